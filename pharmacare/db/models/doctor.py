# pharmacare/db/models/doctor.py
from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from pharmacare.db.base import Base

WEEKDAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


class DoctorModel(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True)
    phone = Column(String(10), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    password_hash = Column(String, nullable=False)
    refresh_token_hash = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # one-to-one links
    details = relationship("DoctorDetailsModel", back_populates="doctor", uselist=False, cascade="all, delete-orphan")
    education = relationship("DoctorEducationModel", back_populates="doctor", uselist=False, cascade="all, delete-orphan")
    registration = relationship("DoctorRegistrationModel", back_populates="doctor", uselist=False, cascade="all, delete-orphan")
    work_schedule = relationship("DoctorWorkDayModel", back_populates="doctor", uselist=False, cascade="all, delete-orphan")
    clinic = relationship("ClinicModel", back_populates="doctor", uselist=False, cascade="all, delete-orphan")


class DoctorDetailsModel(Base):
    __tablename__ = "doctor_details"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    gender = Column(String(10), nullable=False)
    appointment_fee = Column(Numeric(10, 2), nullable=False)
    experience = Column(Integer, nullable=False)  # years
    specialization = Column(String(100), nullable=True)

    doctor = relationship("DoctorModel", back_populates="details")


class DoctorEducationModel(Base):
    __tablename__ = "doctor_education"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), unique=True, nullable=False)
    degree = Column(String(100), nullable=False)
    institute = Column(String(200), nullable=False)
    year_of_completion = Column(Integer, nullable=False)

    doctor = relationship("DoctorModel", back_populates="education")


class DoctorRegistrationModel(Base):
    __tablename__ = "doctor_registrations"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), unique=True, nullable=False)
    registration_number = Column(String(50), unique=True, nullable=False)
    registration_council = Column(String(200), nullable=False)
    registration_year = Column(Integer, nullable=False)

    doctor = relationship("DoctorModel", back_populates="registration")


class DoctorWorkDayModel(Base):
    __tablename__ = "doctor_work_days"

    id = Column(Integer, primary_key=True)
    # exactly one schedule row per doctor
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), unique=True, nullable=False)
    sunday = Column(Boolean, nullable=False, default=False)
    monday = Column(Boolean, nullable=False, default=False)
    tuesday = Column(Boolean, nullable=False, default=False)
    wednesday = Column(Boolean, nullable=False, default=False)
    thursday = Column(Boolean, nullable=False, default=False)
    friday = Column(Boolean, nullable=False, default=False)
    saturday = Column(Boolean, nullable=False, default=False)

    doctor = relationship("DoctorModel", back_populates="work_schedule")


class ClinicModel(Base):
    __tablename__ = "clinics"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), unique=True, nullable=False)
    clinic_name = Column(String(200), nullable=False)
    clinic_sign_board = Column(String(200), nullable=True)
    clinic_contact_no = Column(String(15), nullable=False)
    clinic_registration_no = Column(String(50), unique=True, nullable=False)
    state = Column(String(100), nullable=False)
    district = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)
    pincode = Column(String(6), nullable=False)
    nearby_location = Column(String(200), nullable=True)

    doctor = relationship("DoctorModel", back_populates="clinic")
