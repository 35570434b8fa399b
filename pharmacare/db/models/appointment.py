# pharmacare/db/models/appointment.py
from sqlalchemy import Column, Integer, Date, DateTime, String, ForeignKey, func
from sqlalchemy.orm import relationship
from pharmacare.db.base import Base


class AppointmentModel(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id", ondelete="SET NULL"), nullable=True)

    patient_name = Column(String(100), nullable=False)
    patient_age = Column(Integer, nullable=False)
    patient_gender = Column(String(10), nullable=False)  # MALE | FEMALE | OTHER
    patient_phone = Column(String(10), nullable=False)

    appointment_date = Column(Date, nullable=False)
    appointment_type = Column(String(10), nullable=False)  # ONLINE | OFFLINE
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, CONFIRMED, CANCELLED, COMPLETED

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("UserModel", backref="appointments")
    doctor = relationship("DoctorModel", backref="appointments")
    clinic = relationship("ClinicModel")
