from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional, Union

from pydantic import Field, StringConstraints

from pharmacare.schemas.shared import AppointmentStatus, AppointmentType, CamelModel, Gender

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class AppointmentCreate(CamelModel):
    doctor_id: Annotated[int, Field(gt=0)]
    clinic_id: Annotated[int, Field(gt=0)]
    patient_name: RequiredText
    patient_age: Annotated[int, Field(gt=0, le=150)]
    patient_gender: Gender
    patient_phone: Annotated[str, Field(pattern=r"^\d{10}$")]
    # a plain date, or a datetime whose calendar day is taken in the configured timezone
    appointment_date: Union[datetime, date] = Field(union_mode="left_to_right")
    appointment_type: AppointmentType


class AppointmentOut(CamelModel):
    id: int
    user_id: int
    doctor_id: int
    clinic_id: Optional[int] = None
    patient_name: str
    patient_age: int
    patient_gender: Gender
    patient_phone: str
    appointment_date: date
    appointment_type: AppointmentType
    status: AppointmentStatus


class AppointmentReceipt(CamelModel):
    """Denormalised view of a new appointment with doctor and clinic details."""

    appointment_id: int
    status: AppointmentStatus
    appointment_date: date
    appointment_type: AppointmentType
    # patient
    patient_name: str
    patient_age: int
    patient_gender: Gender
    # doctor
    doctor_id: int
    doctor_name: Optional[str] = None
    doctor_gender: Optional[str] = None
    doctor_fee: Optional[Decimal] = None
    doctor_experience: Optional[int] = None
    # clinic, for offline visits
    clinic_id: Optional[int] = None
    clinic_name: Optional[str] = None
    clinic_sign_board: Optional[str] = None
    clinic_contact_no: Optional[str] = None
    clinic_registration_no: Optional[str] = None
    clinic_state: Optional[str] = None
    clinic_district: Optional[str] = None
    clinic_city: Optional[str] = None
    clinic_pin_code: Optional[str] = None
    clinic_nearby: Optional[str] = None
