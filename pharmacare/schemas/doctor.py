from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field

from pharmacare.schemas.auth import TokenPair
from pharmacare.schemas.shared import CamelModel, Gender

NonEmpty = Annotated[str, Field(min_length=1)]


class DoctorBasicDetailsIn(CamelModel):
    name: Annotated[str, Field(min_length=3, max_length=100)]
    gender: Gender
    appointment_fee: Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
    experience: Annotated[int, Field(ge=0, le=80)]
    specialization: Optional[str] = None


class DoctorBasicDetailsOut(DoctorBasicDetailsIn):
    id: int
    doctor_id: int


class DoctorEducationIn(CamelModel):
    degree: NonEmpty
    institute: NonEmpty
    year_of_completion: Annotated[int, Field(ge=1900, le=2100)]


class DoctorEducationOut(DoctorEducationIn):
    id: int
    doctor_id: int


class DoctorRegistrationIn(CamelModel):
    registration_number: NonEmpty
    registration_council: NonEmpty
    registration_year: Annotated[int, Field(ge=1900, le=2100)]


class DoctorRegistrationOut(DoctorRegistrationIn):
    id: int
    doctor_id: int


class WorkScheduleIn(CamelModel):
    sunday: bool = False
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False


class WorkScheduleOut(WorkScheduleIn):
    doctor_id: int


class ClinicIn(CamelModel):
    clinic_name: NonEmpty
    clinic_sign_board: Optional[str] = None
    clinic_contact_no: Annotated[str, Field(pattern=r"^\d{10,15}$")]
    clinic_registration_no: NonEmpty
    state: NonEmpty
    district: NonEmpty
    city: NonEmpty
    pincode: Annotated[str, Field(pattern=r"^\d{6}$")]
    nearby_location: Optional[str] = None


class ClinicOut(ClinicIn):
    id: int
    doctor_id: int


class DoctorAccountOut(CamelModel):
    id: int
    phone: str
    email: Optional[str] = None


class DoctorProfileOut(CamelModel):
    """Public doctor profile returned to patients."""

    id: int
    details: Optional[DoctorBasicDetailsOut] = None
    education: Optional[DoctorEducationOut] = None
    work_schedule: Optional[WorkScheduleOut] = None
    clinic: Optional[ClinicOut] = None


class DoctorSession(CamelModel):
    doctor: DoctorAccountOut
    tokens: TokenPair
