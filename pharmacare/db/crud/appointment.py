import logging
from datetime import date, datetime
from typing import List, Union
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pharmacare.core.errors import NotFound, StoreError, ValidationError
from pharmacare.db.crud.availability import is_doctor_available
from pharmacare.db.models.appointment import AppointmentModel
from pharmacare.db.models.doctor import ClinicModel, DoctorDetailsModel
from pharmacare.schemas.appointment import AppointmentCreate, AppointmentReceipt
from pharmacare.schemas.shared import AppointmentStatus, Identity, Role

logger = logging.getLogger(__name__)

VALID_NEXT = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED},
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.COMPLETED: set(),
}


def today_in(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def to_calendar_date(value: Union[date, datetime], tz_name: str) -> date:
    """Strip the time of day; aware datetimes are first moved into ``tz_name``."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(tz_name))
        return value.date()
    return value


def check_booking_window(appointment_date: date, today: date, window_days: int) -> None:
    days_diff = (appointment_date - today).days
    if days_diff < 0 or days_diff > window_days:
        raise ValidationError(
            f"Date must be within the next {window_days} days and not in the past.",
            error_code="DATE_OUT_OF_RANGE",
            details={"appointmentDate": appointment_date.isoformat(), "daysDiff": days_diff},
        )


async def _build_receipt(db: AsyncSession, appointment: AppointmentModel) -> AppointmentReceipt:
    receipt = AppointmentReceipt(
        appointment_id=appointment.id,
        status=appointment.status,
        appointment_date=appointment.appointment_date,
        appointment_type=appointment.appointment_type,
        patient_name=appointment.patient_name,
        patient_age=appointment.patient_age,
        patient_gender=appointment.patient_gender,
        doctor_id=appointment.doctor_id,
        clinic_id=appointment.clinic_id,
    )
    # best-effort enrichment, the appointment row is already committed
    try:
        details = (
            await db.execute(select(DoctorDetailsModel).where(DoctorDetailsModel.doctor_id == appointment.doctor_id))
        ).scalar_one_or_none()
        clinic = await db.get(ClinicModel, appointment.clinic_id) if appointment.clinic_id else None
    except SQLAlchemyError:
        logger.warning(f"Could not enrich receipt for appointment_id={appointment.id}", exc_info=True)
        return receipt

    if details:
        receipt.doctor_name = details.name
        receipt.doctor_gender = details.gender
        receipt.doctor_fee = details.appointment_fee
        receipt.doctor_experience = details.experience
    if clinic:
        receipt.clinic_name = clinic.clinic_name
        receipt.clinic_sign_board = clinic.clinic_sign_board
        receipt.clinic_contact_no = clinic.clinic_contact_no
        receipt.clinic_registration_no = clinic.clinic_registration_no
        receipt.clinic_state = clinic.state
        receipt.clinic_district = clinic.district
        receipt.clinic_city = clinic.city
        receipt.clinic_pin_code = clinic.pincode
        receipt.clinic_nearby = clinic.nearby_location
    return receipt


async def create_appointment(
    db: AsyncSession,
    identity: Identity,
    data: AppointmentCreate,
    tz_name: str = "UTC",
    window_days: int = 7,
) -> AppointmentReceipt:
    """
    Book a PENDING appointment for the calling user.

    Field presence and enum values are validated by ``AppointmentCreate``;
    this checks the booking window and the doctor's work day, inserts the row
    and returns a receipt with doctor and clinic details.
    """
    appointment_date = to_calendar_date(data.appointment_date, tz_name)
    check_booking_window(appointment_date, today_in(tz_name), window_days)

    clinic = await db.get(ClinicModel, data.clinic_id)
    if clinic is None:
        raise NotFound("Clinic not found", error_code="CLINIC_NOT_FOUND")
    if clinic.doctor_id != data.doctor_id:
        raise ValidationError("Clinic does not belong to this doctor", error_code="CLINIC_DOCTOR_MISMATCH")

    try:
        available = await is_doctor_available(db, data.doctor_id, appointment_date)
    except NotFound:
        available = False
    if not available:
        raise ValidationError("The doctor doesn't work on this day", error_code="DOCTOR_UNAVAILABLE")

    appointment = AppointmentModel(
        user_id=identity.user_id,
        doctor_id=data.doctor_id,
        clinic_id=data.clinic_id,
        patient_name=data.patient_name,
        patient_age=data.patient_age,
        patient_gender=data.patient_gender.value,
        patient_phone=data.patient_phone,
        appointment_date=appointment_date,
        appointment_type=data.appointment_type.value,
        status=AppointmentStatus.PENDING.value,
    )
    db.add(appointment)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.error(
            f"Integrity error creating appointment for user_id={identity.user_id}, doctor_id={data.doctor_id}",
            exc_info=True,
        )
        raise StoreError("Database error.")
    await db.refresh(appointment)

    logger.info(
        f"Created appointment_id={appointment.id} user_id={identity.user_id} "
        f"doctor_id={data.doctor_id} on {appointment_date.isoformat()}"
    )
    return await _build_receipt(db, appointment)


async def list_appointments(db: AsyncSession, identity: Identity, skip: int = 0, limit: int = 100) -> List[AppointmentModel]:
    """A user sees the appointments they booked, a doctor the ones booked with them."""
    query = select(AppointmentModel)
    if identity.role == Role.doctor:
        query = query.where(AppointmentModel.doctor_id == identity.user_id)
    else:
        query = query.where(AppointmentModel.user_id == identity.user_id)
    query = query.order_by(AppointmentModel.appointment_date.desc(), AppointmentModel.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_appointment(db: AsyncSession, identity: Identity, appointment_id: int) -> AppointmentModel:
    owner = AppointmentModel.doctor_id if identity.role == Role.doctor else AppointmentModel.user_id
    result = await db.execute(
        select(AppointmentModel).where(AppointmentModel.id == appointment_id, owner == identity.user_id)
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFound("Appointment not found", error_code="APPOINTMENT_NOT_FOUND")
    return appointment


async def change_status(
    db: AsyncSession,
    identity: Identity,
    appointment_id: int,
    new_status: AppointmentStatus,
) -> AppointmentModel:
    appointment = await get_appointment(db, identity, appointment_id)
    current = AppointmentStatus(appointment.status)
    if new_status not in VALID_NEXT[current]:
        raise ValidationError(
            f"Cannot move appointment from {current.value} to {new_status.value}",
            error_code="INVALID_STATUS_TRANSITION",
        )

    result = await db.execute(
        update(AppointmentModel)
        .where(AppointmentModel.id == appointment.id, AppointmentModel.status == current.value)
        .values(status=new_status.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # another request moved the appointment first
        await db.rollback()
        raise ValidationError(
            f"Cannot move appointment from its current status to {new_status.value}",
            error_code="INVALID_STATUS_TRANSITION",
        )

    await db.commit()
    await db.refresh(appointment)
    logger.info(f"Appointment {appointment_id}: {current.value} -> {new_status.value} by {identity.role.value} {identity.user_id}")
    return appointment
