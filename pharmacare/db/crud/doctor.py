import logging
from typing import Optional, Type, TypeVar

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pharmacare.core.auth import TokenService, get_password_hash, verify_password
from pharmacare.core.errors import Conflict, NotFound, Unauthenticated
from pharmacare.db.crud.auth import doctor_identity, start_session
from pharmacare.db.models.doctor import (
    ClinicModel,
    DoctorDetailsModel,
    DoctorEducationModel,
    DoctorModel,
    DoctorRegistrationModel,
    DoctorWorkDayModel,
)
from pharmacare.schemas.auth import DoctorRegisterRequest, TokenPair
from pharmacare.schemas.doctor import (
    ClinicIn,
    DoctorBasicDetailsIn,
    DoctorEducationIn,
    DoctorRegistrationIn,
    WorkScheduleIn,
)

logger = logging.getLogger(__name__)

ProfileRow = TypeVar("ProfileRow")


async def get_doctor_by_phone(db: AsyncSession, phone: str) -> Optional[DoctorModel]:
    result = await db.execute(select(DoctorModel).where(DoctorModel.phone == phone))
    return result.scalar_one_or_none()


async def register_doctor(db: AsyncSession, tokens: TokenService, data: DoctorRegisterRequest) -> tuple[DoctorModel, TokenPair]:
    conditions = [DoctorModel.phone == data.phone]
    if data.email:
        conditions.append(DoctorModel.email == data.email)
    existing = (await db.execute(select(DoctorModel).where(or_(*conditions)).limit(1))).scalars().first()
    if existing:
        raise Conflict("Doctor already exists with this phone or email", error_code="DOCTOR_EXISTS")

    doctor = DoctorModel(phone=data.phone, email=data.email, password_hash=get_password_hash(data.password))
    db.add(doctor)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Doctor already exists with this phone or email", error_code="DOCTOR_EXISTS")

    pair = await start_session(db, tokens, doctor, doctor_identity(doctor))
    logger.info(f"Registered doctor_id={doctor.id}")
    return doctor, pair


async def authenticate_doctor(db: AsyncSession, phone: str, password: str) -> DoctorModel:
    doctor = await get_doctor_by_phone(db, phone)
    if not doctor:
        raise NotFound("Doctor Not Found!", error_code="DOCTOR_NOT_FOUND")
    if not verify_password(password, doctor.password_hash):
        raise Unauthenticated("Invalid credentials", error_code="INVALID_CREDENTIALS")
    return doctor


async def _upsert_profile_row(
    db: AsyncSession,
    model: Type[ProfileRow],
    doctor_id: int,
    values: dict,
    conflict_message: str,
) -> ProfileRow:
    """
    Create or update the single row of ``model`` owned by ``doctor_id``.
    Unique-constraint violations surface as Conflict.
    """
    result = await db.execute(select(model).where(model.doctor_id == doctor_id))
    row = result.scalar_one_or_none()
    if row is None:
        row = model(doctor_id=doctor_id, **values)
        db.add(row)
    else:
        for key, value in values.items():
            setattr(row, key, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Unique constraint hit on {model.__tablename__} for doctor_id={doctor_id}")
        raise Conflict(conflict_message)
    await db.refresh(row)
    return row


async def save_basic_details(db: AsyncSession, doctor_id: int, data: DoctorBasicDetailsIn) -> DoctorDetailsModel:
    values = data.model_dump()
    values["gender"] = data.gender.value
    return await _upsert_profile_row(db, DoctorDetailsModel, doctor_id, values, "Basic details already exist")


async def save_education(db: AsyncSession, doctor_id: int, data: DoctorEducationIn) -> DoctorEducationModel:
    return await _upsert_profile_row(db, DoctorEducationModel, doctor_id, data.model_dump(), "Education details already exist")


async def save_registration(db: AsyncSession, doctor_id: int, data: DoctorRegistrationIn) -> DoctorRegistrationModel:
    return await _upsert_profile_row(
        db, DoctorRegistrationModel, doctor_id, data.model_dump(), "Registration number is already in use"
    )


async def save_work_schedule(db: AsyncSession, doctor_id: int, data: WorkScheduleIn) -> DoctorWorkDayModel:
    return await _upsert_profile_row(db, DoctorWorkDayModel, doctor_id, data.model_dump(), "Work schedule already exists")


async def save_clinic(db: AsyncSession, doctor_id: int, data: ClinicIn) -> ClinicModel:
    return await _upsert_profile_row(
        db, ClinicModel, doctor_id, data.model_dump(), "Clinic registration number is already in use"
    )


async def get_doctor_profile(db: AsyncSession, doctor_id: int) -> DoctorModel:
    result = await db.execute(
        select(DoctorModel)
        .options(
            selectinload(DoctorModel.details),
            selectinload(DoctorModel.education),
            selectinload(DoctorModel.work_schedule),
            selectinload(DoctorModel.clinic),
        )
        .where(DoctorModel.id == doctor_id)
    )
    doctor = result.scalar_one_or_none()
    if not doctor:
        raise NotFound("Doctor not found", error_code="DOCTOR_NOT_FOUND")
    return doctor
