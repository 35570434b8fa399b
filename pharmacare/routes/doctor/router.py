import logging

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.core.auth import TokenService
from pharmacare.core.middleware import get_db, get_token_service, require_doctor
from pharmacare.core.responses import ApiResponse
from pharmacare.db.crud.auth import doctor_identity, revoke_refresh_token, rotate_refresh_token, start_session
from pharmacare.db.crud.doctor import (
    authenticate_doctor,
    get_doctor_profile,
    register_doctor,
    save_basic_details,
    save_clinic,
    save_education,
    save_registration,
    save_work_schedule,
)
from pharmacare.db.models.doctor import DoctorModel
from pharmacare.schemas.auth import DoctorRegisterRequest, LoginRequest, RefreshRequest, TokenPair
from pharmacare.schemas.doctor import (
    ClinicIn,
    ClinicOut,
    DoctorAccountOut,
    DoctorBasicDetailsIn,
    DoctorBasicDetailsOut,
    DoctorEducationIn,
    DoctorEducationOut,
    DoctorProfileOut,
    DoctorRegistrationIn,
    DoctorRegistrationOut,
    DoctorSession,
    WorkScheduleIn,
    WorkScheduleOut,
)
from pharmacare.schemas.shared import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctors", tags=["doctors"])


# ---- account ----

@router.post("/register", response_model=ApiResponse[DoctorSession], status_code=status.HTTP_201_CREATED)
async def register(
    doctor_data: DoctorRegisterRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    doctor, pair = await register_doctor(db, tokens, doctor_data)
    session = DoctorSession(doctor=DoctorAccountOut.model_validate(doctor), tokens=pair)
    return ApiResponse.ok(session, message="Doctor registered successfully", status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=ApiResponse[TokenPair])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    doctor = await authenticate_doctor(db, login_data.phone, login_data.password)
    pair = await start_session(db, tokens, doctor, doctor_identity(doctor))
    return ApiResponse.ok(pair, message="Logged in successfully")


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    pair = await rotate_refresh_token(db, tokens, DoctorModel, body.refresh_token, doctor_identity)
    return ApiResponse.ok(pair, message="Access token refreshed")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    await revoke_refresh_token(db, DoctorModel, identity.user_id)
    logger.info(f"Doctor {identity.user_id} logged out")
    return ApiResponse.ok(message="Logged out successfully")


# ---- profile ----

@router.post("/basic-details", response_model=ApiResponse[DoctorBasicDetailsOut])
async def basic_details(
    data: DoctorBasicDetailsIn,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    row = await save_basic_details(db, identity.user_id, data)
    return ApiResponse.ok(DoctorBasicDetailsOut.model_validate(row), message="Basic details saved")


@router.post("/education-details", response_model=ApiResponse[DoctorEducationOut])
async def education_details(
    data: DoctorEducationIn,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    row = await save_education(db, identity.user_id, data)
    return ApiResponse.ok(DoctorEducationOut.model_validate(row), message="Education details saved")


@router.post("/registration-details", response_model=ApiResponse[DoctorRegistrationOut])
async def registration_details(
    data: DoctorRegistrationIn,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    row = await save_registration(db, identity.user_id, data)
    return ApiResponse.ok(DoctorRegistrationOut.model_validate(row), message="Registration details saved")


@router.post("/workday", response_model=ApiResponse[WorkScheduleOut])
async def workday(
    data: WorkScheduleIn,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    row = await save_work_schedule(db, identity.user_id, data)
    return ApiResponse.ok(WorkScheduleOut.model_validate(row), message="Work schedule saved")


@router.post("/clinic-details", response_model=ApiResponse[ClinicOut])
async def clinic_details(
    data: ClinicIn,
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    row = await save_clinic(db, identity.user_id, data)
    return ApiResponse.ok(ClinicOut.model_validate(row), message="Clinic details saved")


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorProfileOut])
async def doctor_profile(
    doctor_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
):
    """Public profile with schedule and clinic, used by patients before booking."""
    doctor = await get_doctor_profile(db, doctor_id)
    return ApiResponse.ok(DoctorProfileOut.model_validate(doctor))
