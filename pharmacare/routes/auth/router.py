import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.config.settings import Settings
from pharmacare.core.auth import TokenService
from pharmacare.core.errors import NotFound
from pharmacare.core.middleware import (
    get_app_settings,
    get_db,
    get_sms_gateway,
    get_token_service,
    require_user,
)
from pharmacare.core.responses import ApiResponse
from pharmacare.db.crud.auth import (
    authenticate_user,
    create_user,
    revoke_refresh_token,
    rotate_refresh_token,
    start_otp_login,
    start_session,
    user_identity,
    verify_otp_login,
)
from pharmacare.db.crud.user import get_user
from pharmacare.db.models.user import UserModel
from pharmacare.schemas.auth import (
    LoginRequest,
    OtpRequest,
    OtpSent,
    OtpVerifyRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserOut,
    UserSession,
)
from pharmacare.schemas.shared import Identity
from pharmacare.services.sms import SmsGateway

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.post("/register", response_model=ApiResponse[UserSession], status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user, pair = await create_user(db, tokens, user_data)
    session = UserSession(user=UserOut.model_validate(user), tokens=pair)
    return ApiResponse.ok(session, message="User registered successfully", status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=ApiResponse[TokenPair])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = await authenticate_user(db, login_data.phone, login_data.password)
    pair = await start_session(db, tokens, user, user_identity(user))
    return ApiResponse.ok(pair, message="Logged in successfully")


@router.post("/login/otp", response_model=ApiResponse[OtpSent], status_code=status.HTTP_202_ACCEPTED)
async def request_otp(
    otp_data: OtpRequest,
    db: AsyncSession = Depends(get_db),
    sms: SmsGateway = Depends(get_sms_gateway),
    settings: Settings = Depends(get_app_settings),
):
    expires_at = await start_otp_login(db, sms, settings, otp_data.phone)
    return ApiResponse.ok(
        OtpSent(phone=otp_data.phone, expires_at=expires_at),
        message="OTP sent",
        status_code=status.HTTP_202_ACCEPTED,
        status="Pending",
    )


@router.post("/login/otp/verify", response_model=ApiResponse[TokenPair])
async def verify_otp(
    otp_data: OtpVerifyRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
):
    pair = await verify_otp_login(db, tokens, otp_data.phone, otp_data.otp, settings.otp_max_attempts)
    return ApiResponse.ok(pair, message="Logged in successfully")


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    pair = await rotate_refresh_token(db, tokens, UserModel, body.refresh_token, user_identity)
    return ApiResponse.ok(pair, message="Access token refreshed")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    await revoke_refresh_token(db, UserModel, identity.user_id)
    logger.info(f"User {identity.user_id} logged out")
    return ApiResponse.ok(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[UserOut])
async def me(
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    user = await get_user(db, identity.user_id)
    if not user:
        raise NotFound("User Not Found!", error_code="USER_NOT_FOUND")
    return ApiResponse.ok(UserOut.model_validate(user))
