import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Type, Union

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from pharmacare.config.settings import Settings
from pharmacare.core.auth import (
    TokenService,
    get_password_hash,
    hash_token,
    token_matches,
    verify_password,
)
from pharmacare.core.errors import Conflict, Forbidden, NotFound, SmsDeliveryError, Unauthenticated
from pharmacare.db.crud.user import find_user_by_phone_or_email, get_user_by_phone
from pharmacare.db.models.doctor import DoctorModel
from pharmacare.db.models.user import UserModel
from pharmacare.schemas.auth import RegisterRequest, TokenPair
from pharmacare.schemas.shared import Identity, Role
from pharmacare.services.sms import SmsGateway

logger = logging.getLogger(__name__)

Account = Union[UserModel, DoctorModel]


def user_identity(user: UserModel) -> Identity:
    return Identity(user_id=user.id, phone=user.phone, email=user.email, role=Role.user)


def doctor_identity(doctor: DoctorModel) -> Identity:
    return Identity(user_id=doctor.id, phone=doctor.phone, email=doctor.email, role=Role.doctor)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def start_session(db: AsyncSession, tokens: TokenService, account: Account, identity: Identity) -> TokenPair:
    """
    Issue a token pair and store the refresh token hash over any previous one.
    Nothing is committed unless both tokens were signed.
    """
    pair = tokens.issue_token_pair(identity)
    account.refresh_token_hash = hash_token(pair.refresh_token)
    await db.commit()
    return pair


async def create_user(db: AsyncSession, tokens: TokenService, data: RegisterRequest) -> tuple[UserModel, TokenPair]:
    """Insert a user and open their first session in one transaction."""
    existing = await find_user_by_phone_or_email(db, data.phone, data.email)
    if existing:
        raise Conflict("User already exists with this phone or email", error_code="USER_EXISTS")

    user = UserModel(
        name=data.name,
        email=data.email,
        phone=data.phone,
        password_hash=get_password_hash(data.password),
        gender=data.gender.value,
        date_of_birth=data.date_of_birth,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise Conflict("User already exists with this phone or email", error_code="USER_EXISTS")

    pair = await start_session(db, tokens, user, user_identity(user))
    logger.info(f"Registered user_id={user.id}")
    return user, pair


async def authenticate_user(db: AsyncSession, phone: str, password: str) -> UserModel:
    user = await get_user_by_phone(db, phone)
    if not user:
        raise NotFound("User Not Found!", error_code="USER_NOT_FOUND")
    if not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid credentials", error_code="INVALID_CREDENTIALS")
    return user


async def rotate_refresh_token(
    db: AsyncSession,
    tokens: TokenService,
    model: Type[Account],
    refresh_token: str,
    identity_for: Callable[[Account], Identity],
) -> TokenPair:
    """
    Exchange a refresh token for a new pair.

    The presented token must verify against the refresh secret and match the
    single hash on file for its account. The new hash replaces the old one only
    if the old one is still in place, so a token can be rotated exactly once.
    """
    account_id = tokens.decode_refresh_token(refresh_token)

    account = await db.get(model, account_id)
    if account is None or not token_matches(refresh_token, account.refresh_token_hash):
        logger.warning(f"Rejected stale refresh token for {model.__tablename__} id={account_id}")
        raise Forbidden("Refresh token is no longer valid", error_code="STALE_REFRESH_TOKEN")

    old_hash = account.refresh_token_hash
    pair = tokens.issue_token_pair(identity_for(account))
    result = await db.execute(
        update(model)
        .where(model.id == account.id, model.refresh_token_hash == old_hash)
        .values(refresh_token_hash=hash_token(pair.refresh_token))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # another request rotated this token first
        await db.rollback()
        raise Forbidden("Refresh token is no longer valid", error_code="STALE_REFRESH_TOKEN")

    await db.commit()
    return pair


async def revoke_refresh_token(db: AsyncSession, model: Type[Account], account_id: int) -> None:
    await db.execute(
        update(model)
        .where(model.id == account_id)
        .values(refresh_token_hash=None)
        .execution_options(synchronize_session=False)
    )
    await db.commit()


def generate_otp(length: int) -> str:
    return f"{secrets.randbelow(10 ** length):0{length}d}"


async def start_otp_login(db: AsyncSession, sms: SmsGateway, settings: Settings, phone: str) -> datetime:
    """Store a fresh OTP for the user and text it to them. Returns its expiry."""
    user = await get_user_by_phone(db, phone)
    if not user:
        raise NotFound("User Not Found!", error_code="USER_NOT_FOUND")

    otp = generate_otp(settings.otp_length)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.otp_expire_minutes)
    user.otp_hash = hash_token(otp)
    user.otp_expires_at = expires_at
    user.otp_attempts = 0
    await db.commit()

    message = f"Your PharmaCare login code is {otp}. It expires in {settings.otp_expire_minutes} minutes."
    if not await sms.send(message, phone):
        raise SmsDeliveryError("Could not deliver OTP, try again later")
    return expires_at


async def verify_otp_login(
    db: AsyncSession, tokens: TokenService, phone: str, otp: str, max_attempts: int = 5
) -> TokenPair:
    """
    Exchange a pending OTP for a token pair.

    Each wrong guess counts against the pending code; once max_attempts is
    reached the code is discarded and a new one must be requested.
    """
    user = await get_user_by_phone(db, phone)
    if not user:
        raise NotFound("User Not Found!", error_code="USER_NOT_FOUND")

    expires_at: Optional[datetime] = user.otp_expires_at
    if expires_at is None or _as_utc(expires_at) < datetime.now(timezone.utc):
        raise Unauthenticated("Invalid or expired OTP", error_code="INVALID_OTP")

    if not token_matches(otp, user.otp_hash):
        user.otp_attempts = (user.otp_attempts or 0) + 1
        if user.otp_attempts >= max_attempts:
            logger.warning(f"OTP for user_id={user.id} discarded after {user.otp_attempts} failed attempts")
            user.otp_hash = None
            user.otp_expires_at = None
            user.otp_attempts = 0
        await db.commit()
        raise Unauthenticated("Invalid or expired OTP", error_code="INVALID_OTP")

    user.otp_hash = None
    user.otp_expires_at = None
    user.otp_attempts = 0
    return await start_session(db, tokens, user, user_identity(user))
