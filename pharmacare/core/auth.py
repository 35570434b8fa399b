import hashlib
import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from passlib.context import CryptContext
from jose import ExpiredSignatureError, JWTError, jwt

from pharmacare.config.settings import Settings
from pharmacare.core.errors import ConfigurationError, Unauthenticated, Forbidden
from pharmacare.schemas.auth import TokenPair
from pharmacare.schemas.shared import Identity

# Explicit bcrypt ident keeps passlib from probing the backend version
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def hash_token(token: str) -> str:
    """One-way digest used to store refresh tokens and OTPs."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_matches(token: str, stored_hash: Optional[str]) -> bool:
    if not stored_hash:
        return False
    return hmac.compare_digest(hash_token(token), stored_hash)


class TokenService:
    """
    Signs and verifies access / refresh tokens.

    Access tokens carry the full Identity; refresh tokens carry only ``userId``
    and are signed with a separate secret. The service never touches storage.
    """

    def __init__(
        self,
        access_secret: Optional[str],
        refresh_secret: Optional[str],
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=7),
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.refresh_token_secret,
            algorithm=settings.algorithm,
            access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        )

    def ensure_configured(self) -> None:
        missing = []
        if not self.access_secret:
            missing.append("JWT_SECRET")
        if not self.refresh_secret:
            missing.append("REFRESH_TOKEN_SECRET")
        if missing:
            raise ConfigurationError(
                "Token secrets are not configured", details={"missing": missing}
            )

    def _sign(self, claims: dict, secret: Optional[str], name: str, ttl: timedelta) -> str:
        if not secret:
            raise ConfigurationError(f"{name} is not defined in environment variables")
        now = datetime.now(timezone.utc)
        to_encode = claims.copy()
        to_encode.update({"iat": now, "exp": now + ttl})
        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def issue_access_token(self, identity: Identity, expires_delta: Optional[timedelta] = None) -> str:
        claims = identity.model_dump(mode="json", by_alias=True, exclude_none=True)
        return self._sign(claims, self.access_secret, "JWT_SECRET", expires_delta or self.access_ttl)

    def issue_refresh_token(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        # jti keeps two tokens minted within the same second distinct
        claims = {"userId": user_id, "jti": uuid.uuid4().hex}
        return self._sign(claims, self.refresh_secret, "REFRESH_TOKEN_SECRET", expires_delta or self.refresh_ttl)

    def issue_token_pair(self, identity: Identity) -> TokenPair:
        access_token = self.issue_access_token(identity)
        refresh_token = self.issue_refresh_token(identity.user_id)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self.access_ttl.total_seconds()),
        )

    def _decode(self, token: str, secret: Optional[str], name: str) -> dict:
        if not secret:
            raise ConfigurationError(f"{name} is not defined in environment variables")
        return jwt.decode(token, secret, algorithms=[self.algorithm])

    def decode_access_token(self, token: str) -> Identity:
        try:
            payload = self._decode(token, self.access_secret, "JWT_SECRET")
        except ExpiredSignatureError:
            raise Unauthenticated("Access token expired", error_code="TOKEN_EXPIRED")
        except JWTError:
            raise Forbidden("Invalid access token", error_code="INVALID_TOKEN")
        try:
            return Identity.model_validate(payload)
        except ValueError:
            raise Forbidden("Invalid access token", error_code="INVALID_TOKEN")

    def decode_refresh_token(self, token: str) -> int:
        try:
            payload = self._decode(token, self.refresh_secret, "REFRESH_TOKEN_SECRET")
        except ExpiredSignatureError:
            raise Unauthenticated("Refresh token expired", error_code="TOKEN_EXPIRED")
        except JWTError:
            raise Unauthenticated("Invalid refresh token", error_code="INVALID_TOKEN")
        user_id = payload.get("userId")
        if not isinstance(user_id, int):
            raise Unauthenticated("Invalid refresh token", error_code="INVALID_TOKEN")
        return user_id
