import logging
import time
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from pharmacare.config.settings import Settings
from pharmacare.core.auth import TokenService
from pharmacare.core.errors import Forbidden, Unauthenticated
from pharmacare.db.session import get_db_session
from pharmacare.schemas.shared import Identity, Role
from pharmacare.services.sms import SmsGateway

logger = logging.getLogger(__name__)

# auto_error=False so a missing header surfaces as our own 401 envelope
http_bearer = HTTPBearer(auto_error=False)


async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception:
        process_time = (time.time() - start_time) * 1000
        logger.exception(
            f"Request: {request.method} {request.url.path} - Failed - Time: {process_time:.2f}ms"
        )
        raise
    process_time = (time.time() - start_time) * 1000
    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.2f}ms"
    )
    return response


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sms_gateway(request: Request) -> SmsGateway:
    return request.app.state.sms_gateway


# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session


async def get_identity(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Verify the bearer access token and attach the decoded Identity to the
    request context. Signature check only, no database round trip.
    """
    if creds is None or not creds.credentials:
        raise Unauthenticated("Unauthorized request: Token missing", error_code="TOKEN_MISSING")

    identity = tokens.decode_access_token(creds.credentials)
    request.state.identity = identity
    return identity


def require_roles(*roles: Role):
    """
    Factory function to create a dependency that requires specific roles.
    Usage: @router.get("/x", dependencies=[Depends(require_roles(Role.doctor))])
    """
    def _require_roles(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in roles:
            raise Forbidden("Not enough permissions", error_code="ROLE_NOT_ALLOWED")
        return identity

    return _require_roles


require_user = require_roles(Role.user)
require_doctor = require_roles(Role.doctor)

