"""
Error taxonomy and the FastAPI handlers that render it.

Every failure leaves the API in the same shape::

    {"message": ..., "statusCode": ..., "errorCode": ..., "details": ...}
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, OperationalError, InterfaceError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code: int = 500
    error_code: str = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "statusCode": self.status_code,
            "errorCode": self.error_code,
            "details": self.details,
        }


class ValidationError(ApiError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class Unauthenticated(ApiError):
    status_code = 401
    error_code = "UNAUTHENTICATED"


class Forbidden(ApiError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFound(ApiError):
    status_code = 404
    error_code = "NOT_FOUND"


class Conflict(ApiError):
    status_code = 409
    error_code = "CONFLICT"


class StoreError(ApiError):
    status_code = 400
    error_code = "STORE_ERROR"


class ConfigurationError(ApiError):
    status_code = 500
    error_code = "CONFIGURATION_ERROR"


class SmsDeliveryError(ApiError):
    status_code = 502
    error_code = "SMS_DELIVERY_FAILED"


def _error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _field_name(loc) -> str:
    # drop the "body"/"query"/"path" prefix FastAPI puts in front of the field
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    failed = ", ".join(d["field"] for d in details)
    return _error_response(
        ValidationError(f"Validation failed for: {failed}", details=details)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error = ApiError(str(exc.detail), status_code=exc.status_code, error_code="HTTP_ERROR")
    return _error_response(error)


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.critical(f"Store connection failure on {request.method} {request.url.path}", exc_info=True)
        error = StoreError("Unknown database error.", status_code=500)
    else:
        logger.error(f"Store error on {request.method} {request.url.path}", exc_info=True)
        error = StoreError("Database error.")
    return _error_response(error)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return _error_response(ApiError("Internal server error.", error_code="INTERNAL_ERROR"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
