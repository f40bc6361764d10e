"""
Exception handlers for the OTP API.

Register these on a FastAPI app instance via `register_exception_handlers(app)`.
Every error body has the shape {"error": "<message>"}.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.env import is_local_env
from .core.errors import OTPError, InvalidPhoneFormat

logger = logging.getLogger("smsotp")


async def otp_error_handler(request: Request, exc: OTPError):
    """Map an OTP error to its status code and client-facing message verbatim."""
    if exc.status_code >= 500:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Schema failures are client errors (400), never 422."""
    logger.debug(f"Request validation failed on {request.url.path}: {exc.errors()}")
    if request.url.path == "/send-otp" and _phone_field_failed(exc):
        message = InvalidPhoneFormat.message
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


def _phone_field_failed(exc: RequestValidationError) -> bool:
    return any("phoneNumber" in err.get("loc", ()) for err in exc.errors())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )

    # In production, don't leak internal error details to clients
    if is_local_env():
        error_response = {"error": f"Internal server error: {exc}"}
    else:
        error_response = {"error": "Internal server error"}

    return JSONResponse(status_code=500, content=error_response)


def register_exception_handlers(app):
    """Register all exception handlers on the given FastAPI app."""
    app.add_exception_handler(OTPError, otp_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
