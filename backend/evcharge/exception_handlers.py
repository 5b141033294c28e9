"""
Exception handlers for the API.

Register these on a FastAPI app instance via `register_exception_handlers(app)`.
"""
import logging

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.env import is_local_env
from .services.errors import (
    ChargingError,
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger("evcharge")

STATUS_BY_ERROR = {
    ConflictError: 409,
    NotFoundError: 404,
    ValidationError: 400,
    DependencyError: 503,
}


def status_for(exc: ChargingError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


async def charging_error_handler(request: Request, exc: ChargingError):
    """Translate engine errors to their HTTP status, keeping kind and message."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.kind, "detail": exc.message},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""
    if isinstance(exc, (HTTPException, StarletteHTTPException)):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    # In production, don't leak internal error details to clients
    if is_local_env():
        error_response = {"detail": f"Internal server error: {exc}"}
    else:
        error_response = {"detail": "Internal server error"}

    return JSONResponse(status_code=500, content=error_response)


def register_exception_handlers(app):
    """Register all exception handlers on the given FastAPI app."""
    app.add_exception_handler(ChargingError, charging_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
