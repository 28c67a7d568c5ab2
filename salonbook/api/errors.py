# salonbook/api/errors.py
"""Map scheduling errors to HTTP responses"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salonbook.core.exceptions import (
    AppointmentGroupNotFoundError,
    AvailabilityConflictError,
    BusinessNotFoundError,
    PersistenceError,
    SalonBookError,
    TransitionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationError: 422,
    AvailabilityConflictError: 409,
    TransitionError: 409,
    BusinessNotFoundError: 404,
    AppointmentGroupNotFoundError: 404,
    PersistenceError: 503,
}


def status_code_for(exc: SalonBookError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


async def salonbook_error_handler(request: Request, exc: SalonBookError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    content = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, ValidationError) and exc.field:
        content["field"] = exc.field

    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SalonBookError, salonbook_error_handler)
