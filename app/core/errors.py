"""
Exception handlers mapping validation and service errors to HTTP responses.

Both API surfaces report bad input as 400 (FastAPI's default for body
validation is 422). Requests under the v2 prefix get the envelope shape,
everything else gets FastAPI's usual `{"detail": ...}` body. The v2 error
envelope always carries success, message, data, count and errors.
"""

import logging
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.schemas.employee import ErrorResponse, FieldError
from app.services.employee_service import (
    DuplicateEmailError,
    EmployeeNotFoundError,
    EmployeeServiceError,
    EmployeeValidationError,
)

logger = logging.getLogger(__name__)


def _is_v2(request: Request) -> bool:
    return request.url.path.startswith(settings.API_V2_STR + "/")


def _status_for(exc: EmployeeServiceError) -> int:
    if isinstance(exc, EmployeeNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, DuplicateEmailError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def field_errors(exc: RequestValidationError) -> List[FieldError]:
    """Flatten pydantic errors into field/message pairs."""
    errors = []
    for error in exc.errors():
        # Drop the leading "body"/"query" location marker
        loc = [str(part) for part in error.get("loc", ())[1:]] or ["request"]
        errors.append(FieldError(field=".".join(loc), message=error.get("msg", "Invalid value")))
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(exc)
    logger.info(f"Validation failed for {request.method} {request.url.path}: {len(errors)} error(s)")

    if _is_v2(request):
        body = ErrorResponse(message="Validation failed", errors=errors).model_dump()
    else:
        body = {"detail": [error.model_dump() for error in errors]}
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def service_exception_handler(request: Request, exc: EmployeeServiceError) -> JSONResponse:
    status_code = _status_for(exc)

    if _is_v2(request):
        errors = None
        if isinstance(exc, EmployeeValidationError) and exc.field:
            errors = [FieldError(field=exc.field, message=exc.message)]
        body = ErrorResponse(message=exc.message, errors=errors).model_dump()
    else:
        body = {"detail": exc.message}
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(EmployeeServiceError, service_exception_handler)
