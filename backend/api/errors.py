"""
Exception handlers.

Maps the AirModeError hierarchy onto HTTP status codes. Each base class
has exactly one status; the most specific matching base wins.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AirModeError,
    AuthenticationError,
    ExternalServiceError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from .models.errors import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: list[tuple[type[AirModeError], int]] = [
    (AuthenticationError, 401),
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (ExternalServiceError, 502),
]


def status_for(exc: AirModeError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def airmode_error_handler(request: Request, exc: AirModeError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = ValidationErrorResponse(details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=400, content=jsonable_encoder(body))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AirModeError, airmode_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
