"""Map transitdb errors onto HTTP responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.responses import JSONResponse

from transit_api.schemas.common import ErrorResponse
from transit_core.errors import (
    AirportNotFoundError,
    BatchLineError,
    InvalidParameterError,
    OfferValidationError,
    StorageError,
    TransitError,
    UnknownAirportError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

_GENERIC_FAILURE = "Internal Server Error"


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, OfferValidationError):
        return "invalid_offer"
    if isinstance(exc, UnknownAirportError):
        return "unknown_airport"
    if isinstance(exc, InvalidParameterError):
        return "invalid_parameter"
    if isinstance(exc, AirportNotFoundError):
        return "not_found"
    return "bad_request"


def _respond(status_code: int, detail: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail, code=code).model_dump(),
    )


def _storage_failure(request: Request, exc: BaseException) -> JSONResponse:
    logger.error(
        "Storage failure on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return _respond(
        status.HTTP_500_INTERNAL_SERVER_ERROR, _GENERIC_FAILURE, "storage_error"
    )


async def handle_batch_error(request: Request, exc: BatchLineError) -> JSONResponse:
    if not exc.caller_fault:
        return _storage_failure(request, exc.cause)  # type: ignore[arg-type]
    return _respond(status.HTTP_400_BAD_REQUEST, str(exc), _error_code(exc.cause))  # type: ignore[arg-type]


async def handle_not_found(request: Request, exc: AirportNotFoundError) -> JSONResponse:
    return _respond(status.HTTP_404_NOT_FOUND, str(exc), _error_code(exc))


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    return _storage_failure(request, exc)


async def handle_caller_error(request: Request, exc: TransitError) -> JSONResponse:
    return _respond(status.HTTP_400_BAD_REQUEST, str(exc), _error_code(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers so services can raise domain errors directly."""
    app.add_exception_handler(BatchLineError, handle_batch_error)  # type: ignore[arg-type]
    app.add_exception_handler(AirportNotFoundError, handle_not_found)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, handle_storage_error)  # type: ignore[arg-type]
    app.add_exception_handler(TransitError, handle_caller_error)  # type: ignore[arg-type]
