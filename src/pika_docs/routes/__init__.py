"""HTTP routers and the error handlers they rely on."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pika_docs.errors import (
    AccessDeniedError,
    DocumentLockedError,
    NotFoundError,
    PersistenceError,
    StaleReferenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[PersistenceError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (DocumentLockedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StaleReferenceError, status.HTTP_404_NOT_FOUND),
]


def status_for(exc: PersistenceError) -> int:
    """HTTP status the API documents for a service error."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s %s error=%s", request.method, request.url.path, exc)
    else:
        logger.info("Request rejected: %s %s status=%d", request.method, request.url.path, code)
    return JSONResponse(status_code=code, content={"detail": str(exc) or "Internal server error"})


async def _request_validation_error(
    request: Request,  # noqa: ARG001
    exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    field = ".".join(str(part) for part in errors[0]["loc"][1:]) if errors else ""
    detail = f"Invalid {field}" if field else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    """Translate service errors and malformed bodies into JSON error responses."""
    app.add_exception_handler(PersistenceError, _persistence_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
