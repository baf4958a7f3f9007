"""
Global error handling for the intake API.

Every error leaves the API in the same ``ErrorResponse`` envelope
(``detail``, ``code``, ``timestamp``) so the presentation layer can show
``detail`` to the user and branch on ``code``.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import IntakeError
from src.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def _envelope(
    status_code: int, detail: str, code: str, timestamp: str | None = None
) -> JSONResponse:
    body = ErrorResponse(
        detail=detail,
        code=code,
        timestamp=timestamp or datetime.now(UTC).isoformat(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    """Attach the intake exception handlers to ``app``.

    ``IntakeError`` subclasses keep their own status code; request
    validation failures become 422 ``VALIDATION_ERROR``; anything else is a
    500 ``INTERNAL_ERROR`` with no stack trace in the body.
    """

    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.info
        log("%s on %s: %s", exc.code, request.url.path, exc.detail)
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, _first_validation_message(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
