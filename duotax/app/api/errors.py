from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..services.depreciation import ScheduleValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _describe_request_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    locations = first.get("loc", ())
    if first.get("type") == "json_invalid":
        # Integer locations here are character offsets into the body, not fields.
        locations = [loc for loc in locations if not isinstance(loc, int)]
    field_path = ".".join(str(loc) for loc in locations if loc != "body")
    if field_path:
        return f"Invalid request: {field_path}: {first.get('msg', 'invalid value')}"
    return f"Invalid request: {first.get('msg', 'malformed body')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Render engine and request failures as ``{"error": message}`` bodies."""

    @app.exception_handler(ScheduleValidationError)
    async def schedule_validation_handler(request: Request, exc: ScheduleValidationError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_request_error(exc)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Calculation error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )
