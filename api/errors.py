# ============================================================================
# API ERROR HANDLERS
# ============================================================================
# STATUS: Core - Error to HTTP mapping
# PURPOSE: Render typed core errors as {"error": reason, "message": text}
# CREATED: 18 OCT 2026
# ============================================================================
"""
API Error Handlers

One place maps ZombieWatchError.reason to an HTTP status:

    validation_error    -> 400
    not_found           -> 404
    invalid_state       -> 409
    internal_error      -> 500
    service_unavailable -> 503

Request bodies that fail JSON type checks are reported as
validation_error (400) as well, not FastAPI's default 422.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import InternalError, ValidationError, ZombieWatchError

logger = logging.getLogger(__name__)


async def handle_core_error(request: Request, exc: ZombieWatchError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.reason}): {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    error = ValidationError(
        f"{location}: {message}" if location else message,
        field=location or None,
    )
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    error = InternalError("Internal server error")
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application."""
    app.add_exception_handler(ZombieWatchError, handle_core_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


__all__ = ["register_exception_handlers"]
