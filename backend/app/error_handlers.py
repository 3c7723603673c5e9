"""
Custom exception handlers for FastAPI.

Every failure leaves the API as ``{success: false, message, errors?}``.
Outside production with DEBUG on, ``error`` and ``stack`` are added to help
local debugging; request IDs are logged server-side only.
"""

import traceback

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import AppError
from core.logging import get_logger

logger = get_logger("backend.errors")

HTTP_MESSAGES = {
    404: "Route not found",
    405: "Method not allowed",
}


def _get_request_id() -> str:
    """Current request ID, for server-side logging only."""
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _expose_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.expose_error_details)


def error_payload(
    request: Request,
    message: str,
    errors: list[dict] | None = None,
    exc: Exception | None = None,
) -> dict:
    payload: dict = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    if exc is not None and _expose_details(request):
        payload["error"] = str(exc)
        payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return payload


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "body"


def _error_message(error: dict) -> str:
    """Human-readable text for one pydantic error entry."""
    field = _field_name(tuple(error.get("loc", ())))
    if error.get("type") == "invalid_field":
        return error["msg"]
    if error.get("type") == "missing":
        if field == "body":
            return "Request body is required"
        return f"{field[:1].upper()}{field[1:]} is required"
    return f"Invalid value for {field}: {error.get('msg', 'invalid input')}"


def validation_errors(errors: list[dict]) -> list[dict]:
    return [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": _error_message(error)}
        for error in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(
            "app_error",
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(request, exc.message, exc.errors, exc),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = validation_errors(list(exc.errors()))
        logger.warning("validation_error", errors=errors, request_id=_get_request_id())
        return JSONResponse(
            status_code=400,
            content=error_payload(request, errors[0]["message"] if errors else "Validation failed", errors),
        )

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        errors = validation_errors(list(exc.errors()))
        logger.warning("validation_error", errors=errors, request_id=_get_request_id())
        return JSONResponse(
            status_code=400,
            content=error_payload(request, errors[0]["message"] if errors else "Validation failed", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(request, HTTP_MESSAGES.get(exc.status_code, str(exc.detail))),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("integrity_error", error=str(exc.orig), request_id=_get_request_id())
        return JSONResponse(
            status_code=409,
            content=error_payload(request, "Duplicate field value", exc=exc),
        )

    @app.exception_handler(StaleDataError)
    async def stale_data_handler(request: Request, exc: StaleDataError):
        logger.warning("concurrent_modification", request_id=_get_request_id())
        return JSONResponse(
            status_code=409,
            content=error_payload(request, "Profile was modified concurrently, please retry", exc=exc),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Log full details server-side (including request_id for tracing)
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=500,
            content=error_payload(request, "Internal server error", exc=exc),
        )
