"""
Structured logging for Portfolio Hub.

Development gets a readable console renderer, production gets one JSON
object per line. Every entry carries the request id bound by the HTTP
middleware so a single request can be followed across log lines.

Usage:
    from core.logging import get_logger
    logger = get_logger("profile")
    logger.info("skill_added", profile_id=profile.id, skill=skill)
"""

from __future__ import annotations

import logging
import sys
import time
import uuid
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from structlog.types import EventDict, Processor

if TYPE_CHECKING:
    from .config import Settings

F = TypeVar("F", bound=Callable[..., Any])

# Paths hit by orchestrator probes; logged at debug to keep info logs readable
_QUIET_PATH_PREFIXES = ("/health",)

_configured = False


def _app_context(app_name: str, environment: str) -> Processor:
    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("env", environment)
        return event_dict

    return processor


def get_processors(settings: Settings) -> list[Processor]:
    """Processor chain for the given settings."""
    shared: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _app_context(settings.app_name, settings.env),
    ]

    if settings.is_production:
        return shared + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return shared + [
        structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(settings: Settings | None = None, *, force: bool = False) -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; later calls are ignored unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    if settings is None:
        from .config import get_settings

        settings = get_settings()

    level_name = "DEBUG" if settings.debug else settings.log_level
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=force)
    # RequestLoggingMiddleware already records every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: Any) -> None:
    """Bind variables included in every later entry for the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def log_timing(
    operation: str, logger: structlog.stdlib.BoundLogger | None = None
) -> Callable[[F], F]:
    """
    Decorator logging how long a function took, at debug level.

    Failures are logged at error level and re-raised.

    Usage:
        @log_timing("skill_histogram")
        def skill_histogram(...):
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _logger.error(
                    "operation_failed",
                    operation=operation,
                    duration_seconds=round(time.perf_counter() - start, 3),
                    error=str(e),
                )
                raise
            _logger.debug(
                "operation_complete",
                operation=operation,
                duration_seconds=round(time.perf_counter() - start, 3),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class RequestLoggingMiddleware:
    """
    ASGI middleware logging the start and outcome of each HTTP request.

    Completed requests are logged at info below 400, warning for client
    errors and error for server errors. Health probes drop to debug.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # RequestIDMiddleware binds the real id when it runs inside this one
        if "request_id" not in structlog.contextvars.get_contextvars():
            bind_context(request_id=uuid.uuid4().hex[:8])

        method = scope.get("method", "")
        path = scope.get("path", "")
        quiet = path.startswith(_QUIET_PATH_PREFIXES)
        client = scope.get("client")

        (self.logger.debug if quiet else self.logger.info)(
            "request_started",
            method=method,
            path=path,
            client=client[0] if client else None,
        )

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if status_code >= 500:
                log = self.logger.error
            elif status_code >= 400:
                log = self.logger.warning
            elif quiet:
                log = self.logger.debug
            else:
                log = self.logger.info

            log(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                duration_seconds=round(time.perf_counter() - start, 3),
            )
            clear_context()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_timing",
    "RequestLoggingMiddleware",
]
