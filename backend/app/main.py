"""
FastAPI application entry point.

``create_app(settings)`` builds a fully wired application: middleware,
exception handlers, database lifecycle and routers. Uses structured logging
from core.logging.
"""

import time
from pathlib import Path
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

import core
from core.config import Settings, get_settings
from core.db import DatabaseManager
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import auth as auth_router
from .routers import health as health_router
from .routers import profile as profile_router
from .routers import projects as projects_router
from .routers import search as search_router
from .routers import skills as skills_router

logger = get_logger("api")


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app, max_size_mb: int = 10):
        super().__init__(app)
        self.max_size = max_size_mb * 1024 * 1024  # Convert to bytes
        self.max_size_mb = max_size_mb

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Check Content-Length header if present
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={
                    "success": False,
                    "message": f"Request too large. Maximum request size is {self.max_size_mb}MB",
                },
            )

        return await call_next(request)


def check_database_health(db: DatabaseManager, max_retries: int = 3, retry_delay: float = 2.0) -> bool:
    """
    Check database connectivity with retry logic.

    Args:
        db: Initialized database manager
        max_retries: Maximum number of connection attempts
        retry_delay: Seconds to wait between retries

    Returns:
        True if database is reachable

    Raises:
        RuntimeError: If database is unreachable after all retries
    """
    for attempt in range(1, max_retries + 1):
        result = db.health_check()
        if result["healthy"]:
            logger.info("database_health_check_passed", attempt=attempt, latency_ms=result["latency_ms"])
            return True

        logger.warning(
            "database_health_check_failed",
            attempt=attempt,
            max_retries=max_retries,
            error=result["error"],
        )
        if attempt < max_retries:
            time.sleep(retry_delay * attempt)

    raise RuntimeError(
        f"Database unreachable after {max_retries} attempts. "
        "Check DATABASE_URL configuration and database server status."
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    api_prefix = settings.api_prefix

    app = FastAPI(title=settings.app_name, version=core.__version__, debug=settings.debug)
    app.state.settings = settings
    app.state.db = DatabaseManager(settings)
    app.state.started_at = time.monotonic()

    # Request size limit middleware (configurable via MAX_REQUEST_SIZE_MB)
    app.add_middleware(RequestSizeLimitMiddleware, max_size_mb=settings.max_request_size_mb)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Accept-Encoding",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
        ],
        expose_headers=["X-Request-ID"],
    )

    # GZip compression for responses > 500 bytes
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Request ID middleware (for tracing)
    app.add_middleware(RequestIDMiddleware)

    # Structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        configure_logging(settings)
        logger.info("app_startup", app_name=settings.app_name, environment=settings.env)

        db: DatabaseManager = app.state.db
        db.initialize(settings.database_url)
        logger.info("database_initialized")

        if settings.auto_create_tables:
            db.create_all_tables()
            logger.info("database_tables_created")

        # Verify database connectivity with retry
        check_database_health(db, max_retries=3, retry_delay=2.0)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("app_shutdown")
        app.state.db.reset()

    @app.get("/", tags=["health"])
    def root():
        return {
            "success": True,
            "message": f"Welcome to {settings.app_name}",
            "version": core.__version__,
            "environment": settings.env,
            "endpoints": {
                "auth": f"{api_prefix}/auth",
                "profile": f"{api_prefix}/profile",
                "search": f"{api_prefix}/search",
                "skills": f"{api_prefix}/skills",
                "projects": f"{api_prefix}/projects",
                "health": "/health",
            },
        }

    app.include_router(health_router.router, prefix="/health")
    app.include_router(auth_router.router, prefix=api_prefix)
    app.include_router(profile_router.router, prefix=api_prefix)
    app.include_router(search_router.router, prefix=api_prefix)
    app.include_router(skills_router.router, prefix=api_prefix)
    app.include_router(projects_router.router, prefix=api_prefix)

    # Uploaded images are served by the app only outside production
    if not settings.is_production:
        upload_dir = Path(settings.upload_dir)
        upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    return app


app = create_app()
