"""
Health and readiness probes.

Mounted at /health, outside the API prefix, so load balancers and container
orchestrators can reach them without knowing API_PREFIX.
"""

import os
import platform
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from core.config import Settings
from core.db import DatabaseManager
from core.logging import get_logger
from core.models import Profile, Project, User

from ..database import get_app_settings, get_database

logger = get_logger("health")

router = APIRouter(tags=["health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uptime(request: Request) -> float:
    started_at = getattr(request.app.state, "started_at", None)
    if started_at is None:
        return 0.0
    return round(time.monotonic() - started_at, 3)


def _memory_usage() -> dict:
    """Peak resident memory of this process, where the platform reports it."""
    try:
        import resource
    except ImportError:
        return {}
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {"maxRss": usage.ru_maxrss}


def _database_stats(db: DatabaseManager) -> dict:
    try:
        with db.session() as session:
            return {
                "users": session.query(User).count(),
                "profiles": session.query(Profile).count(),
                "projects": session.query(Project).count(),
            }
    except Exception as exc:
        logger.warning("database_stats_failed", error=str(exc))
        return {"error": "Unable to fetch database stats"}


@router.get("")
def health_check(request: Request, settings: Settings = Depends(get_app_settings)):
    """Liveness-style check. Touches nothing but the process."""
    return {
        "success": True,
        "message": "OK",
        "timestamp": _timestamp(),
        "uptime": _uptime(request),
        "environment": settings.env,
    }


@router.get("/detailed")
def health_check_detailed(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    db: DatabaseManager = Depends(get_database),
):
    """Database status and latency, row counts and process information."""
    check = db.health_check()
    db_status = "connected" if check["healthy"] else "error"

    return {
        "success": True,
        "message": "Detailed health check completed",
        "timestamp": _timestamp(),
        "status": {
            "api": "healthy",
            "database": db_status,
            "overall": "healthy" if check["healthy"] else "degraded",
        },
        "database": {
            "status": db_status,
            "latency": check["latency_ms"],
            "pool": db.get_pool_status(),
            "stats": _database_stats(db) if check["healthy"] else {},
        },
        "system": {
            "pythonVersion": platform.python_version(),
            "platform": platform.system().lower(),
            "arch": platform.machine(),
            "memoryUsage": _memory_usage(),
            "uptime": _uptime(request),
        },
        "environment": settings.env,
    }


@router.get("/ready")
def readiness_check(db: DatabaseManager = Depends(get_database)):
    """
    Readiness check endpoint.

    Returns 200 if the database answers, 503 otherwise.
    """
    checks = {"database": db.health_check()["healthy"], "api": True}

    if not all(checks.values()):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "message": "Application is not ready",
                "timestamp": _timestamp(),
                "checks": checks,
            },
        )

    return {
        "success": True,
        "message": "Application is ready",
        "timestamp": _timestamp(),
        "checks": checks,
    }


@router.get("/live")
def liveness_check(request: Request):
    return {
        "success": True,
        "message": "Application is alive",
        "timestamp": _timestamp(),
        "pid": os.getpid(),
        "uptime": _uptime(request),
    }


@router.get("/metrics")
def metrics(request: Request, db: DatabaseManager = Depends(get_database)):
    """Basic process and database metrics."""
    healthy = db.health_check()["healthy"]
    return {
        "success": True,
        "data": {
            "timestamp": _timestamp(),
            "uptime": _uptime(request),
            "memory": _memory_usage(),
            "database": {
                "status": "connected" if healthy else "disconnected",
                "tables": _database_stats(db) if healthy else {},
            },
        },
    }
