"""
Base model class for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience.
"""

from datetime import datetime, timezone

from core.db import Base


def utcnow() -> datetime:
    """Timestamp default shared by all models."""
    return datetime.now(timezone.utc)


__all__ = ["Base", "utcnow"]
