"""
Request-scoped database access.

The DatabaseManager is built by create_app() and stored on ``app.state.db``;
handlers receive a session through the ``get_db`` dependency and never look
the manager up globally.
"""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from core.config import Settings
from core.db import DatabaseManager


def get_database(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Yield a session for one request.

    Handlers commit explicitly. Anything left uncommitted when the handler
    fails is rolled back.
    """
    session = get_database(request).get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
