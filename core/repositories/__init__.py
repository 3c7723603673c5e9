"""
Repository pattern implementations for data access.

Repositories wrap the SQLAlchemy session for one aggregate each. They flush
but never commit; the request handler owns the transaction.

Usage:
    from core.repositories import ProfileRepository

    with database.session() as session:
        repo = ProfileRepository(session)
        profile = repo.get_by_user_id(user_id)
        repo.add_skill(profile, "Go")
"""

from .base import BaseRepository
from .profile_repository import ProfileRepository
from .user_repository import TokenBlacklistRepository, UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "TokenBlacklistRepository",
    "ProfileRepository",
]
