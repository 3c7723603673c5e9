"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Repositories
- Pagination parameters
- The caller's profile
"""

from collections.abc import Callable

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from core.constants import MAX_PAGE_SIZE
from core.errors import BadRequestError, NotFoundError
from core.models import Profile, User
from core.repositories import ProfileRepository, TokenBlacklistRepository, UserRepository
from core.search import PageRequest

from ..auth.dependencies import get_current_user
from ..database import get_db

# =============================================================================
# Repository Dependencies
# =============================================================================


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(db)


def get_profile_repository(db: Session = Depends(get_db)) -> ProfileRepository:
    """Get ProfileRepository instance."""
    return ProfileRepository(db)


def get_token_blacklist_repository(db: Session = Depends(get_db)) -> TokenBlacklistRepository:
    """Get TokenBlacklistRepository instance."""
    return TokenBlacklistRepository(db)


def get_own_profile(
    current_user: User = Depends(get_current_user),
    profile_repo: ProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """The authenticated caller's profile, or 404."""
    profile = profile_repo.get_by_user_id(current_user.id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


# =============================================================================
# Pagination Dependencies
# =============================================================================


def pagination(default_limit: int) -> Callable[..., PageRequest]:
    """
    Build a dependency reading ``page`` and ``limit`` query parameters.

    Usage:
        @router.get("")
        def list_things(paging: PageRequest = Depends(pagination(20))):
            ...
    """

    def dependency(
        page: int = Query(default=1),
        limit: int = Query(default=default_limit),
    ) -> PageRequest:
        return PageRequest(page=page, limit=limit)

    return dependency


def result_limit(default_limit: int) -> Callable[..., int]:
    """Build a dependency for endpoints that only take a ``limit``."""

    def dependency(limit: int = Query(default=default_limit)) -> int:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise BadRequestError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        return limit

    return dependency


__all__ = [
    "get_user_repository",
    "get_profile_repository",
    "get_token_blacklist_repository",
    "get_own_profile",
    "pagination",
    "result_limit",
]
