"""
Authentication dependencies for FastAPI routes.

Supports both:
- Bearer token in Authorization header (for API clients)
- HttpOnly cookie (for browser-based frontends)
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.config import Settings
from core.errors import UnauthorizedError
from core.models import User
from core.repositories import TokenBlacklistRepository, UserRepository

from ..database import get_app_settings, get_db
from .jwt import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass
class AuthContext:
    """The authenticated user together with the decoded token that identified them."""

    user: User
    payload: dict[str, Any]


def get_token_from_request(
    token_header: str | None = Depends(oauth2_scheme),
    access_token_cookie: str | None = Cookie(None, alias="access_token"),
) -> str:
    """
    Extract JWT token from request.

    Checks in order:
    1. Authorization header (Bearer token)
    2. HttpOnly cookie (access_token)
    """
    if token_header:
        return token_header
    if access_token_cookie:
        return access_token_cookie
    raise UnauthorizedError("Access token is required")


def _resolve_user(db: Session, settings: Settings, token: str) -> AuthContext:
    try:
        payload = decode_access_token(token, settings)
    except ValueError:
        raise UnauthorizedError("Invalid or expired token") from None

    jti = payload.get("jti")
    if jti and TokenBlacklistRepository(db).is_blacklisted(jti):
        raise UnauthorizedError("Token has been revoked")

    user_id = payload.get("sub")
    try:
        user = UserRepository(db).get_by_id(int(user_id)) if user_id else None
    except ValueError:
        user = None
    if user is None:
        raise UnauthorizedError("User not found")
    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")
    return AuthContext(user=user, payload=payload)


def get_auth_context(
    token: str = Depends(get_token_from_request),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> AuthContext:
    """
    Resolve the caller from a bearer token or cookie.

    Steps:
    1) Extract token from header or cookie
    2) Decode JWT and extract subject (user id) and jti
    3) Reject if token is blacklisted (revoked)
    4) Load the user and reject unknown or deactivated accounts
    """
    return _resolve_user(db, settings, token)


def get_current_user(context: AuthContext = Depends(get_auth_context)) -> User:
    return context.user


def get_optional_user(
    token_header: str | None = Depends(oauth2_scheme),
    access_token_cookie: str | None = Cookie(None, alias="access_token"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User | None:
    """
    Get the current user if authenticated, otherwise return None.

    A bad, revoked or foreign token is treated as no token at all.
    """
    token = token_header or access_token_cookie
    if not token:
        return None
    try:
        return _resolve_user(db, settings, token).user
    except UnauthorizedError:
        return None
