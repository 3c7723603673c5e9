"""
Authentication endpoints: email/password registration and login, token
refresh and logout.

Tokens are returned in the response body and also set as an HttpOnly
``access_token`` cookie for browser clients.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from core.config import Settings
from core.errors import ConflictError, NotFoundError, UnauthorizedError
from core.logging import get_logger
from core.models import User
from core.repositories import ProfileRepository, TokenBlacklistRepository, UserRepository
from core.search import shaper
from core.security import hash_password, verify_password

from ..auth.dependencies import AuthContext, get_auth_context, get_current_user
from ..auth.jwt import create_access_token, get_token_expiry
from ..database import get_app_settings, get_db
from ..dependencies import (
    get_profile_repository,
    get_token_blacklist_repository,
    get_user_repository,
)
from ..schemas import LoginRequest, RegisterRequest, user_to_dict

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(content: dict, token: str | None, settings: Settings, status_code: int = 200) -> JSONResponse:
    """JSON response that also sets (or clears, when ``token`` is None) the auth cookie."""
    response = JSONResponse(status_code=status_code, content=jsonable_encoder(content))
    if token is None:
        response.delete_cookie(key="access_token", path="/", secure=settings.is_production, samesite="lax")
    else:
        response.set_cookie(
            key="access_token",
            value=token,
            httponly=True,
            secure=settings.is_production,
            samesite="lax",
            max_age=settings.access_token_expire_minutes * 60,
            path="/",
        )
    return response


def _issue_token(user: User, settings: Settings) -> str:
    return create_access_token({"sub": str(user.id)}, settings)


def _revoke(blacklist: TokenBlacklistRepository, payload: dict) -> None:
    jti = payload.get("jti")
    if not jti:
        return
    expiry = get_token_expiry(payload) or datetime.now(timezone.utc)
    blacklist.blacklist_token(jti, expiry)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Create a user and their profile, and sign them in."""
    if users.email_exists(payload.email):
        raise ConflictError("User with this email already exists")

    user = users.create_user(payload.email, hash_password(payload.password, rounds=settings.bcrypt_rounds))
    profile = profiles.create_for_user(user, name=payload.name)
    users.record_login(user)
    db.commit()

    token = _issue_token(user, settings)
    logger.info("user_registered", user_id=user.id)

    return _token_response(
        {
            "success": True,
            "message": "User registered successfully",
            "data": {
                "user": user_to_dict(user),
                "profile": {"id": profile.id, "name": profile.name, "email": profile.email},
                "token": token,
            },
        },
        token,
        settings,
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
def login(
    payload: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Exchange email and password for a token. There is no lockout on repeated failures."""
    user = users.get_by_email(payload.email)
    if user is None:
        raise UnauthorizedError("Invalid email or password")
    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")
    if not verify_password(payload.password, user.password_hash):
        logger.info("login_failed", user_id=user.id)
        raise UnauthorizedError("Invalid email or password")

    users.record_login(user)
    db.commit()

    token = _issue_token(user, settings)
    logger.info("user_logged_in", user_id=user.id)

    return _token_response(
        {
            "success": True,
            "message": "Login successful",
            "data": {"user": user_to_dict(user), "token": token},
        },
        token,
        settings,
    )


@router.get("/me")
def current_user(user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return {"success": True, "data": {"user": user_to_dict(user)}}


@router.get("/profile")
def current_user_profile(
    user: User = Depends(get_current_user),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """Current user together with the public view of their profile."""
    profile = profiles.get_by_user_id(user.id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return {
        "success": True,
        "data": {"user": user_to_dict(user), "profile": shaper.public_profile(profile)},
    }


@router.post("/refresh")
def refresh_token(
    context: AuthContext = Depends(get_auth_context),
    blacklist: TokenBlacklistRepository = Depends(get_token_blacklist_repository),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Issue a new token.

    The token used for this request is revoked so it cannot be replayed.
    """
    _revoke(blacklist, context.payload)
    db.commit()

    token = _issue_token(context.user, settings)
    logger.info("token_refreshed", user_id=context.user.id)
    return _token_response(
        {"success": True, "message": "Token refreshed successfully", "data": {"token": token}},
        token,
        settings,
    )


@router.post("/logout")
def logout(
    context: AuthContext = Depends(get_auth_context),
    blacklist: TokenBlacklistRepository = Depends(get_token_blacklist_repository),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Revoke the current token and clear the auth cookie."""
    _revoke(blacklist, context.payload)
    removed = blacklist.cleanup_expired()
    db.commit()

    logger.info("user_logged_out", user_id=context.user.id, expired_tokens_removed=removed)
    return _token_response({"success": True, "message": "Logout successful"}, None, settings)
