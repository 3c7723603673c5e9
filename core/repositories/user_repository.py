"""User repository for authentication and user management."""

from datetime import datetime, timezone

from core.logging import get_logger
from core.models import TokenBlacklist, User
from core.models.base import utcnow

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (emails are stored lowercase)."""
        return self.session.query(User).filter(User.email == email.strip().lower()).first()

    def email_exists(self, email: str) -> bool:
        return self.exists_where(email=email.strip().lower())

    def create_user(self, email: str, password_hash: str) -> User:
        """Create an active user. The caller is responsible for hashing the password."""
        user = self.add(
            User(email=email.strip().lower(), password_hash=password_hash, is_active=True)
        )
        logger.info("user_created", user_id=user.id)
        return user

    def record_login(self, user: User) -> User:
        """Stamp the last successful login."""
        user.last_login = utcnow()
        self.session.flush()
        return user

    def deactivate(self, user_id: int) -> bool:
        user = self.get_by_id(user_id)
        if user is None:
            return False
        user.is_active = False
        self.session.flush()
        logger.info("user_deactivated", user_id=user_id)
        return True


class TokenBlacklistRepository(BaseRepository[TokenBlacklist]):
    """Repository for managing blacklisted JWT tokens."""

    model = TokenBlacklist

    def is_blacklisted(self, token_jti: str) -> bool:
        """Check if a token JTI is blacklisted."""
        return self.exists_where(token_jti=token_jti)

    def blacklist_token(self, token_jti: str, expires_at: datetime) -> TokenBlacklist:
        """Add a token to the blacklist. Revoking an already revoked token is a no-op."""
        existing = self.session.query(TokenBlacklist).filter(
            TokenBlacklist.token_jti == token_jti
        ).first()
        if existing is not None:
            return existing
        return self.add(TokenBlacklist(token_jti=token_jti, expires_at=expires_at))

    def cleanup_expired(self) -> int:
        """Remove expired tokens from blacklist."""
        result = (
            self.session.query(TokenBlacklist)
            .filter(TokenBlacklist.expires_at < datetime.now(timezone.utc))
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return result
