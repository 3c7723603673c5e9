"""
Password hashing with bcrypt.

bcrypt only looks at the first 72 bytes of a password; longer passwords are
truncated consistently for both hashing and verification.
"""

import bcrypt

from core.logging import get_logger

logger = get_logger("security.passwords")

BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a salted bcrypt hash suitable for storage."""
    return bcrypt.hashpw(_to_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a candidate password against a stored hash.

    Malformed hashes never match; they are logged for investigation.
    """
    try:
        return bcrypt.checkpw(_to_bytes(password), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.warning("password_hash_invalid", error=str(e))
        return False
