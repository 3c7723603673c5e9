"""
Security helpers for Portfolio Hub.

Provides:
- Password hashing (bcrypt)
"""

from .passwords import hash_password, verify_password

__all__ = ["hash_password", "verify_password"]
