"""
Backend services for Portfolio Hub.
"""

from . import profile_service

__all__ = ["profile_service"]
