"""
SQLAlchemy models for Portfolio Hub.

Single source of truth for all database models.

Usage:
    from core.models import User, Profile, Project
"""

from .base import Base
from .profile import (
    Profile,
    ProfileSkill,
    Project,
    ProjectTechnology,
    WorkExperience,
    empty_links,
)
from .user import TokenBlacklist, User

__all__ = [
    # Base
    "Base",
    # User
    "User",
    "TokenBlacklist",
    # Profile aggregate
    "Profile",
    "ProfileSkill",
    "Project",
    "ProjectTechnology",
    "WorkExperience",
    "empty_links",
]
