"""
Portfolio Hub Core Library.

Database management, models, repositories, search and logging shared by the
HTTP backend.

Usage:
    from core.db import DatabaseManager
    from core.models import User, Profile, Project
    from core.repositories import ProfileRepository, UserRepository
    from core.search import service as search_service

    from core.config import get_settings, Settings
    from core.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
