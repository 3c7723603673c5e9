"""
Pytest fixtures for Portfolio Hub tests.

Every test gets a fresh in-memory SQLite database (StaticPool, one shared
connection) built through DatabaseManager, the same way the app builds it.
"""

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy.orm import Session

from core.config import Settings
from core.db import DatabaseManager
from core.models import Profile
from core.repositories import ProfileRepository, UserRepository

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256-signing"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite://",
        jwt_secret_key=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        env="test",
        debug=False,
        auto_create_tables=True,
    )


@pytest.fixture
def test_db(test_settings) -> Iterator[DatabaseManager]:
    """Create a fresh test database for each test."""
    database = DatabaseManager(test_settings)
    database.initialize()
    database.create_all_tables()
    yield database
    database.reset()


@pytest.fixture
def test_session(test_db) -> Iterator[Session]:
    """Get a test session from the test database."""
    session = test_db.get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_profile(test_session) -> Callable[..., Profile]:
    """
    Factory creating a user with a profile and committing it.

    Usage:
        profile = make_profile("ada@example.com", "Ada", skills=["Python"],
                               projects=[{"title": "Engine", "technologies": ["C"]}])
    """

    def factory(
        email: str,
        name: str,
        skills: list[str] | tuple[str, ...] = (),
        projects: list[dict] | tuple[dict, ...] = (),
        work: list[dict] | tuple[dict, ...] = (),
        is_public: bool = True,
        **fields,
    ) -> Profile:
        user = UserRepository(test_session).create_user(email, "not-a-real-hash")
        repo = ProfileRepository(test_session)
        profile = repo.create_for_user(user, name=name, is_public=is_public, **fields)
        for skill in skills:
            repo.add_skill(profile, skill)
        for project in projects:
            repo.add_project(
                profile,
                **{"description": f"{project['title']} description", **project},
            )
        for entry in work:
            repo.add_work(
                profile,
                **{
                    "position": "Engineer",
                    "description": "Built things",
                    "start_date": "2020-01-01",
                    **entry,
                },
            )
        test_session.commit()
        return profile

    return factory
