"""
Tests for DatabaseManager and Settings.
"""

import pytest
from sqlalchemy import inspect

from core.config import Settings
from core.db import DatabaseManager
from core.models import User


class TestDatabaseManager:
    """Tests for the engine/session lifecycle."""

    def test_create_all_tables(self, test_db):
        tables = set(inspect(test_db.engine).get_table_names())

        assert {
            "users",
            "token_blacklist",
            "profiles",
            "profile_skills",
            "projects",
            "project_technologies",
            "work_experience",
        } <= tables

    def test_session_commits_on_success(self, test_db):
        with test_db.session() as session:
            session.add(User(email="a@example.com", password_hash="x"))

        with test_db.session() as session:
            assert session.query(User).count() == 1

    def test_session_rolls_back_on_error(self, test_db):
        with pytest.raises(RuntimeError):
            with test_db.session() as session:
                session.add(User(email="a@example.com", password_hash="x"))
                session.flush()
                raise RuntimeError("boom")

        with test_db.session() as session:
            assert session.query(User).count() == 0

    def test_health_check(self, test_db):
        result = test_db.health_check()

        assert result["healthy"] is True
        assert result["error"] is None

    def test_uninitialized(self, test_settings):
        database = DatabaseManager(test_settings)

        assert database.is_initialized is False
        assert database.health_check()["healthy"] is False
        assert database.get_pool_status() == {}
        with pytest.raises(RuntimeError, match="not initialized"):
            database.get_session()

    def test_reset(self, test_settings):
        database = DatabaseManager(test_settings)
        database.initialize()

        database.reset()

        assert database.is_initialized is False
        assert database.engine is None

    def test_sqlite_uses_static_pool(self, test_db):
        assert test_db.get_pool_status()["type"] == "StaticPool"

    def test_file_sqlite_gets_real_pool(self, test_settings, tmp_path):
        database = DatabaseManager(test_settings)
        database.initialize(f"sqlite:///{tmp_path / 'hub.db'}")
        try:
            database.create_all_tables()
            with database.session() as session:
                session.add(User(email="file@example.com", password_hash="x"))
            with database.session() as session:
                assert session.query(User).count() == 1

            assert database.get_pool_status()["type"] != "StaticPool"
        finally:
            database.reset()


class TestSettings:
    """Tests for Settings parsing."""

    def test_cors_origins_list(self):
        settings = Settings(cors_allowed_origins="http://a.test, ,http://b.test", jwt_secret_key="x" * 40)

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_error_details_only_in_debug_outside_production(self):
        secret = "x" * 40

        assert Settings(debug=True, env="development", jwt_secret_key=secret).expose_error_details
        assert not Settings(debug=False, env="development", jwt_secret_key=secret).expose_error_details
        assert not Settings(debug=True, env="production", jwt_secret_key=secret).expose_error_details

    def test_upload_size_bytes(self):
        settings = Settings(max_upload_size_mb=2, jwt_secret_key="x" * 40)

        assert settings.max_upload_size_bytes == 2 * 1024 * 1024

    def test_default_secret_warns_in_development(self, monkeypatch):
        monkeypatch.setenv("ENV", "development")

        with pytest.warns(UserWarning, match="default value"):
            Settings(jwt_secret_key="CHANGE_ME")

    def test_default_secret_rejected_in_production(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")

        with pytest.raises(ValueError, match="cannot be a default value"):
            Settings(jwt_secret_key="CHANGE_ME")

    def test_default_secret_rejected_when_env_passed_directly(self, monkeypatch):
        monkeypatch.delenv("ENV", raising=False)

        with pytest.raises(ValueError, match="cannot be a default value"):
            Settings(env="production", jwt_secret_key="CHANGE_ME")

    def test_default_secret_rejected_when_env_comes_from_dotenv(self, monkeypatch, tmp_path):
        monkeypatch.delenv("ENV", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("ENV=production\nJWT_SECRET_KEY=changeme\n")

        with pytest.raises(ValueError, match="cannot be a default value"):
            Settings(_env_file=env_file)

    def test_short_secret_rejected_in_production(self, monkeypatch):
        monkeypatch.delenv("ENV", raising=False)

        with pytest.raises(ValueError, match="at least 32 characters"):
            Settings(env="prod", jwt_secret_key="s" * 16)


class TestStartupHealthCheck:
    """Tests for the startup connectivity check."""

    def test_passes_for_reachable_database(self, test_db):
        from backend.app.main import check_database_health

        assert check_database_health(test_db, max_retries=1, retry_delay=0) is True

    def test_raises_after_retries(self, test_settings):
        from backend.app.main import check_database_health

        with pytest.raises(RuntimeError, match="after 2 attempts"):
            check_database_health(DatabaseManager(test_settings), max_retries=2, retry_delay=0)
