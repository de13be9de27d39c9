"""
Tests for settings and database connection helpers.
"""

import pytest

import mock_data  # noqa: F401

from roadsafety.core.config import Settings
from roadsafety.db import check_db_health, close_db, get_db_engine, init_db


class TestSettings:

    def test_defaults(self):
        config = Settings()

        assert config.SCREENING_THRESHOLD == 1000.0
        assert config.SCREENING_LOOKBACK_DAYS == 365
        assert config.COST_MODEL == "simple"
        assert config.ACCIDENT_CACHE_TTL_SECONDS == 60

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("COST_MODEL", "advanced")
        monkeypatch.setenv("SCREENING_THRESHOLD", "2500")

        config = Settings()

        assert config.COST_MODEL == "advanced"
        assert config.SCREENING_THRESHOLD == 2500.0

    def test_invalid_lookback_rejected(self):
        with pytest.raises(ValueError):
            Settings(SCREENING_LOOKBACK_DAYS=0)


class TestDatabaseConnection:
    """Test the global engine lifecycle."""

    def teardown_method(self):
        close_db()

    def test_engine_requires_init(self):
        close_db()

        with pytest.raises(RuntimeError):
            get_db_engine()
        assert check_db_health()["status"] == "unhealthy"

    def test_init_and_health(self):
        engine = init_db("sqlite://")

        assert get_db_engine() is engine
        assert check_db_health() == {"status": "healthy", "database": "sqlite", "error": None}

    def test_close_resets_engine(self):
        init_db("sqlite://")

        close_db()

        with pytest.raises(RuntimeError):
            get_db_engine()
