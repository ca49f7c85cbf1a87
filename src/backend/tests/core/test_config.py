"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from core.config import Settings


@pytest.mark.unit
class TestSettings:
    def test_secret_key_is_required(self) -> None:
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY="", _env_file=None)

    def test_postgres_url_uses_asyncpg(self) -> None:
        settings = Settings(SECRET_KEY="k", DATABASE_URL="postgresql://u:p@db:5432/hub", _env_file=None)
        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/hub"

    def test_url_built_from_parts(self) -> None:
        settings = Settings(
            SECRET_KEY="k",
            DATABASE_URL=None,
            POSTGRES_HOST="db",
            POSTGRES_USER="u",
            POSTGRES_PASSWORD="p",
            POSTGRES_DB="hub",
            _env_file=None,
        )
        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/hub"

    def test_cors_origins_accepts_json_and_csv(self) -> None:
        assert Settings(SECRET_KEY="k", CORS_ORIGINS='["http://a", "http://b"]').cors_origins_list == [
            "http://a",
            "http://b",
        ]
        assert Settings(SECRET_KEY="k", CORS_ORIGINS="http://a, http://b").cors_origins_list == [
            "http://a",
            "http://b",
        ]

    def test_gamification_defaults(self) -> None:
        settings = Settings(SECRET_KEY="k", _env_file=None)
        assert settings.STREAK_LOOKBACK_DAYS == 30
        assert settings.LEADERBOARD_MAX_LIMIT == 100
