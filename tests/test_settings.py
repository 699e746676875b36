"""
Test suite for configuration settings.

System role: Verification of environment-driven configuration
"""

import pytest
from pydantic import ValidationError

from reading_room.configs.base import BaseSettings
from reading_room.configs.database import DatabaseSettings
from reading_room.configs.retrieval import RetrievalSettings


class TestDatabaseSettings:
    """Test suite for DatabaseSettings.async_database_url."""

    def test_url_should_be_built_from_parts(self) -> None:
        settings = DatabaseSettings(host="db", port=6543, user="u", password="p", db="library", sslmode="disable")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:6543/library"

    def test_ssl_should_be_required_by_default(self) -> None:
        assert DatabaseSettings(url=None).async_database_url.endswith("?ssl=require")

    def test_provider_url_should_switch_to_asyncpg(self) -> None:
        settings = DatabaseSettings(url="postgres://u:p@host:5432/library")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@host:5432/library"


class TestRetrievalSettings:
    """Test suite for RetrievalSettings."""

    def test_environment_should_override_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("RETRIEVAL_TOP_N", "5")
        monkeypatch.setenv("RETRIEVAL_ENABLE_RERANK", "true")

        settings = RetrievalSettings()

        assert settings.top_n == 5
        assert settings.enable_rerank is True
        assert settings.catalog_page_size == 20

    def test_threshold_should_be_bounded(self) -> None:
        with pytest.raises(ValidationError):
            RetrievalSettings(similarity_threshold=1.5)


class TestBaseSettings:
    """Test suite for shared settings fields."""

    def test_log_level_should_be_normalized(self) -> None:
        assert BaseSettings(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_should_be_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BaseSettings(log_level="chatty")
