"""Tests for application configuration."""
import pytest

from core.config import Settings


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test__parse_cors_origins__single_origin_string(self) -> None:
        """Single origin string is parsed correctly."""
        settings = Settings(_env_file=None, cors_origins="http://localhost:5173")
        assert settings.cors_origins == ["http://localhost:5173"]

    def test__parse_cors_origins__multiple_origins_comma_separated(self) -> None:
        """Multiple comma-separated origins are parsed correctly."""
        settings = Settings(
            _env_file=None,
            cors_origins="http://localhost:5173,https://example.com",
        )
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test__parse_cors_origins__origins_with_whitespace(self) -> None:
        """Whitespace around origins is stripped."""
        settings = Settings(
            _env_file=None,
            cors_origins="  http://localhost:5173 , https://example.com  ",
        )
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test__parse_cors_origins__origins_list_passthrough(self) -> None:
        """List of origins is passed through unchanged."""
        origins = ["http://localhost:5173", "https://example.com"]
        settings = Settings(_env_file=None, cors_origins=origins)
        assert settings.cors_origins == origins

    def test__parse_cors_origins__trailing_comma(self) -> None:
        """Trailing comma is handled (empty entries filtered)."""
        settings = Settings(_env_file=None, cors_origins="http://localhost:5173,")
        assert settings.cors_origins == ["http://localhost:5173"]

    def test__cors_origins__from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A comma-separated CORS_ORIGINS variable is split, not JSON-decoded."""
        monkeypatch.setenv("CORS_ORIGINS", "https://a.com,https://b.com")
        settings = Settings(_env_file=None)
        assert settings.cors_origins == ["https://a.com", "https://b.com"]

    def test__cors_origins__default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """All origins are allowed by default."""
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.cors_origins == ["*"]


class TestMetadataConfig:
    """Tests for metadata fetching settings."""

    def test__metadata_settings__defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Fetching uses a 10 second timeout and the SSRF guard by default."""
        for name in ("METADATA_TIMEOUT", "BLOCK_PRIVATE_URLS", "METADATA_USER_AGENT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.metadata_timeout == 10.0
        assert settings.block_private_urls is True
        assert "BookmarkBot" in settings.metadata_user_agent

    def test__metadata_settings__environment_overrides(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Settings are read from environment variables."""
        monkeypatch.setenv("METADATA_TIMEOUT", "2.5")
        monkeypatch.setenv("BLOCK_PRIVATE_URLS", "false")
        settings = Settings(_env_file=None)
        assert settings.metadata_timeout == 2.5
        assert settings.block_private_urls is False
