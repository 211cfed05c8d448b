"""Unit tests for core configuration module."""

import pytest
from pydantic import ValidationError

from thinktank_api.core.config import Settings


@pytest.fixture
def backend_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setenv("BACKEND_URL", "https://project.backend.test/")
    monkeypatch.setenv("BACKEND_ANON_KEY", "anon-key")
    return monkeypatch


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_from_env(self, backend_env: pytest.MonkeyPatch) -> None:
        """Settings load from environment variables."""
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.backend_url == "https://project.backend.test"
        assert settings.backend_anon_key == "anon-key"

    def test_settings_defaults(self, backend_env: pytest.MonkeyPatch) -> None:
        """Default values are applied correctly."""
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.backend_service_key is None
        assert settings.backend_timeout == 15.0
        assert settings.session_lookup_timeout == 5.0
        assert settings.publication_cache_ttl_seconds == 60.0
        assert settings.content_bucket == "admin-uploads"
        assert settings.partner_logo_bucket == "partner-logos"
        assert settings.content_max_file_size_mb == 100
        assert settings.report_max_file_size_mb == 50
        assert settings.log_level == "INFO"
        assert settings.cors_origins == ""
        assert settings.api_v1_prefix == "/api/v1"
        assert settings.rate_limit_per_minute == 200

    def test_backend_url_must_be_http(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKEND_URL", "ftp://backend.test")
        monkeypatch.setenv("BACKEND_ANON_KEY", "anon-key")
        with pytest.raises(ValidationError, match="http"):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_anon_key_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKEND_URL", "https://backend.test")
        monkeypatch.delenv("BACKEND_ANON_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_cors_origin_list(self, backend_env: pytest.MonkeyPatch) -> None:
        """CORS origins string is parsed into a list."""
        backend_env.setenv("CORS_ORIGINS", "http://localhost:3000, https://thinktank.example")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.cors_origin_list == ["http://localhost:3000", "https://thinktank.example"]

    def test_cors_origin_list_empty(self, backend_env: pytest.MonkeyPatch) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.cors_origin_list == []

    def test_trusted_proxy_header_list(self, backend_env: pytest.MonkeyPatch) -> None:
        backend_env.setenv("TRUSTED_PROXY_HEADERS", "X-Real-IP , CF-Connecting-IP")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.trusted_proxy_header_list == ["X-Real-IP", "CF-Connecting-IP"]

    def test_validation_rate_limit_positive(self, backend_env: pytest.MonkeyPatch) -> None:
        """Rate limit per minute must be a positive integer."""
        backend_env.setenv("RATE_LIMIT_PER_MINUTE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_validation_upload_limit_positive(self, backend_env: pytest.MonkeyPatch) -> None:
        backend_env.setenv("REPORT_MAX_FILE_SIZE_MB", "-1")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestStorageUrls:
    """Storage endpoints fall back to paths under the backend URL."""

    def test_defaults_derive_from_backend_url(self, backend_env: pytest.MonkeyPatch) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.resolved_storage_endpoint == "https://project.backend.test/storage/v1/s3"
        assert settings.resolved_storage_public_url == "https://project.backend.test/storage/v1/object/public"

    def test_explicit_values_win(self, backend_env: pytest.MonkeyPatch) -> None:
        backend_env.setenv("STORAGE_S3_ENDPOINT", "https://s3.example")
        backend_env.setenv("STORAGE_PUBLIC_URL", "https://cdn.example/public/")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.resolved_storage_endpoint == "https://s3.example"
        assert settings.resolved_storage_public_url == "https://cdn.example/public"
