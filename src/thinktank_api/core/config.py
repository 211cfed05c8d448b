"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend-as-a-service
    backend_url: str = Field(
        description="Base URL of the hosted backend (REST, auth and storage live under it)",
    )
    backend_anon_key: str = Field(
        min_length=1,
        description="Public (anon) API key sent with every backend request",
    )
    backend_service_key: str | None = Field(
        default=None,
        description="Service-role key used by CLI maintenance commands (bypasses row-level security)",
    )
    backend_timeout: float = Field(
        default=15.0,
        description="Backend HTTP request timeout in seconds",
        gt=0,
    )
    session_lookup_timeout: float = Field(
        default=5.0,
        description="Upper bound in seconds for resolving the current identity",
        gt=0,
    )
    publication_cache_ttl_seconds: float = Field(
        default=60.0,
        description="Maximum age in seconds of the cached public feed (picks up writes from other processes)",
        gt=0,
    )

    @field_validator("backend_url")
    @classmethod
    def validate_backend_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            msg = "backend_url must be an http(s) URL"
            raise ValueError(msg)
        return v.rstrip("/")

    # S3-compatible object storage
    storage_s3_endpoint: str | None = Field(
        default=None,
        description="S3 endpoint of the backend storage (defaults to {backend_url}/storage/v1/s3)",
    )
    storage_access_key_id: str | None = Field(
        default=None,
        description="S3 access key for backend storage",
    )
    storage_secret_access_key: str | None = Field(
        default=None,
        description="S3 secret key for backend storage",
    )
    storage_region: str = Field(
        default="us-east-1",
        description="S3 region name for backend storage",
    )
    storage_public_url: str | None = Field(
        default=None,
        description="Public URL prefix for stored objects (defaults to {backend_url}/storage/v1/object/public)",
    )
    content_bucket: str = Field(
        default="admin-uploads",
        description="Bucket for content files, report files, thumbnails and gallery images",
    )
    partner_logo_bucket: str = Field(
        default="partner-logos",
        description="Bucket for partner logos",
    )

    @property
    def resolved_storage_endpoint(self) -> str:
        """S3 endpoint, falling back to the backend's storage path."""
        return self.storage_s3_endpoint or f"{self.backend_url}/storage/v1/s3"

    @property
    def resolved_storage_public_url(self) -> str:
        """Public object URL prefix without a trailing slash."""
        base = self.storage_public_url or f"{self.backend_url}/storage/v1/object/public"
        return base.rstrip("/")

    # Uploads
    content_max_file_size_mb: int = Field(
        default=100,
        description="Maximum size for content and image uploads in megabytes",
        gt=0,
    )
    report_max_file_size_mb: int = Field(
        default=50,
        description="Maximum size for report uploads in megabytes",
        gt=0,
    )
    default_author: str = Field(
        default="AfroStrategia",
        description="Author recorded on content and blog posts submitted without one",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )
    rate_limit_per_minute: int = Field(
        default=200,
        description="Maximum API requests per minute per IP address",
        gt=0,
    )
    trusted_proxy_headers: str = Field(
        default="CF-Connecting-IP,X-Forwarded-For,X-Real-IP",
        description="Comma-separated list of HTTP headers to check for real client IP, in priority order",
    )

    @property
    def trusted_proxy_header_list(self) -> list[str]:
        """Parse trusted proxy headers string into a list."""
        if not self.trusted_proxy_headers.strip():
            return []
        return [h.strip() for h in self.trusted_proxy_headers.split(",") if h.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
