"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock modes enable local development without external services.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Studio Site API"
    api_version: str = "v1"
    environment: str = Field(
        default="development",
        description="Deployment environment (development or production). Production marks cookies Secure."
    )

    # Admin Authentication
    admin_email: str = Field(
        default="",
        description="Email of the single admin account. Login always fails while unset."
    )
    admin_password: str = Field(
        default="",
        description="Password of the single admin account. Login always fails while unset."
    )
    session_secret_key: str = Field(
        default="",
        description="Secret used to sign admin session tokens. Admin login is disabled while unset."
    )
    session_ttl_seconds: int = Field(
        default=86400,
        description="Lifetime of an admin session token and cookie (24 hours)."
    )
    session_cookie_name: str = Field(
        default="admin_session",
        description="Name of the HTTP-only admin session cookie."
    )

    # Snowflake Configuration
    snowflake_account: str = Field(
        default="",
        description="Snowflake account identifier"
    )
    snowflake_user: str = Field(
        default="",
        description="Snowflake service account username"
    )
    snowflake_password: str = Field(
        default="",
        description="Snowflake service account password"
    )
    snowflake_private_key_path: Optional[str] = Field(
        default=None,
        description="Path to RSA private key file for key-pair authentication"
    )
    snowflake_database: str = Field(
        default="STUDIO",
        description="Snowflake database name"
    )
    snowflake_schema: str = Field(
        default="SITE",
        description="Snowflake schema name"
    )
    snowflake_warehouse: str = Field(
        default="COMPUTE_WH",
        description="Snowflake warehouse for query execution"
    )
    snowflake_role: Optional[str] = Field(
        default=None,
        description="Snowflake role to use (optional)"
    )
    snowflake_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real Snowflake connection. Enables local dev without DB."
    )

    # R2/S3 Storage Configuration
    r2_account_id: str = Field(
        default="",
        description="Cloudflare account ID for R2"
    )
    r2_access_key_id: str = Field(
        default="",
        description="R2 access key ID"
    )
    r2_secret_access_key: str = Field(
        default="",
        description="R2 secret access key"
    )
    r2_bucket_name: str = Field(
        default="studio-media",
        description="R2 bucket name for photo galleries and videos"
    )
    r2_endpoint_url: Optional[str] = Field(
        default=None,
        description="R2 endpoint URL. Auto-constructed from account_id if not provided."
    )
    r2_public_base_url: Optional[str] = Field(
        default=None,
        description="Public bucket URL (custom domain or r2.dev). When unset, presigned URLs are issued."
    )
    r2_presigned_url_ttl_seconds: int = Field(
        default=3600,
        description="Expiry of presigned download URLs when no public base URL is configured."
    )
    r2_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real R2. Enables local dev without object storage."
    )

    # Media layout
    photos_prefix: str = Field(
        default="photos",
        description="Root folder holding one sub-folder per gallery"
    )
    videos_prefix: str = Field(
        default="videos",
        description="Root folder holding videos (one level of sub-folders allowed)"
    )

    # Email (Resend)
    resend_api_key: str = Field(
        default="",
        description="Resend API key. Required unless in mock mode."
    )
    resend_mock_mode: bool = Field(
        default=False,
        description="Record outgoing email in memory instead of calling Resend."
    )
    booking_from_email: str = Field(
        default="Booking <bookings@example.com>",
        description="Sender used for booking notifications. Must be on a verified domain."
    )
    booking_notification_email: str = Field(
        default="studio@example.com",
        description="Where booking requests are delivered"
    )
    inbox_from_email: str = Field(
        default="Inbox <inbox@example.com>",
        description="Sender used when forwarding inbound email"
    )
    inbox_forward_email: str = Field(
        default="studio@example.com",
        description="Operator address receiving a copy of every inbound email"
    )
    site_domain: str = Field(
        default="example.com",
        description="Domain receiving inbound email, shown in forwarded copies"
    )

    # Instagram mirror
    instagram_feed_url: Optional[str] = Field(
        default=None,
        description="Behold-style JSON feed URL. When unset the mirror serves mock posts."
    )
    instagram_cache_seconds: int = Field(
        default=3600,
        description="How long a fetched feed is reused before refetching (1 hour)."
    )
    instagram_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for the upstream feed request"
    )

    # Inbox
    inbox_poll_interval_seconds: float = Field(
        default=5.0,
        description="How often the live inbox stream re-reads the message collection"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,https://example.com",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def r2_endpoint(self) -> str:
        """
        Construct R2 endpoint URL from account ID.

        R2 endpoints follow the pattern: https://{account_id}.r2.cloudflarestorage.com
        This is S3-compatible but uses Cloudflare's network.
        """
        if self.r2_endpoint_url:
            return self.r2_endpoint_url
        return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"

    @property
    def email_configured(self) -> bool:
        """Whether outgoing email can be sent at all."""
        return self.resend_mock_mode or bool(self.resend_api_key)

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on whether we're in mock mode.
        """
        missing = []

        if not self.admin_email:
            missing.append("ADMIN_EMAIL")
        if not self.admin_password:
            missing.append("ADMIN_PASSWORD")
        if not self.session_secret_key:
            missing.append("SESSION_SECRET_KEY")

        # Snowflake only required if not in mock mode
        if not self.snowflake_mock_mode and not self.snowflake_private_key_path:
            if not self.snowflake_account:
                missing.append("SNOWFLAKE_ACCOUNT")
            if not self.snowflake_user:
                missing.append("SNOWFLAKE_USER")
            # Need either password or private key
            if not self.snowflake_password:
                missing.append("SNOWFLAKE_PASSWORD or SNOWFLAKE_PRIVATE_KEY_PATH")

        # R2 only required if not in mock mode
        if not self.r2_mock_mode:
            if not self.r2_account_id and not self.r2_endpoint_url:
                missing.append("R2_ACCOUNT_ID")
            if not self.r2_access_key_id:
                missing.append("R2_ACCESS_KEY_ID")
            if not self.r2_secret_access_key:
                missing.append("R2_SECRET_ACCESS_KEY")

        if not self.email_configured:
            missing.append("RESEND_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
