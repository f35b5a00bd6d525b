"""
Application configuration using Pydantic settings.

Configuration is loaded once from environment variables (or a .env file)
and is immutable afterwards. Handlers receive it through FastAPI
dependencies instead of reading os.environ themselves.

Mock modes enable local development without Backblaze or Supabase.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CORS_ORIGINS = (
    "https://kendama.club,"
    "https://www.kendama.club,"
    "https://kendama-club-site.vercel.app,"
    "http://localhost:5173"
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Field names map to upper-case env vars (b2_bucket_name -> B2_BUCKET_NAME).
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "ClipVault API"
    api_version: str = "0.1.0"
    access_password: str = Field(
        default="",
        description="Shared secret required on upload, metadata and download routes."
    )

    # Backblaze B2 (S3-compatible) Configuration
    b2_endpoint: str = Field(
        default="",
        description="B2 S3 endpoint host, e.g. s3.us-west-004.backblazeb2.com"
    )
    b2_region: str = Field(
        default="",
        description="Region used when signing requests, e.g. us-west-004"
    )
    b2_key_id: str = Field(
        default="",
        description="B2 application key ID"
    )
    b2_application_key: str = Field(
        default="",
        description="B2 application key secret"
    )
    b2_bucket_name: str = Field(
        default="",
        description="Bucket holding uploaded videos"
    )
    presign_expiry_seconds: int = Field(
        default=3600,
        description="Lifetime of issued upload/download URLs"
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Issue fake URLs from memory instead of signing against B2."
    )

    # Supabase Configuration
    supabase_url: str = Field(
        default="",
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        default="",
        description="Supabase service or anon key"
    )
    supabase_table: str = Field(
        default="videos",
        description="Table holding video metadata rows"
    )
    database_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory table instead of Supabase."
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    app_env: str = Field(
        default="development",
        description="'production' means an external host serves the ASGI app; no local listener."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default=DEFAULT_CORS_ORIGINS,
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def b2_endpoint_url(self) -> Optional[str]:
        """
        B2 endpoint as a full URL.

        B2_ENDPOINT is usually given as a bare host, so https:// is added
        unless a scheme is already present.
        """
        if not self.b2_endpoint:
            return None
        if "://" in self.b2_endpoint:
            return self.b2_endpoint
        return f"https://{self.b2_endpoint}"

    @property
    def serves_locally(self) -> bool:
        """False when deployed behind a host that invokes the app per request."""
        return self.app_env.lower() != "production"

    def validate_required_fields(self) -> list[str]:
        """
        Return the env vars that must be set but are not.

        Kept separate from Pydantic validation because requirements
        depend on the mock mode flags.
        """
        missing = []

        if not self.access_password:
            missing.append("ACCESS_PASSWORD")

        if not self.storage_mock_mode:
            if not self.b2_endpoint:
                missing.append("B2_ENDPOINT")
            if not self.b2_region:
                missing.append("B2_REGION")
            if not self.b2_key_id:
                missing.append("B2_KEY_ID")
            if not self.b2_application_key:
                missing.append("B2_APPLICATION_KEY")
            if not self.b2_bucket_name:
                missing.append("B2_BUCKET_NAME")

        if not self.database_mock_mode:
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_key:
                missing.append("SUPABASE_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process and never change at runtime.
    For tests, call get_settings.cache_clear() or override the dependency.
    """
    return Settings()
