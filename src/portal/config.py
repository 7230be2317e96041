"""Application configuration using Pydantic Settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are validated once at import time and frozen afterwards; the
    application lifespan builds every client from this object.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # System Configuration
    environment: str = "development"
    debug: bool = False
    cors_origins: str = "http://localhost:3000"
    rate_limit_enabled: bool = True
    site_url: str = "http://localhost:3000"

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_anon_key: str = "test-anon-key"
    supabase_service_role_key: str = "test-service-role-key"

    # Token Verification Configuration
    use_local_jwt_verification: bool = False
    jwks_cache_ttl_seconds: int = 3600  # 1 hour
    jwt_audience: str = "authenticated"
    jwt_leeway_seconds: int = 10  # Clock skew tolerance

    # Session Cookies
    session_max_age_seconds: int = 60 * 60 * 24 * 7  # 7 days

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, value: str) -> str:
        """Reject Supabase URLs without an http(s) scheme."""
        if not value.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be a valid URL starting with http:// or https://")
        return value.rstrip("/")

    @property
    def cookie_secure(self) -> bool:
        """Session cookies are secure everywhere except local development."""
        return self.environment != "development"

    @property
    def auth_url(self) -> str:
        """Supabase auth endpoint, also the JWT issuer."""
        return f"{self.supabase_url}/auth/v1"


settings = Settings()
