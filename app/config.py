# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Stripe (class checkout)
    # -------------------------------------------------------------------------

    STRIPE_SECRET_KEY: str = Field(
        default="",
        description="Stripe secret API key"
    )

    STRIPE_WEBHOOK_SECRET: str = Field(
        default="",
        description="Signing secret for the Stripe webhook endpoint"
    )

    # -------------------------------------------------------------------------
    # Email (Resend)
    # -------------------------------------------------------------------------

    RESEND_API_KEY: str = Field(
        default="",
        description="Resend API key for transactional email"
    )

    RESEND_DOMAIN: str = Field(
        default="example.com",
        description="Verified sending domain, e.g. mail.example.com"
    )

    ADMIN_NOTIFICATION_EMAIL: str = Field(
        default="",
        description="Inbox that receives new time-off requests"
    )

    # -------------------------------------------------------------------------
    # Business Rules
    # -------------------------------------------------------------------------

    BUSINESS_TIMEZONE: str = Field(
        default="America/Los_Angeles",
        description="Timezone used to turn timestamps into schedule dates"
    )

    APPROVED_DEVICES_CACHE_TTL: int = Field(
        default=60 * 60 * 24,
        ge=0,
        description="Seconds an unfiltered approved-devices listing stays cached"
    )

    CERTIFICATION_WARNING_DAYS: int = Field(
        default=60,
        ge=1,
        le=365,
        description="Days before expiration when a certification is 'Expiring Soon'"
    )

    SCHEDULE_MAX_WEEKS: int = Field(
        default=52,
        ge=1,
        le=104,
        description="Upper bound for the weeks parameter of schedule generation"
    )

    OVERTIME_ALERT_HOURS: float = Field(
        default=9,
        gt=0,
        le=24,
        description="Hours clocked in without clocking out before overtime alerts go out"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    APP_BASE_URL: str = Field(
        default="http://localhost:3000",
        description="Public site URL, used for checkout redirects"
    )

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def email_configured(self) -> bool:
        return bool(self.RESEND_API_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
