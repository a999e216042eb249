"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bind8.core.errors import ConfigurationAppError


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_log_settings() -> "LogSettings":
    return LogSettings()


def _build_app_settings() -> "AppSettings":
    return AppSettings()


def _build_supabase_settings() -> "SupabaseSettings":
    return SupabaseSettings()


def _build_stripe_settings() -> "StripeSettings":
    return StripeSettings()


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (defaults to logs/app.log)",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    name: str = Field("Bind8", description="Application display name")
    version: str = Field("1.0.0", description="Application version")
    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    base_url: str = Field(
        "http://localhost:3000",
        description="Public base URL of the web front-end",
    )
    host: str = Field("127.0.0.1", description="Interface the API server binds to")
    port: int = Field(8000, description="Port the API server listens on")
    api_key_required: bool = Field(
        True,
        description="Whether API key authentication is required on protected routes",
    )
    api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid API keys for authentication",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on API routes",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    rate_limit_reaper_interval_seconds: float = Field(
        60.0,
        description="Interval between sweeps that purge expired rate limit windows",
        gt=0,
    )

    validate_external_config: bool = Field(
        False,
        description="Fail startup when Supabase/Stripe credentials are missing",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class SupabaseSettings(BaseSettings):
    """Backend-as-a-service (auth, tables, storage) credentials."""

    url: str | None = Field(None, description="Supabase project URL")
    anon_key: str | None = Field(None, description="Public anon key")
    service_role_key: str | None = Field(
        None,
        description="Service role key for privileged server-side calls",
    )

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        case_sensitive=False,
    )


class StripeSettings(BaseSettings):
    """Payment provider credentials."""

    secret_key: str | None = Field(None, description="Stripe secret API key")
    publishable_key: str | None = Field(None, description="Stripe publishable key")
    webhook_secret: str | None = Field(None, description="Stripe webhook signing secret")

    model_config = SettingsConfigDict(
        env_prefix="STRIPE_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    supabase: SupabaseSettings = Field(default_factory=_build_supabase_settings)
    stripe: StripeSettings = Field(default_factory=_build_stripe_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


def validate_required_env(cfg: Settings | None = None) -> None:
    """Ensure every external credential the application needs is configured.

    Args:
        cfg: Settings to check; defaults to the global settings instance.

    Raises:
        ConfigurationAppError: Listing every missing environment variable by name.
    """

    cfg = cfg or settings
    required = {
        "SUPABASE_URL": cfg.supabase.url,
        "SUPABASE_ANON_KEY": cfg.supabase.anon_key,
        "STRIPE_SECRET_KEY": cfg.stripe.secret_key,
        "STRIPE_PUBLISHABLE_KEY": cfg.stripe.publishable_key,
    }
    missing = [name for name, value in required.items() if not value]

    if missing:
        raise ConfigurationAppError(
            code="missing_environment_variables",
            message=f"Missing required environment variables: {', '.join(missing)}",
            details={"missing": missing},
        )


settings = Settings()
