"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from decimal import Decimal
from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from pathlib import Path

# Get the base directory
BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_title: str = Field(default="Hourbook")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Supabase Configuration
    supabase_url: str = Field(default="https://example.supabase.co", description="Supabase project URL")
    supabase_anon_key: str = Field(default="temp-key", description="Supabase anonymous key")
    supabase_service_key: str = Field(default="temp-key", description="Supabase service role key")
    supabase_jwt_secret: str = Field(
        default="development-secret-key-change-in-production",
        description="Secret used by Supabase to sign access tokens"
    )
    site_url: str = Field(default="http://localhost:3000", description="Frontend URL for email redirects")

    # Database
    database_url: str = Field(default=f"sqlite:///{BASE_DIR / 'hourbook.db'}", description="Database URL")

    # CORS
    cors_origins: str | List[str] = Field(default=",".join(DEFAULT_CORS_ORIGINS))
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Host header check; empty disables it
    allowed_hosts: str | List[str] = Field(default="", validate_default=True, description="Comma-separated host names the API answers to")

    # Billing
    default_user_hourly_rate: Decimal = Field(default=Decimal("50"))
    default_project_hourly_rate: Decimal = Field(default=Decimal("75"))
    currency_symbol: str = Field(default="€")
    status_transition_policy: str = Field(
        default="permissive",
        description="'permissive' allows any status change, 'strict' only one step forward"
    )

    # Invoice providers (simulated)
    invoice_send_delay_seconds: float = Field(default=2.0)
    moneybird_tax_rate_id: str = Field(default="21")  # 21% BTW

    # Accounts
    min_password_length: int = Field(default=6)

    # Sentry (Optional)
    sentry_dsn: Optional[str] = Field(default=None)
    sentry_traces_sample_rate: float = Field(default=0.1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            if not v or v.strip() == "":
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return list(DEFAULT_CORS_ORIGINS)
        return v

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("status_transition_policy")
    @classmethod
    def check_transition_policy(cls, v: str) -> str:
        """Only the two known policies are accepted."""
        value = v.strip().lower()
        if value not in ("permissive", "strict"):
            raise ValueError("status_transition_policy must be 'permissive' or 'strict'")
        return value

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_environment(self) -> None:
        """Validate that all required environment variables are set."""
        required_vars = [
            "supabase_url",
            "supabase_anon_key",
            "supabase_service_key",
            "supabase_jwt_secret"
        ]

        missing_vars = []
        for var in required_vars:
            value = getattr(self, var, None)
            if not value or value == "temp-key":
                missing_vars.append(var.upper())

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()

    return settings


# Create a global settings instance
settings = get_settings()
