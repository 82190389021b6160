"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() wherever settings are needed; the instance is cached.

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    print(settings.challenges_table)

    # Tests
    settings = Settings(environment="test", _env_file=None)
"""

from functools import lru_cache
from typing import Optional

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

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    challenges_table: str = Field(default="challenges")
    workout_summaries_table: str = Field(default="workout_summaries")
    trophies_table: str = Field(default="trophies")

    transaction_max_attempts: int = Field(
        default=5,
        ge=1,
        description="Attempts for an optimistic challenge transaction before giving up",
    )

    # -------------------------------------------------------------------------
    # Challenge Rules
    # -------------------------------------------------------------------------
    competitive_rank_cutoff: int = Field(
        default=3,
        ge=1,
        description="Worst competitive rank that still earns a trophy",
    )
    personal_record_max_reps: int = Field(
        default=10,
        ge=1,
        le=36,
        description="Highest rep count trusted for personal-record 1RM estimates",
    )
    trophy_dedupe_enabled: bool = Field(
        default=False,
        description="Skip awarding a challenge trophy the user already holds",
    )
    default_trophy_image_url: Optional[str] = Field(
        default=None,
        description="Trophy image used when a challenge has no badge",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
