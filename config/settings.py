"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Nothing here is required; every value has a working default so the
planning engines can run without a .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # COUNT PLANNING
    # ===================
    default_plan_mode: str = Field(
        default="balanced",
        pattern="^(express|balanced|deep|shrink_focus|fast_mover)$",
        description="Plan mode used when a request does not name one"
    )
    include_routine_default: bool = Field(
        default=False,
        description="Return routine (below-threshold) items when a request does not say"
    )

    # ===================
    # REPLENISHMENT
    # ===================
    purchase_order_reference_start: int = Field(
        default=1001,
        ge=1,
        description="First sequence number used for PO-#### references"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are present but invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
