"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "artstock.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class LedgerSettings(BaseSettings):
    """Stock ledger configuration."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    stats_window_days: int = 7
    default_movement_limit: int = 50
    max_movement_limit: int = 500


class NumberingSettings(BaseSettings):
    """Order numbering configuration."""

    model_config = SettingsConfigDict(env_prefix="NUMBERING_")

    default_prefix: str = "ART"
    max_retries: int = 5


class CostingSettings(BaseSettings):
    """Cost calculation configuration."""

    model_config = SettingsConfigDict(env_prefix="COSTING_")

    # Number of most recent purchases in the weighted average
    purchase_window: int = 10
    hourly_rate: float = 0.0
    recalculate_on_purchase: bool = True


class PricingSettings(BaseSettings):
    """Default pricing factors for recommended prices."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    markup_percentage: float = 200.0
    min_price: float = 50.0
    max_price: float = 1000.0
    complexity_multiplier: float = 1.0
    size_multiplier: float = 1.0
    urgency_multiplier: float = 1.0


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ArtStock"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    numbering: NumberingSettings = Field(default_factory=NumberingSettings)
    costing: CostingSettings = Field(default_factory=CostingSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
