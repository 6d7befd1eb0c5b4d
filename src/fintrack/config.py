"""Configuration for fintrack.

Typed settings loaded from environment variables (and an optional ``.env``
file). ``FINTRACK_DB_PATH`` is read here and can be overridden by
the ``--db-path`` CLI option.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini receipt scanning configuration."""

    model_config = SettingsConfigDict(env_prefix="GEMINI_", env_file=".env", extra="ignore")

    # Optional here so that a missing key surfaces as a receipt configuration
    # error when scanning, not as a settings failure at startup.
    api_key: Optional[str] = Field(default=None, description="Gemini API key")
    model_name: str = Field(default="gemini-2.0-flash", description="Gemini model to use")
    temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    max_output_tokens: int = Field(default=512, ge=64, le=8192)


class AdmissionSettings(BaseSettings):
    """Token bucket limits for creating transactions."""

    model_config = SettingsConfigDict(env_prefix="FINTRACK_", env_file=".env", extra="ignore")

    rate_capacity: int = Field(default=10, ge=1)
    rate_refill: int = Field(default=10, ge=1, description="Tokens added per interval")
    rate_interval_seconds: float = Field(default=3600.0, gt=0)
    blocked_subjects: str = Field(default="", description="Comma-separated subjects to block")

    @property
    def blocked_subjects_list(self) -> list[str]:
        return [s.strip() for s in self.blocked_subjects.split(",") if s.strip()]


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_prefix="FINTRACK_", env_file=".env", extra="ignore")

    db_path: Optional[str] = Field(default=None, description="SQLite database file")
    max_receipt_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    log_level: str = Field(default="WARNING")
    log_json: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return level


class Settings:
    """Root settings container.

    Sub-settings are loaded on access so that one badly configured service
    does not prevent the others from working.
    """

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def admission(self) -> AdmissionSettings:
        return AdmissionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached).

    Call ``get_settings.cache_clear()`` to reload.
    """
    return Settings()
