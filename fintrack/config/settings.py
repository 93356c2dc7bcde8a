"""
Configuration Management for FinTrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The parser itself never reads settings. Policies such as "are future
dates allowed?" are read here and passed into the parser as arguments,
which keeps parsing a pure function of its inputs.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger engine and budget tracker configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_LEDGER_",
        extra="ignore"
    )

    near_threshold_ratio: Decimal = Field(
        default=Decimal("0.9"),
        ge=0,
        le=1,
        description="Fraction of a budget limit at which spending counts as near the limit"
    )


class InputSettings(BaseSettings):
    """Policies applied to user-supplied command text."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_INPUT_",
        extra="ignore"
    )

    allow_future_dates: bool = Field(
        default=False,
        description="Accept records dated after today on add and modify"
    )
    ascii_only: bool = Field(
        default=True,
        description="Reject command text containing non-ASCII characters"
    )
    export_suffix: str = Field(
        default=".csv",
        description="Suffix appended to export paths that have none"
    )

    @field_validator('export_suffix')
    @classmethod
    def validate_export_suffix(cls, v: str) -> str:
        """Suffix must look like '.ext'."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"Export suffix must start with '.', got {v!r}")
        return v


class AuditSettings(BaseSettings):
    """Audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_AUDIT_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Record ledger events in the audit trail"
    )
    max_events: int = Field(
        default=500,
        ge=1,
        le=100000,
        description="Number of events kept in the in-memory trail"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for the structured log"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def input(self) -> InputSettings:
        return InputSettings()

    @property
    def audit(self) -> AuditSettings:
        return AuditSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "input", "audit", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
