"""
Configuration Management for the Finance Core

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Tenant-level choices (valuation method, currency) live in each tenant's
dataset; the values below are only the defaults a brand-new tenant starts with.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinanceSettings(BaseSettings):
    """Defaults applied to new tenants and to closing entries."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_currency: str = Field(
        default="AUD",
        min_length=3,
        max_length=3,
        description="Currency assigned to a tenant on first access"
    )
    default_valuation_method: str = Field(
        default="FIFO",
        description="Inventory valuation method for new tenants (FIFO, LIFO, AVG)"
    )
    retained_earnings_account: str = Field(
        default="Equity:RetainedEarnings",
        description="Equity account that receives closing entries"
    )
    default_chart_template: str = Field(
        default="DEFAULT",
        description="Chart of accounts template used when none is named"
    )
    storage_backend: str = Field(
        default="memory",
        description="Tenant dataset store: 'memory' or 'google_sheets'"
    )

    @field_validator('default_valuation_method')
    @classmethod
    def validate_valuation_method(cls, v: str) -> str:
        """Only the three supported costing methods are accepted."""
        method = v.strip().upper()
        if method not in {"FIFO", "LIFO", "AVG"}:
            raise ValueError(f"Unsupported valuation method: {v}")
        return method

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator('storage_backend')
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        backend = v.strip().lower()
        if backend not in {"memory", "google_sheets"}:
            raise ValueError(f"Unsupported storage backend: {v}")
        return backend


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )
    finance_sheet_name: str = Field(
        default="TenantFinance",
        description="Name of the sheet holding one dataset row per tenant"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (False gives console output)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def finance(self) -> FinanceSettings:
        return FinanceSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.finance
        results["finance"] = True
    except Exception as e:
        results["finance"] = False
        results["finance_error"] = str(e)

    try:
        _ = settings.logging
        results["logging"] = True
    except Exception as e:
        results["logging"] = False
        results["logging_error"] = str(e)

    # Sheets credentials are only required when that backend is selected
    if results["finance"] and settings.finance.storage_backend == "google_sheets":
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    return results
