"""
Configuration Management for Income Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Import limits, export naming, logging and the reference currency are the
only knobs; reference tables (currencies, categories) are static data.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImportSettings(BaseSettings):
    """File import limits."""

    model_config = SettingsConfigDict(
        env_prefix="IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    max_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum import file size in MB"
    )
    supported_formats: str = Field(
        default="csv,json",
        description="Comma-separated list of accepted file extensions"
    )

    @property
    def supported_formats_list(self) -> list[str]:
        """Get supported formats as a list."""
        return [fmt.strip().lower() for fmt in self.supported_formats.split(",") if fmt.strip()]

    @property
    def max_size_bytes(self) -> int:
        """Get max import size in bytes."""
        return self.max_size_mb * 1024 * 1024


class ExportSettings(BaseSettings):
    """Export file naming."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    filename_prefix: str = Field(
        default="work-entries",
        min_length=1,
        description="Prefix of generated export file names"
    )
    timestamp_format: str = Field(
        default="%Y-%m-%d-%H%M",
        description="strftime format appended to export file names"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )
    render_json: bool = Field(
        default=True,
        description="Render log lines as JSON (console rendering otherwise)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept standard level names."""
        normalized = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return normalized


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Force DEBUG logging regardless of LOG_LEVEL"
    )

    # Money
    reference_currency: str = Field(
        default="BDT",
        description="Currency code all aggregates are reported in (must have rate 1.0)"
    )

    # Reports
    daily_series_days: int = Field(
        default=30,
        ge=1,
        le=366,
        description="Number of days in the daily income series"
    )

    @field_validator('reference_currency')
    @classmethod
    def normalize_reference_currency(cls, v: str) -> str:
        return v.strip().upper()


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
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def importing(self) -> ImportSettings:
        return ImportSettings()

    @property
    def exporting(self) -> ExportSettings:
        return ExportSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


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

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each section that failed to load.
    """
    results = {}
    settings = get_settings()

    for name in ("app", "importing", "exporting", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
