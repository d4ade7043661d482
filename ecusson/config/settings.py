"""
Configuration Management for Ecusson

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every process (app, widget, live activity) builds its settings the same
way, so they all agree on where the shared ledger lives and under which key.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Shared persisted blob configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ECUSSON_STORAGE_",
        extra="ignore"
    )

    shared_dir: Path = Field(
        default=Path.home() / ".ecusson",
        description="Root directory holding the app group containers"
    )
    app_group_id: str = Field(
        default="group.com.leoacqueberge.ecusson",
        min_length=1,
        description="Installation group shared by the app and its extensions"
    )

    # Keys within the app group
    history_key: str = Field(
        default="history",
        min_length=1,
        description="Key of the persisted ledger blob"
    )
    widget_signal_key: str = Field(
        default="widget-refresh",
        min_length=1,
        description="Key of the widget refresh signal"
    )
    live_activity_key: str = Field(
        default="live-activity",
        min_length=1,
        description="Key of the live activity state"
    )
    notifications_key: str = Field(
        default="notifications",
        min_length=1,
        description="Key of the pending reminder requests"
    )

    @property
    def group_dir(self) -> Path:
        """Directory of the shared app group container."""
        return Path(self.shared_dir).expanduser() / self.app_group_id


class LedgerSettings(BaseSettings):
    """Ledger and aggregation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ECUSSON_LEDGER_",
        extra="ignore"
    )

    trailing_days: int = Field(
        default=28,
        ge=1,
        le=366,
        description="Length of the trailing window shown as 'Last N Days'"
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone of the device calendar (system local if unset)"
    )
    widget_kind: str = Field(
        default="EcussonWidget",
        description="Widget kind refreshed after each ledger change"
    )
    quick_amounts: str = Field(
        default="1,-1,10",
        description="Comma-separated amounts offered by the add/subtract control"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Reject timezone names the zoneinfo database does not know."""
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v.strip())
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v.strip()

    @field_validator("quick_amounts")
    @classmethod
    def validate_quick_amounts(cls, v: str) -> str:
        for part in v.split(","):
            try:
                int(part.strip())
            except ValueError:
                raise ValueError(f"Quick amount is not an integer: {part!r}")
        return v

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Configured timezone, or None for the system local calendar."""
        return ZoneInfo(self.timezone) if self.timezone else None

    @property
    def quick_amounts_list(self) -> list[int]:
        """Get quick amounts as a list of integers."""
        return [int(part.strip()) for part in self.quick_amounts.split(",")]


class ReminderSettings(BaseSettings):
    """Daily local reminder configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ECUSSON_REMINDER_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Register the daily reminder on launch"
    )
    identifier: str = Field(
        default="dailyExpenseReminder",
        min_length=1,
        description="Identifier used to detect an already pending reminder"
    )
    hour: int = Field(
        default=22,
        ge=0,
        le=23,
        description="Local hour the reminder fires at"
    )
    minute: int = Field(
        default=0,
        ge=0,
        le=59,
        description="Local minute the reminder fires at"
    )
    title: str = Field(
        default="Daily Expenses",
        description="Reminder title"
    )
    body: str = Field(
        default="Have you recorded your expenses for today? 🤑",
        description="Reminder body"
    )


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

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level of emitted log records"
    )

    # Import / export
    export_filename: str = Field(
        default="history.md",
        min_length=1,
        description="Default filename offered when exporting the history"
    )

    @field_validator("log_level")
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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def reminder(self) -> ReminderSettings:
        return ReminderSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


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

    Returns a dict of {setting_name: is_valid}, plus a
    "<setting_name>_error" entry for every invalid section.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "reminder", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
