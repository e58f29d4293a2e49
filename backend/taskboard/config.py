# backend/taskboard/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_RESET_DEADLINE_SECONDS,
    DEFAULT_RESET_MAX_CONCURRENCY,
    DEFAULT_RESET_SCHEDULE_HOUR,
    DEFAULT_RESET_SCHEDULE_MINUTE,
    DEFAULT_USER_TIMEZONE,
)
from .enums import LogLevel
from .utils.timezone_utils import validate_timezone


class Settings(BaseSettings):
    environment: str = "development"
    # Database
    database_url: str = Field(..., description="PostgreSQL connection string")
    db_pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Database connection pool size",
    )
    db_pool_timeout: int = Field(
        default=30,
        ge=5,
        le=300,
        description="Database connection timeout in seconds",
    )

    # Timezones
    default_user_timezone: str = Field(
        default=DEFAULT_USER_TIMEZONE,
        description="Timezone applied to owners without a stored preference",
    )

    # Recurrence reset job
    reset_schedule_hour: int = Field(
        default=DEFAULT_RESET_SCHEDULE_HOUR,
        ge=0,
        le=23,
        description="Local hour at which the daily reset runs",
    )
    reset_schedule_minute: int = Field(
        default=DEFAULT_RESET_SCHEDULE_MINUTE,
        ge=0,
        le=59,
        description="Local minute at which the daily reset runs",
    )
    reset_schedule_timezone: str = Field(
        default=DEFAULT_USER_TIMEZONE,
        description="Timezone the daily reset time is expressed in",
    )
    reset_max_concurrency: int = Field(
        default=DEFAULT_RESET_MAX_CONCURRENCY,
        ge=1,
        le=64,
        description="Maximum tasks reset concurrently within one run",
    )
    reset_deadline_seconds: Optional[float] = Field(
        default=DEFAULT_RESET_DEADLINE_SECONDS,
        gt=0,
        description="Abort a run that takes longer than this (None disables)",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (optional)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v) -> LogLevel:
        """Validate log level is one of the allowed values"""
        if isinstance(v, LogLevel):
            return v
        allowed_levels = LogLevel.__members__.keys()
        v_upper = str(v).upper()
        if v_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(allowed_levels)}"
            )
        return LogLevel[v_upper]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values"""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(allowed_envs)}"
            )
        return v_lower

    @field_validator("default_user_timezone", "reset_schedule_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Reject identifiers the zone database does not know"""
        if not validate_timezone(v):
            raise ValueError(f"Invalid timezone '{v}'")
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Global settings instance, built on first use"""
    return Settings()  # type: ignore[call-arg]
