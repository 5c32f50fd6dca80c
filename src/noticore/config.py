"""noticore configuration system — typed settings loaded from .env."""

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_config_instance: "NotiConfig | None" = None


class NotiConfig(BaseSettings):
    """All engine settings, loaded from environment variables with NOTICORE_ prefix."""

    # Admission
    stack_duplicates: bool = True
    always_run_script: bool = True  # Run scripts even for empty notifications
    print_notifications: bool = False

    # Queues
    history_length: int = 20  # 0 = unbounded
    displayed_limit: int = 0  # 0 = unbounded
    sticky_history: bool = True
    sort: bool = True  # Order by urgency before id

    # Timing (seconds)
    default_timeout: float = 10.0
    critical_timeout: float = 0.0  # Critical notifications are sticky
    show_age_threshold: float = 60.0  # Negative disables age display
    idle_threshold: float = 120.0
    fullscreen_poll_interval: float = 1.0  # Re-check while entries wait out fullscreen

    # Logging
    log_level: str = "INFO"
    log_dir: Path | None = None  # None = ~/.noticore/logs
    log_file: str = "noticore.log"
    log_backup_days: int = 7  # 0 = no file log

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NOTICORE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("history_length", "displayed_limit", "log_backup_days")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("limits must be >= 0")
        return value

    @field_validator("default_timeout", "critical_timeout", "idle_threshold")
    @classmethod
    def _non_negative_seconds(cls, value: float) -> float:
        if value < 0:
            raise ValueError("durations must be >= 0")
        return value

    @field_validator("fullscreen_poll_interval")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("poll interval must be > 0")
        return value


def get_config() -> NotiConfig:
    """Get the singleton NotiConfig instance.

    Returns:
        The shared NotiConfig loaded from environment.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = NotiConfig()
    return _config_instance
