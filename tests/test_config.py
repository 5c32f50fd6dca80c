"""Tests for the noticore configuration system."""

import pytest
from pydantic import ValidationError

from noticore.config import NotiConfig


class TestNotiConfigDefaults:
    def test_default_values(self):
        config = NotiConfig()
        assert config.stack_duplicates is True
        assert config.always_run_script is True
        assert config.print_notifications is False
        assert config.history_length == 20
        assert config.displayed_limit == 0
        assert config.sticky_history is True
        assert config.sort is True
        assert config.log_level == "INFO"

    def test_default_timing(self):
        config = NotiConfig()
        assert config.default_timeout == 10.0
        assert config.critical_timeout == 0.0
        assert config.show_age_threshold == 60.0
        assert config.idle_threshold == 120.0
        assert config.fullscreen_poll_interval == 1.0

    def test_default_logging(self):
        config = NotiConfig()
        assert config.log_dir is None
        assert config.log_file == "noticore.log"
        assert config.log_backup_days == 7


class TestNotiConfigFromEnv:
    def test_loads_from_env_vars(self, monkeypatch):
        monkeypatch.setenv("NOTICORE_HISTORY_LENGTH", "5")
        monkeypatch.setenv("NOTICORE_DISPLAYED_LIMIT", "3")
        monkeypatch.setenv("NOTICORE_STACK_DUPLICATES", "false")
        monkeypatch.setenv("NOTICORE_LOG_LEVEL", "DEBUG")

        config = NotiConfig()
        assert config.history_length == 5
        assert config.displayed_limit == 3
        assert config.stack_duplicates is False
        assert config.log_level == "DEBUG"

    def test_negative_age_threshold_disables(self, monkeypatch):
        monkeypatch.setenv("NOTICORE_SHOW_AGE_THRESHOLD", "-1")
        assert NotiConfig().show_age_threshold == -1


class TestValidation:
    def test_negative_history_length_rejected(self):
        with pytest.raises(ValidationError, match="limits must be >= 0"):
            NotiConfig(history_length=-1)

    def test_negative_displayed_limit_rejected(self):
        with pytest.raises(ValidationError, match="limits must be >= 0"):
            NotiConfig(displayed_limit=-2)

    def test_zero_poll_interval_rejected(self):
        with pytest.raises(ValidationError, match="poll interval must be > 0"):
            NotiConfig(fullscreen_poll_interval=0)

    def test_negative_log_retention_rejected(self):
        with pytest.raises(ValidationError, match="limits must be >= 0"):
            NotiConfig(log_backup_days=-1)

    def test_log_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("NOTICORE_LOG_DIR", str(tmp_path))
        assert NotiConfig().log_dir == tmp_path

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError, match="durations must be >= 0"):
            NotiConfig(default_timeout=-5)


class TestGetConfigSingleton:
    def test_returns_same_instance(self):
        import noticore.config as cfg

        cfg._config_instance = None
        c1 = cfg.get_config()
        c2 = cfg.get_config()
        assert c1 is c2

        cfg._config_instance = None
