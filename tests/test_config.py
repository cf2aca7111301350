"""
설정 테스트
"""
import logging

import pytest
from pydantic import ValidationError

from manse.config import Settings, configure_logging


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.use_local_time is True
        assert settings.default_standard_meridian == 135.0
        assert settings.timezone_offset_hours == 9.0
        assert settings.year_boundary == "lichun"
        assert settings.zi_hour_rollover is True
        assert settings.boundary_window_hours == 48

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MANSE_YEAR_BOUNDARY", "lunar_new_year")
        monkeypatch.setenv("MANSE_USE_LOCAL_TIME", "false")
        monkeypatch.setenv("MANSE_LUCK_CYCLE_COUNT", "8")
        settings = Settings(_env_file=None)
        assert settings.year_boundary == "lunar_new_year"
        assert settings.use_local_time is False
        assert settings.luck_cycle_count == 8

    def test_invalid_boundary(self, monkeypatch):
        monkeypatch.setenv("MANSE_YEAR_BOUNDARY", "solstice")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestLogging:

    def test_configure_logging_sets_package_level(self):
        configure_logging(Settings(_env_file=None, log_level="debug"))
        assert logging.getLogger("manse").level == logging.DEBUG

        configure_logging(Settings(_env_file=None, log_level="WARNING"))
        assert logging.getLogger("manse").level == logging.WARNING
