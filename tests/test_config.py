"""DashboardSettings validation and logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from pydantic import ValidationError

from dashboard.config import DashboardSettings, get_settings, settings
from utils.logger import setup_logger


def make_settings(**overrides) -> DashboardSettings:
    return DashboardSettings(_env_file=None, **overrides)


class TestSettings:

    def test_test_environment_is_loaded(self):
        assert settings.ENVIRONMENT == "testing"
        assert get_settings() is settings
        assert settings.DATABASE_URL is None

    def test_defaults(self):
        cfg = make_settings(ENVIRONMENT="development", TIMEZONE="UTC", PASSWORD_HASH_ITERATIONS=200_000)

        assert cfg.DASHBOARD_PORT == 3004
        assert cfg.MAX_WINDOW_DAYS == 365
        assert cfg.DATA_FILES["todos"] == "todos.json"

    def test_production_disables_debug_and_docs(self):
        cfg = make_settings(ENVIRONMENT="Production", DEBUG=True)

        assert cfg.ENVIRONMENT == "production"
        assert cfg.DEBUG is False
        assert cfg.DOCS_URL is None
        assert cfg.OPENAPI_URL is None

    def test_allowed_origins(self):
        cfg = make_settings(ALLOWED_ORIGINS="http://a.test, http://b.test ,")
        assert cfg.allowed_origins == ["http://a.test", "http://b.test"]

    def test_log_level_is_normalized(self):
        assert make_settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    @pytest.mark.parametrize("overrides", [
        {"ENVIRONMENT": "qa"},
        {"LOG_LEVEL": "LOUD"},
        {"DASHBOARD_PORT": 70000},
        {"TIMEZONE": "Mars/Olympus"},
        {"MAX_WINDOW_DAYS": 0},
        {"SESSION_TIMEOUT": -1},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            make_settings(**overrides)


class TestLogger:

    def test_file_handler_is_not_duplicated(self, tmp_path):
        log_file = tmp_path / "logs" / "dashboard.log"
        root = logging.getLogger()

        try:
            setup_logger("INFO", log_file=str(log_file))
            setup_logger("INFO", log_file=str(log_file))

            file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
            assert len(file_handlers) == 1

            logging.getLogger("dashboard.test").info("hello")
            file_handlers[0].flush()
            assert "hello" in log_file.read_text(encoding="utf-8")
        finally:
            setup_logger("WARNING")

        assert not [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
