"""
test_logging_config.py - Unit tests for logging_setup.py and config.py
"""

import io
import logging

from csv_ledger import logging_setup
from csv_ledger.config import Settings, get_settings
from csv_ledger.ledger import Ledger


class TestParseLevel:

    def test_int(self):
        assert logging_setup.parse_level(logging.DEBUG) == logging.DEBUG

    def test_name(self):
        assert logging_setup.parse_level(" info ") == logging.INFO

    def test_numeric_string(self):
        assert logging_setup.parse_level("15") == 15

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("CSV_LEDGER_LOG_LEVEL", "ERROR")
        assert logging_setup.parse_level(None) == logging.ERROR

    def test_default(self, monkeypatch):
        monkeypatch.delenv("CSV_LEDGER_LOG_LEVEL", raising=False)
        assert logging_setup.parse_level(None) == logging.WARNING


class TestConfigureLogging:

    def test_get_logger_silent_until_configured(self, fresh_logging):
        logging_setup.get_logger("csv_ledger.ledger")
        assert any(isinstance(h, logging.NullHandler) for h in fresh_logging.handlers)

    def test_configure_once(self, fresh_logging):
        stream = io.StringIO()
        logging_setup.configure_logging("DEBUG", fmt="%(levelname)s %(message)s", stream=stream)
        logging_setup.configure_logging("ERROR", stream=io.StringIO())

        assert len(fresh_logging.handlers) == 1
        assert fresh_logging.level == logging.DEBUG
        assert fresh_logging.propagate is False

    def test_ledger_logs_ignored_references(self, fresh_logging):
        stream = io.StringIO()
        logging_setup.configure_logging("DEBUG", fmt="%(levelname)s %(message)s", stream=stream)

        ledger = Ledger()
        ledger.apply_dispute(9, 99)
        assert "DEBUG ignored dispute of tx 99: not pending" in stream.getvalue()

    def test_consume_logs_summary(self, fresh_logging):
        stream = io.StringIO()
        logging_setup.configure_logging("INFO", fmt="%(message)s", stream=stream)

        Ledger().consume(["type,client,tx,amount", "deposit,1,1,1"])
        assert "applied 1 events to 1 accounts" in stream.getvalue()


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("CSV_LEDGER_LOG_LEVEL", "CSV_LEDGER_LOG_FORMAT", "CSV_LEDGER_ENCODING"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "WARNING"
        assert settings.log_format is None
        assert settings.encoding == "utf-8"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("CSV_LEDGER_LOG_LEVEL", "debug")
        monkeypatch.setenv("CSV_LEDGER_ENCODING", "latin-1")
        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.encoding == "latin-1"

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
