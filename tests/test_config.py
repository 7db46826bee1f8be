"""
Tests for configuration, logging setup and error reporting.
"""

import logging
from logging.handlers import RotatingFileHandler

from decisiondesk.config import DEFAULT_HISTORY_LIMIT, AppConfig, load_config
from decisiondesk.errors import report_exception
from decisiondesk.logs import ROOT_LOGGER, configure_logging, get_logger


class TestConfig:
    def test_defaults(self, monkeypatch):
        for name in ("DECISIONDESK_DATA_DIR", "DECISIONDESK_ENV", "DECISIONDESK_HISTORY_LIMIT",
                     "DECISIONDESK_LOG_LEVEL", "DECISIONDESK_REPORTS_DIR"):
            monkeypatch.delenv(name, raising=False)
        assert load_config() == AppConfig()
        assert AppConfig().is_production

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DECISIONDESK_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("DECISIONDESK_ENV", " Development ")
        monkeypatch.setenv("DECISIONDESK_LOG_LEVEL", "debug")
        monkeypatch.setenv("DECISIONDESK_HISTORY_LIMIT", "25")
        cfg = load_config()
        assert cfg.data_dir == str(tmp_path)
        assert cfg.environment == "development"
        assert not cfg.is_production
        assert cfg.log_level == "DEBUG"
        assert cfg.history_limit == 25
        assert cfg.log_dir.startswith(str(tmp_path))

    def test_bad_history_limit_falls_back(self, monkeypatch):
        monkeypatch.setenv("DECISIONDESK_HISTORY_LIMIT", "lots")
        assert load_config().history_limit == DEFAULT_HISTORY_LIMIT
        monkeypatch.setenv("DECISIONDESK_HISTORY_LIMIT", "-4")
        assert load_config().history_limit == DEFAULT_HISTORY_LIMIT


class TestLogging:
    def test_configure_is_idempotent(self, tmp_path):
        logger = logging.getLogger(ROOT_LOGGER)
        before = list(logger.handlers)
        try:
            configure_logging(str(tmp_path / "log"))
            count = len(logger.handlers)
            configure_logging(str(tmp_path / "log"))
            assert len(logger.handlers) == count
            assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        finally:
            for h in list(logger.handlers):
                if h not in before:
                    logger.removeHandler(h)
                    h.close()

    def test_get_logger_namespaces(self):
        assert get_logger("shell").name == "decisiondesk.shell"
        assert get_logger("decisiondesk.pages").name == "decisiondesk.pages"


class TestReportException:
    def _raise(self):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as exc:
            return exc

    def test_non_production_skips_error_log(self, tmp_path):
        tb = report_exception(self._raise(), where="test", environment="development", log_dir=str(tmp_path))
        assert "kaboom" in tb
        assert not (tmp_path / "error.log").exists()

    def test_production_appends_error_log(self, tmp_path):
        report_exception(self._raise(), where="first", environment="production", log_dir=str(tmp_path))
        report_exception(self._raise(), where="second", environment="production", log_dir=str(tmp_path))
        text = (tmp_path / "error.log").read_text(encoding="utf-8")
        assert "[first]" in text and "[second]" in text
