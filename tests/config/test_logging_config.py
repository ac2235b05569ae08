"""Tests for environment-driven logging configuration."""

from hotel_tenancy.config.logging_config import LoggingConfig, get_log_level_from_verbosity

RECONCILER = "hotel_tenancy.features.billing.services.reconciler"


class TestLoggingConfig:

    def test_verbosity_levels(self):
        assert get_log_level_from_verbosity("quiet") == "ERROR"
        assert get_log_level_from_verbosity("NORMAL") == "INFO"
        assert get_log_level_from_verbosity("debug") == "DEBUG"
        assert get_log_level_from_verbosity("chatty") == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = LoggingConfig.build()

        assert config["root"]["level"] == "DEBUG"

    def test_normal_pins_billing_detail_and_sql(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_VERBOSITY", "NORMAL")
        monkeypatch.delenv("ENABLE_SQL_LOGGING", raising=False)

        loggers = LoggingConfig.build()["loggers"]

        assert loggers[RECONCILER]["level"] == "WARNING"
        assert loggers["asyncpg"]["level"] == "WARNING"

    def test_verbose_lets_billing_detail_through(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_VERBOSITY", "VERBOSE")
        monkeypatch.setenv("ENABLE_SQL_LOGGING", "true")

        loggers = LoggingConfig.build()["loggers"]

        assert RECONCILER not in loggers
        assert "asyncpg" not in loggers

    def test_unknown_format_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        fmt = LoggingConfig.build()["formatters"]["default"]["format"]

        assert fmt.startswith("%(asctime)s - %(levelname)s")
