"""Logging setup for hotel-tenancy.

Configured once from the environment through ``logging.config.dictConfig``:

- ``LOG_LEVEL``: explicit root level, wins over verbosity
- ``LOG_VERBOSITY``: QUIET, NORMAL, VERBOSE or DEBUG
- ``LOG_FORMAT``: simple, detailed or json
- ``ENABLE_SQL_LOGGING``: let asyncpg log below WARNING
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict, Iterable


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    """How chatty the service is."""
    QUIET = "QUIET"      # errors only
    NORMAL = "NORMAL"    # pass summaries, connection opens and closes
    VERBOSE = "VERBOSE"  # plus one line per reconciled bill
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    """Log line layouts."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: LogLevel.ERROR,
    LogVerbosity.NORMAL: LogLevel.INFO,
    LogVerbosity.VERBOSE: LogLevel.INFO,
    LogVerbosity.DEBUG: LogLevel.DEBUG,
}

_FORMATS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Root level for a verbosity mode; unknown modes fall back to INFO."""
    try:
        return _VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())].value
    except ValueError:
        return LogLevel.INFO.value


def _pinned(modules: Iterable[str], level: str) -> Dict[str, Dict[str, Any]]:
    return {
        module: {"level": level, "handlers": ["console"], "propagate": False}
        for module in modules
    }


class LoggingConfig:
    """Environment-driven logging configuration."""

    # Per-bill reconciliation and repository lines, shown from VERBOSE up
    BILLING_DETAIL_MODULES = [
        "hotel_tenancy.features.billing.services.reconciler",
        "hotel_tenancy.features.hotel.repositories",
    ]

    # Third-party modules pinned to ERROR
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
        "asyncio",
    ]

    @classmethod
    def build(cls) -> Dict[str, Any]:
        """The dictConfig mapping for the current environment."""
        verbosity = os.getenv("LOG_VERBOSITY", LogVerbosity.NORMAL.value).upper()
        explicit_level = os.getenv("LOG_LEVEL", "").upper()
        log_format = os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value).lower()
        sql_logging = os.getenv("ENABLE_SQL_LOGGING", "false").lower() == "true"

        if explicit_level in LogLevel.__members__:
            level = explicit_level
        else:
            level = get_log_level_from_verbosity(verbosity)

        try:
            fmt = _FORMATS[LogFormat(log_format)]
        except ValueError:
            fmt = _FORMATS[LogFormat.SIMPLE]

        loggers: Dict[str, Dict[str, Any]] = {}
        if verbosity not in (LogVerbosity.VERBOSE.value, LogVerbosity.DEBUG.value):
            loggers.update(_pinned(cls.BILLING_DETAIL_MODULES, LogLevel.WARNING.value))
        loggers.update(_pinned(cls.ERROR_ONLY_MODULES, LogLevel.ERROR.value))
        loggers.update(_pinned(["uvicorn.access"], LogLevel.WARNING.value))
        if not sql_logging:
            loggers.update(_pinned(["asyncpg"], LogLevel.WARNING.value))

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls) -> None:
        """Apply the configuration from the environment."""
        config = cls.build()
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(f"Logging configured: level={config['root']['level']}")

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        return logging.getLogger(name)

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Override one module's level at runtime."""
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))


def setup_logging() -> None:
    """Configure logging from environment variables."""
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    return LoggingConfig.get_logger(name)
