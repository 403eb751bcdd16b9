import logging
import logging.config
from typing import Any, Dict

from check_newrelic.core.exceptions import ValidationError


class SimpleConsoleFormatter(logging.Formatter):
    """Minimal, readable console format for terminal use."""

    default_time_format = "%Y-%m-%d %H:%M:%S"
    default_msec_format = "%s.%03d"

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        record.message = record.getMessage()
        asctime = self.formatTime(record, self.datefmt)
        line = f"{asctime} | {record.levelname} | {record.name} | {record.message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "WARNING", debug: bool = False) -> None:
    """Configure logging for a single check run.

    Stdout is reserved for the single status line read by the monitoring
    supervisor, so every handler writes to stderr.

    ``level`` normally comes from LOG_LEVEL; ``debug`` forces DEBUG and lets
    the HTTP client libraries log as well. An unknown level name raises
    ``ValidationError``.
    """

    log_level = "DEBUG" if debug else str(level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValidationError(f"Invalid configuration: LOG_LEVEL {level!r}")
    http_level = "DEBUG" if debug else "WARNING"

    dict_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {"()": SimpleConsoleFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "simple",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": log_level, "propagate": False},
            # Quiet noisy libraries
            "httpx": {"handlers": ["console"], "level": http_level, "propagate": False},
            "httpcore": {"handlers": ["console"], "level": http_level, "propagate": False},
        },
    }

    logging.config.dictConfig(dict_config)
