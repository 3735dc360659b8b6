"""
Logging Configuration

Stdout logging for the Notes API process.
Repository and router loggers live under the ``notes_api`` namespace.
"""

import sys
from logging.config import dictConfig
from typing import Any

from notes_api.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_logging_config(log_level: str) -> dict[str, Any]:
    """
    Build the ``dictConfig`` payload for the given level.

    The ``notes_api`` logger follows ``log_level``; uvicorn stays at INFO
    and ``sqlalchemy.engine`` at WARNING so statements are not echoed.
    """
    level = log_level.upper()
    console = ["console"]

    return {
        "version": 1,
        "disable_existing_loggers": False,  # Preserve third-party loggers
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
            },
        },
        "root": {"level": level, "handlers": console},
        "loggers": {
            "notes_api": {
                "level": level,
                "handlers": console,
                "propagate": False,  # Prevent duplicate logs to root
            },
            "uvicorn": {"handlers": console, "level": "INFO", "propagate": False},
            "uvicorn.access": {
                "handlers": console,
                "level": "INFO",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": console,
                "propagate": False,
            },
        },
    }


def setup_logging(log_level: str | None = None) -> None:
    """Apply logging config; defaults to ``settings.LOG_LEVEL``."""
    dictConfig(build_logging_config(log_level or settings.LOG_LEVEL))
