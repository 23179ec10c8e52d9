"""Process-wide logging setup: console plus app/error/access log files."""

from __future__ import annotations

import logging.config
from pathlib import Path
from typing import Any

from inventory_api.core.config import Settings

ACCESS_LOGGER = "inventory_api.access"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def build_logging_config(settings: Settings) -> dict[str, Any]:
    """Return a ``dictConfig`` mapping for the given settings."""
    level = settings.log_level.upper()
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "level": level,
        },
    }
    root_handlers = ["console"]
    access_handlers = ["console"]

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        def daily(filename: str, handler_level: str) -> dict[str, Any]:
            return {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "filename": str(log_dir / filename),
                "when": "midnight",
                "backupCount": 14,
                "encoding": "utf-8",
                "formatter": "default",
                "level": handler_level,
            }

        handlers["app_file"] = daily("app.log", level)
        handlers["error_file"] = daily("error.log", "ERROR")
        handlers["access_file"] = daily("access.log", "INFO")
        root_handlers += ["app_file", "error_file"]
        access_handlers = ["access_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "root": {"level": level, "handlers": root_handlers},
        "loggers": {
            ACCESS_LOGGER: {
                "level": "INFO",
                "handlers": access_handlers,
                "propagate": False,
            },
        },
    }


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig(build_logging_config(settings))
