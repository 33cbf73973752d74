from __future__ import annotations

import logging.config
from typing import Any, Dict


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Return a dictConfig mapping that sends everything to stderr."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "{levelname} {asctime} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
        "loggers": {
            "uvicorn.access": {"level": "WARNING"},
        },
    }


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """Install the console logging configuration at ``level``."""
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logging.config.dictConfig(build_logging_config(level))
