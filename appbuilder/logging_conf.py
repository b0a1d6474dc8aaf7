# appbuilder/logging_conf.py
from __future__ import annotations

import logging.config
import os

FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def build_logging_config(level: str | None = None) -> dict:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "basic": {"format": FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "basic",
                "level": level,
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": "INFO"},
            "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "appbuilder": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }


def setup_logging(level: str | None = None) -> None:
    logging.config.dictConfig(build_logging_config(level))
