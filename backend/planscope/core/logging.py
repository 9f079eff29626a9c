"""Logging setup: one console handler, every line stamped with the request id."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from planscope.core.context import get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

# HTTP client chatter from the OpenAI SDK stays at WARNING regardless of log_level.
QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def build_logging_config(log_level: str = "INFO") -> Dict[str, Any]:
    loggers: Dict[str, Dict[str, Any]] = {"planscope": {"level": log_level}}
    loggers.update({name: {"level": "WARNING"} for name in QUIET_LOGGERS})
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "filters": {"request_id": {"()": "planscope.core.logging.RequestIdFilter"}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": log_level,
                "filters": ["request_id"],
            }
        },
        "loggers": loggers,
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Apply :func:`build_logging_config` once per process."""
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(build_logging_config(log_level.upper()))
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    setattr(configure_logging, "_configured", True)
