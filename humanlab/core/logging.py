from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from humanlab.core.config import get_settings
from humanlab.utils.trace import trace_id_ctx


def _add_trace_id(_, __, event_dict: dict) -> dict:
    trace_id = trace_id_ctx.get()
    if trace_id and "trace_id" not in event_dict:
        event_dict["trace_id"] = trace_id
    return event_dict


def configure_logging(stream: TextIO | None = None) -> None:
    """Route structlog through stdlib logging on ``stream`` (stdout by default).

    Production renders one JSON object per line; other environments get the
    console renderer.
    """
    settings = get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=stream or sys.stdout, level=level)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if settings.is_production:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_trace_id,
            structlog.processors.StackInfoRenderer(),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
