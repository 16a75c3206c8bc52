"""
Logging Setup - Teed Waitlist
waitlist/logging_config.py

Configures structlog once at startup. LOG_FORMAT selects JSON lines for
deployed environments or the coloured console renderer for local work.
"""

import logging
import sys

import structlog

from waitlist.config import settings


def configure_logging(log_level: str = None, log_format: str = None) -> None:
    """Configure structlog and the stdlib root logger."""
    level_name = (log_level or settings.LOG_LEVEL).upper()
    fmt = log_format or settings.LOG_FORMAT
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
