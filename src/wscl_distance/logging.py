"""Progress logging for a calculator run.

Everything goes to stderr so stdout stays free for the final summary. The
console format is meant for a person watching geocoding and distance lookups
go by; the json format emits one event object per line for log shippers.
"""

import logging
import sys
from typing import Literal

import structlog

LogFormat = Literal["console", "json"]

# Names accepted by the LOG_LEVEL setting
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _renderers(format: LogFormat) -> list[structlog.typing.Processor]:
    if format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(level: str = "INFO", format: LogFormat = "console") -> None:
    """Route calculator events to stderr at the given level.

    Unknown level names fall back to INFO. Loggers are not cached, so a
    later call (one per CLI invocation) takes effect for module loggers
    created at import time.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            *_renderers(format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            LOG_LEVELS.get(level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a module logger tagged with ``logger_name``."""
    # Initial values keep the proxy lazy until first use.
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
