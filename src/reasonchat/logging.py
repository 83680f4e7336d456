"""Structured logging setup.

Components obtain loggers with ``get_logger(__name__)`` and emit snake_case
events with key/value context. Message text and credentials are never
passed as event fields.
"""

import sys
from typing import Any

import structlog

_NAME_TO_LEVEL = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "warn": 30,
    "error": 40,
    "critical": 50,
}


def configure_logging(level: str = "info", json_output: bool = False) -> None:
    """Install the structlog processor chain.

    Args:
        level: Minimum level name (unknown names fall back to info)
        json_output: Render JSON lines instead of console output
    """
    renderers: list[Any] = (
        [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        if json_output
        else [structlog.dev.ConsoleRenderer(colors=False)]
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _NAME_TO_LEVEL.get(level.lower(), 20)
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a bound logger tagged with the component name."""
    if name:
        return structlog.get_logger(component=name)
    return structlog.get_logger()
