"""
Structured logging for sqlshape.

Importing sqlshape leaves structlog untouched: library events use whatever
configuration the host application installs, or structlog's defaults.
Applications (and the CLI) may call configure_logging() once at startup to
route events through the stdlib logging module with a stderr handler.
"""

import logging
import sys

import structlog


def _configure_structlog(json: bool) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def configure_logging(*, level: str = "WARNING", json: bool = False) -> None:
    """
    Install a stderr handler and choose the rendering.

    Args:
        level: Minimum level name (e.g. "DEBUG", "INFO")
        json: Render events as JSON lines instead of console text
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
    )
    _configure_structlog(json)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)

