"""Structured logging setup."""

import logging
import sys

import structlog


def configure_logging(level: str = "WARNING", fmt: str = "plain") -> None:
    """
    Configure structlog on top of the standard library logger.

    Log records go to stderr so that stdout carries only the run summary.

    Args:
        level: Standard library level name, e.g. ``"INFO"``
        fmt: ``"json"`` for JSON lines, anything else for console output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
