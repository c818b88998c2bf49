"""Logging setup: structlog on top of the standard logging module."""

import logging
import sys

import structlog


def configure_logging(level: int | str = logging.WARNING, *, json: bool = False) -> None:
    """Configure the structlog/standard logging bridge.

    Args:
        level: Log level name (``"debug"``, ``"warning"``, ...) or number
        json: Render events as JSON lines instead of console output
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)

