"""Logging for shipyard.

Modules log through the module-level ``logger``. Importing shipyard
configures nothing; the host application owns logging setup. Programs
without their own setup can call :func:`configure_logging` once at
startup to get console output at the configured ``[logging] level``.
"""

from __future__ import annotations

import logging
import sys

import structlog

from shipyard.config import Settings, get_settings

logger = structlog.get_logger("shipyard")


def configure_logging(settings: Settings | None = None) -> None:
    """Send structlog and stdlib logging to stderr at ``settings.logging.level``."""
    level_name = (settings or get_settings()).logging.level
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
