"""Custom logger configuration for UniScout."""

import logging
import os
import sys

import structlog
from structlog.processors import (
    TimeStamper,
    add_log_level,
    format_exc_info,
)


def configure_logging(log_level: str | None = None, force: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Level name; falls back to the LOG_LEVEL env var
        force: Reconfigure even if structlog is already configured
    """
    if structlog.is_configured() and not force:
        return

    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer()
            if sys.stderr.isatty()
            else structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
        force=force,
    )
