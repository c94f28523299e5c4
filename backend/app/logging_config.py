"""
logging_config.py: Logging setup for the catalog API

Loguru is the only logging backend. Stdlib logging (uvicorn, SQLAlchemy)
is intercepted and routed through Loguru so every line shares one format.

- LOG_FORMAT=json writes JSON lines to stdout
- anything else writes colorized human-readable lines
- LOG_LEVEL sets the minimum level

Called by: app/main.py (lifespan), app/__main__.py
"""

import logging
import sys

from loguru import logger

from . import config


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure Loguru and intercept stdlib logging. Safe to call twice."""
    logger.remove()

    level = (level or config.LOG_LEVEL).upper()
    fmt = (fmt or config.LOG_FORMAT).lower()

    if fmt == "json":
        logger.add(sys.stdout, level=level, format="{message}", serialize=True)
    else:
        logger.add(
            sys.stdout,
            level=level,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "{message}"
            ),
            colorize=True,
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    # uvicorn.access is replaced by the request-logging middleware
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug("Logging configured (level={}, format={})", level, fmt)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )
