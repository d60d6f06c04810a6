"""
logging_config.py — Centralized Logging Configuration for Alfred

Sets up Loguru as the single logging backend. Intercepts Python's stdlib
logging module so all getLogger() calls route through Loguru.

Business Rules:
- All logs go through Loguru (no print())
- JSON format in production for machine parsing
- Human-readable format in development

Called by: alfred/main.py (on import, with settings.log_level and settings.env)
Depends on: config.py values, or LOG_LEVEL/ENV environment variables
"""

import logging
import os
import sys

from loguru import logger


def setup_logging(log_level: str | None = None, env: str | None = None) -> None:
    """Configure Loguru and intercept stdlib logging.

    main.py passes settings.log_level and settings.env so values from .env
    apply. Without arguments the LOG_LEVEL/ENV environment variables are used.
    """
    logger.remove()

    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    is_production = (env or os.getenv("ENV", "DEV")).upper() == "PROD"

    if is_production:
        # JSON lines to stdout, the container runtime collects them
        logger.add(sys.stdout, level=log_level, format="{message}", serialize=True)
    else:
        logger.add(
            sys.stdout,
            level=log_level,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "{message}"
            ),
            colorize=True,
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info("Logging configured", level=log_level, production=is_production)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip frames from stdlib logging internals
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )
