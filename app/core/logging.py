"""Centralized logging configuration."""

import logging
import sys

from app.config import settings


LOGGER_NAME = "family_health_vault"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "openai", "pymongo", "pdfminer")


def setup_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Configure and return the application logger."""
    level_value = getattr(logging, level.upper(), logging.INFO)

    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level_value)

    # Prevent duplicate handlers on reload
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        app_logger.addHandler(handler)
    for handler in app_logger.handlers:
        handler.setLevel(level_value)

    if level_value > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    app_logger.debug(f"Logging configured with level: {level.upper()}")
    return app_logger


logger = setup_logging()
