"""Logging helpers shared by the API, the prober and the scripts."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "introspect"
DEFAULT_LEVEL = "INFO"


def is_valid_level(level: str) -> bool:
    # getLevelName maps known names to their numeric value and anything else to a string
    return isinstance(logging.getLevelName(level.strip().upper()), int)


def setup_logger(name: str, level: str = DEFAULT_LEVEL) -> logging.Logger:
    """Attach a single stream handler to the named logger."""
    logger = logging.getLogger(name)
    logger.setLevel(level.strip().upper())

    # Uvicorn reloads and repeated create_app() calls must not stack handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def configure_logging(level: str) -> logging.Logger:
    """Set the level every introspect.* module logger inherits."""
    return setup_logger(PACKAGE_LOGGER, level=level)


def get_logger(name: str) -> logging.Logger:
    """
    Return a module logger.

    Module loggers carry no level of their own; they inherit from the
    package logger, which configure_logging() adjusts once Settings exist.
    """
    package = logging.getLogger(PACKAGE_LOGGER)
    if not package.handlers:
        env_level = os.environ.get("LOG_LEVEL", "").strip()
        setup_logger(PACKAGE_LOGGER, level=env_level if is_valid_level(env_level) else DEFAULT_LEVEL)
    return logging.getLogger(name)
