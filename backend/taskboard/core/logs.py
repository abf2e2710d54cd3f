import logging
import sys

from .config import settings

LOGGER_NAME = "taskboard"


def setup_logging(level: str | None = None):
    """Configure the ``taskboard`` logger namespace once per process."""
    level_name = (level or settings.LOG_LEVEL).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s',
        '%Y-%m-%d %H:%M:%S',
    ))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'{LOGGER_NAME}.{name}')
    return logging.getLogger(LOGGER_NAME)
