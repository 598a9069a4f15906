"""Logging setup for the heart monitor."""

import logging

from .config import Config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: Config) -> logging.Logger:
    """
    Configure the package logger from the configuration.

    Args:
        config: Configuration object

    Returns:
        The ``heart_monitor`` package logger
    """
    logger = logging.getLogger("heart_monitor")

    if not config.enable_logging:
        logger.disabled = True
        return logger

    logger.disabled = False
    logger.setLevel(config.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
