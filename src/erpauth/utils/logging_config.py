"""Logging setup for console use."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("erpauth")


def init_console_logging(level: str = "WARNING") -> None:
    """Send erpauth log records to the console.

    Parameters
    ----------
    level : str, optional
        Log level name, by default "WARNING"
    """
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
