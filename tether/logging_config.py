"""Opt-in log output for the ``tether`` logger. Importing tether never configures logging."""

import logging
import sys
from typing import Optional

LOGGER_NAME = "tether"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Send tether's records to stderr and, optionally, a file.

    Request and response headers are never logged, so DEBUG is safe to
    enable against authenticated APIs.

    Args:
        level: Level name; unknown names mean INFO
        log_file: Also append records to this file
        force: Replace handlers installed by an earlier call

    Returns:
        The ``tether`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if logger.handlers and not force:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
