"""Logging configuration helpers."""

import logging
import time

LOGGER_NAME = "timezone_detector"
LOG_FORMAT = "%(asctime)sZ %(levelname)s: %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Configure detector logging with a single stream handler.

    Timestamps are UTC so that logged zone changes are not rendered in the
    very time zone they change. Arbitration decisions are logged at DEBUG.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if logger.handlers:
        return
    formatter = logging.Formatter(LOG_FORMAT)
    formatter.converter = time.gmtime
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
