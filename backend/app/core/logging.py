"""
Logging setup.

Every module logs through ``logging.getLogger(__name__)``; this module wires
the root ``app`` logger to a console handler once per process.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the ``app`` logger.

    Safe to call repeatedly (e.g. one app per test); only the level is
    updated after the first call.
    """
    logger = logging.getLogger("app")
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
