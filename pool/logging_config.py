"""
Logging setup for the prediction pool.
Configured once from the application lifespan.
"""

import logging

from .config import LOG_FORMAT, LOG_LEVEL

_configured = False


def configure_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """Attach a console handler to the ``pool`` logger."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))

    logger = logging.getLogger("pool")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True
