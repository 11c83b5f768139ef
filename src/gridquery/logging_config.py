"""
Logging configuration for gridquery.

Library modules only create loggers via ``logging.getLogger(__name__)``; nothing
is configured on import. Applications that want gridquery's debug trace call
``configure_logging()`` once.
"""

import logging
from typing import Optional, Union

from gridquery.config import settings

LOGGER_NAME = "gridquery"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _GridQueryHandler(logging.StreamHandler):
    """Marker subclass so repeated configure_logging() calls can find their handler."""


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach a stream handler to the ``gridquery`` logger.

    Calling this more than once only updates the level.

    Args:
        level: Logging level name or number. Defaults to ``settings.log_level``
            (``GRIDQUERY_LOG_LEVEL``).

    Returns:
        The configured ``gridquery`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    resolved = level if level is not None else settings.log_level
    if isinstance(resolved, str):
        resolved = resolved.upper()

    handler = next((h for h in logger.handlers if isinstance(h, _GridQueryHandler)), None)
    if handler is None:
        handler = _GridQueryHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(resolved)
    handler.setLevel(resolved)
    return logger
