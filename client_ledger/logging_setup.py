"""
Logging configuration for the client_ledger package.

Library modules only call logging.getLogger(__name__) and never
attach handlers. The application entry point calls
configure_logging() once at startup.
"""

import logging
import sys

_PKG_LOGGER_NAME = "client_ledger"
_CONFIGURED = False

logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(
    level: int | str = "INFO",
    fmt: str = "%(asctime)s %(name)s %(levelname)s %(message)s",
) -> None:
    """Attach a single stderr handler to the package logger, once."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level))
    logger.propagate = False

    _CONFIGURED = True
