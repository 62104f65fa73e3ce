"""Logging configuration for the cashflow package."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Send cashflow log records to stderr at the given level.

    Idempotent: calling it again only changes the level and re-targets the
    handler at the current ``sys.stderr``.
    """
    logger = logging.getLogger("cashflow")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = next((h for h in logger.handlers if getattr(h, "_cashflow_handler", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._cashflow_handler = True
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)

    return logger
