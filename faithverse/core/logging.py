"""
Console logger setup shared by every module.

Usage:
    from faithverse.core.logging import get_logger
    logger = get_logger(__name__)
    logger.info("[SCORE] recorded ...")
"""
import logging

from faithverse.core.config import LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """Return a logger that writes to the console exactly once."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger
