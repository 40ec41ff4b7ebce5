"""
Project logger setup.
"""

import logging
import os
import sys
from typing import Optional

from .config import CONFIG

_BASE_NAME = "remote_image"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class _CategoryFilter(logging.Filter):
    """Only pass records whose last logger name segment is an allowed category."""

    def __init__(self, allowed):
        super().__init__()
        self.allowed = set(allowed)

    def filter(self, record: logging.LogRecord) -> bool:
        # record.name like: remote_image.controller, remote_image.transport
        parts = (record.name or "").split(".")
        suffix = parts[-1] if parts else record.name
        return suffix in self.allowed


def setup_logger(level: int = logging.INFO, name: str = _BASE_NAME) -> logging.Logger:
    """Create or update the project logger.

    - Respects env overrides REMOTE_IMAGE_LOG_LEVEL/REMOTE_IMAGE_LOG_CATS on every call.
    - Keeps exactly one stderr StreamHandler on the base logger and updates
      its formatter/filters instead of adding another one.
    """
    logger = logging.getLogger(name)

    env_level = (os.getenv(CONFIG["LOG_LEVEL_ENV"]) or "").strip().lower()
    if env_level:
        level = _LEVELS.get(env_level, level)
    logger.setLevel(level)

    stream_handler: Optional[logging.StreamHandler] = None
    for h in list(logger.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            stream_handler = h
            break

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(stream_handler)

    stream_handler.setFormatter(
        logging.Formatter(fmt="[%(asctime)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )

    stream_handler.filters.clear()
    cats = (os.getenv(CONFIG["LOG_CATS_ENV"]) or "").strip()
    if cats:
        allowed = {c.strip() for c in cats.split(",") if c.strip()}
        stream_handler.addFilter(_CategoryFilter(allowed))

    # Do not propagate beyond the project logger
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Project logger, or one of its category children.

    The project logger is configured on first use only; later calls leave any
    level or handler set by ``setup_logger`` alone.
    """
    base = logging.getLogger(_BASE_NAME)
    if not base.handlers:
        base = setup_logger(name=_BASE_NAME)
    return base if not name else base.getChild(name)
