"""
Lightweight logging utilities for the Staking Rewards toolkit.

Provides a consistent logger with a simple console handler and optional
log-level override via the SRT_LOG_LEVEL environment variable.
"""

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger with a stream handler.

    The first time a logger is created, a StreamHandler is attached with a
    plain-text formatter. Subsequent calls reuse the existing configuration.

    Log level can be overridden with the SRT_LOG_LEVEL environment variable.
    """
    logger = logging.getLogger(name if name else __name__)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)

        level_str = os.getenv("SRT_LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_str, logging.INFO)
        logger.setLevel(level)

    return logger


def set_package_level(level: str) -> None:
    """Apply a log level to every logger under the toolkit namespace.

    Used by the CLI ``--log-level`` flag; unknown names fall back to INFO.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    get_logger("staking_rewards_toolkit").setLevel(resolved)
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith("staking_rewards_toolkit.") and isinstance(
            logger, logging.Logger
        ):
            logger.setLevel(resolved)
