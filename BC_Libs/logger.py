"""
Logging setup for Batch Crop.

Library modules log through ``logging.getLogger(__name__)``; this module
configures the shared ``BC_Libs`` logger once at application start.

Functions:
    setup_logger: Configure the project logger (idempotent)
    get_logger: Get the project logger or one of its children
"""

import logging
import os
import sys
from typing import Optional

from BC_Libs.constants import ENV_LOG_LEVEL

LOGGER_NAME = "BC_Libs"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def resolve_log_level(default: int = logging.INFO) -> int:
    """
    Resolve the log level from the environment.

    Args:
        default: Level used when BATCH_CROP_LOG_LEVEL is unset or unknown

    Returns:
        A logging level constant
    """
    env_level = (os.getenv(ENV_LOG_LEVEL) or "").strip().lower()
    return _LEVEL_MAP.get(env_level, default)


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Create or update the project logger.

    Respects the BATCH_CROP_LOG_LEVEL override on every call and keeps
    exactly one stderr StreamHandler on the project logger, updating its
    formatter instead of stacking handlers on repeated calls.

    Args:
        level: Default level when no environment override is present

    Returns:
        The configured project logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_log_level(level))

    stream_handler: Optional[logging.StreamHandler] = None
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) is sys.stderr:
            stream_handler = handler
            break

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(stream_handler)

    stream_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the project logger, or a child logger when name is given."""
    base = logging.getLogger(LOGGER_NAME)
    return base if not name else base.getChild(name)
