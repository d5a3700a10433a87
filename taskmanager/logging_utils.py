"""Logging helpers shared by the API and the client library."""
import logging
from typing import Optional

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("taskmanager")


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the package logger once; repeated calls only adjust the level."""
    level_name = (level or LOG_LEVEL).upper()
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, level_name, logging.INFO))


def log_error(error: BaseException, context: str, user_id: Optional[str] = None) -> None:
    """Log an unexpected failure with its traceback and the caller that hit it."""
    who = f" user_id={user_id}" if user_id else ""
    logger.error("%s failed%s: %s", context, who, error, exc_info=error)
