import sys
import os
from uuid import uuid4
from loguru import logger

from .config import LOG_FILE, LOG_FORMAT, LOG_JSON, LOG_LEVEL


def setup_logging():
    """
    Configure application logging
    """
    # Clear default loggers
    logger.remove()

    # Console logger, structured when LOG_JSON is set
    if LOG_JSON:
        logger.add(sys.stderr, level=LOG_LEVEL, serialize=True)
    else:
        logger.add(
            sys.stderr,
            format=LOG_FORMAT,
            level=LOG_LEVEL,
            colorize=True
        )

    # File logger with rotation and retention, only when a path is configured
    if LOG_FILE:
        log_dir = os.path.dirname(os.path.abspath(LOG_FILE))
        try:
            os.makedirs(log_dir, exist_ok=True)
            logger.add(
                LOG_FILE,
                format=LOG_FORMAT,
                level=LOG_LEVEL,
                rotation="10 MB",
                retention="1 week",
                compression="zip"
            )
            logger.info(f"File logging initialized at {LOG_FILE}")
        except OSError as e:
            logger.error(f"Failed to initialize file logging: {e}")

    logger.info("Logging system initialized")


def get_request_logger(request_id=None):
    """
    Create a contextualized logger for a request
    """
    if not request_id:
        request_id = f"req-{uuid4().hex[:12]}"

    return logger.bind(request_id=request_id)
