from __future__ import annotations

import sys
from logging.handlers import SysLogHandler

from loguru import logger

from gift_claimer.config import Settings

SYSLOG_IDENT = "stfc-automation"
MESSAGE_FORMAT = "{message}"


def setup_logging(settings: Settings) -> None:
    """Route loguru output to stdout and, if configured, a log file and syslog."""
    logger.remove()
    logger.add(sys.stdout, format=MESSAGE_FORMAT, level=settings.log_level)

    if settings.log_file:
        logger.add(
            settings.log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            level=settings.log_level,
            rotation=settings.log_rotation,
            enqueue=True,
        )

    if settings.log_to_syslog:
        try:
            handler = SysLogHandler(address="/dev/log")
        except OSError as e:
            logger.warning(f"Failed to connect to syslog: {e}")
        else:
            handler.ident = f"{SYSLOG_IDENT}: "
            logger.add(handler, format=MESSAGE_FORMAT, level=settings.log_level)
