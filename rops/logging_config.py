"""Logging configuration for the rops CLI.

Command output streamed by the CommandRunner goes through loguru, so the
sink level decides whether ignored stderr lines (debug) are visible.
"""

import sys

from loguru import logger

DEFAULT_LEVEL = "INFO"
LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> <level>{message}</level>"
)


def configure_logging(level: str | None = None) -> None:
    """Replace the default loguru sink with a stderr sink at ``level``."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or DEFAULT_LEVEL).upper(),
        format=LOG_FORMAT,
        colorize=None,
    )
