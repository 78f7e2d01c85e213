"""Logging setup for depaudit."""

import logging
import sys

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

LOGGER_NAME = "depaudit"


def configure_logging(level: str | int = "NOTICE") -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Args:
        level: Level name (DEBUG, INFO, NOTICE, WARNING, ERROR) or number

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Repeated CLI invocations in one process must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s audit %(message)s"))
    logger.addHandler(handler)
    return logger
