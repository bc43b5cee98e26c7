"""
Console logging for the trampoline.

Everything goes to stderr: stdout belongs to UnityYAMLMerge.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def verbosity_to_level(verbosity: int, default: Optional[int] = None) -> int:
    """
    Map the number of -v flags to a logging level.

    Args:
        verbosity: Count of -v flags
        default: Level used when no -v is given (WARNING if None)
    """
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return default if default is not None else logging.WARNING


def setup_logging(level: int = logging.WARNING, logger_name: str = "uyamlt") -> logging.Handler:
    """
    Setup logging for the package logger.

    Args:
        level: Logging level for the package logger
        logger_name: Logger to configure

    Returns:
        The installed console handler
    """
    package_logger = logging.getLogger(logger_name)
    package_logger.setLevel(level)

    # Remove console handlers from earlier setups to avoid duplicates
    for h in package_logger.handlers[:]:
        if isinstance(h, logging.StreamHandler):
            package_logger.removeHandler(h)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(console_handler)

    return console_handler
