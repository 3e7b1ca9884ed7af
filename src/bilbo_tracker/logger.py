"""Logging configuration for bilbo-tracker."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "bilbo_tracker"


def setup_logger(
    name: str = LOGGER_NAME,
    level: str = "WARNING",
    log_file: Optional[str] = None,
    console: bool = True,
) -> logging.Logger:
    """Configure and return the package logger.

    Library modules log through ``logging.getLogger(__name__)``, so
    configuring the ``bilbo_tracker`` logger covers all of them.

    Args:
        name: Logger name (default: "bilbo_tracker")
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file. If None, only logs to console.
        console: Whether to log to stderr (default: True)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(level="DEBUG", log_file="logs/bilbo.log")
        >>> logger.debug("Store opened")
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers so repeated CLI invocations don't stack them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console output goes to stderr
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5_000_000,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
