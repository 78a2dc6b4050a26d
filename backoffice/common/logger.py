"""Logging setup for the back office.

Console and rotating file handlers with ISO 8601 timestamps. Modules log
through logging.getLogger(__name__) under the "backoffice" namespace, so
configuring that one logger covers the whole package.
"""

import logging
import logging.handlers
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logger(
    name: str,
    log_dir: str = "/var/log/backoffice",
    level: str = "INFO",
    file_logging: bool = True,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Set up a logger with file and console handlers.

    Args:
        name: Logger name; the log file is "<log_dir>/<name>.log"
        log_dir: Directory for log files
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)
        file_logging: Add a rotating file handler
        console_logging: Add a stderr handler
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Raises:
        ValueError: If level is not a logging level name
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    logger = logging.getLogger(name)
    logger.setLevel(level_value)

    # Already configured (app factory called more than once)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []

    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
        ))
    if console_logging:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(settings, name: Optional[str] = None) -> logging.Logger:
    """Configure the package logger from application settings."""
    return setup_logger(
        name or "backoffice",
        log_dir=settings.log_dir,
        level=settings.log_level,
        file_logging=settings.file_logging,
    )
