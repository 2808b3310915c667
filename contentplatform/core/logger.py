"""Logging setup for the Content Platform.

Modules log through ``logging.getLogger(__name__)``. Everything below the
``contentplatform`` package logger is configured once, at application or
CLI start, from the ``LOG_*`` settings.
"""

import logging
import logging.handlers
import os
from typing import List, Optional

PACKAGE_LOGGER = "contentplatform"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
ISO_8601 = "%Y-%m-%dT%H:%M:%S"

# Marks handlers owned by setup_logger so reconfiguring replaces only those
_OWNED = "_contentplatform_handler"


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {name}")
    return level


def _build_handlers(log_dir: str, to_file: bool, max_bytes: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if to_file:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, f"{PACKAGE_LOGGER}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    return handlers


def setup_logger(
    level: str = "INFO",
    log_format: Optional[str] = None,
    to_file: bool = False,
    log_dir: str = "./logs",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the package logger with a console and optional rotating file handler.

    Calling it again swaps the handlers it installed earlier, so the level
    and destinations always reflect the latest call.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level(level))

    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt=ISO_8601)
    for handler in _build_handlers(log_dir, to_file, max_bytes, backup_count):
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)
    return logger


def configure_from_settings(settings) -> logging.Logger:
    """Apply the LOG_* settings."""
    return setup_logger(
        level=settings.log_level,
        log_format=settings.log_format,
        to_file=settings.log_to_file,
        log_dir=settings.log_dir,
    )
