"""Logging setup shared by the viewer and scripts."""

import logging
import os
from typing import Optional

from config.settings import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: Optional[str] = None, log_to_file: Optional[bool] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package loggers.

    Library modules only create named loggers; handlers are installed here
    once, by whoever hosts the engine.

    Args:
        level: Log level name (defaults to settings.log_level)
        log_to_file: Also write to logs/fieldmap.log (defaults to settings.log_to_file)

    Returns:
        The root "fieldmap" logger
    """
    global _configured

    level_name = (level or settings.log_level).upper()
    if log_to_file is None:
        log_to_file = settings.log_to_file

    root = logging.getLogger("fieldmap")
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if _configured:
        return root

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    if log_to_file:
        log_dir = os.path.join(os.path.dirname(__file__), "..", "logs")
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, "fieldmap.log"), mode="a", encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the "fieldmap" namespace."""
    return logging.getLogger(f"fieldmap.{name}")
