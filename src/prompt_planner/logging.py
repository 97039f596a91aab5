from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import AppSettings, get_settings
from .core import ensure_data_dir

# Client libraries that log every HTTP round-trip at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "hypercorn.access")

_LOG_FILE: Optional[Path] = None


def configure_logging(settings: Optional[AppSettings] = None) -> Path:
    """Install the rotating planner log and a console handler, once per process.

    Returns the file the planner logs to; later calls keep the first setup.
    """

    global _LOG_FILE
    if _LOG_FILE is not None:
        return _LOG_FILE

    settings = settings or get_settings()
    log_file = settings.storage.log_path
    ensure_data_dir(log_file.parent)

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    console_handler = logging.StreamHandler()
    root = logging.getLogger()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOG_FILE = log_file
    logging.getLogger(__name__).debug("Planner log: %s (level %s)", log_file, settings.log_level)
    return log_file


__all__ = ["QUIET_LOGGERS", "configure_logging"]
