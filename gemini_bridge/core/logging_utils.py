"""
Logging setup for gemini-bridge.
The log file gets everything at ``log_level``; the console (stderr) only shows
``console_log_level`` and above so tool results printed to stdout stay readable.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(settings: Settings) -> Path:
    log_dir = settings.data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "gemini-bridge.log"

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(settings.console_log_level))
    console.setFormatter(formatter)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(_level(settings.log_level))
    file_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(min(console.level, file_handler.level))
    root.addHandler(console)
    root.addHandler(file_handler)
    logging.getLogger(__name__).debug("Logging initialized at %s", log_file)
    return log_file
