"""Logging setup for the interactive session.

The TUI owns the terminal, so records never go to stderr. Logging stays
silent unless a log file is requested.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILE_ENV = "JERM_LOG_FILE"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "jerm.log"

logging.getLogger(APP_NAME).addHandler(logging.NullHandler())


def resolve_log_path(log_file: str | None, debug: bool) -> Path | None:
    """Pick the log destination from CLI flag, environment, or debug default."""
    if log_file:
        return Path(log_file).expanduser()
    from_env = os.environ.get(LOG_FILE_ENV, "").strip()
    if from_env:
        return Path(from_env).expanduser()
    if debug:
        return DEFAULT_LOG_PATH
    return None


def configure_logging(log_path: Path | None, debug: bool = False) -> logging.Handler | None:
    """Attach a file handler to the ``jerm`` logger when ``log_path`` is set."""
    root = logging.getLogger(APP_NAME)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    if log_path is None:
        return None
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return handler
