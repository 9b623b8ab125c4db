"""Persistent JSON config helpers.

Stores refresh cadence, probe timeouts, and the UI theme name.
Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "jerm"
CONFIG_FILENAME = "config.json"
SHORTCUTS_FILENAME = "shortcuts.json"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
CONFIG_PATH = CONFIG_DIR / CONFIG_FILENAME
SHORTCUTS_PATH = CONFIG_DIR / SHORTCUTS_FILENAME

GIT_REFRESH_SECONDS = 30.0
GIT_PROBE_TIMEOUT_SECONDS = 2.0
GIT_FETCH_TIMEOUT_SECONDS = 15.0
COMMAND_TIMEOUT_SECONDS = 300.0


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    git_refresh_seconds: float = GIT_REFRESH_SECONDS
    git_probe_timeout_seconds: float = GIT_PROBE_TIMEOUT_SECONDS
    git_fetch_timeout_seconds: float = GIT_FETCH_TIMEOUT_SECONDS
    command_timeout_seconds: float = COMMAND_TIMEOUT_SECONDS
    theme: str = "default"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so that an unwritable
    config directory never interrupts the interactive session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.debug("could not write config %s: %s", CONFIG_PATH, exc)


def _positive_seconds(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value <= 0:
        return default
    return float(value)


def load_settings() -> Settings:
    """Build ``Settings`` from config, keeping defaults for invalid values."""
    data = load_config()
    theme = data.get("theme")
    return Settings(
        git_refresh_seconds=_positive_seconds(data, "git_refresh_seconds", GIT_REFRESH_SECONDS),
        git_probe_timeout_seconds=_positive_seconds(
            data, "git_probe_timeout_seconds", GIT_PROBE_TIMEOUT_SECONDS
        ),
        git_fetch_timeout_seconds=_positive_seconds(
            data, "git_fetch_timeout_seconds", GIT_FETCH_TIMEOUT_SECONDS
        ),
        command_timeout_seconds=_positive_seconds(data, "command_timeout_seconds", COMMAND_TIMEOUT_SECONDS),
        theme=theme.strip() if isinstance(theme, str) and theme.strip() else "default",
    )


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)
