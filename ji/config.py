"""Persistent JSON config helpers.

Stores the preferred highlight style and the colour preference.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "ji"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("ignoring config at %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and ignored; an unwritable config never
    stops the editor from starting.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.debug("could not write config to %s: %s", CONFIG_PATH, exc)


def load_style_name() -> str | None:
    """Load persisted highlight style name, returning ``None`` when unset/invalid."""
    value = load_config().get("style")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_style_name(style_name: str) -> None:
    """Persist selected highlight style name."""
    stripped = str(style_name).strip()
    if not stripped:
        return
    config = load_config()
    config["style"] = stripped
    save_config(config)


def load_no_color() -> bool:
    """Return persisted colour preference; only explicit booleans count."""
    value = load_config().get("no_color")
    return bool(value) if isinstance(value, bool) else False
