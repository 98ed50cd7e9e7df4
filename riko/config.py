"""User configuration for the riko editor.

Settings are read from a JSON file in the user's config directory. A missing
file means defaults; an unreadable or malformed file is ignored with a
warning, and so is any individual value that fails validation.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Tunable editor settings."""
    tab_stop: int = EditorConstants.TAB_STOP
    placeholder_color: int = EditorConstants.PLACEHOLDER_COLOR
    status_bar_color: int = EditorConstants.STATUS_BAR_COLOR


def default_config_path() -> Path:
    """Return the platform-appropriate location of ``config.json``."""
    return Path(platformdirs.user_config_dir("riko")) / "config.json"


def validate_setting(key: str, value: Any) -> bool:
    """Return True if ``value`` is acceptable for setting ``key``.

    Booleans are rejected for the integer settings even though ``bool`` is an
    ``int`` subclass.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    if key == 'tab_stop':
        return EditorConstants.MIN_TAB_STOP <= value <= EditorConstants.MAX_TAB_STOP
    if key in ('placeholder_color', 'status_bar_color'):
        return 0 <= value <= 255
    return False


def _read_settings(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Config file {path} has invalid format (not a dict), ignoring")
        return {}
    return data


def load_config(path: Optional[Path] = None) -> EditorConfig:
    """Load the editor configuration.

    Args:
        path: Explicit config file. Defaults to ``default_config_path()``.

    Returns:
        An EditorConfig with every valid override applied.
    """
    path = Path(path) if path is not None else default_config_path()
    settings = _read_settings(path)
    config = EditorConfig()
    known = {f.name for f in fields(EditorConfig)}
    for key, value in settings.items():
        if key not in known:
            logger.warning(f"Unknown config setting {key!r} in {path}, ignoring")
            continue
        if not validate_setting(key, value):
            logger.warning(f"Invalid value {value!r} for {key!r} in {path}, using default")
            continue
        setattr(config, key, value)
    logger.debug(f"Loaded config from {path}: {config}")
    return config
