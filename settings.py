"""User preferences for Yahtzee.

Read from ~/.yahtzee_solo_settings.json. Only presentation preferences
live here; game state is never written to disk.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULTS = {
    "dark_mode": False,
    "confirm_zero": True,
    "date_format": "%Y-%m-%d %H:%M",
}


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".yahtzee_solo_settings.json"


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing keys get default values.
    Unknown keys are ignored.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return dict(DEFAULTS)
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable settings file %s", path, exc_info=True)
        return dict(DEFAULTS)

    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return dict(DEFAULTS)
    # Merge: only keep known keys, fill missing from defaults
    result = dict(DEFAULTS)
    for key in DEFAULTS:
        if key in data:
            result[key] = data[key]
    return result
