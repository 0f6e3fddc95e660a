"""preferences.py - Reader preferences and environment configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

SETTINGS_KEY = "speedreader-settings"

DEFAULT_STORE_PATH = Path("speedread_store.json")
DEFAULT_WPM = 300
DEFAULT_FONT_SIZE = 64
MAX_WPM = 1000
WPM_STEP = 10
MIN_FONT_SIZE = 24
MAX_FONT_SIZE = 128


@dataclass
class Preferences:
    wpm: int = DEFAULT_WPM
    font_size: int = DEFAULT_FONT_SIZE
    alt_reading_mode: bool = False

    def to_record(self) -> dict:
        return {"wpm": self.wpm, "fontSize": self.font_size, "altReadingMode": self.alt_reading_mode}


def clamp_wpm(wpm: int) -> int:
    return max(0, min(MAX_WPM, wpm))


def clamp_font_size(size: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, size))


def get_store_path() -> Path:
    """Store location from SPEEDREAD_STORE, else ./speedread_store.json."""
    raw = os.getenv("SPEEDREAD_STORE", "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_STORE_PATH


def get_default_wpm() -> int:
    """Starting rate from SPEEDREAD_WPM; invalid values fall back to the default."""
    raw = os.getenv("SPEEDREAD_WPM", "").strip()
    try:
        return clamp_wpm(int(raw))
    except ValueError:
        return DEFAULT_WPM


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def load_preferences(store) -> Preferences:
    """Merge the stored preferences record over the defaults, skipping bad fields."""
    prefs = Preferences(wpm=get_default_wpm())
    raw = store.get(SETTINGS_KEY)
    if not isinstance(raw, dict):
        return prefs

    if _is_int(raw.get("wpm")):
        prefs.wpm = clamp_wpm(raw["wpm"])
    if _is_int(raw.get("fontSize")) and raw["fontSize"] > 0:
        prefs.font_size = raw["fontSize"]
    if isinstance(raw.get("altReadingMode"), bool):
        prefs.alt_reading_mode = raw["altReadingMode"]
    return prefs


def save_preferences(store, prefs: Preferences) -> None:
    """Write preferences, keeping any unrelated keys already in the record."""
    current = store.get(SETTINGS_KEY)
    record = dict(current) if isinstance(current, dict) else {}
    record.update(prefs.to_record())
    store.set(SETTINGS_KEY, record)
