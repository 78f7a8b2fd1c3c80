# aac_settings.py
import codecs
import logging
import os
from dataclasses import dataclass, asdict
from typing import Dict, Any, Tuple, Optional
from PySide6.QtCore import QSettings

from aac_mappings import AACMappings, ReselectPolicy


# App identity for QSettings (macOS -> ~/Library/Preferences/<org>.<app>.plist)
ORG_NAME = "Topository"
APP_NAME = "AACBoard"

# Point this at an .ini file to keep settings out of the user's preferences
SETTINGS_FILE_ENV = "AAC_SETTINGS_FILE"

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"

@dataclass(frozen=True)
class Defaults:
    board_path: str = "AACMappingsDefault.txt"
    reselect_policy: str = ReselectPolicy.ERROR.value
    log_level: str = "INFO"
    encoding: str = "utf-8"

# Keys used in the settings store (avoid typos; one place to change)
KEYS = {
    "board_path": "board/path",
    "reselect_policy": "board/reselect_policy",
    "log_level": "logging/level",
    "encoding": "board/encoding",
}

def _qs() -> QSettings:
    path = os.environ.get(SETTINGS_FILE_ENV)
    if path:
        return QSettings(path, QSettings.Format.IniFormat)
    return QSettings(ORG_NAME, APP_NAME)

def load_all() -> Dict[str, Any]:
    """Return a dict of current values, falling back to defaults."""
    d = Defaults()
    s = _qs()
    return {name: s.value(KEYS[name], default, type=str) for name, default in asdict(d).items()}

def load_one(name: str, default: Any = None) -> Any:
    if name not in KEYS:
        raise KeyError("Unknown setting: " + name)
    return load_all().get(name, default)

def save_one(name: str, value: Any) -> None:
    """Persist a single setting by name using KEYS mapping."""
    if name not in KEYS:
        raise KeyError("Unknown setting: " + name)
    allowed = choices().get(name)
    if allowed is not None and value not in allowed:
        raise ValueError("Invalid value for {}: {!r} (expected one of {})".format(name, value, allowed))
    if name == "encoding":
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError("Unknown encoding: {!r}".format(value)) from None
    s = _qs()
    s.setValue(KEYS[name], value)
    s.sync()

def reset_all() -> Dict[str, Any]:
    """Reset everything to Defaults and return the fresh dict."""
    d = Defaults()
    s = _qs()
    for k, v in asdict(d).items():
        s.setValue(KEYS[k], v)
    s.sync()
    return load_all()

def choices() -> Dict[str, Tuple[str, ...]]:
    """Allowed values for settings that take one of a fixed set."""
    return {
        "reselect_policy": tuple(p.value for p in ReselectPolicy),
        "log_level": ("DEBUG", "INFO", "WARNING", "ERROR"),
    }

def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for an application using the saved log level."""
    level = level or load_one("log_level")
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

def open_board(path: Optional[str] = None) -> AACMappings:
    """Load the board named by ``path`` or by the saved settings."""
    cfg = load_all()
    return AACMappings(path or cfg["board_path"],
                       reselect_policy=ReselectPolicy(cfg["reselect_policy"]),
                       encoding=cfg["encoding"])
