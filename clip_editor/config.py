"""
Configuration for ClipCrop

Application constants, logging setup, the persisted settings file and the
tunable editor constants (minimum crop size, minimum trim duration, hit
radius, nudge steps).

Environment overrides are read from a local .env file if present:
    CLIPCROP_LOG_LEVEL   Logging level name (default INFO)
    CLIPCROP_LOG_FILE    Log file path (default clipcrop.log)
    CLIPCROP_FFMPEG      Explicit path to the FFmpeg binary
"""

import os
import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional

from colorlog import ColoredFormatter
from dotenv import load_dotenv

load_dotenv()

# --- CONSTANTS ---
APP_NAME = "ClipCrop"
VERSION = "1.0.0"
IS_WINDOWS = os.name == 'nt'

# --- PATHS ---
# Use %APPDATA% on Windows, ~/.config on Linux/Mac
if IS_WINDOWS:
    CONFIG_DIR = os.path.join(os.environ.get('APPDATA', str(Path.home())), APP_NAME)
else:
    CONFIG_DIR = os.path.join(str(Path.home()), ".config", APP_NAME)

SETTINGS_FILE = os.path.join(CONFIG_DIR, "settings.json")
LOG_FILE = os.getenv("CLIPCROP_LOG_FILE", "clipcrop.log")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

logger = logging.getLogger(APP_NAME)


# --- LOGGING ---
def setup_logging(level: Optional[str] = None, log_file: Optional[str] = LOG_FILE) -> logging.Logger:
    """
    Configure root logging with a colored console handler and, optionally, a file.

    Args:
        level: Level name; falls back to CLIPCROP_LOG_LEVEL, then INFO
        log_file: Path of the log file, or None for console only

    Returns:
        The application logger
    """
    level_name = (level or os.getenv("CLIPCROP_LOG_LEVEL", "INFO")).upper()

    console = logging.StreamHandler()
    console.setFormatter(ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(message)s",
        datefmt=None,
        reset=True,
        log_colors={'DEBUG': 'cyan', 'INFO': 'green', 'WARNING': 'yellow', 'ERROR': 'red'}
    ))
    handlers = [console]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )
    return logger


# --- EDITOR CONSTANTS ---
@dataclass
class EditorConfig:
    """
    Tunable constants of the crop and timeline editors.

    Attributes:
        min_crop: Minimum crop side length in media pixels
        min_duration: Minimum trim selection length in seconds
        hit_radius: Grab distance around a handle in display pixels
        min_export_duration: Shortest selection accepted for export (seconds)
        step_default: Arrow key nudge step (seconds)
        step_fine: Nudge step with Alt held
        step_coarse: Nudge step with Shift held
        end_epsilon: Tolerance for auto-pause at the selection end
        replay_epsilon: Tolerance for restarting playback from the selection start
        max_log_entries: Status log capacity
    """
    min_crop: float = 50.0
    min_duration: float = 1.0
    hit_radius: float = 12.0
    min_export_duration: float = 0.1
    step_default: float = 0.1
    step_fine: float = 0.01
    step_coarse: float = 1.0
    end_epsilon: float = 0.05
    replay_epsilon: float = 0.1
    max_log_entries: int = 200

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Build from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# --- SETTINGS MANAGER ---
def load_settings() -> Dict[str, Any]:
    """Loads settings from JSON file."""
    if not os.path.exists(SETTINGS_FILE):
        return {}
    try:
        with open(SETTINGS_FILE, 'r') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load settings: {e}")
        return {}


def save_settings(key: str, value: Any) -> None:
    """Saves a single setting key-value pair."""
    if not os.path.exists(CONFIG_DIR):
        os.makedirs(CONFIG_DIR)

    settings = load_settings()
    settings[key] = value

    try:
        with open(SETTINGS_FILE, 'w') as f:
            json.dump(settings, f, indent=4)
        logger.info(f"Saved setting: {key} = {value}")
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")


def get_setting(key: str, default: Any = None) -> Any:
    """Retrieves a setting value."""
    settings = load_settings()
    return settings.get(key, default)


def load_editor_config() -> EditorConfig:
    """Editor constants from the "editor" settings section, defaults otherwise."""
    section = get_setting("editor", {})
    if not isinstance(section, dict):
        logger.warning("Ignoring malformed 'editor' settings section")
        return EditorConfig()
    return EditorConfig.from_dict(section)
