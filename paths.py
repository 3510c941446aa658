from __future__ import annotations
import os
import sys
from pathlib import Path


APP_NAME = "StudyTimer"
DATA_FILE_NAME = "study_data.json"
DEFAULT_LOG_LEVEL = "INFO"


def get_data_dir() -> Path:
    """
    Resolve the directory used for storing local app data.
    Uses an environment override when provided, otherwise falls back to a
    per-OS user data location.
    """
    override = os.environ.get("STUDY_TIMER_DATA_DIR")
    if override:
        base = Path(override).expanduser()
    else:
        home = Path.home()
        platform = sys.platform
        if platform == "darwin":
            base = home / "Library" / "Application Support" / APP_NAME
        elif platform.startswith("win"):
            roaming = os.environ.get("APPDATA")
            base = Path(roaming) / APP_NAME if roaming else home / "AppData" / "Roaming" / APP_NAME
        else:
            base = home / ".local" / "share" / "study-timer"

    base.mkdir(parents=True, exist_ok=True)
    return base


def get_data_file() -> Path:
    override = os.environ.get("STUDY_TIMER_DATA_FILE")
    if override:
        return Path(override).expanduser()
    return get_data_dir() / DATA_FILE_NAME


def get_log_level() -> str:
    level = os.environ.get("STUDY_TIMER_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    return level or DEFAULT_LOG_LEVEL
