from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Base exception for data file failures."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class PersistenceReadError(PersistenceError):
    """Raised when the data file exists but cannot be read or parsed."""


class PersistenceWriteError(PersistenceError):
    """Raised when the data file cannot be written."""


def backup_corrupt_file(path: Path | str) -> Path:
    """
    Move an unreadable data file aside to <name>.bak and return the new path.
    An existing backup is overwritten.
    """
    path = Path(path)
    backup = path.with_suffix(path.suffix + ".bak")
    try:
        path.replace(backup)
    except OSError as e:
        raise PersistenceWriteError(f"Could not back up {path}: {e}", path) from e
    logger.warning("Moved unreadable data file %s to %s", path, backup)
    return backup


def load_json(path: Path | str, default: Any = None) -> Any:
    """
    Load JSON from path:
    - If missing: return default
    - If unreadable, empty or invalid: raise PersistenceReadError
    """
    path = Path(path)

    if not path.exists():
        logger.debug("No data file at %s", path)
        return default

    try:
        raw_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read %s: %s", path, e)
        raise PersistenceReadError(f"Could not read {path}: {e}", path) from e

    if not raw_text.strip():
        raise PersistenceReadError(f"Data file {path} is empty.", path)

    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        raise PersistenceReadError(f"Invalid JSON in {path}: {e}", path) from e


def save_json(path: Path | str, payload: Any) -> None:
    """
    Atomic JSON write: write to temp file then replace target.
    """
    path = Path(path)
    temp = path.with_suffix(path.suffix + ".tmp")
    try:
        text = json.dumps(payload, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as e:
        raise PersistenceWriteError(f"Could not serialize data for {path}: {e}", path) from e

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp.write_text(text, encoding="utf-8")
        temp.replace(path)
    except OSError as e:
        logger.error("Could not write %s: %s", path, e)
        try:
            temp.unlink()
        except OSError:
            pass
        raise PersistenceWriteError(f"Could not write {path}: {e}", path) from e
    logger.debug("Saved %s", path)
