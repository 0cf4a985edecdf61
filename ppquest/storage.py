"""
Persistence layer for PP Quest.

Stores the whole application state as one JSON snapshot under a fixed key
in a local byte store.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ppquest.models import AppState

logger = logging.getLogger(__name__)

STORAGE_KEY = "pp_quest_v6_state"


class PersistenceError(Exception):
    """Raised when the snapshot cannot be written or removed."""
    pass


class FileStore:
    """
    Key-value byte store backed by one file per key in a directory.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a reader sees either the old snapshot or
    the new one, never a partial write.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def default_state() -> AppState:
    """
    Build the state of a first launch.

    Initial values:
    - user: logged out, 2 manual refreshes, English, dark theme
    - no active or completed quests
    - stats: level 1, everything else zero, no badges
    - last_refresh: None
    """
    return AppState()


def load_state(store) -> AppState:
    """
    Load the persisted snapshot.

    A missing key or a blob that does not parse into ``AppState`` yields a
    fresh default state; the parse error is logged and not propagated.

    Args:
        store: Byte store with a ``get(key)`` method

    Returns:
        The stored AppState, or a default one
    """
    try:
        raw = store.get(STORAGE_KEY)
    except OSError as e:
        logger.error(f"Failed to read stored state, starting fresh: {e}")
        return default_state()

    if raw is None:
        return default_state()

    try:
        return AppState.model_validate_json(raw)
    except ValidationError as e:
        logger.error(f"Stored state is malformed, starting fresh: {e}")
        return default_state()


def save_state(state: AppState, store) -> None:
    """
    Write the full state snapshot.

    Args:
        state: State to persist
        store: Byte store with a ``set(key, data)`` method

    Raises:
        PersistenceError: If the store fails to write
    """
    data = state.model_dump_json(by_alias=True).encode("utf-8")
    try:
        store.set(STORAGE_KEY, data)
    except OSError as e:
        raise PersistenceError(f"Failed to save state: {e}") from e


def clear_state(store) -> None:
    """
    Remove the persisted snapshot.

    Raises:
        PersistenceError: If the store fails to delete the key
    """
    try:
        store.delete(STORAGE_KEY)
    except OSError as e:
        raise PersistenceError(f"Failed to clear state: {e}") from e
