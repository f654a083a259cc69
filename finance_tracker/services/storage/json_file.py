"""
JSON File Storage Implementation

DESIGN DECISION: Each key is one JSON file in the data directory.
1. Users can open and back up their data with any text editor
2. No database setup required
3. A broken file only affects its own collection

TRADEOFFS:
- Not suitable for large data (we're fine for personal use)
- Whole collections are rewritten on every save

Writes go to a temporary file that is then renamed over the target, so
a crash mid-write leaves the previous contents intact.
"""

import os
import re
from pathlib import Path
from typing import Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.services.storage.interface import KeyValueStore, StorageError


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9@._-]")


class JsonFileStore(KeyValueStore):
    """
    File-per-key store under a single directory.

    Keys are mapped to file names by replacing characters outside
    [A-Za-z0-9@._-] with underscores.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not key:
            raise StorageError("Storage key must not be empty")
        return self._data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(f"{path} is not valid UTF-8: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._write(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")
        return True

    def move(self, key: str, new_key: str) -> bool:
        source = self._path_for(key)
        target = self._path_for(new_key)
        try:
            os.replace(source, target)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to move {source} to {target}: {e}")
        return True

    def keys(self) -> list[str]:
        if not self._data_dir.exists():
            return []
        return sorted(path.stem for path in self._data_dir.glob("*.json"))
