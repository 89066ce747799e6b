# app/services/local_storage.py
import json
import logging
from abc import ABC, abstractmethod
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LocalStorage(ABC):
    """Key-value storage holding JSON-serialisable values"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryStorage(LocalStorage):
    """Process-local storage; values are round-tripped through JSON so they never alias caller data"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[Any]:
        raw = self._items.get(key)
        return json.loads(raw) if raw is not None else None

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = json.dumps(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def keys(self):
        return list(self._items.keys())


class FileStorage(LocalStorage):
    """Storage writing one ``<key>.json`` file per key under a directory"""

    def __init__(self, directory: str = ".storage"):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe_key = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return self.directory / f"{safe_key}.json"

    def get_item(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading storage key '{key}' from {path}: {str(e)}")
            return None

    def set_item(self, key: str, value: Any) -> None:
        path = self._path(key)
        # Write to a temp file first so a crash never leaves half a collection on disk
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def clear(self) -> None:
        for path in self.directory.glob("*.json"):
            path.unlink()
