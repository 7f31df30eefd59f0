"""
Synchronous key/value storage backends for the cart store.

They all expose the browser Storage contract (get_item / set_item /
remove_item over string values) so the store does not care where its state
lives.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, MutableMapping, Optional

logger = logging.getLogger(__name__)


class Storage(ABC):
    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Stored value, or None when the key is absent"""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass


class MemoryStorage(Storage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class JSONFileStorage(Storage):
    """
    Keeps every key in one JSON file, rewritten on each change.

    A missing file reads as empty; an unreadable one is logged and replaced
    on the next write.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=4)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class SessionStorage(Storage):
    """Backs the store with a Flask session (or any mutable mapping)."""

    def __init__(self, session: MutableMapping):
        self.session = session

    def _touch(self) -> None:
        if hasattr(self.session, "modified"):
            self.session.modified = True

    def get_item(self, key: str) -> Optional[str]:
        return self.session.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.session[key] = value
        self._touch()

    def remove_item(self, key: str) -> None:
        self.session.pop(key, None)
        self._touch()
