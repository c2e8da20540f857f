"""
BrettAppsCode Backend - In-Memory Key-Value Stores
====================================================

What:  The "datasheet" and "databank" maps the editor uses for scratch data.
How:   A dict behind a lock. Contents live for the life of the process and are
       never persisted or evicted.
Who:   Injected into the /api/datasheet and /api/databank routes.
"""

import logging
import threading
from typing import Any, Dict

from app.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Thread-safe mapping with a store-specific not-found message.

    A stored None is a real value: `get` only fails for keys never set.
    """

    def __init__(self, name: str, missing_message: str = "Key not found"):
        self.name = name
        self.missing_message = missing_message
        self._items: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        """
        Raises:
            NotFoundError if `key` was never set.
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    message=self.missing_message,
                    context={"store": self.name, "key": key},
                )
            return self._items[key]

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._items[key] = value
        logger.debug("%s: set %r", self.name, key)

    def snapshot(self) -> Dict[str, Any]:
        """Shallow copy of every entry."""
        with self._lock:
            return dict(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


# ── Singleton Instances ───────────────────────────────────────────────────
datasheet_store = KeyValueStore("datasheet", missing_message="Data sheet not found")
databank_store = KeyValueStore("databank", missing_message="Key not found")


def get_datasheet_store() -> KeyValueStore:
    return datasheet_store


def get_databank_store() -> KeyValueStore:
    return databank_store
