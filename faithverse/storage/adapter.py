"""
Key-value store adapters.

The engine only needs synchronous get/set/remove over string keys. Values are
already-serialized JSON; adapters never look inside them.
"""
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from faithverse.storage.models import KeyValueEntry


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class SqlKeyValueStore:
    """Store backed by the kv_entries table. Every write commits immediately."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        entry = self.db.get(KeyValueEntry, key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        entry = self.db.get(KeyValueEntry, key)
        if entry is None:
            self.db.add(KeyValueEntry(key=key, value=value))
        else:
            entry.value = value
        self.db.commit()

    def remove(self, key: str) -> None:
        entry = self.db.get(KeyValueEntry, key)
        if entry is not None:
            self.db.delete(entry)
            self.db.commit()

    def keys(self, prefix: str = "") -> list[str]:
        query = self.db.query(KeyValueEntry.key)
        if prefix:
            query = query.filter(KeyValueEntry.key.startswith(prefix, autoescape=True))
        return [row[0] for row in query.order_by(KeyValueEntry.key).all()]


class MemoryKeyValueStore:
    """Dict-backed store for isolated, throwaway engines."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
