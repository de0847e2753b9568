"""Key-value store implementations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.key_value import KeyValueEntry


class SQLModelKeyValueStore:
    """SQLModel-based key-value store."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            entry = session.exec(select(KeyValueEntry).where(KeyValueEntry.key == key)).first()
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            entry = session.exec(select(KeyValueEntry).where(KeyValueEntry.key == key)).first()
            if entry:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            else:
                entry = KeyValueEntry(key=key, value=value)
            session.add(entry)
            session.commit()

    def delete(self, key: str) -> None:
        with self.session_factory() as session:
            entry = session.exec(select(KeyValueEntry).where(KeyValueEntry.key == key)).first()
            if entry:
                session.delete(entry)
                session.commit()


class InMemoryKeyValueStore:
    """Dictionary-backed store for tests and throwaway runs."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


__all__ = ["SQLModelKeyValueStore", "InMemoryKeyValueStore"]
