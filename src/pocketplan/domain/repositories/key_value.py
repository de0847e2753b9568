"""Key-value store protocol."""

from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """String storage addressed by key; last write wins."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""
        ...
