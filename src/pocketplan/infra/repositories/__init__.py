"""Concrete repository implementations."""

from .key_value import InMemoryKeyValueStore, SQLModelKeyValueStore

__all__ = ["InMemoryKeyValueStore", "SQLModelKeyValueStore"]
