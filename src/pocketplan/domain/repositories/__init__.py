"""Repository protocol definitions for domain layer."""

from .key_value import KeyValueStore

__all__ = ["KeyValueStore"]
