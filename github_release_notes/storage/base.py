"""Abstract key-value storage backend for local persistence.

The draft store depends on StorageBackend, not on a concrete backend, so tests
run against InMemoryBackend and the CLI against JSONFileBackend.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised when a storage backend cannot read or write its records."""

    pass


class StorageBackend(ABC):
    """Flat string-keyed record store scoped to this application."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under a key, or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every key currently stored."""
