"""In-memory storage backend, used in tests and for throwaway sessions."""

from .base import StorageBackend


class InMemoryBackend(StorageBackend):
    """Keeps records in a dict for the lifetime of the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize with optional records to start from."""
        self._records: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        """Return the record stored under a key, or None."""
        return self._records.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a record under a key."""
        self._records[key] = value

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._records.pop(key, None)

    def keys(self) -> list[str]:
        """List every stored key."""
        return list(self._records)
