"""JSON file storage backend for drafts that survive between CLI runs."""

import json
import os
import tempfile
from pathlib import Path

import structlog

from .base import StorageBackend, StorageError

logger = structlog.get_logger(__name__)


class JSONFileBackend(StorageBackend):
    """Stores every record in one JSON object on disk.

    Writes go to a temporary file in the same directory which then replaces
    the file, so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize with the path of the storage file, created on first write."""
        self.path = Path(path).expanduser()

    def get(self, key: str) -> str | None:
        """Return the record stored under a key, or None."""
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        """Store a record under a key and rewrite the file."""
        records = self._load()
        records[key] = value
        self._write(records)

    def delete(self, key: str) -> None:
        """Remove a key, rewriting the file only when it was present."""
        records = self._load()
        if records.pop(key, None) is not None:
            self._write(records)

    def keys(self) -> list[str]:
        """List every stored key."""
        return list(self._load())

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read storage file {self.path}: {e}") from e
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise StorageError(f"Storage file {self.path} does not contain a JSON object of string records")
        return data

    def _write(self, records: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    json.dump(records, tmp_file, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write storage file {self.path}: {e}") from e
        logger.debug("Wrote storage file", path=str(self.path), records=len(records))
