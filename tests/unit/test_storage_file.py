"""Unit tests for the storage backends."""

import json
from pathlib import Path

import pytest

from github_release_notes.storage.base import StorageError
from github_release_notes.storage.file import JSONFileBackend
from github_release_notes.storage.memory import InMemoryBackend


def test_missing_file_reads_as_empty(tmp_path: Path) -> None:
    """Test that a backend without a file yet has no records."""
    backend = JSONFileBackend(tmp_path / "drafts.json")

    assert backend.get("release-notes:drafts") is None
    assert backend.keys() == []


def test_set_creates_parent_directories_and_persists(tmp_path: Path) -> None:
    """Test that records survive a new backend instance over the same file."""
    path = tmp_path / "nested" / "drafts.json"
    JSONFileBackend(path).set("release-notes:drafts", "[]")

    reopened = JSONFileBackend(path)

    assert reopened.get("release-notes:drafts") == "[]"
    assert json.loads(path.read_text(encoding="utf-8")) == {"release-notes:drafts": "[]"}
    assert list(path.parent.iterdir()) == [path]


def test_delete_removes_key(tmp_path: Path) -> None:
    """Test deleting one key while keeping the others."""
    backend = JSONFileBackend(tmp_path / "drafts.json")
    backend.set("a", "1")
    backend.set("b", "2")

    backend.delete("a")
    backend.delete("missing")

    assert backend.keys() == ["b"]


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("{not json", id="invalid json"),
        pytest.param("[1, 2]", id="not an object"),
        pytest.param('{"a": 1}', id="non-string value"),
    ],
)
def test_unreadable_file_raises_storage_error(tmp_path: Path, content: str) -> None:
    """Test that a corrupt storage file surfaces as a StorageError."""
    path = tmp_path / "drafts.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        JSONFileBackend(path).get("a")


def test_in_memory_backend_round_trip() -> None:
    """Test the in-memory backend used by tests and throwaway sessions."""
    backend = InMemoryBackend({"a": "1"})
    backend.set("b", "2")
    backend.delete("a")

    assert backend.get("a") is None
    assert backend.get("b") == "2"
    assert backend.keys() == ["b"]
