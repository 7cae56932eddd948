"""Local persistence of release drafts."""

from __future__ import annotations

import json
from typing import Any

import structlog
from pydantic import ValidationError

from ..storage.base import StorageBackend, StorageError
from ..utils.constants import DRAFT_SCHEMA_VERSION, DRAFTS_KEY, STORAGE_PREFIX
from ..utils.helpers import Clock, utc_now
from .models import ReleaseDraft, ReleaseItem

logger = structlog.get_logger(__name__)


def migrate_record(record: dict[str, Any]) -> dict[str, Any]:
    """Upgrade a stored draft record to the current schema version.

    Records written before drafts were versioned keep each item's provider
    payload under 'data'.
    """
    version = record.get("schemaVersion", 0)
    migrated = dict(record)
    if version < 1:
        migrated["items"] = [
            {**{k: v for k, v in item.items() if k != "data"}, "payload": item["data"]}
            if isinstance(item, dict) and "data" in item and "payload" not in item
            else item
            for item in record.get("items", [])
        ]
        migrated["schemaVersion"] = 1
    return migrated


class DraftStore:
    """Durable record of in-progress release drafts.

    All drafts live as one JSON array under a single key of the storage
    backend. Storage failures and corrupt records are logged and otherwise
    ignored: reads fall back to empty results and writes become no-ops, so
    the caller's in-memory working copy stays usable.
    """

    def __init__(self, backend: StorageBackend, clock: Clock = utc_now) -> None:
        """Initialize with the storage backend and the clock used for timestamps."""
        self.backend = backend
        self.clock = clock

    def list(self) -> list[ReleaseDraft]:
        """Return every readable draft."""
        drafts: list[ReleaseDraft] = []
        for record in self._read_records() or []:
            draft = self._parse_record(record)
            if draft is not None:
                drafts.append(draft)
        return drafts

    def list_for_repo(self, owner: str, repo: str) -> list[ReleaseDraft]:
        """Return the drafts of one repository."""
        return [draft for draft in self.list() if draft.belongs_to(owner, repo)]

    def get(self, draft_id: str) -> ReleaseDraft | None:
        """Return a draft by ID."""
        for draft in self.list():
            if draft.id == draft_id:
                return draft
        return None

    def latest_for_repo(self, owner: str, repo: str) -> ReleaseDraft | None:
        """Return the most recently updated draft of a repository."""
        drafts = self.list_for_repo(owner, repo)
        if not drafts:
            return None
        return max(drafts, key=lambda draft: draft.updated_at)

    def create(self, owner: str, repo: str, version: str = "") -> ReleaseDraft:
        """Create and persist an empty draft for a repository."""
        now = self.clock()
        draft = ReleaseDraft(
            id=f"{owner}/{repo}/{version or 'new'}-{int(now.timestamp() * 1000)}",
            owner=owner,
            repo=repo,
            version=version,
            created_at=now,
            updated_at=now,
        )
        logger.info("Created release draft", draft_id=draft.id)
        return self.save(draft)

    def save(self, draft: ReleaseDraft) -> ReleaseDraft:
        """Insert or replace a draft by ID, stamping a fresh update time.

        Returns:
            The draft as written, with its new update time
        """
        stamped = draft.model_copy(update={"updated_at": self.clock(), "schema_version": DRAFT_SCHEMA_VERSION})
        record = stamped.model_dump(mode="json", by_alias=True)

        records = self._read_records()
        if records is None:
            logger.warning("Not saving draft over unreadable storage", draft_id=draft.id)
            return stamped
        for index, existing in enumerate(records):
            if isinstance(existing, dict) and existing.get("id") == draft.id:
                records[index] = record
                break
        else:
            records.append(record)

        self._write_records(records)
        return stamped

    def update_items(self, draft_id: str, items: list[ReleaseItem]) -> ReleaseDraft | None:
        """Replace the items of a stored draft."""
        draft = self.get(draft_id)
        if draft is None:
            logger.warning("Cannot update items of unknown draft", draft_id=draft_id)
            return None
        return self.save(draft.model_copy(update={"items": list(items)}))

    def update_item(
        self,
        draft_id: str,
        item_id: str,
        note: str | None = None,
        included: bool | None = None,
    ) -> ReleaseDraft | None:
        """Merge a note and/or inclusion flag into one item of a stored draft.

        Does nothing when the draft or the item does not exist.
        """
        draft = self.get(draft_id)
        if draft is None:
            logger.warning("Cannot update item of unknown draft", draft_id=draft_id, item_id=item_id)
            return None
        item = draft.find_item(item_id)
        if item is None:
            logger.warning("Cannot update unknown item", draft_id=draft_id, item_id=item_id)
            return None
        if note is not None:
            item.note = note
        if included is not None:
            item.included = included
        return self.save(draft)

    def delete(self, draft_id: str) -> None:
        """Remove a draft by ID."""
        records = self._read_records()
        if records is None:
            logger.warning("Not deleting draft from unreadable storage", draft_id=draft_id)
            return
        remaining =[record for record in records if not (isinstance(record, dict) and record.get("id") == draft_id)]
        if len(remaining) == len(records):
            logger.debug("No draft to delete", draft_id=draft_id)
            return
        self._write_records(remaining)
        logger.info("Deleted release draft", draft_id=draft_id)

    def clear(self) -> None:
        """Remove every record under this application's namespace."""
        try:
            for key in self.backend.keys():
                if key.startswith(STORAGE_PREFIX):
                    self.backend.delete(key)
        except StorageError as e:
            logger.error("Failed to clear stored drafts", error=str(e))
            return
        logger.info("Cleared stored drafts")

    def _read_records(self) -> list[Any] | None:
        """Read the stored record array.

        Returns:
            The records, or None when the stored value cannot be read and
            must not be overwritten
        """
        try:
            raw = self.backend.get(DRAFTS_KEY)
        except StorageError as e:
            logger.error("Failed to load drafts from storage", error=str(e))
            return None
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.error("Stored drafts are not valid JSON", error=str(e))
            return None
        if not isinstance(records, list):
            logger.error("Stored drafts are not a JSON array", found=type(records).__name__)
            return None
        return records

    def _write_records(self, records: list[Any]) -> None:
        try:
            self.backend.set(DRAFTS_KEY, json.dumps(records))
        except StorageError as e:
            logger.error("Failed to save drafts to storage", error=str(e))

    def _parse_record(self, record: Any) -> ReleaseDraft | None:
        if not isinstance(record, dict):
            logger.warning("Skipping stored draft that is not an object", found=type(record).__name__)
            return None
        version = record.get("schemaVersion", 0)
        if not isinstance(version, int) or version > DRAFT_SCHEMA_VERSION:
            logger.warning("Skipping stored draft with unsupported schema version", draft_id=record.get("id"), schema_version=version)
            return None
        if version < DRAFT_SCHEMA_VERSION:
            record = migrate_record(record)
        try:
            return ReleaseDraft.model_validate(record)
        except ValidationError as e:
            logger.warning("Skipping corrupt stored draft", draft_id=record.get("id"), error=str(e))
            return None
