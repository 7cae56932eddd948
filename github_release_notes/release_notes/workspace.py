"""Release notes workspace: sequences fetching, review, and export for one repository."""

import asyncio
from datetime import datetime

import structlog

from ..configuration.models import ExportFormat
from ..github.abc import GitHubClientBase
from ..utils.helpers import Clock, utc_now
from .aggregator import ItemAggregator
from .drafts import DraftStore
from .exceptions import FilterNotUsableError, ReleaseItemsFetchError, WorkspaceNotOpenError
from .export import render, to_export
from .models import (
    CommitItem,
    ItemType,
    MilestonePayload,
    ReleaseDraft,
    ReleaseExport,
    ReleaseFilter,
    ReleaseItem,
    RepositoryInfo,
    WorkspaceStep,
)

logger = structlog.get_logger(__name__)


def item_matches(item: ReleaseItem, query: str) -> bool:
    """Check whether an item matches a case-insensitive search query.

    Pull requests and issues match on title, author login, or number;
    commits on message, git author name, or SHA.
    """
    query = query.lower()
    if isinstance(item, CommitItem):
        commit = item.payload
        author = commit.commit.author.name if commit.commit.author else ""
        return query in commit.commit.message.lower() or query in author.lower() or query in commit.sha
    payload = item.payload
    return query in payload.title.lower() or query in payload.author_login.lower() or query in str(payload.number)


class WorkspaceController:
    """Working state of one repository's release notes.

    The controller holds a transient working copy of the current draft; every
    durable change goes through the draft store.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        adapter: GitHubClientBase,
        store: DraftStore,
        aggregator: ItemAggregator | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the workspace for one repository."""
        self.owner = owner
        self.repo = repo
        self.adapter = adapter
        self.store = store
        self.clock = clock
        self.aggregator = aggregator or ItemAggregator(adapter, clock=clock)

        self.repository: RepositoryInfo | None = None
        self.milestones: list[MilestonePayload] = []
        self.tags: list[str] = []
        self.branches: list[str] = []

        self.draft: ReleaseDraft | None = None
        self.release_filter: ReleaseFilter | None = None
        self.items: list[ReleaseItem] = []
        self.step = WorkspaceStep.CONFIG

    async def open(self) -> WorkspaceStep:
        """Load repository data and resume the most recent draft.

        Returns:
            The step the workspace starts at
        """
        repository, milestones, tags, branches = await asyncio.gather(
            self.adapter.get_repository(),
            self.adapter.list_milestones(),
            self.adapter.list_tags(),
            self.adapter.list_branches(),
        )
        self.repository = RepositoryInfo.from_github(repository)
        self.milestones = [MilestonePayload.model_validate(milestone) for milestone in milestones]
        self.tags = [tag["name"] for tag in tags]
        self.branches = [branch["name"] for branch in branches]
        logger.info(
            "Loaded repository data",
            repository=self.repository.full_name,
            milestones=len(self.milestones),
            tags=len(self.tags),
            branches=len(self.branches),
        )
        return self.resume()

    async def load_repository(self) -> RepositoryInfo:
        """Load only the repository metadata needed for exports."""
        self.repository = RepositoryInfo.from_github(await self.adapter.get_repository())
        return self.repository

    def resume(self) -> WorkspaceStep:
        """Select the most recently updated draft of the repository.

        A draft that already has items skips the configuration step.
        """
        draft = self.store.latest_for_repo(self.owner, self.repo)
        if draft is None:
            self.step = WorkspaceStep.CONFIG
            return self.step

        self.draft = draft
        if draft.items:
            self.items = list(draft.items)
            self.release_filter = draft.filter
            self.step = WorkspaceStep.REVIEW
        else:
            self.step = WorkspaceStep.CONFIG
        logger.info("Resumed release draft", draft_id=draft.id, items=len(draft.items), step=self.step.value)
        return self.step

    async def fetch_items(self, release_filter: ReleaseFilter) -> list[ReleaseItem]:
        """Fetch the items selected by a filter into the current draft.

        Raises:
            FilterNotUsableError: If the filter is missing required fields
            ReleaseItemsFetchError: If fetching fails; the workspace step is unchanged
        """
        if not release_filter.is_usable():
            raise FilterNotUsableError(release_filter.type)

        try:
            items = await self.aggregator.aggregate(release_filter)
        except Exception as e:
            logger.exception("Failed to fetch release items", owner=self.owner, repo=self.repo)
            raise ReleaseItemsFetchError(f"Failed to fetch release items: {e}") from e

        draft = self.draft or self.store.create(self.owner, self.repo)
        self.draft = self.store.save(draft.model_copy(update={"filter": release_filter, "items": items}))
        self.release_filter = release_filter
        self.items = items
        self.step = WorkspaceStep.REVIEW

        logger.info(
            "Fetched release items",
            draft_id=self.draft.id,
            pull_requests=self.count("pr"),
            issues=self.count("issue"),
            commits=self.count("commit"),
        )
        return items

    def count(self, item_type: ItemType, included_only: bool = False) -> int:
        """Count working items of a type."""
        return sum(1 for item in self.items if item.type == item_type and (item.included or not included_only))

    @property
    def included_count(self) -> int:
        """Number of working items selected for the release notes."""
        return sum(1 for item in self.items if item.included)

    def update_item(self, item_id: str, note: str | None = None, included: bool | None = None) -> bool:
        """Apply a note and/or inclusion change to one working item and persist it.

        Returns:
            Whether the item exists
        """
        updates: dict[str, object] = {}
        if note is not None:
            updates["note"] = note
        if included is not None:
            updates["included"] = included

        found = False
        updated_items: list[ReleaseItem] = []
        for item in self.items:
            if item.id == item_id:
                found = True
                item = item.model_copy(update=updates)
            updated_items.append(item)

        if not found:
            logger.warning("Unknown release item", item_id=item_id)
            return False

        self.items = updated_items
        self._persist_items()
        return True

    def set_inclusion(self, item_type: ItemType, included: bool) -> int:
        """Include or exclude every working item of a type.

        Returns:
            Number of items changed
        """
        changed = 0
        updated_items: list[ReleaseItem] = []
        for item in self.items:
            if item.type == item_type and item.included != included:
                item = item.model_copy(update={"included": included})
                changed += 1
            updated_items.append(item)
        self.items = updated_items
        if changed:
            self._persist_items()
        return changed

    def search(self, query: str, item_type: ItemType | None = None) -> list[ReleaseItem]:
        """Return working items matching a search query, optionally of one type."""
        return [item for item in self.items if (item_type is None or item.type == item_type) and item_matches(item, query)]

    def update_metadata(self, version: str | None = None, title: str | None = None, description: str | None = None) -> ReleaseDraft:
        """Update the draft's version, title, or description."""
        draft = self._require_draft()
        updates = {key: value for key, value in {"version": version, "title": title, "description": description}.items() if value is not None}
        self.draft = self.store.save(draft.model_copy(update=updates))
        return self.draft

    def proceed_to_summary(self) -> None:
        """Persist the working items and move to the summary step."""
        if self.draft is not None:
            self._persist_items()
        self.step = WorkspaceStep.SUMMARY

    def build_export(self, generated_at: datetime | None = None) -> ReleaseExport:
        """Project the working items into a release export."""
        if self.repository is None:
            raise WorkspaceNotOpenError("Repository metadata has not been loaded")
        draft = self._require_draft()
        return to_export(draft, self.items, self.repository, generated_at or self.clock())

    def render(self, export_format: ExportFormat, generated_at: datetime | None = None) -> str:
        """Render the release notes in the requested format."""
        return render(self.build_export(generated_at), export_format)

    def render_markdown(self, generated_at: datetime | None = None) -> str:
        return self.render(ExportFormat.MARKDOWN, generated_at)

    def render_json(self, generated_at: datetime | None = None) -> str:
        return self.render(ExportFormat.JSON, generated_at)

    def _require_draft(self) -> ReleaseDraft:
        if self.draft is None:
            raise WorkspaceNotOpenError(f"No release draft for {self.owner}/{self.repo}; fetch items first")
        return self.draft

    def _persist_items(self) -> None:
        draft = self._require_draft()
        self.draft = self.store.save(draft.model_copy(update={"items": self.items}))
