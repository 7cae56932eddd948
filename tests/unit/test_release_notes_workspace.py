"""Unit tests for the release notes workspace controller."""

import itertools
import json
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from github_release_notes.release_notes.drafts import DraftStore
from github_release_notes.release_notes.exceptions import FilterNotUsableError, ReleaseItemsFetchError, WorkspaceNotOpenError
from github_release_notes.release_notes.models import DateFilter, TagFilter, WorkspaceStep
from github_release_notes.release_notes.workspace import WorkspaceController
from github_release_notes.storage.memory import InMemoryBackend

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
JANUARY = DateFilter(from_date=datetime(2024, 1, 1, tzinfo=timezone.utc), to_date=datetime(2024, 1, 31, tzinfo=timezone.utc))


def ticking_clock() -> Any:
    """Clock advancing one second on every call."""
    ticks = itertools.count()
    return lambda: NOW + timedelta(seconds=next(ticks))


@pytest.fixture
def adapter(raw_repository: dict[str, Any], raw_pull_request: Any, raw_issue: Any, raw_commit: Any) -> MagicMock:
    """Adapter for acme/widgets with one pull request, issue, and commit in January."""
    adapter = MagicMock()
    adapter.get_repository = AsyncMock(return_value=raw_repository)
    adapter.list_milestones = AsyncMock(return_value=[{"id": 1, "number": 1, "title": "Q1", "created_at": "2024-01-01T00:00:00Z"}])
    adapter.list_tags = AsyncMock(return_value=[{"name": "v2.0.0"}, {"name": "v1.0.0"}])
    adapter.list_branches = AsyncMock(return_value=[{"name": "main"}])
    adapter.list_pull_requests_page = AsyncMock(return_value=[raw_pull_request(42, title="Add caching", labels=["perf"])])
    adapter.list_issues_page = AsyncMock(return_value=[raw_issue(7, title="Crash on start")])
    adapter.list_commits = AsyncMock(return_value=[raw_commit("abc1234def", message="Bump version")])
    return adapter


@pytest.fixture
def store() -> DraftStore:
    """Draft store over an in-memory backend."""
    return DraftStore(InMemoryBackend(), clock=ticking_clock())


def make_workspace(adapter: MagicMock, store: DraftStore) -> WorkspaceController:
    return WorkspaceController("acme", "widgets", adapter, store, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_open_loads_repository_options(adapter: MagicMock, store: DraftStore) -> None:
    """Test that opening a workspace loads repository data and starts at configuration."""
    workspace = make_workspace(adapter, store)

    step = await workspace.open()

    assert step == WorkspaceStep.CONFIG
    assert workspace.repository is not None
    assert workspace.repository.full_name == "acme/widgets"
    assert [milestone.title for milestone in workspace.milestones] == ["Q1"]
    assert workspace.tags == ["v2.0.0", "v1.0.0"]
    assert workspace.branches == ["main"]
    assert workspace.draft is None


@pytest.mark.asyncio
async def test_fetch_items_creates_draft_and_moves_to_review(adapter: MagicMock, store: DraftStore) -> None:
    """Test that fetching persists the filter and items into a new draft."""
    workspace = make_workspace(adapter, store)
    await workspace.open()

    items = await workspace.fetch_items(JANUARY)

    assert [item.id for item in items] == ["pr-42", "issue-7", "commit-abc1234def"]
    assert workspace.step == WorkspaceStep.REVIEW
    assert workspace.count("pr") == 1
    assert workspace.included_count == 2
    stored = store.latest_for_repo("acme", "widgets")
    assert stored is not None
    assert stored.filter == JANUARY
    assert [item.id for item in stored.items] == ["pr-42", "issue-7", "commit-abc1234def"]


@pytest.mark.asyncio
async def test_reopening_resumes_draft_at_review(adapter: MagicMock, store: DraftStore) -> None:
    """Test that a later session resumes the stored draft and skips configuration."""
    first = make_workspace(adapter, store)
    await first.open()
    await first.fetch_items(JANUARY)
    first.update_item("pr-42", note="Big win")

    second = make_workspace(adapter, store)
    step = await second.open()

    assert step == WorkspaceStep.REVIEW
    assert second.draft is not None
    assert second.draft.id == first.draft.id
    assert second.release_filter == JANUARY
    assert second.items[0].note == "Big win"


@pytest.mark.asyncio
async def test_unusable_filter_is_rejected_before_fetching(adapter: MagicMock, store: DraftStore) -> None:
    """Test that a filter missing required fields never reaches GitHub."""
    workspace = make_workspace(adapter, store)

    with pytest.raises(FilterNotUsableError):
        await workspace.fetch_items(TagFilter(from_tag=""))

    adapter.list_pull_requests_page.assert_not_awaited()
    assert store.list() == []


@pytest.mark.asyncio
async def test_fetch_failure_keeps_step(adapter: MagicMock, store: DraftStore) -> None:
    """Test that a failed fetch raises a fetch error and leaves the workspace unchanged."""
    adapter.list_pull_requests_page.side_effect = Exception("Bad credentials")
    workspace = make_workspace(adapter, store)
    await workspace.open()

    with pytest.raises(ReleaseItemsFetchError, match="Bad credentials"):
        await workspace.fetch_items(JANUARY)

    assert workspace.step == WorkspaceStep.CONFIG
    assert workspace.items == []
    assert store.list() == []


@pytest.mark.asyncio
async def test_update_item_and_set_inclusion_persist(adapter: MagicMock, store: DraftStore) -> None:
    """Test that item edits reach the draft store."""
    workspace = make_workspace(adapter, store)
    await workspace.fetch_items(JANUARY)

    assert workspace.update_item("issue-7", included=False) is True
    assert workspace.update_item("pr-999", note="missing") is False
    assert workspace.set_inclusion("commit", True) == 1
    assert workspace.set_inclusion("commit", True) == 0

    assert workspace.draft is not None
    stored = store.get(workspace.draft.id)
    assert stored is not None
    assert [(item.id, item.included) for item in stored.items] == [("pr-42", True), ("issue-7", False), ("commit-abc1234def", True)]


@pytest.mark.asyncio
async def test_search_matches_titles_authors_numbers_and_shas(adapter: MagicMock, store: DraftStore) -> None:
    """Test searching the working items."""
    workspace = make_workspace(adapter, store)
    await workspace.fetch_items(JANUARY)

    assert [item.id for item in workspace.search("CACHING")] == ["pr-42"]
    assert [item.id for item in workspace.search("bob")] == ["issue-7"]
    assert [item.id for item in workspace.search("42")] == ["pr-42"]
    assert [item.id for item in workspace.search("abc123")] == ["commit-abc1234def"]
    assert [item.id for item in workspace.search("Carol", item_type="commit")] == ["commit-abc1234def"]
    assert len(workspace.search("")) == 3


@pytest.mark.asyncio
async def test_export_renders_included_items(adapter: MagicMock, store: DraftStore) -> None:
    """Test the export of a reviewed draft."""
    workspace = make_workspace(adapter, store)
    await workspace.open()
    await workspace.fetch_items(JANUARY)
    workspace.update_item("pr-42", note="Big win")
    workspace.update_item("issue-7", included=False)
    workspace.update_metadata(version="v2.1.0")
    workspace.proceed_to_summary()

    markdown = workspace.render_markdown()
    document = json.loads(workspace.render_json())

    assert workspace.step == WorkspaceStep.SUMMARY
    assert markdown.startswith("# Release v2.1.0\n\n**Version:** v2.1.0\n**Date:** March 1, 2024\n")
    assert "- [#42](https://github.com/acme/widgets/pull/42) Add caching (@alice) `perf`\n  > Big win" in markdown
    assert "## Issues Fixed" not in markdown
    assert "## Commits" not in markdown
    assert document["version"] == "v2.1.0"
    assert [pr["number"] for pr in document["pullRequests"]] == [42]


def test_export_requires_repository(adapter: MagicMock, store: DraftStore) -> None:
    """Test that exporting before repository data is loaded fails clearly."""
    workspace = make_workspace(adapter, store)

    with pytest.raises(WorkspaceNotOpenError):
        workspace.build_export()


def test_metadata_requires_draft(adapter: MagicMock, store: DraftStore) -> None:
    """Test that metadata cannot be edited before a draft exists."""
    workspace = make_workspace(adapter, store)

    with pytest.raises(WorkspaceNotOpenError):
        workspace.update_metadata(version="v1.0.0")
