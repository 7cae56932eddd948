"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from githubkit.exception import RequestFailed

from github_release_notes.github.adapter import GitHubKitAdapter


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, data: Any = None, status_code: int = 200) -> None:
        """Initialize the dummy response with its JSON body and status code."""
        self.status_code: int = status_code
        self.url = "https://api.github.com/repos/owner/repo"
        self._data = data

    def json(self) -> Any:
        """Return the JSON body."""
        return self._data


@pytest.mark.asyncio
async def test_get_repository_returns_json() -> None:
    """Test that get_repository returns the raw repository JSON."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_get = AsyncMock(return_value=DummyResponse({"name": "repo"}))

    assert await adapter.get_repository() == {"name": "repo"}
    adapter.client.rest.repos.async_get.assert_awaited_once_with(owner="owner", repo="repo")


@pytest.mark.asyncio
async def test_list_pull_requests_page_sorts_by_update_time() -> None:
    """Test that pull requests are listed most recently updated first."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.pulls.async_list = AsyncMock(return_value=DummyResponse([{"number": 1}]))

    assert await adapter.list_pull_requests_page(page=2, per_page=50) == [{"number": 1}]
    adapter.client.rest.pulls.async_list.assert_awaited_once_with(
        owner="owner", repo="repo", state="closed", sort="updated", direction="desc", per_page=50, page=2
    )


@pytest.mark.asyncio
async def test_list_issues_page_omits_missing_milestone() -> None:
    """Test that no milestone parameter is sent when none is selected."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(return_value=DummyResponse([]))

    await adapter.list_issues_page(page=1)

    kwargs = adapter.client.rest.issues.async_list_for_repo.await_args.kwargs
    assert "milestone" not in kwargs
    assert kwargs["state"] == "closed"


@pytest.mark.asyncio
async def test_list_issues_page_sends_milestone() -> None:
    """Test that a selected milestone narrows the issue listing."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(return_value=DummyResponse([]))

    await adapter.list_issues_page(page=1, milestone="4")

    assert adapter.client.rest.issues.async_list_for_repo.await_args.kwargs["milestone"] == "4"


@pytest.mark.asyncio
async def test_list_commits_sends_iso_bounds() -> None:
    """Test that commit listing bounds are sent as ISO 8601 and omitted when unset."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_list_commits = AsyncMock(return_value=DummyResponse([{"sha": "abc"}]))
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)

    commits = await adapter.list_commits(since=since)

    assert commits == [{"sha": "abc"}]
    adapter.client.rest.repos.async_list_commits.assert_awaited_once_with(
        owner="owner", repo="repo", since="2024-01-01T00:00:00+00:00", per_page=100, page=1
    )


@pytest.mark.asyncio
async def test_compare_commits_returns_commit_list() -> None:
    """Test that comparing refs returns only the commits, in order."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.repos.async_compare_commits = AsyncMock(
        return_value=DummyResponse({"status": "ahead", "commits": [{"sha": "c1"}, {"sha": "c2"}]})
    )

    commits = await adapter.compare_commits("v1.0.0", "HEAD")

    assert [commit["sha"] for commit in commits] == ["c1", "c2"]
    adapter.client.rest.repos.async_compare_commits.assert_awaited_once_with(owner="owner", repo="repo", basehead="v1.0.0...HEAD")


@pytest.mark.asyncio
async def test_git_database_lookups() -> None:
    """Test ref, tag, and commit lookups used to date a tag."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.git.async_get_ref = AsyncMock(return_value=DummyResponse({"object": {"sha": "t1", "type": "tag"}}))
    adapter.client.rest.git.async_get_tag = AsyncMock(return_value=DummyResponse({"object": {"sha": "c1"}}))
    adapter.client.rest.git.async_get_commit = AsyncMock(return_value=DummyResponse({"author": {"date": "2024-01-01T00:00:00Z"}}))

    assert (await adapter.get_ref("tags/v1.0.0"))["object"]["sha"] == "t1"
    assert (await adapter.get_tag("t1"))["object"]["sha"] == "c1"
    assert (await adapter.get_git_commit("c1"))["author"]["date"] == "2024-01-01T00:00:00Z"
    adapter.client.rest.git.async_get_ref.assert_awaited_once_with(owner="owner", repo="repo", ref="tags/v1.0.0")
    adapter.client.rest.git.async_get_tag.assert_awaited_once_with(owner="owner", repo="repo", tag_sha="t1")
    adapter.client.rest.git.async_get_commit.assert_awaited_once_with(owner="owner", repo="repo", commit_sha="c1")


@pytest.mark.asyncio
async def test_request_failure_is_reraised() -> None:
    """Test that failed requests propagate after being logged."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    response = MagicMock()
    response.status_code = 401
    response.json.return_value = {"message": "Bad credentials"}
    error = RequestFailed(response)
    adapter.client.rest.pulls.async_list = AsyncMock(side_effect=error)

    with pytest.raises(RequestFailed):
        await adapter.list_pull_requests_page(page=1)


@pytest.mark.asyncio
async def test_create_rejects_malformed_repository() -> None:
    """Test that create validates the owner/repo format before building a client."""
    with pytest.raises(ValueError):
        await GitHubKitAdapter.create(repo="not-a-repo", github_auth_type=MagicMock(), github_pat_token="token")
