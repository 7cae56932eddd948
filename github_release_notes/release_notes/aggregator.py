"""Aggregate pull requests, issues, and commits into release items."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from pydantic import BaseModel

from ..github.abc import GitHubClientBase
from ..utils.constants import DEFAULT_PAGE_SIZE, MAX_LISTING_PAGES
from ..utils.helpers import Clock, utc_now
from .models import (
    CommitItem,
    CommitPayload,
    CompareRef,
    DateWindow,
    IssueItem,
    IssuePayload,
    MilestoneFilter,
    PullRequestItem,
    PullRequestPayload,
    ReleaseFilter,
    ReleaseItem,
    ResolvedRange,
)
from .resolver import RangeResolver

logger = structlog.get_logger(__name__)

P = TypeVar("P", bound=BaseModel)


class ItemAggregator:
    """Collects the release items of a repository for a filter.

    The three categories are fetched concurrently. Pull requests and issues
    are paged through most-recently-updated first and windowed on their
    merge/close time. Commits come from the compare endpoint when the filter
    names two refs, and from a date-bounded listing otherwise.
    """

    def __init__(
        self,
        adapter: GitHubClientBase,
        resolver: RangeResolver | None = None,
        clock: Clock = utc_now,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = MAX_LISTING_PAGES,
    ) -> None:
        """Initialize with the GitHub adapter of the repository being released."""
        self.adapter = adapter
        self.resolver = resolver or RangeResolver(adapter)
        self.clock = clock
        self.page_size = page_size
        self.max_pages = max_pages

    async def aggregate(self, release_filter: ReleaseFilter) -> list[ReleaseItem]:
        """Fetch and merge every release item selected by the filter.

        Returns:
            Pull requests, then issues, then commits, each in provider order
        """
        resolved = await self.resolver.resolve(release_filter, now=self.clock())
        logger.info(
            "Aggregating release items",
            filter_type=release_filter.type,
            since=resolved.window.since.isoformat() if resolved.window.since else None,
            until=resolved.window.until.isoformat() if resolved.window.until else None,
            compare=resolved.compare.model_dump() if resolved.compare else None,
        )

        milestone_number = None
        if isinstance(release_filter, MilestoneFilter) and release_filter.milestone is not None:
            milestone_number = release_filter.milestone.number

        pull_requests, issues, commits = await asyncio.gather(
            self.fetch_pull_requests(resolved.window),
            self.fetch_issues(resolved.window, milestone_number=milestone_number),
            self.fetch_commits(resolved),
        )

        items: list[ReleaseItem] = [
            *(PullRequestItem.from_payload(pr) for pr in pull_requests),
            *(IssueItem.from_payload(issue) for issue in issues),
            *(CommitItem.from_payload(commit) for commit in commits),
        ]
        logger.info(
            "Aggregated release items",
            pull_requests=len(pull_requests),
            issues=len(issues),
            commits=len(commits),
        )
        return items

    async def fetch_pull_requests(self, window: DateWindow) -> list[PullRequestPayload]:
        """Fetch merged pull requests whose merge time falls inside the window."""

        def include(pr: PullRequestPayload) -> bool:
            # Closed-but-unmerged pull requests never belong in release notes
            if pr.merged_at is None:
                return False
            return window.contains(pr.merged_at)

        async def fetch_page(page: int) -> list[dict[str, Any]]:
            return await self.adapter.list_pull_requests_page(page=page, per_page=self.page_size, state="closed")

        return await self._paginate(fetch_page, PullRequestPayload, include, window, category="pull_requests")

    async def fetch_issues(self, window: DateWindow, milestone_number: int | None = None) -> list[IssuePayload]:
        """Fetch closed issues whose close time falls inside the window.

        Pull requests returned by the issues listing are dropped so they are
        not counted twice.
        """

        def include(issue: IssuePayload) -> bool:
            if issue.is_pull_request or issue.closed_at is None:
                return False
            return window.contains(issue.closed_at)

        milestone = str(milestone_number) if milestone_number is not None else None

        async def fetch_page(page: int) -> list[dict[str, Any]]:
            return await self.adapter.list_issues_page(page=page, per_page=self.page_size, state="closed", milestone=milestone)

        return await self._paginate(fetch_page, IssuePayload, include, window, category="issues")

    async def fetch_commits(self, resolved: ResolvedRange) -> list[CommitPayload]:
        """Fetch commits from the compare endpoint or from a date-bounded listing."""
        if resolved.compare is not None:
            return await self._compare(resolved.compare)

        raw_commits = await self.adapter.list_commits(
            since=resolved.window.since,
            until=resolved.window.until,
            per_page=self.page_size,
        )
        return [CommitPayload.model_validate(raw) for raw in raw_commits]

    async def _compare(self, compare: CompareRef) -> list[CommitPayload]:
        """Commits ahead of base, or an empty list when the refs cannot be compared."""
        try:
            raw_commits = await self.adapter.compare_commits(compare.base, compare.head)
        except Exception as e:
            logger.error("Failed to compare refs, continuing without commits", base=compare.base, head=compare.head, error=str(e))
            return []
        return [CommitPayload.model_validate(raw) for raw in raw_commits]

    async def _paginate(
        self,
        fetch_page: Callable[[int], Awaitable[list[dict[str, Any]]]],
        payload_type: type[P],
        include: Callable[[P], bool],
        window: DateWindow,
        category: str,
    ) -> list[P]:
        """Page through a listing sorted by update time, newest first.

        Paging stops on an empty or short page, after the page cap, or once a
        page's last entry was updated before the window starts. Merge and
        close times never exceed the update time, so later pages cannot hold
        anything inside the window.
        """
        collected: list[P] = []
        page = 1
        while True:
            raw_entries = await fetch_page(page)
            if not raw_entries:
                break

            entries = [payload_type.model_validate(raw) for raw in raw_entries]
            collected.extend(entry for entry in entries if include(entry))

            last_updated = getattr(entries[-1], "updated_at", None)
            if last_updated is not None and window.is_before_start(last_updated):
                logger.debug("Reached entries older than the window", category=category, page=page)
                break

            if len(raw_entries) < self.page_size:
                break
            page += 1

            if page > self.max_pages:
                logger.warning("Stopped paging at the safety cap", category=category, max_pages=self.max_pages)
                break

        logger.debug("Fetched category", category=category, pages=page, kept=len(collected))
        return collected
