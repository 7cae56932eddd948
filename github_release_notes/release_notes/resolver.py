"""Resolve release filters into concrete date windows and compare references."""

from datetime import datetime

import structlog

from ..github.abc import GitHubClientBase
from ..utils.constants import LATEST_REF
from .models import (
    BranchFilter,
    CompareRef,
    DateFilter,
    DateWindow,
    MilestoneFilter,
    ReleaseFilter,
    ResolvedRange,
    TagFilter,
)

logger = structlog.get_logger(__name__)


class RangeResolver:
    """Derives the bounds of a release from a filter.

    Date and milestone filters produce a date window. Tag filters produce a
    window starting at the start tag's commit date plus a compare reference.
    Branch filters only produce a compare reference. Lookup failures never
    propagate: they degrade to an unbounded window.
    """

    def __init__(self, adapter: GitHubClientBase) -> None:
        """Initialize with the GitHub adapter of the repository being released."""
        self.adapter = adapter

    async def resolve(self, release_filter: ReleaseFilter, now: datetime) -> ResolvedRange:
        """Resolve a filter into a date window and optional compare reference.

        Args:
            release_filter: The user's filter
            now: Current time, used as the end of open-ended milestones

        Returns:
            The resolved range
        """
        if isinstance(release_filter, DateFilter):
            return ResolvedRange(window=DateWindow(since=release_filter.from_date, until=release_filter.to_date))

        if isinstance(release_filter, MilestoneFilter):
            return ResolvedRange(window=self._milestone_window(release_filter, now))

        if isinstance(release_filter, TagFilter):
            if not release_filter.is_usable():
                return ResolvedRange()
            since = await self._tag_commit_date(release_filter.from_tag)
            compare = CompareRef(base=release_filter.from_tag, head=release_filter.to_tag or LATEST_REF)
            return ResolvedRange(window=DateWindow(since=since), compare=compare)

        if isinstance(release_filter, BranchFilter):
            if not release_filter.is_usable():
                return ResolvedRange()
            return ResolvedRange(compare=CompareRef(base=release_filter.base_branch, head=release_filter.compare_branch))

        raise TypeError(f"Unsupported release filter: {type(release_filter).__name__}")

    def _milestone_window(self, release_filter: MilestoneFilter, now: datetime) -> DateWindow:
        """Milestones have no start date, so their creation time stands in for one."""
        milestone = release_filter.milestone
        if milestone is None:
            return DateWindow()
        return DateWindow(since=milestone.created_at, until=milestone.due_on or now)

    async def _tag_commit_date(self, tag_name: str) -> datetime | None:
        """Return the author date of the commit a tag points at, or None on failure."""
        try:
            tag_ref = await self.adapter.get_ref(f"tags/{tag_name}")
            target = tag_ref["object"]
            commit_sha = target["sha"]

            # Annotated tags point at a tag object rather than the commit
            if target.get("type") == "tag":
                tag_object = await self.adapter.get_tag(commit_sha)
                commit_sha = tag_object["object"]["sha"]

            commit = await self.adapter.get_git_commit(commit_sha)
            commit_date = datetime.fromisoformat(commit["author"]["date"].replace("Z", "+00:00"))
        except Exception as e:
            logger.warning("Failed to resolve tag date, using an unbounded window", tag=tag_name, error=str(e))
            return None

        logger.debug("Resolved tag date", tag=tag_name, commit_sha=commit_sha, since=commit_date.isoformat())
        return commit_date
