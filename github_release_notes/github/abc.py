"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Literal


class GitHubClientBase(ABC):
    """Base ABC for the GitHub calls release notes drafting depends on.

    Every method returns the raw JSON of the GitHub REST response so callers
    can validate it into their own models.
    """

    # Repository metadata
    @abstractmethod
    async def get_repository(self) -> dict[str, Any]:
        """Get the repository."""
        pass

    @abstractmethod
    async def list_milestones(self, state: Literal["open", "closed", "all"] = "all", per_page: int = 100) -> list[dict[str, Any]]:
        """List milestones for the repository, most recent due date first."""
        pass

    @abstractmethod
    async def list_tags(self, per_page: int = 100) -> list[dict[str, Any]]:
        """List tags for the repository."""
        pass

    @abstractmethod
    async def list_branches(self, per_page: int = 100) -> list[dict[str, Any]]:
        """List branches for the repository."""
        pass

    # Listings used by the item aggregator
    @abstractmethod
    async def list_pull_requests_page(
        self,
        page: int,
        per_page: int = 100,
        state: Literal["open", "closed", "all"] = "closed",
    ) -> list[dict[str, Any]]:
        """List one page of pull requests, most recently updated first."""
        pass

    @abstractmethod
    async def list_issues_page(
        self,
        page: int,
        per_page: int = 100,
        state: Literal["open", "closed", "all"] = "closed",
        milestone: str | None = None,
    ) -> list[dict[str, Any]]:
        """List one page of issues (pull requests included), most recently updated first."""
        pass

    @abstractmethod
    async def list_commits(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
        per_page: int = 100,
        page: int = 1,
    ) -> list[dict[str, Any]]:
        """List one page of commits on the default branch within a time window."""
        pass

    @abstractmethod
    async def compare_commits(self, base: str, head: str) -> list[dict[str, Any]]:
        """List the commits reachable from head but not from base."""
        pass

    # Git database lookups used by the range resolver
    @abstractmethod
    async def get_ref(self, ref: str) -> dict[str, Any]:
        """Get a git reference such as 'tags/v1.0.0'."""
        pass

    @abstractmethod
    async def get_tag(self, tag_sha: str) -> dict[str, Any]:
        """Get an annotated tag object."""
        pass

    @abstractmethod
    async def get_git_commit(self, commit_sha: str) -> dict[str, Any]:
        """Get a git commit object."""
        pass
