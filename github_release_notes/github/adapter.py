"""GitHub client adapter for the githubkit library."""

from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Literal, Self, TypeVar

import structlog
from githubkit.exception import RequestFailed

from github_release_notes.configuration.models import GitHubAuthenticationType
from github_release_notes.utils.constants import DEFAULT_PAGE_SIZE
from github_release_notes.utils.github import compare_basehead, split_repository_in_configuration

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def log_request_failure(func: F) -> F:
    """Decorator to log failed GitHub requests with their details before re-raising."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            try:
                error_data = exc.response.json()
            except Exception:
                error_data = {}
            message = error_data.get("message", "") if isinstance(error_data, dict) else ""
            logger.error(
                "GitHub request failed",
                function=func.__name__,
                message=message,
                url=str(getattr(exc.response, "url", None)),
                status_code=exc.response.status_code,
            )
            raise

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If the repository is not in 'owner/repo' format
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    # Repository metadata
    @log_request_failure
    async def get_repository(self) -> dict[str, Any]:
        """Get the repository for the current client."""
        response = await self.client.rest.repos.async_get(owner=self.owner, repo=self.repo_name)
        return response.json()

    @log_request_failure
    async def list_milestones(
        self, state: Literal["open", "closed", "all"] = "all", per_page: int = DEFAULT_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """List milestones for the repository, most recent due date first."""
        response = await self.client.rest.issues.async_list_milestones(
            owner=self.owner,
            repo=self.repo_name,
            state=state,
            sort="due_on",
            direction="desc",
            per_page=per_page,
        )
        return response.json()

    @log_request_failure
    async def list_tags(self, per_page: int = DEFAULT_PAGE_SIZE) -> list[dict[str, Any]]:
        """List tags for the repository."""
        response = await self.client.rest.repos.async_list_tags(owner=self.owner, repo=self.repo_name, per_page=per_page)
        return response.json()

    @log_request_failure
    async def list_branches(self, per_page: int = DEFAULT_PAGE_SIZE) -> list[dict[str, Any]]:
        """List branches for the repository."""
        response = await self.client.rest.repos.async_list_branches(owner=self.owner, repo=self.repo_name, per_page=per_page)
        return response.json()

    # Listings
    @log_request_failure
    async def list_pull_requests_page(
        self,
        page: int,
        per_page: int = DEFAULT_PAGE_SIZE,
        state: Literal["open", "closed", "all"] = "closed",
    ) -> list[dict[str, Any]]:
        """List one page of pull requests, most recently updated first."""
        logger.debug("Fetching pull requests page", owner=self.owner, repo=self.repo_name, page=page, state=state)
        response = await self.client.rest.pulls.async_list(
            owner=self.owner,
            repo=self.repo_name,
            state=state,
            sort="updated",
            direction="desc",
            per_page=per_page,
            page=page,
        )
        return response.json()

    @log_request_failure
    async def list_issues_page(
        self,
        page: int,
        per_page: int = DEFAULT_PAGE_SIZE,
        state: Literal["open", "closed", "all"] = "closed",
        milestone: str | None = None,
    ) -> list[dict[str, Any]]:
        """List one page of issues, most recently updated first.

        GitHub's issues listing also returns pull requests; those entries carry
        a 'pull_request' key.
        """
        logger.debug("Fetching issues page", owner=self.owner, repo=self.repo_name, page=page, state=state, milestone=milestone)
        params = self._omit_null_parameters(
            state=state,
            sort="updated",
            direction="desc",
            milestone=milestone,
            per_page=per_page,
            page=page,
        )
        response = await self.client.rest.issues.async_list_for_repo(owner=self.owner, repo=self.repo_name, **params)
        return response.json()

    @log_request_failure
    async def list_commits(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
        per_page: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
    ) -> list[dict[str, Any]]:
        """List one page of commits on the default branch within a time window.

        Args:
            since: Only commits after this time
            until: Only commits before this time
            per_page: Number of commits per page (default: 100, max: 100)
            page: Page number to fetch

        Returns:
            List of raw commit dictionaries
        """
        params = self._omit_null_parameters(
            since=since.isoformat() if since else None,
            until=until.isoformat() if until else None,
            per_page=per_page,
            page=page,
        )
        logger.info("Fetching commits for repository", owner=self.owner, repo=self.repo_name, filters=params)
        response = await self.client.rest.repos.async_list_commits(owner=self.owner, repo=self.repo_name, **params)
        return response.json()

    @log_request_failure
    async def compare_commits(self, base: str, head: str) -> list[dict[str, Any]]:
        """List the commits reachable from head but not from base, oldest first."""
        logger.info("Comparing refs", owner=self.owner, repo=self.repo_name, base=base, head=head)
        response = await self.client.rest.repos.async_compare_commits(
            owner=self.owner,
            repo=self.repo_name,
            basehead=compare_basehead(base, head),
        )
        commits: list[dict[str, Any]] = response.json().get("commits", [])
        logger.info("Compared refs", base=base, head=head, total_commits=len(commits))
        return commits

    # Git database
    @log_request_failure
    async def get_ref(self, ref: str) -> dict[str, Any]:
        """Get a git reference such as 'tags/v1.0.0'."""
        response = await self.client.rest.git.async_get_ref(owner=self.owner, repo=self.repo_name, ref=ref)
        return response.json()

    @log_request_failure
    async def get_tag(self, tag_sha: str) -> dict[str, Any]:
        """Get an annotated tag object."""
        response = await self.client.rest.git.async_get_tag(owner=self.owner, repo=self.repo_name, tag_sha=tag_sha)
        return response.json()

    @log_request_failure
    async def get_git_commit(self, commit_sha: str) -> dict[str, Any]:
        """Get a git commit object."""
        response = await self.client.rest.git.async_get_commit(owner=self.owner, repo=self.repo_name, commit_sha=commit_sha)
        return response.json()
