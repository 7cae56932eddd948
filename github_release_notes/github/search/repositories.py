"""Repository discovery for the authenticated user."""

from typing import Any

import structlog

from github_release_notes.github.client import GitHubClient
from github_release_notes.utils.constants import DEFAULT_REPOSITORY_PAGE_SIZE

logger = structlog.get_logger(__name__)


async def list_repositories(
    client: GitHubClient, page: int = 1, per_page: int = DEFAULT_REPOSITORY_PAGE_SIZE
) -> tuple[list[dict[str, Any]], bool]:
    """List repositories the user can access, most recently updated first.

    Returns:
        Tuple of (repositories on this page, whether another page may exist)
    """
    response = await client.rest.repos.async_list_for_authenticated_user(
        sort="updated",
        direction="desc",
        per_page=per_page,
        page=page,
    )
    repositories: list[dict[str, Any]] = response.json()
    logger.debug("Listed repositories for authenticated user", page=page, count=len(repositories))
    return repositories, len(repositories) == per_page


async def search_repositories(client: GitHubClient, query: str, page: int = 1) -> list[dict[str, Any]]:
    """Search the user's repositories by name.

    An empty query falls back to the plain repository listing.
    """
    if not query.strip():
        repositories, _ = await list_repositories(client, page=page)
        return repositories

    response = await client.rest.search.async_repos(
        q=f"{query} user:@me",
        sort="updated",
        per_page=DEFAULT_REPOSITORY_PAGE_SIZE,
        page=page,
    )
    items: list[dict[str, Any]] = response.json().get("items", [])
    logger.debug("Searched repositories", query=query, page=page, count=len(items))
    return items
