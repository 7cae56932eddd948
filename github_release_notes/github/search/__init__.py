"""GitHub Search API functionality for repository discovery."""

from .repositories import list_repositories, search_repositories

__all__ = ["list_repositories", "search_repositories"]
