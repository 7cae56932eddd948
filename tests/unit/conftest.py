"""Fixtures for unit tests."""

from typing import Any, Callable, Generator

import pytest
import structlog

RawFactory = Callable[..., dict[str, Any]]


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def raw_pull_request() -> RawFactory:
    """Build pull request JSON as returned by the GitHub pulls listing."""

    def build(
        number: int,
        merged_at: str | None = "2024-01-15T12:00:00Z",
        updated_at: str | None = None,
        title: str | None = None,
        author: str = "alice",
        labels: list[str] | None = None,
    ) -> dict[str, Any]:
        return {
            "id": 1000 + number,
            "number": number,
            "title": title or f"Pull request {number}",
            "state": "closed",
            "html_url": f"https://github.com/acme/widgets/pull/{number}",
            "user": {"login": author},
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": updated_at or merged_at or "2024-01-15T12:00:00Z",
            "closed_at": merged_at or "2024-01-15T12:00:00Z",
            "merged_at": merged_at,
            "labels": [{"name": name} for name in labels or []],
        }

    return build


@pytest.fixture
def raw_issue() -> RawFactory:
    """Build issue JSON as returned by the GitHub issues listing."""

    def build(
        number: int,
        closed_at: str | None = "2024-01-16T12:00:00Z",
        updated_at: str | None = None,
        title: str | None = None,
        author: str = "bob",
        labels: list[str] | None = None,
        is_pull_request: bool = False,
    ) -> dict[str, Any]:
        issue: dict[str, Any] = {
            "id": 2000 + number,
            "number": number,
            "title": title or f"Issue {number}",
            "state": "closed",
            "html_url": f"https://github.com/acme/widgets/issues/{number}",
            "user": {"login": author},
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": updated_at or closed_at or "2024-01-16T12:00:00Z",
            "closed_at": closed_at,
            "labels": [{"name": name} for name in labels or []],
        }
        if is_pull_request:
            issue["pull_request"] = {"url": f"https://api.github.com/repos/acme/widgets/pulls/{number}"}
        return issue

    return build


@pytest.fixture
def raw_commit() -> RawFactory:
    """Build commit JSON as returned by the GitHub commits and compare endpoints."""

    def build(sha: str, message: str = "Fix a bug", author_login: str | None = "carol", author_name: str = "Carol") -> dict[str, Any]:
        return {
            "sha": sha,
            "html_url": f"https://github.com/acme/widgets/commit/{sha}",
            "commit": {
                "author": {"name": author_name, "email": f"{author_name.lower()}@example.com", "date": "2024-01-14T09:00:00Z"},
                "message": message,
            },
            "author": {"login": author_login} if author_login else None,
        }

    return build


@pytest.fixture
def raw_repository() -> dict[str, Any]:
    """Repository JSON as returned by the GitHub repository endpoint."""
    return {
        "id": 1,
        "name": "widgets",
        "full_name": "acme/widgets",
        "owner": {"login": "acme"},
        "html_url": "https://github.com/acme/widgets",
        "description": "Widgets for everyone",
        "private": False,
        "default_branch": "main",
        "stargazers_count": 42,
        "language": "Python",
    }
