"""Project release drafts into exportable release notes."""

from datetime import datetime
from typing import Sequence

from ..configuration.models import ExportFormat
from ..utils.constants import DRAFT_FILENAME_FALLBACK, SHORT_SHA_LENGTH
from .markdown import MarkdownWriter
from .models import (
    CommitItem,
    ExportedCommit,
    ExportedIssue,
    ExportedPullRequest,
    ExportRepository,
    IssueItem,
    PullRequestItem,
    ReleaseDraft,
    ReleaseExport,
    ReleaseItem,
    RepositoryInfo,
)


def to_export(
    draft: ReleaseDraft,
    items: Sequence[ReleaseItem],
    repository: RepositoryInfo,
    generated_at: datetime,
) -> ReleaseExport:
    """Project the included items of a draft into a release export.

    Args:
        draft: Draft providing version, title, description and filter
        items: Working copy of the draft's items
        repository: Repository the release belongs to
        generated_at: Timestamp recorded as the release date

    Returns:
        The export, with only included items
    """
    pull_requests: list[ExportedPullRequest] = []
    issues: list[ExportedIssue] = []
    commits: list[ExportedCommit] = []

    for item in items:
        if not item.included:
            continue
        if isinstance(item, PullRequestItem):
            pr = item.payload
            pull_requests.append(
                ExportedPullRequest(
                    number=pr.number,
                    title=pr.title,
                    url=pr.html_url,
                    author=pr.author_login,
                    note=item.note,
                    labels=pr.label_names,
                )
            )
        elif isinstance(item, IssueItem):
            issue = item.payload
            issues.append(
                ExportedIssue(
                    number=issue.number,
                    title=issue.title,
                    url=issue.html_url,
                    author=issue.author_login,
                    note=item.note,
                    labels=issue.label_names,
                )
            )
        elif isinstance(item, CommitItem):
            commit = item.payload
            commits.append(
                ExportedCommit(
                    sha=commit.sha,
                    message=commit.summary,
                    url=commit.html_url,
                    author=commit.author_name,
                    note=item.note,
                )
            )
        else:
            raise TypeError(f"Unsupported release item: {type(item).__name__}")

    return ReleaseExport(
        version=draft.version,
        title=draft.title or f"Release {draft.version}",
        description=draft.description,
        date=generated_at,
        repository=ExportRepository(owner=repository.owner, name=repository.name, url=repository.html_url),
        filter=draft.filter,
        pull_requests=pull_requests,
        issues=issues,
        commits=commits,
        summary=build_summary(draft.description, pull_requests, issues, commits),
    )


def build_summary(
    description: str,
    pull_requests: Sequence[ExportedPullRequest],
    issues: Sequence[ExportedIssue],
    commits: Sequence[ExportedCommit],
) -> str:
    """Build the plain prose summary carried by an export."""
    parts: list[str] = []

    if description:
        parts.extend([description, ""])

    if pull_requests:
        parts.extend(["## Pull Requests", ""])
        parts.extend(f"- {pr.title} (#{pr.number}){_note_suffix(pr.note)}" for pr in pull_requests)
        parts.append("")

    if issues:
        parts.extend(["## Issues Fixed", ""])
        parts.extend(f"- {issue.title} (#{issue.number}){_note_suffix(issue.note)}" for issue in issues)
        parts.append("")

    if commits:
        parts.extend(["## Commits", ""])
        parts.extend(f"- {commit.message} ({commit.sha[:SHORT_SHA_LENGTH]}){_note_suffix(commit.note)}" for commit in commits)

    return "\n".join(parts)


def _note_suffix(note: str) -> str:
    return f" - {note}" if note else ""


def to_markdown(export: ReleaseExport) -> str:
    """Render an export as Markdown."""
    return MarkdownWriter().render(export)


def to_json(export: ReleaseExport) -> str:
    """Render an export as an indented JSON document with camelCase keys."""
    return export.model_dump_json(by_alias=True, indent=2)


def render(export: ReleaseExport, export_format: ExportFormat) -> str:
    """Render an export in the requested format."""
    if export_format == ExportFormat.JSON:
        return to_json(export)
    return to_markdown(export)


def export_filename(version: str, export_format: ExportFormat) -> str:
    """Default file name of a downloaded export, e.g. 'release-notes-v2.1.0.md'."""
    return f"release-notes-{version or DRAFT_FILENAME_FALLBACK}.{export_format.value}"
