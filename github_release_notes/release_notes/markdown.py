"""Markdown rendering for release notes."""

import structlog

from ..utils.constants import (
    COMMITS_HEADING,
    ISSUES_HEADING,
    PULL_REQUESTS_HEADING,
    SHORT_SHA_LENGTH,
    UNRELEASED_VERSION_LABEL,
)
from ..utils.helpers import format_long_date
from .models import ExportedCommit, ExportedIssue, ExportedPullRequest, ReleaseExport

logger = structlog.get_logger(__name__)


class MarkdownWriter:
    """Renders a release export as a Markdown document.

    Sections appear in a fixed order: header, description, pull requests,
    issues, commits, footer. Empty categories produce no section.
    """

    def render(self, export: ReleaseExport) -> str:
        """Render the full Markdown document."""
        lines: list[str] = []

        lines.append(f"# {export.title or f'Release {export.version}'}")
        lines.append("")
        lines.append(f"**Version:** {export.version or UNRELEASED_VERSION_LABEL}")
        lines.append(f"**Date:** {format_long_date(export.date)}")
        lines.append("")

        if export.description:
            lines.append(export.description)
            lines.append("")

        if export.pull_requests:
            lines.extend(self._section(PULL_REQUESTS_HEADING, [self._numbered_line(pr) for pr in export.pull_requests]))

        if export.issues:
            lines.extend(self._section(ISSUES_HEADING, [self._numbered_line(issue) for issue in export.issues]))

        if export.commits:
            lines.extend(self._section(COMMITS_HEADING, [self._commit_line(commit) for commit in export.commits]))

        lines.append("---")
        lines.append(f"*Generated from [{export.repository.owner}/{export.repository.name}]({export.repository.url})*")

        logger.debug(
            "Rendered release notes markdown",
            pull_requests=len(export.pull_requests),
            issues=len(export.issues),
            commits=len(export.commits),
        )
        return "\n".join(lines)

    def _section(self, heading: str, entries: list[str]) -> list[str]:
        return [heading, "", *entries, ""]

    def _numbered_line(self, entry: ExportedPullRequest | ExportedIssue) -> str:
        labels = f" `{'` `'.join(entry.labels)}`" if entry.labels else ""
        return f"- [#{entry.number}]({entry.url}) {entry.title} (@{entry.author}){labels}{self._note(entry.note)}"

    def _commit_line(self, commit: ExportedCommit) -> str:
        short_sha = commit.sha[:SHORT_SHA_LENGTH]
        return f"- [`{short_sha}`]({commit.url}) {commit.message} (@{commit.author}){self._note(commit.note)}"

    def _note(self, note: str) -> str:
        return f"\n  > {note}" if note else ""
