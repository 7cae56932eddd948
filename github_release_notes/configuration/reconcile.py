"""Reconcile GitHub authentication configuration and release filter options."""

from datetime import datetime
from pathlib import Path
from typing import Sequence

from github_release_notes.configuration.exceptions import ConflictingFilterOptionsError, GitHubAuthenticationConfigurationUndefinedError
from github_release_notes.configuration.models import GitHubAuthenticationType
from github_release_notes.release_notes.models import (
    BranchFilter,
    DateFilter,
    MilestoneFilter,
    MilestonePayload,
    ReleaseFilter,
    TagFilter,
)

# (display name, command line option, environment variable) of each GitHub App setting
GITHUB_APP_SETTINGS: tuple[tuple[str, str, str], ...] = (
    ("GitHub App ID", "--github-app-id", "GITHUB_APP_ID"),
    ("GitHub App private key path", "--github-app-private-key-path", "GITHUB_APP_PRIVATE_KEY_PATH"),
    ("GitHub App installation ID", "--github-app-installation-id", "GITHUB_APP_INSTALLATION_ID"),
)


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Exactly one of a PAT or a complete GitHub App configuration must be provided.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If the configuration is missing, incomplete, or ambiguous.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_values = (github_app_id, github_app_private_key_path, github_app_installation_id)
    any_app_value = any(app_values)

    if github_pat_token and any_app_value:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if not any_app_value:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )

    missing = [setting for setting, value in zip(GITHUB_APP_SETTINGS, app_values) if not value]
    if missing:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "Incomplete GitHub App configuration - missing settings include "
            + ", ".join(f"{name} (command line option {option}, environment variable {env_name})" for name, option, env_name in missing)
        )
    return GitHubAuthenticationType.APP


def build_release_filter(
    milestones: Sequence[MilestonePayload] = (),
    milestone: int | None = None,
    from_tag: str | None = None,
    to_tag: str | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    base_branch: str | None = None,
    compare_branch: str | None = None,
) -> ReleaseFilter:
    """Build a release filter from command line options.

    Args:
        milestones: Milestones of the repository, used to look up a milestone by number
        milestone: Milestone number
        from_tag: Start tag of a tag range
        to_tag: End tag of a tag range; omitted means up to the latest commit
        from_date: Start of a date range
        to_date: End of a date range; omitted means up to now
        base_branch: Branch the release is compared against
        compare_branch: Branch holding the release's commits

    Raises:
        ConflictingFilterOptionsError: If options of more than one filter type are given
        ValueError: If no filter options are given or the milestone does not exist

    Returns:
        The release filter. It may still be unusable, e.g. a tag range without a start tag.
    """
    requested: list[str] = []
    if milestone is not None:
        requested.append("milestone")
    if from_tag or to_tag:
        requested.append("tag")
    if from_date or to_date:
        requested.append("date")
    if base_branch or compare_branch:
        requested.append("branch")

    if len(requested) > 1:
        raise ConflictingFilterOptionsError(requested)
    if not requested:
        raise ValueError("A release filter is required: use a milestone, a tag range, a date range, or a branch comparison.")

    filter_type = requested[0]
    if filter_type == "milestone":
        selected = next((candidate for candidate in milestones if candidate.number == milestone), None)
        if selected is None:
            raise ValueError(f"Milestone #{milestone} does not exist in this repository.")
        return MilestoneFilter(milestone=selected)
    if filter_type == "tag":
        return TagFilter(from_tag=from_tag or "", to_tag=to_tag or None)
    if filter_type == "date":
        return DateFilter(from_date=from_date, to_date=to_date)
    return BranchFilter(base_branch=base_branch or "", compare_branch=compare_branch or "")
