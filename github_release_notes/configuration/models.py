"""Models for configuration between CLI arguments and environment variables."""

from enum import Enum


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


class ExportFormat(str, Enum):
    """Enum for release notes export formats (doubles as the file extension)."""

    MARKDOWN = "md"
    JSON = "json"


class ReleaseItemKind(str, Enum):
    """Enum for release item categories selectable on the command line."""

    PR = "pr"
    ISSUE = "issue"
    COMMIT = "commit"
