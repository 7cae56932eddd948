"""Shared constants used across the application."""

# This file is intended to hold shared constants.

# GitHub Listing Constants
# ------------------------

DEFAULT_PAGE_SIZE = 100
"""Page size used for every paginated GitHub listing (GitHub's maximum)."""

MAX_LISTING_PAGES = 10
"""Hard cap on pages fetched per category, bounding a single fetch to 1000 items."""

LATEST_REF = "HEAD"
"""Compare head used when a tag range has no explicit end tag."""

DEFAULT_REPOSITORY_PAGE_SIZE = 30
"""Page size used when listing or searching repositories for the user."""

# Release Item Constants
# ----------------------

SHORT_SHA_LENGTH = 7
"""Number of characters of a commit SHA rendered in release notes."""

# Draft Storage Constants
# -----------------------

STORAGE_PREFIX = "release-notes:"
"""Namespace prefix for every key this application writes to the storage backend."""

DRAFTS_KEY = f"{STORAGE_PREFIX}drafts"
"""Key holding the JSON array of all release drafts."""

DRAFT_SCHEMA_VERSION = 1
"""Current structural version of a stored release draft."""

DEFAULT_DRAFT_STORE_PATH = "~/.github-release-notes/drafts.json"
"""Default location of the JSON file backing the draft store."""

# Export Constants
# ----------------

UNRELEASED_VERSION_LABEL = "Unreleased"
"""Version shown in the Markdown header when a draft has no version."""

DRAFT_FILENAME_FALLBACK = "draft"
"""Version part of an export filename when a draft has no version."""

PULL_REQUESTS_HEADING = "## Pull Requests"
ISSUES_HEADING = "## Issues Fixed"
COMMITS_HEADING = "## Commits"
