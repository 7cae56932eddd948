"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_PAGE_SIZE,
    DRAFT_SCHEMA_VERSION,
    DRAFTS_KEY,
    LATEST_REF,
    MAX_LISTING_PAGES,
    STORAGE_PREFIX,
)
from .helpers import Clock, utc_now

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_LISTING_PAGES",
    "LATEST_REF",
    "STORAGE_PREFIX",
    "DRAFTS_KEY",
    "DRAFT_SCHEMA_VERSION",
    "Clock",
    "utc_now",
]
