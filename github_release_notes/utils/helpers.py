"""General utility functions and helper classes."""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]
"""Callable returning the current time, injected wherever "now" matters."""


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with GitHub timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def first_line(message: str) -> str:
    """Return the summary line of a (commit) message."""
    return message.split("\n")[0]


def generate_item_id(item_type: str, natural_key: int | str) -> str:
    """Generate a deterministic release item ID like 'pr-42' or 'commit-<sha>'."""
    return f"{item_type}-{natural_key}"


def format_long_date(value: datetime) -> str:
    """Format a date like 'March 5, 2024'."""
    return f"{value:%B} {value.day}, {value.year}"
