"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as ISO 8601 with millisecond precision (record timestamps)."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def split_csv(values: tuple[str, ...] | list[str] | None) -> list[str] | None:
    """Flatten repeated and comma-separated option values, dropping blanks.

    Examples:
        >>> split_csv(("a,b", "c"))
        ['a', 'b', 'c']
    """
    if not values:
        return None
    items = [part.strip() for v in values for part in v.split(",")]
    return [i for i in items if i] or None
