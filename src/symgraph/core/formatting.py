"""Summary formatting utilities for tool and CLI output.

Design principles:
- Every summary fits on one line
- Long lists collapse into "+N more"
- Grammatically correct (1 unit vs 2 units)
"""

from __future__ import annotations


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Examples:
        (1, "unit") -> "1 unit"
        (3, "class", "classes") -> "3 classes"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def format_name_list(names: list[str], *, max_shown: int = 5) -> str:
    """Join names, collapsing the tail into "+N more".

    Examples:
        ["A"] -> "A"
        ["A", "B", "C"] with max_shown=2 -> "A, B +1 more"
    """
    if not names:
        return ""
    shown = ", ".join(names[:max_shown])
    if len(names) > max_shown:
        return f"{shown} +{len(names) - max_shown} more"
    return shown


def truncate_query(query: str, max_len: int = 20) -> str:
    """Truncate a search query for display.

    Examples:
        "UserManagerDelegateProtocol" -> "UserManagerDelega..."
        "short" -> "short"
    """
    if len(query) <= max_len:
        return query
    return query[: max_len - 3] + "..."


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples:
        0.345 -> "0.3s"
        90.0 -> "1m 30s"
    """
    if seconds < 0:
        raise ValueError("Duration must be non-negative")

    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes = int(seconds // 60)
    remaining_secs = int(seconds % 60)
    return f"{minutes}m {remaining_secs}s"
