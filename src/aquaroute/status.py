"""Facility display status derived from operating hours.

Everything here is a pure function of its arguments: the current hour is
always passed in by the caller, never read from a process-wide clock.
"""

from __future__ import annotations


def format_hour(hour: int) -> str:
    """Render a 24h hour as a 12h label (``0`` -> ``"12 AM"``, ``13`` -> ``"1 PM"``)."""
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


def is_overnight_window(open_hour: int | None, close_hour: int | None) -> bool:
    """Return ``True`` for windows that cross midnight (e.g. 22 -> 6).

    :func:`resolve_status` does not wrap such windows; callers should treat
    their derived status as unreliable.
    """
    if open_hour is None or close_hour is None:
        return False
    return close_hour < open_hour


def resolve_status(
    open_hour: int | None,
    close_hour: int | None,
    raw_status: str,
    current_hour: int,
) -> str:
    """Derive the display status for the half-open window ``[open_hour, close_hour)``.

    Without both bounds the remote ``raw_status`` is returned unchanged.
    ``current_hour`` is not clamped.
    """
    if open_hour is None or close_hour is None:
        return raw_status
    if current_hour < open_hour:
        return f"Opens at {format_hour(open_hour)}"
    if open_hour <= current_hour < close_hour:
        if close_hour - current_hour <= 1:
            return f"Closing Soon (until {format_hour(close_hour)})"
        return "Open"
    return f"Closed (opens at {format_hour(open_hour)} tomorrow)"
