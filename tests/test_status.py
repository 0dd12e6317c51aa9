from __future__ import annotations

import pytest

from aquaroute.status import format_hour, is_overnight_window, resolve_status


@pytest.mark.parametrize(
    ("hour", "expected"),
    [(0, "12 AM"), (1, "1 AM"), (11, "11 AM"), (12, "12 PM"), (13, "1 PM"), (23, "11 PM")],
)
def test_format_hour(hour: int, expected: str) -> None:
    assert format_hour(hour) == expected


def test_before_opening() -> None:
    assert resolve_status(6, 19, "Operational", 5) == "Opens at 6 AM"


def test_open_during_window() -> None:
    assert resolve_status(6, 19, "Operational", 12) == "Open"
    assert resolve_status(6, 19, "Operational", 6) == "Open"


def test_closing_soon_in_last_hour() -> None:
    assert resolve_status(6, 19, "Operational", 18) == "Closing Soon (until 7 PM)"


def test_closed_at_close_hour_and_after() -> None:
    assert resolve_status(6, 19, "Operational", 19) == "Closed (opens at 6 AM tomorrow)"
    assert resolve_status(6, 19, "Operational", 23) == "Closed (opens at 6 AM tomorrow)"


def test_missing_bound_returns_raw_status() -> None:
    assert resolve_status(None, 19, "Under maintenance", 12) == "Under maintenance"
    assert resolve_status(6, None, "Under maintenance", 12) == "Under maintenance"
    assert resolve_status(None, None, "", 12) == ""


def test_overnight_window_is_flagged_not_wrapped() -> None:
    assert is_overnight_window(22, 6)
    assert not is_overnight_window(6, 22)
    assert not is_overnight_window(None, 6)
    # The arithmetic is applied as-is: 23:00 inside a 22->6 window reads as closed.
    assert resolve_status(22, 6, "Open", 23) == "Closed (opens at 10 PM tomorrow)"


def test_resolution_is_deterministic() -> None:
    assert [resolve_status(5, 20, "x", h) for h in range(24)] == [resolve_status(5, 20, "x", h) for h in range(24)]
