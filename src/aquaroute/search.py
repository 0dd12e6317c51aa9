"""Cross-collection free-text search."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from aquaroute.models.selection import FacilityDetail, SelectionDetail, VesselDetail, WaypointDetail
from aquaroute.state.store import EntityStore


class SearchResult(BaseModel):
    """Number of matches across all collections and the entity to focus on."""

    model_config = ConfigDict(frozen=True)

    total_count: int = 0
    focus: SelectionDetail | None = None


EMPTY_RESULT = SearchResult()


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.casefold()


class SearchEngine:
    """Case-insensitive substring search over vessels, waypoints and facilities.

    Vessels match on name or route (counted once), waypoints and facilities
    on name. The focus is the first matching vessel, else the first
    waypoint, else the first facility, in each collection's stable order.
    Searching never mutates any state.
    """

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def search(self, query: str) -> SearchResult:
        needle = query.strip().casefold()
        if not needle:
            return EMPTY_RESULT

        vessels = [v for v in self._store.vessels() if _contains(v.name, needle) or _contains(v.route, needle)]
        waypoints = [w for w in self._store.waypoints() if _contains(w.name, needle)]
        facilities = [f for f in self._store.facilities() if _contains(f.name, needle)]

        focus: SelectionDetail | None = None
        if vessels:
            focus = VesselDetail(vessel=vessels[0])
        elif waypoints:
            focus = WaypointDetail(waypoint=waypoints[0])
        elif facilities:
            facility = facilities[0]
            focus = FacilityDetail(facility=facility, display_status=facility.display_status(self._store.current_hour))

        return SearchResult(total_count=len(vessels) + len(waypoints) + len(facilities), focus=focus)
