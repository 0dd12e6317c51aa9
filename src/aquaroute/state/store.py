"""Single-writer in-memory entity store.

This is the only component allowed to mutate vessels, waypoints, facilities
and the current hour. Readers get immutable snapshots (tuples of frozen
models); a snapshot taken before a mutation is never altered by it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime
from types import MappingProxyType
from typing import TypeVar

from aquaroute._constants import SEED_VESSELS, SEED_WAYPOINTS
from aquaroute.exceptions import OwnershipError
from aquaroute.models.facility import Facility
from aquaroute.models.vessel import Vessel
from aquaroute.models.waypoint import Waypoint
from aquaroute.state.events import ChangeFeed, ChangeKind, EntityChangeEvent, EntityCollection

_logger = logging.getLogger(__name__)


def _localnow() -> datetime:
    return datetime.now().astimezone()


_Named = TypeVar("_Named", Vessel, Waypoint)


def seed_vessels() -> list[Vessel]:
    return [
        Vessel.model_validate(
            {
                "name": row["name"],
                "route": row["route"],
                "position": {"lat": row["lat"], "lon": row["lon"]},
                "status": row["status"],
                "eta_minutes": row["eta"],
            }
        )
        for row in SEED_VESSELS
    ]


def seed_waypoints() -> list[Waypoint]:
    return [
        Waypoint.model_validate(
            {
                "name": row["name"],
                "position": {"lat": row["lat"], "lon": row["lon"]},
                "is_primary": row["is_primary"],
            }
        )
        for row in SEED_WAYPOINTS
    ]


def _index_unique(items: Iterable[_Named], what: str) -> dict[str, _Named]:
    index: dict[str, _Named] = {}
    for item in items:
        if item.name in index:
            raise ValueError(f"duplicate {what} name: {item.name!r}")
        index[item.name] = item
    return index


# Provenance only; a defaulted createdAt changes on every fetch.
_UNDIFFED_FACILITY_FIELDS = frozenset({"created_at"})


def _facility_diff(old: Facility, new: Facility) -> frozenset[str]:
    before = old.model_dump(exclude=set(_UNDIFFED_FACILITY_FIELDS))
    after = new.model_dump(exclude=set(_UNDIFFED_FACILITY_FIELDS))
    return frozenset(key for key in after if before.get(key) != after[key])


class EntityStore:
    """In-memory owner of the three entity collections.

    Parameters
    ----------
    vessels, waypoints
        Initial collections; default to the built-in seed data. Their
        cardinality never changes afterwards.
    clock
        Returns the local wall-clock time; used for the initial hour and by
        :meth:`refresh_hour`.
    feed
        Channel receiving an :class:`EntityChangeEvent` per mutation.
    """

    def __init__(
        self,
        *,
        vessels: Iterable[Vessel] | None = None,
        waypoints: Iterable[Waypoint] | None = None,
        clock: Callable[[], datetime] = _localnow,
        feed: ChangeFeed | None = None,
    ) -> None:
        self._clock = clock
        self._feed = feed if feed is not None else ChangeFeed()
        self._vessels: dict[str, Vessel] = _index_unique(seed_vessels() if vessels is None else vessels, "vessel")
        self._waypoints: dict[str, Waypoint] = _index_unique(seed_waypoints() if waypoints is None else waypoints, "waypoint")
        self._facilities: MappingProxyType[str, Facility] = MappingProxyType({})
        self._facilities_loaded = False
        self._current_hour = clock().hour
        self._owner = threading.get_ident()

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def bind_owner(self) -> None:
        """Make the calling thread the single writer."""
        self._owner = threading.get_ident()

    def _check_owner(self, operation: str) -> None:
        if threading.get_ident() != self._owner:
            raise OwnershipError(f"{operation} must run on the store's owner thread")

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def vessels(self) -> tuple[Vessel, ...]:
        return tuple(self._vessels.values())

    def waypoints(self) -> tuple[Waypoint, ...]:
        return tuple(self._waypoints.values())

    def facilities(self) -> tuple[Facility, ...]:
        # One attribute read: either the old or the new snapshot, never a mix.
        return tuple(self._facilities.values())

    def vessel(self, name: str) -> Vessel | None:
        return self._vessels.get(name)

    def waypoint(self, name: str) -> Waypoint | None:
        return self._waypoints.get(name)

    def facility(self, facility_id: str) -> Facility | None:
        return self._facilities.get(facility_id)

    @property
    def facilities_loaded(self) -> bool:
        """Whether at least one facility snapshot (possibly empty) was applied."""
        return self._facilities_loaded

    @property
    def current_hour(self) -> int:
        return self._current_hour

    def facility_status(self, facility_id: str) -> str | None:
        """Display status of a facility for the current hour, ``None`` if unknown."""
        facility = self._facilities.get(facility_id)
        if facility is None:
            return None
        return facility.display_status(self._current_hour)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mutate_vessel(self, name: str, lat: float, lon: float) -> bool:
        """Move a vessel. Unknown names are ignored and return ``False``."""
        self._check_owner("mutate_vessel")
        vessel = self._vessels.get(name)
        if vessel is None:
            _logger.debug("mutate_vessel ignored unknown vessel %r", name)
            return False
        self._vessels[name] = vessel.moved_to(lat, lon)
        self._feed.publish(
            EntityChangeEvent(
                collection=EntityCollection.VESSELS,
                entity_id=name,
                changed_fields=frozenset({"position"}),
            )
        )
        return True

    def replace_facilities(self, facilities: Iterable[Facility]) -> None:
        """Swap in a complete new facility snapshot.

        Duplicate ids raise :class:`ValueError` before any state changes.
        """
        self._check_owner("replace_facilities")
        incoming: dict[str, Facility] = {}
        for facility in facilities:
            if facility.id in incoming:
                raise ValueError(f"duplicate facility id: {facility.id!r}")
            incoming[facility.id] = facility

        previous = self._facilities
        self._facilities = MappingProxyType(incoming)
        self._facilities_loaded = True
        _logger.debug("Facility snapshot replaced: %d -> %d records", len(previous), len(incoming))

        events: list[EntityChangeEvent] = []
        for facility_id in previous:
            if facility_id not in incoming:
                events.append(
                    EntityChangeEvent(
                        collection=EntityCollection.FACILITIES,
                        entity_id=facility_id,
                        kind=ChangeKind.REMOVED,
                    )
                )
        for facility_id, new in incoming.items():
            old = previous.get(facility_id)
            if old is None:
                events.append(
                    EntityChangeEvent(
                        collection=EntityCollection.FACILITIES,
                        entity_id=facility_id,
                        kind=ChangeKind.ADDED,
                        changed_fields=frozenset(new.model_dump().keys()),
                    )
                )
                continue
            changed = _facility_diff(old, new)
            if changed:
                events.append(
                    EntityChangeEvent(
                        collection=EntityCollection.FACILITIES,
                        entity_id=facility_id,
                        changed_fields=changed,
                    )
                )
        for event in events:
            self._feed.publish(event)

    def set_current_hour(self, hour: int) -> None:
        self._check_owner("set_current_hour")
        if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour < 24:
            raise ValueError(f"hour must be an integer in [0, 24), got {hour!r}")
        if hour == self._current_hour:
            return
        self._current_hour = hour
        self._feed.publish(
            EntityChangeEvent(
                collection=EntityCollection.CLOCK,
                entity_id="hour",
                changed_fields=frozenset({"current_hour"}),
            )
        )

    def refresh_hour(self) -> int:
        """Read the clock and store its hour; returns the new hour."""
        hour = self._clock().hour
        self.set_current_hour(hour)
        return hour
