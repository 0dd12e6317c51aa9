from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from aquaroute.exceptions import OwnershipError
from aquaroute.models import Facility, Position
from aquaroute.state.events import ChangeKind, EntityChangeEvent, EntityCollection
from aquaroute.state.store import EntityStore


def _clock(hour: int = 10) -> Callable[[], datetime]:
    return lambda: datetime(2026, 1, 1, hour, 30)


def _facility(facility_id: str, name: str = "Port", **overrides: object) -> Facility:
    values: dict[str, object] = {
        "id": facility_id,
        "name": name,
        "position": Position(lat=13.0, lon=121.0),
        "open_hour": 6,
        "close_hour": 19,
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
    }
    values.update(overrides)
    return Facility(**values)  # type: ignore[arg-type]


def _record(store: EntityStore) -> list[EntityChangeEvent]:
    events: list[EntityChangeEvent] = []
    store.feed.subscribe(events.append)
    return events


def test_seed_collections_in_stable_order() -> None:
    store = EntityStore(clock=_clock())

    assert [v.name for v in store.vessels()] == ["MV Star Express", "MV Sea Princess", "MV Ocean King"]
    assert [v.route for v in store.vessels()] == ["Manila-Cavite", "Manila-Cavite", "Manila-Batangas"]
    assert [w.name for w in store.waypoints()] == ["Dagupan Ferry Terminal", "Manila Port", "Cavite Port"]
    assert store.waypoint("Dagupan Ferry Terminal").is_primary  # type: ignore[union-attr]
    assert store.facilities() == ()
    assert not store.facilities_loaded
    assert store.current_hour == 10


def test_duplicate_seed_names_rejected() -> None:
    vessels = EntityStore(clock=_clock()).vessels()
    with pytest.raises(ValueError):
        EntityStore(vessels=[vessels[0], vessels[0]], clock=_clock())


def test_mutate_vessel_updates_both_coordinates_and_publishes() -> None:
    store = EntityStore(clock=_clock())
    events = _record(store)

    assert store.mutate_vessel("MV Ocean King", 14.3, 121.0) is True

    vessel = store.vessel("MV Ocean King")
    assert vessel is not None
    assert vessel.position == Position(lat=14.3, lon=121.0)
    assert len(events) == 1
    assert events[0].collection == EntityCollection.VESSELS
    assert events[0].entity_id == "MV Ocean King"
    assert events[0].changed_fields == frozenset({"position"})


def test_mutate_unknown_vessel_is_noop() -> None:
    store = EntityStore(clock=_clock())
    events = _record(store)
    before = store.vessels()

    assert store.mutate_vessel("MV Ghost", 0.0, 0.0) is False
    assert store.vessels() == before
    assert events == []


def test_snapshot_taken_before_mutation_is_unchanged() -> None:
    store = EntityStore(clock=_clock())
    snapshot = store.vessels()

    store.mutate_vessel("MV Star Express", 0.0, 0.0)

    assert snapshot[0].position == Position(lat=14.55, lon=120.96)


def test_replace_facilities_is_wholesale() -> None:
    store = EntityStore(clock=_clock())
    store.replace_facilities([_facility("a", "Alpha"), _facility("b", "Bravo")])
    old_snapshot = store.facilities()

    store.replace_facilities([_facility("c", "Charlie")])

    assert [f.id for f in old_snapshot] == ["a", "b"]
    assert [f.id for f in store.facilities()] == ["c"]
    assert store.facility("a") is None


def test_replace_facilities_publishes_added_removed_updated() -> None:
    store = EntityStore(clock=_clock())
    store.replace_facilities([_facility("a", "Alpha"), _facility("b", "Bravo")])
    events = _record(store)

    store.replace_facilities([_facility("a", "Alpha", raw_status="Closed"), _facility("c", "Charlie")])

    by_id = {e.entity_id: e for e in events}
    assert by_id["b"].kind == ChangeKind.REMOVED
    assert by_id["c"].kind == ChangeKind.ADDED
    assert by_id["a"].kind == ChangeKind.UPDATED
    assert by_id["a"].changed_fields == frozenset({"raw_status"})


def test_identical_replace_publishes_nothing() -> None:
    store = EntityStore(clock=_clock())
    facilities = [_facility("a", "Alpha")]
    store.replace_facilities(facilities)
    events = _record(store)

    store.replace_facilities(facilities)

    assert events == []


def test_replace_with_duplicate_ids_leaves_snapshot_untouched() -> None:
    store = EntityStore(clock=_clock())
    store.replace_facilities([_facility("a", "Alpha")])

    with pytest.raises(ValueError):
        store.replace_facilities([_facility("x"), _facility("x")])

    assert [f.id for f in store.facilities()] == ["a"]


def test_empty_replace_is_valid() -> None:
    store = EntityStore(clock=_clock())
    store.replace_facilities([_facility("a")])

    store.replace_facilities([])

    assert store.facilities() == ()
    assert store.facilities_loaded


def test_set_current_hour_validates_and_publishes_once() -> None:
    store = EntityStore(clock=_clock(10))
    events = _record(store)

    store.set_current_hour(10)
    store.set_current_hour(23)

    assert store.current_hour == 23
    assert len(events) == 1
    assert events[0].collection == EntityCollection.CLOCK
    for bad in (-1, 24, 3.5, True):
        with pytest.raises(ValueError):
            store.set_current_hour(bad)  # type: ignore[arg-type]


def test_facility_status_follows_current_hour() -> None:
    store = EntityStore(clock=_clock(5))
    store.replace_facilities([_facility("a")])

    assert store.facility_status("a") == "Opens at 6 AM"
    store.set_current_hour(12)
    assert store.facility_status("a") == "Open"
    assert store.facility_status("missing") is None


def test_identical_snapshots_yield_identical_statuses() -> None:
    store = EntityStore(clock=_clock(18))
    facilities = [_facility("a"), _facility("b", open_hour=5, close_hour=20)]

    store.replace_facilities(facilities)
    first = [store.facility_status(f.id) for f in facilities]
    store.replace_facilities(facilities)
    second = [store.facility_status(f.id) for f in facilities]

    assert first == second == ["Closing Soon (until 7 PM)", "Open"]


def test_mutation_from_foreign_thread_rejected() -> None:
    store = EntityStore(clock=_clock())
    errors: list[BaseException] = []

    def _worker() -> None:
        try:
            store.mutate_vessel("MV Star Express", 0.0, 0.0)
        except OwnershipError as exc:
            errors.append(exc)

    thread = threading.Thread(target=_worker)
    thread.start()
    thread.join()

    assert len(errors) == 1
    assert store.vessel("MV Star Express").position.lat == 14.55  # type: ignore[union-attr]


def test_refresh_hour_reads_clock() -> None:
    hours = iter([7, 8])
    store = EntityStore(clock=lambda: datetime(2026, 1, 1, next(hours), 0))

    assert store.current_hour == 7
    assert store.refresh_hour() == 8
    assert store.current_hour == 8


def test_refetch_with_new_created_at_publishes_nothing() -> None:
    store = EntityStore(clock=_clock())
    store.replace_facilities([_facility("a", "Alpha")])
    events = _record(store)

    store.replace_facilities([_facility("a", "Alpha", created_at=datetime(2026, 2, 1, tzinfo=UTC))])

    assert events == []
    assert store.facility("a").created_at == datetime(2026, 2, 1, tzinfo=UTC)  # type: ignore[union-attr]
