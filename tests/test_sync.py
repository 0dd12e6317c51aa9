from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

import pytest

from aquaroute.exceptions import FetchError
from aquaroute.state.store import EntityStore
from aquaroute.sync import RemoteSync, SyncReport

NOW = datetime(2026, 3, 1, 8, 0, tzinfo=UTC)


class _ScriptedSource:
    """Returns queued results in order; exceptions are raised."""

    def __init__(self, *results: Any) -> None:
        self._results = list(results)
        self.calls = 0

    async def fetch_records(self) -> list[Any]:
        self.calls += 1
        result = self._results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


def _store() -> EntityStore:
    return EntityStore(clock=lambda: datetime(2026, 3, 1, 12, 0))


def _records() -> list[dict[str, Any]]:
    return [
        {"id": "a", "name": "Banton Port", "lat": 12.95, "lng": 122.05},
        {"id": "b", "name": "Batangas Ferry", "lat": 13.75, "lng": 121.05, "type": "ferry_terminal"},
    ]


def _sync(store: EntityStore, source: _ScriptedSource, **kwargs: Any) -> RemoteSync:
    return RemoteSync(store, source, clock=lambda: NOW, **kwargs)


@pytest.mark.asyncio
async def test_refresh_replaces_snapshot() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records()))

    report = await sync.refresh()

    assert report.ok and report.applied
    assert report.loaded == 2
    assert report.summary == "Loaded 2 ports"
    assert [f.id for f in store.facilities()] == ["a", "b"]
    assert sync.last_report == report


@pytest.mark.asyncio
async def test_fetch_error_keeps_previous_snapshot() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records(), FetchError("HTTP 500 from source", status_code=500)))
    await sync.refresh()
    before = store.facilities()

    report = await sync.refresh()

    assert not report.ok
    assert report.error == "HTTP 500 from source"
    assert report.summary == "Failed to load ports: HTTP 500 from source"
    assert store.facilities() == before
    assert [store.facility_status(f.id) for f in before] == ["Open", "Open"]


@pytest.mark.asyncio
async def test_empty_fetch_is_distinct_success() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records(), []))
    await sync.refresh()

    report = await sync.refresh()

    assert report.ok and report.applied
    assert report.loaded == 0
    assert report.summary == "No ports found"
    assert store.facilities() == ()


@pytest.mark.asyncio
async def test_rejections_counted_not_fatal() -> None:
    store = _store()
    records = _records() + [{"id": "c", "name": "Broken", "lat": "x", "lng": 1}]
    sync = _sync(store, _ScriptedSource(records))

    report = await sync.refresh()

    assert report.ok
    assert (report.loaded, report.rejected) == (2, 1)
    assert report.summary == "Loaded 2 ports (1 errors)"


@pytest.mark.asyncio
async def test_fetch_does_not_touch_store() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records()))

    result = await sync.fetch()

    assert len(result.facilities) == 2
    assert store.facilities() == ()
    assert not store.facilities_loaded


@pytest.mark.asyncio
async def test_result_discarded_when_session_inactive() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records()), is_active=lambda: False)

    report = await sync.refresh()

    assert report.ok and not report.applied
    assert store.facilities() == ()


@pytest.mark.asyncio
async def test_repeated_fetch_gives_same_derived_hours() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records(), _records()))

    await sync.refresh()
    first = {f.id: (f.open_hour, f.close_hour) for f in store.facilities()}
    await sync.refresh()
    second = {f.id: (f.open_hour, f.close_hour) for f in store.facilities()}

    assert first == second == {"a": (6, 19), "b": (5, 20)}


@pytest.mark.asyncio
async def test_schedule_refresh_from_worker_thread_applies_on_loop() -> None:
    store = _store()
    sync = _sync(store, _ScriptedSource(_records()))
    loop = asyncio.get_running_loop()

    def _from_thread() -> SyncReport:
        return sync.schedule_refresh(loop).result(timeout=5)

    report = await asyncio.to_thread(_from_thread)

    assert report.applied
    assert len(store.facilities()) == 2
