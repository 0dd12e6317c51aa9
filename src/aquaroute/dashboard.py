"""High-level dashboard session."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Any

import aiohttp

from aquaroute._constants import NORTH_ROUTE
from aquaroute._scheduler import PeriodicTask
from aquaroute._transport import FacilitySource, HttpFacilitySource
from aquaroute.config import DashboardConfig
from aquaroute.exceptions import AquarouteError, ConfigError
from aquaroute.models.selection import FacilityDetail, SelectionDetail, VesselDetail, WaypointDetail
from aquaroute.persistence import InMemoryQueryStore, QueryStore
from aquaroute.search import EMPTY_RESULT, SearchEngine, SearchResult
from aquaroute.selection import SelectionController
from aquaroute.simulation import HourTicker, PositionSimulator
from aquaroute.state.events import EntityChangeEvent, EntityCollection
from aquaroute.state.store import EntityStore
from aquaroute.sync import RemoteSync, SyncReport

_logger = logging.getLogger(__name__)


class Dashboard:
    """Live map dashboard state for one session.

    Usage::

        async with Dashboard(DashboardConfig.from_env()) as dashboard:
            dashboard.start()
            await dashboard.refresh_facilities()
            result = dashboard.search("Manila")

    The event loop running ``__aenter__`` becomes the single writer of the
    entity store; all methods must be called from that loop.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        *,
        source: FacilitySource | None = None,
        session: aiohttp.ClientSession | None = None,
        store: EntityStore | None = None,
        query_store: QueryStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config if config is not None else DashboardConfig()
        self._external_session = session is not None
        self._http_session = session
        self._source = source
        self._store = store if store is not None else EntityStore()
        self._query_store: QueryStore = query_store if query_store is not None else InMemoryQueryStore()
        self._selection = SelectionController()
        self._search = SearchEngine(self._store)
        if rng is None and self._config.random_seed is not None:
            rng = random.Random(self._config.random_seed)
        self._simulator = PositionSimulator(
            self._store,
            interval=self._config.simulation_interval,
            step=self._config.drift_step,
            rng=rng,
        )
        self._hour_ticker = HourTicker(self._store, interval=self._config.hour_tick_interval)
        self._sync: RemoteSync | None = None
        self._refresh_task: PeriodicTask | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._active = False
        self._last_error: str | None = None
        if source is not None:
            self._attach_source(source)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Dashboard:
        self._loop = asyncio.get_running_loop()
        self._store.bind_owner()
        if self._sync is None and self._config.facilities_url:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._attach_source(
                HttpFacilitySource(
                    self._config.facilities_url,
                    self._http_session,
                    timeout=self._config.fetch_timeout,
                )
            )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._loop = None

    def _attach_source(self, source: FacilitySource) -> None:
        self._source = source
        self._sync = RemoteSync(self._store, source, is_active=lambda: self._active)
        if self._config.facility_refresh_interval > 0:
            self._refresh_task = PeriodicTask(
                "facility-refresh",
                self.refresh_facilities,
                self._config.facility_refresh_interval,
            )

    # ------------------------------------------------------------------
    # Session activity
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Activate the session: simulation, hour ticker and periodic refresh."""
        if self._loop is None:
            raise AquarouteError("Dashboard not initialized. Use 'async with Dashboard(...) as dashboard:'")
        self._active = True
        self._store.refresh_hour()
        self._simulator.start()
        self._hour_ticker.start()
        if self._refresh_task is not None:
            self._refresh_task.start()
        _logger.debug("Dashboard session started")

    def stop(self) -> None:
        """Deactivate the session. No tick reaches the store after this returns."""
        was_active = self._active
        self._active = False
        self._simulator.stop()
        self._hour_ticker.stop()
        if self._refresh_task is not None:
            self._refresh_task.stop()
        if was_active:
            _logger.debug("Dashboard session stopped")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def selection(self) -> SelectionController:
        return self._selection

    @property
    def simulator(self) -> PositionSimulator:
        return self._simulator

    @property
    def routes(self) -> tuple[tuple[tuple[float, float], ...], ...]:
        """Reference polylines drawn under the markers."""
        return (NORTH_ROUTE,)

    @property
    def last_error(self) -> str | None:
        """User-facing message of the last failed refresh, cleared on success."""
        return self._last_error

    @property
    def last_query(self) -> str:
        return self._query_store.get_last_query()

    def subscribe_changes(self, callback: Callable[[EntityChangeEvent], None]) -> Callable[[], None]:
        return self._store.feed.subscribe(callback)

    def subscribe_selection(self, callback: Callable[[SelectionDetail | None], None]) -> Callable[[], None]:
        return self._selection.subscribe(callback)

    def facility_status(self, facility_id: str) -> str | None:
        return self._store.facility_status(facility_id)

    # ------------------------------------------------------------------
    # Remote facilities
    # ------------------------------------------------------------------

    async def refresh_facilities(self) -> SyncReport:
        """Fetch the facility collection and replace the snapshot on success."""
        if self._sync is None:
            raise ConfigError("No facility source configured (pass source= or set facilities_url)")
        report = await self._sync.refresh()
        self._last_error = None if report.ok else report.summary
        return report

    # ------------------------------------------------------------------
    # Search & selection
    # ------------------------------------------------------------------

    def search(self, query: str) -> SearchResult:
        """Search all collections and focus the best match.

        A blank query changes nothing. Otherwise the query is saved and, when
        something matches, the focus becomes the selection.
        """
        if not query.strip():
            return EMPTY_RESULT
        self._query_store.save_query(query)
        result = self._search.search(query)
        if result.focus is not None:
            self._selection.select(result.focus)
        _logger.debug("Search %r matched %d entities", query, result.total_count)
        return result

    def clear_search(self) -> None:
        self._query_store.clear_query()

    def on_entity_clicked(self, collection: EntityCollection | str, entity_id: str) -> SelectionDetail | None:
        """Select the clicked entity. Unknown collections and stale ids are ignored."""
        try:
            kind = EntityCollection(collection)
        except ValueError:
            _logger.debug("Click on unknown collection %r ignored", collection)
            return None
        detail = self._resolve_detail(kind, entity_id)
        if detail is None:
            _logger.debug("Click on unknown %s %r ignored", collection, entity_id)
            return None
        self._selection.select(detail)
        return detail

    def dismiss_selection(self) -> None:
        self._selection.dismiss()

    def _resolve_detail(self, collection: EntityCollection, entity_id: str) -> SelectionDetail | None:
        if collection == EntityCollection.VESSELS:
            vessel = self._store.vessel(entity_id)
            return VesselDetail(vessel=vessel) if vessel is not None else None
        if collection == EntityCollection.WAYPOINTS:
            waypoint = self._store.waypoint(entity_id)
            return WaypointDetail(waypoint=waypoint) if waypoint is not None else None
        if collection == EntityCollection.FACILITIES:
            facility = self._store.facility(entity_id)
            if facility is None:
                return None
            return FacilityDetail(facility=facility, display_status=facility.display_status(self._store.current_hour))
        return None
