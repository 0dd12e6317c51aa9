"""Remote facility synchronisation.

The fetch runs off the store's owner context (awaited I/O or a worker
thread); the validated snapshot is applied with
:meth:`EntityStore.replace_facilities` only once control is back on the
event loop that owns the store.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from aquaroute._transport import FacilitySource
from aquaroute.exceptions import FetchError
from aquaroute.ingestion.facilities import FacilityParseResult, parse_facility_records
from aquaroute.state.store import EntityStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SyncReport(BaseModel):
    """Result of one refresh attempt.

    ``ok`` is ``False`` only for a :class:`FetchError`; an empty but
    successful fetch is ``ok`` with ``loaded == 0``. ``applied`` tells
    whether the snapshot actually reached the store.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    applied: bool = False
    loaded: int = 0
    rejected: int = 0
    error: str | None = None
    finished_at: datetime = Field(default_factory=_utcnow)

    @property
    def summary(self) -> str:
        if not self.ok:
            return f"Failed to load ports: {self.error}"
        if self.loaded == 0 and self.rejected == 0:
            return "No ports found"
        if self.rejected:
            return f"Loaded {self.loaded} ports ({self.rejected} errors)"
        return f"Loaded {self.loaded} ports"


class RemoteSync:
    """Fetch, validate and apply the facility collection.

    Parameters
    ----------
    store
        Owner of the facility snapshot.
    source
        Remote collaborator returning raw records.
    is_active
        Returns whether the owning session is still active; results that
        arrive after the session stopped are discarded.
    """

    def __init__(
        self,
        store: EntityStore,
        source: FacilitySource,
        *,
        is_active: Callable[[], bool] = lambda: True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._source = source
        self._is_active = is_active
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_report: SyncReport | None = None

    @property
    def last_report(self) -> SyncReport | None:
        return self._last_report

    async def fetch(self) -> FacilityParseResult:
        """Fetch and validate without touching the store.

        Raises
        ------
        FetchError
            On transport or top-level parse failure.
        """
        records = await self._source.fetch_records()
        return parse_facility_records(records, fetched_at=self._clock())

    async def refresh(self) -> SyncReport:
        """Fetch and, on success, atomically replace the facility snapshot.

        A :class:`FetchError` leaves the previous snapshot untouched.
        Concurrent calls are serialized.
        """
        async with self._lock:
            try:
                result = await self.fetch()
            except FetchError as exc:
                _logger.warning("Facility fetch failed: %s", exc)
                report = SyncReport(ok=False, error=str(exc), finished_at=self._clock())
                self._last_report = report
                return report

            applied = False
            if self._is_active():
                self._store.replace_facilities(result.facilities)
                applied = True
            else:
                _logger.debug("Session inactive; discarding %d fetched facilities", len(result.facilities))

            report = SyncReport(
                ok=True,
                applied=applied,
                loaded=len(result.facilities),
                rejected=result.rejected_count,
                finished_at=self._clock(),
            )
            self._last_report = report
            _logger.debug(report.summary)
            return report

    def schedule_refresh(self, loop: asyncio.AbstractEventLoop) -> concurrent.futures.Future[SyncReport]:
        """Request a refresh from any thread; it runs on *loop*, the store's owner."""
        return asyncio.run_coroutine_threadsafe(self.refresh(), loop)
