"""Vessel position simulation and the current-hour ticker.

Positions follow an unclamped random walk: each tick moves every vessel by
an independent uniform offset in ``[-step, step]`` degrees per coordinate.
Nothing keeps vessels inside a geographic bound, so over long sessions they
drift freely. This is simulation looseness, not telemetry.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime

from aquaroute._constants import DEFAULT_DRIFT_STEP, DEFAULT_HOUR_TICK_INTERVAL, DEFAULT_SIMULATION_INTERVAL
from aquaroute._scheduler import PeriodicTask
from aquaroute.state.store import EntityStore

_logger = logging.getLogger(__name__)


def _localnow() -> datetime:
    return datetime.now().astimezone()


class PositionSimulator:
    """Periodic random walk applied to every vessel through the store.

    Besides moving vessels, each tick records the time of the last update
    and toggles ``live_indicator`` (the blinking "LIVE" badge).
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        interval: float = DEFAULT_SIMULATION_INTERVAL,
        step: float = DEFAULT_DRIFT_STEP,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _localnow,
    ) -> None:
        self._store = store
        self._step = step
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._task = PeriodicTask("position-simulator", self.tick, interval)
        self._run = 0
        self.last_tick_at: datetime | None = None
        self.live_indicator = True

    @property
    def step(self) -> float:
        return self._step

    @property
    def is_running(self) -> bool:
        return self._task.is_running

    @property
    def last_update_label(self) -> str | None:
        """Wall-clock time of the last tick as ``HH:MM``."""
        if self.last_tick_at is None:
            return None
        return self.last_tick_at.strftime("%H:%M")

    def tick(self) -> None:
        """Move every vessel once.

        A ``stop()`` issued mid-tick (e.g. by a change-feed subscriber)
        abandons the remaining vessels.
        """
        run = self._run
        for vessel in self._store.vessels():
            if run != self._run:
                return
            lat = vessel.position.lat + self._rng.uniform(-self._step, self._step)
            lon = vessel.position.lon + self._rng.uniform(-self._step, self._step)
            self._store.mutate_vessel(vessel.name, lat, lon)
        if run != self._run:
            return
        self.last_tick_at = self._clock()
        self.live_indicator = not self.live_indicator

    def start(self) -> None:
        self._run += 1
        self._task.start()

    def stop(self) -> None:
        self._run += 1
        self._task.stop()


class HourTicker:
    """Refresh the store's current hour from the wall clock."""

    def __init__(self, store: EntityStore, *, interval: float = DEFAULT_HOUR_TICK_INTERVAL) -> None:
        self._store = store
        self._task = PeriodicTask("hour-ticker", self.tick, interval)

    @property
    def is_running(self) -> bool:
        return self._task.is_running

    def tick(self) -> None:
        hour = self._store.refresh_hour()
        _logger.debug("Current hour is %d", hour)

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.stop()
