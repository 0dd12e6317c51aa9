"""Cancellable periodic tasks on the asyncio event loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run *callback* every *interval* seconds while started.

    ``stop()`` is synchronous and final for the current run: once it
    returns, no further tick is delivered, including one that was already
    scheduled. Both ``start()`` and ``stop()`` must be called on the event
    loop thread.

    The callback may be a plain function or a coroutine function. A tick
    that raises is logged and the schedule continues.
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[], Awaitable[object] | object],
        interval: float,
        *,
        run_immediately: bool = True,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._name = name
        self._callback = callback
        self._interval = interval
        self._run_immediately = run_immediately
        self._task: asyncio.Task[None] | None = None
        self._generation = 0
        self._ticks = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_count(self) -> int:
        return self._ticks

    def start(self) -> None:
        """(Re)start the schedule; a running schedule is stopped first."""
        self.stop()
        generation = self._generation
        self._task = asyncio.get_running_loop().create_task(self._run(generation), name=f"aquaroute:{self._name}")
        _logger.debug("Started periodic task %s every %.3fs", self._name, self._interval)

    def stop(self) -> None:
        # Bumping the generation makes any pending wake-up of the old task a no-op
        # even if it resumes before the cancellation is delivered.
        self._generation += 1
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            _logger.debug("Stopped periodic task %s", self._name)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, generation: int) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self._interval)
        while self._is_current(generation):
            try:
                result = self._callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                _logger.warning("Periodic task %s tick failed", self._name, exc_info=True)
            self._ticks += 1
            if not self._is_current(generation):
                return
            await asyncio.sleep(self._interval)
