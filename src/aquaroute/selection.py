"""The single currently selected detail."""

from __future__ import annotations

import logging
from collections.abc import Callable

from aquaroute._pubsub import Channel
from aquaroute.models.selection import SelectionDetail

_logger = logging.getLogger(__name__)


class SelectionController:
    """Two-state holder: nothing selected, or exactly one detail.

    ``select`` replaces any prior selection without confirmation (last write
    wins, no history); ``dismiss`` clears it and is idempotent. Every call
    notifies subscribers exactly once, synchronously and in registration
    order, with the new detail or ``None``.
    """

    def __init__(self) -> None:
        self._current: SelectionDetail | None = None
        self._channel: Channel[SelectionDetail | None] = Channel("selection")

    @property
    def current(self) -> SelectionDetail | None:
        return self._current

    @property
    def has_selection(self) -> bool:
        return self._current is not None

    def subscribe(self, callback: Callable[[SelectionDetail | None], None]) -> Callable[[], None]:
        return self._channel.subscribe(callback)

    def select(self, detail: SelectionDetail) -> None:
        self._current = detail
        _logger.debug("Selected %s %s", detail.kind, detail.entity_id)
        self._channel.publish(detail)

    def dismiss(self) -> None:
        self._current = None
        self._channel.publish(None)
