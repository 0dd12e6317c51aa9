"""Synchronous, in-order publish/subscribe channel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Channel(Generic[T]):
    """Deliver each published value to every subscriber, in registration order.

    Delivery happens on the publisher's stack; there is no background
    dispatch. A subscriber that raises is logged and skipped so the
    remaining subscribers still receive the value.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._subscribers: list[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback*; the returned callable unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return _unsubscribe

    def publish(self, value: T) -> None:
        # Snapshot so (un)subscribing inside a callback doesn't affect this round.
        for callback in tuple(self._subscribers):
            try:
                callback(value)
            except Exception:
                _logger.debug("%s subscriber failed", self._name, exc_info=True)

    def __len__(self) -> int:
        return len(self._subscribers)
