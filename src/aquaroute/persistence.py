"""Last-search persistence collaborator."""

from __future__ import annotations

from typing import Protocol


class QueryStore(Protocol):
    """Key-value store for the last search query; calls are fire-and-forget."""

    def get_last_query(self) -> str: ...

    def save_query(self, query: str) -> None: ...

    def clear_query(self) -> None: ...


class InMemoryQueryStore:
    """Process-local :class:`QueryStore`."""

    def __init__(self, initial: str = "") -> None:
        self._query = initial

    def get_last_query(self) -> str:
        return self._query

    def save_query(self, query: str) -> None:
        self._query = query

    def clear_query(self) -> None:
        self._query = ""
