"""Entity change events.

Every store mutation is described by one or more of these events so the
overlay binder can update an existing marker in place instead of
recreating it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aquaroute._pubsub import Channel


class EntityCollection(StrEnum):
    VESSELS = "vessels"
    WAYPOINTS = "waypoints"
    FACILITIES = "facilities"
    CLOCK = "clock"


class ChangeKind(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


class EntityChangeEvent(BaseModel):
    """A single entity change delivered to the overlay binder."""

    model_config = ConfigDict(frozen=True)

    collection: EntityCollection
    entity_id: str = Field(..., description="Vessel/waypoint name, facility id, or 'hour' for the clock")
    kind: ChangeKind = ChangeKind.UPDATED
    changed_fields: frozenset[str] = Field(default_factory=frozenset)
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("entity_id")
    @classmethod
    def _normalize_entity_id(cls, value: str) -> str:
        if not value:
            raise ValueError("entity_id must be non-empty")
        return value


class ChangeFeed(Channel[EntityChangeEvent]):
    """Channel carrying :class:`EntityChangeEvent` values."""

    def __init__(self) -> None:
        super().__init__("change feed")
