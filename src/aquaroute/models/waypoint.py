"""Static waypoint model."""

from __future__ import annotations

from pydantic import Field

from aquaroute.models._base import AquaBaseModel, Position


class Waypoint(AquaBaseModel):
    """A fixed, named reference location (local port)."""

    name: str = Field(min_length=1)
    position: Position
    is_primary: bool = False
