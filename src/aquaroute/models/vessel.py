"""Simulated vessel model."""

from __future__ import annotations

from pydantic import Field

from aquaroute.models._base import AquaBaseModel, AquaEnum, Position


class VesselStatus(AquaEnum):
    """Schedule status shown for a vessel."""

    ON_TIME = "on_time"
    DELAYED = "delayed"
    UNKNOWN = "unknown"


class Vessel(AquaBaseModel):
    """A moving vessel on a named route.

    Parameters
    ----------
    name : str
        Unique vessel name (identity key).
    route : str
        Route label, e.g. ``"Manila-Cavite"``.
    position : Position
        Current simulated position.
    status : VesselStatus
        Schedule status; unmapped values become ``UNKNOWN``.
    eta_minutes : int
        Minutes to arrival, never negative.
    """

    name: str = Field(min_length=1)
    route: str
    position: Position
    status: VesselStatus = VesselStatus.UNKNOWN
    eta_minutes: int = Field(default=0, ge=0)

    def moved_to(self, lat: float, lon: float) -> Vessel:
        """Return a copy at a new position; both coordinates change together."""
        return self.model_copy(update={"position": Position(lat=lat, lon=lon)})
