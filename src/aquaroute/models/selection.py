"""Selection detail: one variant per entity kind."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from aquaroute.models._base import AquaBaseModel
from aquaroute.models.facility import Facility
from aquaroute.models.vessel import Vessel
from aquaroute.models.waypoint import Waypoint


class VesselDetail(AquaBaseModel):
    kind: Literal["vessel"] = "vessel"
    vessel: Vessel

    @property
    def entity_id(self) -> str:
        return self.vessel.name


class WaypointDetail(AquaBaseModel):
    kind: Literal["waypoint"] = "waypoint"
    waypoint: Waypoint

    @property
    def entity_id(self) -> str:
        return self.waypoint.name


class FacilityDetail(AquaBaseModel):
    """A facility together with the status resolved when it was selected."""

    kind: Literal["facility"] = "facility"
    facility: Facility
    display_status: str

    @property
    def entity_id(self) -> str:
        return self.facility.id


SelectionDetail = Annotated[VesselDetail | WaypointDetail | FacilityDetail, Field(discriminator="kind")]
"""Closed tagged union of selectable details, discriminated on ``kind``."""
