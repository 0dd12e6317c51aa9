"""Data models for dashboard entities."""

from aquaroute.models._base import AquaBaseModel, AquaEnum, AquaTimestamp, Position, parse_timestamp
from aquaroute.models.facility import Facility, FacilityCategory
from aquaroute.models.selection import FacilityDetail, SelectionDetail, VesselDetail, WaypointDetail
from aquaroute.models.vessel import Vessel, VesselStatus
from aquaroute.models.waypoint import Waypoint

__all__ = [
    "AquaBaseModel",
    "AquaEnum",
    "AquaTimestamp",
    "Facility",
    "FacilityCategory",
    "FacilityDetail",
    "Position",
    "SelectionDetail",
    "Vessel",
    "VesselDetail",
    "VesselStatus",
    "Waypoint",
    "WaypointDetail",
    "parse_timestamp",
]
