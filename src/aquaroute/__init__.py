"""aquaroute - Live ferry dashboard state engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("aquaroute")
except PackageNotFoundError:
    __version__ = "0+local"
from aquaroute._transport import CallableFacilitySource, FacilitySource, HttpFacilitySource
from aquaroute.config import DashboardConfig
from aquaroute.dashboard import Dashboard
from aquaroute.exceptions import (
    AquarouteError,
    ConfigError,
    FetchError,
    OwnershipError,
    RecordValidationError,
)
from aquaroute.models import (
    Facility,
    FacilityCategory,
    FacilityDetail,
    Position,
    SelectionDetail,
    Vessel,
    VesselDetail,
    VesselStatus,
    Waypoint,
    WaypointDetail,
)
from aquaroute.search import SearchEngine, SearchResult
from aquaroute.selection import SelectionController
from aquaroute.state.events import ChangeFeed, ChangeKind, EntityChangeEvent, EntityCollection
from aquaroute.state.store import EntityStore
from aquaroute.status import format_hour, resolve_status
from aquaroute.sync import RemoteSync, SyncReport

__all__ = [
    "__version__",
    "AquarouteError",
    "CallableFacilitySource",
    "ChangeFeed",
    "ChangeKind",
    "ConfigError",
    "Dashboard",
    "DashboardConfig",
    "EntityChangeEvent",
    "EntityCollection",
    "EntityStore",
    "Facility",
    "FacilityCategory",
    "FacilityDetail",
    "FacilitySource",
    "FetchError",
    "HttpFacilitySource",
    "OwnershipError",
    "Position",
    "RecordValidationError",
    "RemoteSync",
    "SearchEngine",
    "SearchResult",
    "SelectionController",
    "SelectionDetail",
    "SyncReport",
    "Vessel",
    "VesselDetail",
    "VesselStatus",
    "Waypoint",
    "WaypointDetail",
    "format_hour",
    "resolve_status",
]
