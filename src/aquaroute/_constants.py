"""Internal constants shared across the library."""

USER_AGENT = "aquaroute/0 (+aiohttp)"

DEFAULT_SIMULATION_INTERVAL = 3.0
DEFAULT_HOUR_TICK_INTERVAL = 60.0
DEFAULT_DRIFT_STEP = 0.0005
DEFAULT_FETCH_TIMEOUT = 10.0

# ------------------------------------------------------------------
# Facility operating hours
# ------------------------------------------------------------------

FERRY_TYPE_HOURS: tuple[int, int] = (5, 20)

#: Name substrings with documented hours (matched case-insensitively).
KNOWN_NAME_HOURS: dict[str, tuple[int, int]] = {
    "banton": (6, 19),
}

#: Range for hours derived from the facility name digest.
DERIVED_OPEN_HOURS: tuple[int, ...] = (5, 6, 7, 8)
DERIVED_CLOSE_HOURS: tuple[int, ...] = (17, 18, 19, 20, 21)

# ------------------------------------------------------------------
# Seed data
# ------------------------------------------------------------------

SEED_VESSELS: tuple[dict[str, object], ...] = (
    {"name": "MV Star Express", "route": "Manila-Cavite", "lat": 14.55, "lon": 120.96, "status": "on_time", "eta": 15},
    {"name": "MV Sea Princess", "route": "Manila-Cavite", "lat": 14.50, "lon": 120.93, "status": "delayed", "eta": 25},
    {"name": "MV Ocean King", "route": "Manila-Batangas", "lat": 14.20, "lon": 120.98, "status": "on_time", "eta": 40},
)

SEED_WAYPOINTS: tuple[dict[str, object], ...] = (
    {"name": "Dagupan Ferry Terminal", "lat": 16.0431, "lon": 120.3339, "is_primary": True},
    {"name": "Manila Port", "lat": 14.594, "lon": 120.970, "is_primary": False},
    {"name": "Cavite Port", "lat": 14.475, "lon": 120.915, "is_primary": False},
)

#: Reference route drawn under the markers: Dagupan -> Lingayen -> Manila.
NORTH_ROUTE: tuple[tuple[float, float], ...] = (
    (16.0431, 120.3339),
    (15.8797, 119.7740),
    (14.594, 120.970),
)
