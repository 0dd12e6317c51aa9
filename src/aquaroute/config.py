"""Dashboard configuration for aquaroute."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from aquaroute._constants import (
    DEFAULT_DRIFT_STEP,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_HOUR_TICK_INTERVAL,
    DEFAULT_SIMULATION_INTERVAL,
)
from aquaroute.exceptions import ConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{key} must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Dashboard session configuration.

    Parameters
    ----------
    facilities_url : str or None
        URL of the remote facility collection (JSON). ``None`` means no
        HTTP source is configured and a source must be passed explicitly.
    simulation_interval : float
        Seconds between vessel position ticks.
    hour_tick_interval : float
        Seconds between current-hour refreshes.
    drift_step : float
        Maximum per-tick offset in degrees applied to each coordinate.
    fetch_timeout : float
        Total timeout in seconds for one facility fetch.
    facility_refresh_interval : float
        Seconds between automatic facility refreshes while the session is
        active. ``0`` disables periodic refresh.
    random_seed : int or None
        Seed for the position simulator; ``None`` uses system entropy.
    """

    facilities_url: str | None = None
    simulation_interval: float = DEFAULT_SIMULATION_INTERVAL
    hour_tick_interval: float = DEFAULT_HOUR_TICK_INTERVAL
    drift_step: float = DEFAULT_DRIFT_STEP
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    facility_refresh_interval: float = 0.0
    random_seed: int | None = None

    def __post_init__(self) -> None:
        if self.simulation_interval <= 0:
            raise ConfigError("simulation_interval must be positive")
        if self.hour_tick_interval <= 0:
            raise ConfigError("hour_tick_interval must be positive")
        if self.drift_step < 0:
            raise ConfigError("drift_step must not be negative")
        if self.fetch_timeout <= 0:
            raise ConfigError("fetch_timeout must be positive")
        if self.facility_refresh_interval < 0:
            raise ConfigError("facility_refresh_interval must not be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from ``AQUAROUTE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        url = env.get("AQUAROUTE_FACILITIES_URL")
        if url:
            config_kwargs["facilities_url"] = url

        _ENV_FLOAT_MAP = {
            "AQUAROUTE_SIMULATION_INTERVAL": "simulation_interval",
            "AQUAROUTE_HOUR_TICK_INTERVAL": "hour_tick_interval",
            "AQUAROUTE_DRIFT_STEP": "drift_step",
            "AQUAROUTE_FETCH_TIMEOUT": "fetch_timeout",
            "AQUAROUTE_FACILITY_REFRESH_INTERVAL": "facility_refresh_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            parsed = _env_float(env, env_key)
            if parsed is not None and field_name not in overrides:
                config_kwargs[field_name] = parsed

        seed_env = env.get("AQUAROUTE_RANDOM_SEED")
        if seed_env is not None and "random_seed" not in overrides:
            try:
                config_kwargs["random_seed"] = int(seed_env)
            except ValueError as exc:
                raise ConfigError(f"AQUAROUTE_RANDOM_SEED must be an integer, got {seed_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
