from __future__ import annotations

import pytest

from aquaroute.config import DashboardConfig
from aquaroute.exceptions import ConfigError


def test_defaults() -> None:
    config = DashboardConfig()

    assert config.facilities_url is None
    assert config.simulation_interval == 3.0
    assert config.hour_tick_interval == 60.0
    assert config.drift_step == 0.0005
    assert config.fetch_timeout == 10.0
    assert config.facility_refresh_interval == 0.0
    assert config.random_seed is None


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AQUAROUTE_FACILITIES_URL", "https://example.test/ports.json")
    monkeypatch.setenv("AQUAROUTE_SIMULATION_INTERVAL", "1.5")
    monkeypatch.setenv("AQUAROUTE_DRIFT_STEP", "0.001")
    monkeypatch.setenv("AQUAROUTE_RANDOM_SEED", "42")

    config = DashboardConfig.from_env()

    assert config.facilities_url == "https://example.test/ports.json"
    assert config.simulation_interval == 1.5
    assert config.drift_step == 0.001
    assert config.random_seed == 42


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AQUAROUTE_FETCH_TIMEOUT", "30")
    monkeypatch.setenv("AQUAROUTE_RANDOM_SEED", "not-a-number")

    config = DashboardConfig.from_env(fetch_timeout=5.0, random_seed=7)

    assert config.fetch_timeout == 5.0
    assert config.random_seed == 7


def test_blank_variables_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AQUAROUTE_HOUR_TICK_INTERVAL", "  ")

    assert DashboardConfig.from_env().hour_tick_interval == 60.0


def test_non_numeric_variable_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AQUAROUTE_SIMULATION_INTERVAL", "fast")

    with pytest.raises(ConfigError, match="AQUAROUTE_SIMULATION_INTERVAL"):
        DashboardConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"simulation_interval": 0},
        {"hour_tick_interval": -1},
        {"drift_step": -0.1},
        {"fetch_timeout": 0},
        {"facility_refresh_interval": -5},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, float]) -> None:
    with pytest.raises(ConfigError):
        DashboardConfig(**kwargs)
