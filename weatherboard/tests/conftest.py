"""Shared test fixtures."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import yaml

from weatherboard.config.schema import DashboardConfig
from weatherboard.ingest.weather_fetcher import WeatherFetcher, parse_forecast
from weatherboard.models.forecast import ForecastBundle
from weatherboard.models.snapshot import FetchFailure, FetchSuccess
from weatherboard.storage.kv_store import MemoryKeyValueStore
from weatherboard.storage.location_store import LocationStore

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def london_payload() -> dict:
    return load_fixture("owm_forecast_london.json")


@pytest.fixture
def paris_payload() -> dict:
    return load_fixture("owm_forecast_paris.json")


@pytest.fixture
def london_bundle(london_payload: dict) -> ForecastBundle:
    return parse_forecast("london", london_payload)


@pytest.fixture
def default_config() -> DashboardConfig:
    return DashboardConfig(provider={"api_key": "test-key"})


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "refresh": {"interval_seconds": 120},
        "display": {"unit": "F"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def location_store(kv: MemoryKeyValueStore) -> LocationStore:
    return LocationStore(kv)


@pytest.fixture
def fake_fetcher(london_payload: dict, paris_payload: dict) -> WeatherFetcher:
    """Fetcher stub: london and paris succeed, everything else fails."""
    payloads = {"london": london_payload, "paris": paris_payload}

    async def _fetch(location: str):
        if location in payloads:
            return FetchSuccess(location, parse_forecast(location, payloads[location]))
        return FetchFailure.for_location(location, "http_status:404")

    fetcher = AsyncMock(spec=WeatherFetcher)
    fetcher.fetch.side_effect = _fetch
    return fetcher
