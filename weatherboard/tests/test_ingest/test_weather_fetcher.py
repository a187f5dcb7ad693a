"""Tests for the weather fetcher with a mocked provider client."""

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from weatherboard.errors import FetchFailed
from weatherboard.ingest.owm_client import OpenWeatherMapClient
from weatherboard.ingest.weather_fetcher import WeatherFetcher, parse_forecast
from weatherboard.models.snapshot import FetchFailure, FetchSuccess


def _fetcher(**client_kwargs) -> tuple[WeatherFetcher, AsyncMock]:
    client = AsyncMock(spec=OpenWeatherMapClient)
    client.get_forecast.configure_mock(**client_kwargs)
    return WeatherFetcher(client), client


def _http_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://example.com/forecast")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("bad status", request=request, response=response)


class TestFetch:
    def test_success(self, london_payload: dict):
        fetcher, client = _fetcher(return_value=london_payload)
        result = asyncio.run(fetcher.fetch("london"))

        assert isinstance(result, FetchSuccess)
        assert result.location == "london"
        assert len(result.bundle.points) == 6
        assert result.bundle.current.condition_code == 800
        client.get_forecast.assert_awaited_once_with("london")

    def test_http_status_failure(self):
        fetcher, _ = _fetcher(side_effect=_http_error(404))
        result = asyncio.run(fetcher.fetch("atlantis"))

        assert isinstance(result, FetchFailure)
        assert result.reason == "Failed to load weather data for atlantis"
        assert result.cause == "http_status:404"

    def test_network_failure(self):
        fetcher, _ = _fetcher(side_effect=httpx.ConnectTimeout("timed out"))
        result = asyncio.run(fetcher.fetch("london"))

        assert isinstance(result, FetchFailure)
        assert result.reason == "Failed to load weather data for london"
        assert result.cause == "request_error:ConnectTimeout"

    def test_undecodable_body(self):
        fetcher, _ = _fetcher(side_effect=json.JSONDecodeError("bad", "doc", 0))
        result = asyncio.run(fetcher.fetch("london"))

        assert isinstance(result, FetchFailure)
        assert result.cause.startswith("malformed_response:")

    def test_wrong_shape(self):
        fetcher, _ = _fetcher(return_value={"list": [{"dt": 1}]})
        result = asyncio.run(fetcher.fetch("london"))

        assert isinstance(result, FetchFailure)
        assert result.reason == "Failed to load weather data for london"

    def test_exactly_one_request(self):
        fetcher, client = _fetcher(side_effect=_http_error(500))
        asyncio.run(fetcher.fetch("london"))
        assert client.get_forecast.await_count == 1


class TestParseForecast:
    def test_point_fields(self, london_payload: dict):
        bundle = parse_forecast("london", london_payload)
        p = bundle.points[0]
        assert p.timestamp == 1700000000
        assert p.condition_description == "clear"
        assert p.temperature_c == 15.0
        assert p.humidity_pct == 60
        assert p.wind_speed_ms == 3.2

    def test_keeps_provider_order(self, london_payload: dict):
        bundle = parse_forecast("london", london_payload)
        assert [p.timestamp for p in bundle.points] == [
            item["dt"] for item in london_payload["list"]
        ]

    def test_integer_temperature_becomes_float(self):
        raw = {"list": [{"dt": 1, "weather": [{"id": 800, "description": "clear"}],
                         "main": {"temp": 20, "humidity": 50}, "wind": {"speed": 1}}]}
        bundle = parse_forecast("x", raw)
        assert isinstance(bundle.current.temperature_c, float)

    @pytest.mark.parametrize(
        "raw",
        [
            [],
            "text",
            {},
            {"list": []},
            {"list": "nope"},
            {"list": [{"dt": 1, "weather": [], "main": {"temp": 1, "humidity": 1}, "wind": {"speed": 1}}]},
            {"list": [{"dt": 1, "weather": [{"id": 800}], "main": {"humidity": 1}, "wind": {"speed": 1}}]},
            {"list": [{"dt": "soon", "weather": [{"id": 800}], "main": {"temp": 1, "humidity": 1}, "wind": {"speed": 1}}]},
            {"list": [{"dt": 1, "weather": [{"id": 800}], "main": {"temp": 1, "humidity": 1}, "wind": {"speed": 1}}]},
        ],
    )
    def test_malformed_raises(self, raw):
        with pytest.raises(FetchFailed):
            parse_forecast("london", raw)

    def test_out_of_range_timestamp_raises(self, london_payload: dict):
        london_payload["list"][0]["dt"] = 10**20
        with pytest.raises(FetchFailed):
            parse_forecast("london", london_payload)

    def test_out_of_range_timestamp_is_failure(self, london_payload: dict):
        london_payload["list"][0]["dt"] = 10**20
        fetcher, _ = _fetcher(return_value=london_payload)
        result = asyncio.run(fetcher.fetch("london"))

        assert isinstance(result, FetchFailure)
        assert result.reason == "Failed to load weather data for london"
        assert result.cause.startswith("malformed_response:")
