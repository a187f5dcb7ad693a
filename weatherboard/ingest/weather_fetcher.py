"""Weather fetcher: one provider call per location, failures become values."""

import json
import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from weatherboard.errors import FetchFailed
from weatherboard.ingest.owm_client import OpenWeatherMapClient
from weatherboard.models.common import utc_now_iso
from weatherboard.models.forecast import ForecastBundle, ForecastPoint
from weatherboard.models.snapshot import FetchFailure, FetchResult, FetchSuccess

logger = logging.getLogger(__name__)


class WeatherFetcher:
    def __init__(self, client: OpenWeatherMapClient):
        self.client = client

    async def fetch(self, location: str) -> FetchResult:
        """Fetch and parse the forecast for one location.

        Never raises for provider problems: HTTP errors, transport errors
        and malformed bodies all come back as a FetchFailure carrying the
        generic user-facing reason plus a short cause for logs.
        """
        try:
            raw = await self.client.get_forecast(location)
            bundle = parse_forecast(location, raw)
        except httpx.HTTPStatusError as e:
            cause = f"http_status:{e.response.status_code}"
        except httpx.RequestError as e:
            cause = f"request_error:{type(e).__name__}"
        except (json.JSONDecodeError, FetchFailed) as e:
            cause = f"malformed_response:{getattr(e, 'cause', e)}"
        else:
            return FetchSuccess(location=location, bundle=bundle)

        logger.warning("Fetch failed for %s (%s)", location, cause)
        return FetchFailure.for_location(location, cause)


def parse_forecast(location: str, raw: Any) -> ForecastBundle:
    """Parse a provider forecast body into a ForecastBundle.

    Raises FetchFailed if the body does not have the expected shape or the
    forecast list is empty.
    """
    if not isinstance(raw, dict):
        raise FetchFailed(location, "body is not an object")
    items = raw.get("list")
    if not isinstance(items, list) or not items:
        raise FetchFailed(location, "missing or empty 'list'")

    points = []
    for i, item in enumerate(items):
        try:
            points.append(_parse_point(item))
        except (KeyError, IndexError, TypeError, ValueError, OverflowError, OSError) as e:
            raise FetchFailed(location, f"bad entry {i}: {e!r}") from e

    return ForecastBundle(location=location, points=tuple(points), fetched_at=utc_now_iso())


def _parse_point(item: dict) -> ForecastPoint:
    weather = item["weather"][0]
    main = item["main"]
    ts = int(item["dt"])
    # must be representable as a calendar date
    datetime.fromtimestamp(ts, UTC)
    return ForecastPoint(
        timestamp=ts,
        condition_code=int(weather["id"]),
        condition_description=str(weather["description"]),
        temperature_c=float(main["temp"]),
        humidity_pct=int(main["humidity"]),
        wind_speed_ms=float(item["wind"]["speed"]),
    )
