"""OpenWeatherMap 5-day/3-hour forecast API client."""

import logging
from typing import Any

import httpx

from weatherboard.config.defaults import DEFAULT_FORECAST_URL

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "weatherboard/0.1.0"


class OpenWeatherMapClient:
    """Async client for the forecast endpoint.

    One request per call, no retries; a failed location is retried by the
    next refresh cycle.
    """

    def __init__(
        self,
        api_key: str,
        forecast_url: str = DEFAULT_FORECAST_URL,
        units: str = "metric",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.forecast_url = forecast_url
        self.units = units
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"},
            )
        return self._client

    async def get_forecast(self, location: str) -> Any:
        """Fetch the forecast for a location name.

        Raises httpx.HTTPStatusError on non-2xx and httpx.RequestError on
        transport failures. Returns the decoded JSON body.
        """
        params = {"q": location, "APPID": self.api_key, "units": self.units}
        logger.debug("GET %s q=%s", self.forecast_url, location)
        resp = await self._http().get(self.forecast_url, params=params)
        resp.raise_for_status()
        return resp.json()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
