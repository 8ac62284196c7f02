"""Weather lookup using the OpenWeatherMap current weather API."""

import math
import os
from typing import Protocol

import httpx

from ..config import WEATHER_BASE_URL, WEATHER_TIMEOUT
from ..logging_config import get_logger

logger = get_logger(__name__)


class IWeatherLookup(Protocol):
    """Current outdoor temperature for a postal code."""

    async def lookup_temperature(self, postal_code: str, country_code: str) -> int:
        """Return the current temperature in Celsius, rounded down."""
        ...


class WeatherClient:
    """OpenWeatherMap client."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key or os.getenv("WEATHER_API_KEY")
        if not self._api_key:
            raise ValueError("WEATHER_API_KEY environment variable not set")

        self._client = httpx.AsyncClient(
            base_url=base_url or os.getenv("WEATHER_BASE_URL") or WEATHER_BASE_URL,
            timeout=WEATHER_TIMEOUT,
            transport=transport,
        )

    async def lookup_temperature(self, postal_code: str, country_code: str) -> int:
        """Return the current temperature in Celsius, rounded down.

        Any non-2xx response or a body without `main.temp` raises.
        """
        params = {
            "units": "metric",
            "zip": f"{postal_code},{country_code}",
            "APPID": self._api_key,
        }
        logger.debug("Requesting weather for %s,%s", postal_code, country_code)
        try:
            response = await self._client.get("/data/2.5/weather", params=params)
            response.raise_for_status()
            temperature = math.floor(response.json()["main"]["temp"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error("Weather lookup failed for %s: %s", postal_code, e)
            raise

        logger.info("Temperature for %s is %s", postal_code, temperature)
        return temperature

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
