"""OpenWeather API client: geocoding, current conditions, and 5-day forecast."""

import logging
from typing import Any

import httpx

from skyview.config.schema import OpenWeatherConfig
from skyview.errors import ConfigurationError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Async client; every call is bounded by the configured timeout and never retried."""

    def __init__(self, config: OpenWeatherConfig):
        self.config = config

    async def geocode(self, city: str) -> Any:
        return await self._get(
            self.config.geo_url, {"q": city, "limit": self.config.geo_limit}
        )

    async def get_current(self, lat: float, lon: float) -> Any:
        return await self._get(
            self.config.weather_url,
            {"lat": lat, "lon": lon, "units": self.config.units},
        )

    async def get_forecast(self, lat: float, lon: float) -> Any:
        return await self._get(
            self.config.forecast_url,
            {"lat": lat, "lon": lon, "units": self.config.units},
        )

    async def _get(self, url: str, params: dict) -> Any:
        if not self.config.api_key:
            raise ConfigurationError("OPENWEATHER_API_KEY is not set")

        params = {**params, "appid": self.config.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.TimeoutException as e:
            logger.warning("OpenWeather request to %s timed out: %s", url, e)
            raise UpstreamUnavailable(f"timeout calling {url}", timed_out=True) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "OpenWeather %s returned %d", url, e.response.status_code
            )
            raise UpstreamUnavailable(
                f"{url} returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error("OpenWeather request to %s failed: %s", url, e)
            raise UpstreamUnavailable(f"request to {url} failed") from e
        except ValueError as e:
            logger.error("OpenWeather %s returned invalid JSON", url)
            raise UpstreamUnavailable(f"{url} returned invalid JSON") from e
