"""Weather lookup: city text to assembled payload.

Flow: geocode -> first candidate -> current + forecast fetched concurrently ->
aggregation -> payload. Upstream errors propagate to the caller.
"""

import asyncio
import logging
from collections.abc import Callable

from skyview.errors import CityNotFound
from skyview.forecast.aggregator import compute_forecast_views
from skyview.forecast.assembler import assemble_payload
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.ingest.parsers import (
    parse_current_conditions,
    parse_forecast,
    parse_geo_candidates,
)
from skyview.ingest.sanitize import normalize_city
from skyview.models.common import epoch_now
from skyview.models.weather import WeatherPayload

logger = logging.getLogger(__name__)


class WeatherLookup:
    def __init__(
        self,
        client: OpenWeatherClient,
        clock: Callable[[], int] = epoch_now,
    ):
        self.client = client
        self.clock = clock

    async def lookup(self, city: str) -> WeatherPayload:
        """Resolve a city and build its weather payload.

        Raises CityNotFound, UpstreamUnavailable, or MalformedInput.
        """
        city = normalize_city(city)
        if not city:
            raise CityNotFound(city)

        candidates = parse_geo_candidates(await self.client.geocode(city))
        if not candidates:
            raise CityNotFound(city)
        geo = candidates[0]
        logger.info(
            "Resolved %r to %s, %s (%.4f, %.4f)",
            city, geo.name, geo.country, geo.lat, geo.lon,
        )

        raw_current, raw_forecast = await asyncio.gather(
            self.client.get_current(geo.lat, geo.lon),
            self.client.get_forecast(geo.lat, geo.lon),
        )
        current = parse_current_conditions(raw_current)
        samples, forecast_offset = parse_forecast(raw_forecast)

        offset = forecast_offset
        if offset is None:
            offset = current.timezone_offset if current.timezone_offset is not None else 0
        views = compute_forecast_views(samples, self.clock(), offset)

        return assemble_payload(current, views, geo.name, geo.country)
