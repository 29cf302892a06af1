"""Parse raw OpenWeather JSON responses into typed models.

Every leaf field is optional; missing values become None. Only a wrong
top-level shape raises MalformedInput.
"""

import math
from typing import Any

from skyview.errors import MalformedInput
from skyview.models.forecast import ForecastSample
from skyview.models.weather import CurrentConditions, GeoCandidate


def parse_geo_candidates(raw: Any) -> list[GeoCandidate]:
    """Parse the direct-geocoding response (a JSON list of places)."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MalformedInput(f"geocoding response must be a list, got {type(raw).__name__}")

    candidates = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        lat, lon = _number(item.get("lat")), _number(item.get("lon"))
        if lat is None or lon is None:
            continue
        candidates.append(
            GeoCandidate(
                name=_text(item.get("name")),
                country=_text(item.get("country")),
                lat=lat,
                lon=lon,
            )
        )
    return candidates


def parse_current_conditions(raw: dict) -> CurrentConditions:
    _require_object(raw, "current weather response")
    main = _section(raw, "main")
    sys_ = _section(raw, "sys")
    wind = _section(raw, "wind")
    weather = _first_weather(raw)
    return CurrentConditions(
        temp=_number(main.get("temp")),
        feels_like=_number(main.get("feels_like")),
        description=_text(weather.get("description")),
        icon=_text(weather.get("icon")),
        humidity=_number(main.get("humidity")),
        pressure=_number(main.get("pressure")),
        visibility=_number(raw.get("visibility")),
        wind_speed=_number(wind.get("speed")),
        sunrise_utc=_integer(sys_.get("sunrise")),
        sunset_utc=_integer(sys_.get("sunset")),
        timezone_offset=_integer(raw.get("timezone")),
        location_name=_text(raw.get("name")),
        country_code=_text(sys_.get("country")),
    )


def parse_forecast(raw: dict) -> tuple[list[ForecastSample], int | None]:
    """Return the forecast samples and the city's timezone offset, if present."""
    _require_object(raw, "forecast response")
    items = raw.get("list")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise MalformedInput(
            f"forecast 'list' must be a list, got {type(items).__name__}"
        )

    samples = []
    for item in items:
        if not isinstance(item, dict):
            continue
        dt = _integer(item.get("dt"))
        if dt is None:
            continue
        main = _section(item, "main")
        weather = _first_weather(item)
        samples.append(
            ForecastSample(
                timestamp_utc=dt,
                temperature=_number(main.get("temp")),
                min_temperature=_number(main.get("temp_min")),
                max_temperature=_number(main.get("temp_max")),
                icon_code=_text(weather.get("icon")),
                precipitation_probability=_number(item.get("pop")),
            )
        )

    city = _section(raw, "city")
    return samples, _integer(city.get("timezone"))


def _require_object(raw: Any, what: str) -> None:
    if not isinstance(raw, dict):
        raise MalformedInput(f"{what} must be an object, got {type(raw).__name__}")


def _section(raw: dict, key: str) -> dict:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def _first_weather(raw: dict) -> dict:
    weather = raw.get("weather")
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        return weather[0]
    return {}


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _integer(value: Any) -> int | None:
    number = _number(value)
    if number is None or not math.isfinite(number):
        return None
    return int(number)


def _text(value: Any) -> str | None:
    # Empty strings are treated as absent
    return value if isinstance(value, str) and value else None
