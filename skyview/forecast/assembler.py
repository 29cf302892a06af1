"""Merge current conditions and forecast views into the response payload."""

from skyview.models.forecast import ForecastViews
from skyview.models.weather import CurrentConditions, WeatherPayload


def assemble_payload(
    current: CurrentConditions,
    views: ForecastViews,
    resolved_city: str | None,
    resolved_country: str | None,
) -> WeatherPayload:
    """Pure field-for-field merge; no value is recomputed or defaulted to zero."""
    return WeatherPayload(
        city=resolved_city or current.location_name,
        country=resolved_country or current.country_code or "",
        temperature=current.temp,
        feels_like=current.feels_like,
        description=current.description,
        icon=current.icon,
        humidity=current.humidity,
        pressure=current.pressure,
        visibility=current.visibility,
        wind_speed=current.wind_speed,
        sunrise=current.sunrise_utc,
        sunset=current.sunset_utc,
        timezone=current.timezone_offset,
        forecast=views,
    )
