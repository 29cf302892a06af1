"""Upstream location/current-conditions models and the assembled payload."""

from dataclasses import dataclass

from skyview.models.common import drop_absent
from skyview.models.forecast import ForecastViews


@dataclass(frozen=True)
class GeoCandidate:
    name: str | None
    country: str | None
    lat: float
    lon: float


@dataclass(frozen=True)
class CurrentConditions:
    temp: float | None = None
    feels_like: float | None = None
    description: str | None = None
    icon: str | None = None
    humidity: float | None = None
    pressure: float | None = None
    visibility: float | None = None
    wind_speed: float | None = None
    sunrise_utc: int | None = None
    sunset_utc: int | None = None
    timezone_offset: int | None = None
    location_name: str | None = None
    country_code: str | None = None


@dataclass(frozen=True)
class WeatherPayload:
    city: str | None
    country: str
    temperature: float | None
    feels_like: float | None
    description: str | None
    icon: str | None
    humidity: float | None
    pressure: float | None
    visibility: float | None
    wind_speed: float | None
    sunrise: int | None
    sunset: int | None
    timezone: int | None
    forecast: ForecastViews

    def to_dict(self) -> dict:
        """JSON shape returned to clients. Absent fields are omitted, never zeroed."""
        data = drop_absent({
            "city": self.city,
            "country": self.country,
            "temperature": self.temperature,
            "feelsLike": self.feels_like,
            "description": self.description,
            "icon": self.icon,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "visibility": self.visibility,
            "windSpeed": self.wind_speed,
            "sunrise": self.sunrise,
            "sunset": self.sunset,
            "timezone": self.timezone,
        })
        data["forecast"] = self.forecast.to_dict()
        return data
