"""Forecast sample and aggregated view models."""

from dataclasses import dataclass, field

from skyview.models.common import drop_absent


@dataclass(frozen=True)
class ForecastSample:
    timestamp_utc: int
    temperature: float | None = None
    min_temperature: float | None = None
    max_temperature: float | None = None
    icon_code: str | None = None
    precipitation_probability: float | None = None


@dataclass(frozen=True)
class HourlyPoint:
    timestamp_utc: int
    temperature: float | None
    icon_code: str | None
    precipitation_probability: float

    def to_dict(self) -> dict:
        return drop_absent({
            "time": self.timestamp_utc,
            "temp": self.temperature,
            "icon": self.icon_code,
            "pop": self.precipitation_probability,
        })


@dataclass(frozen=True)
class DailyPoint:
    date: str  # YYYY-MM-DD, local calendar
    min_temp: float | None
    max_temp: float | None
    icon: str | None

    def to_dict(self) -> dict:
        return drop_absent({
            "date": self.date,
            "minTemp": self.min_temp,
            "maxTemp": self.max_temp,
            "icon": self.icon,
        })


@dataclass(frozen=True)
class ForecastViews:
    hourly: list[HourlyPoint] = field(default_factory=list)
    daily: list[DailyPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "hourly": [p.to_dict() for p in self.hourly],
            "daily": [p.to_dict() for p in self.daily],
        }
