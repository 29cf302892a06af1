"""Forecast aggregation: 3-hour provider samples into hourly and daily views.

Both views are pure functions of their inputs. Local calendar dates are derived
by shifting each UTC timestamp by the location's offset and reading the date
off the shifted instant as if it were UTC, so results never depend on the host
timezone database.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from skyview.errors import MalformedInput
from skyview.models.forecast import DailyPoint, ForecastSample, ForecastViews, HourlyPoint

HOURLY_LIMIT = 8  # 8 x 3h samples ~ 24h
DAILY_LIMIT = 5
NOON = 12
SECONDS_PER_DAY = 86400


def build_hourly_view(samples: Sequence[ForecastSample], now_utc: int) -> list[HourlyPoint]:
    """Return up to 8 points at or after now_utc, in the order received."""
    _require_list(samples)
    points: list[HourlyPoint] = []
    for s in samples:
        if s.timestamp_utc < now_utc:
            continue
        points.append(
            HourlyPoint(
                timestamp_utc=s.timestamp_utc,
                temperature=s.temperature,
                icon_code=s.icon_code,
                precipitation_probability=(
                    s.precipitation_probability
                    if s.precipitation_probability is not None
                    else 0
                ),
            )
        )
        if len(points) == HOURLY_LIMIT:
            break
    return points


@dataclass
class _DayAccumulator:
    date: str
    min_temp: float | None
    max_temp: float | None
    icon: str | None
    icon_hour: int

    def fold(self, sample: ForecastSample, local_hour: int) -> None:
        if sample.min_temperature is not None:
            if self.min_temp is None or sample.min_temperature < self.min_temp:
                self.min_temp = sample.min_temperature
        if sample.max_temperature is not None:
            if self.max_temp is None or sample.max_temperature > self.max_temp:
                self.max_temp = sample.max_temperature
        # Strictly closer to noon wins; ties keep the earlier sample.
        if abs(local_hour - NOON) < abs(self.icon_hour - NOON):
            self.icon = sample.icon_code or self.icon
            self.icon_hour = local_hour

    def to_point(self) -> DailyPoint:
        return DailyPoint(
            date=self.date, min_temp=self.min_temp, max_temp=self.max_temp, icon=self.icon
        )


def build_daily_view(
    samples: Sequence[ForecastSample], timezone_offset: int
) -> list[DailyPoint]:
    """Group samples by local date, drop the earliest date, return up to 5 days."""
    _require_list(samples)
    days: dict[str, _DayAccumulator] = {}
    for s in samples:
        date, hour = local_date_hour(s.timestamp_utc, timezone_offset)
        acc = days.get(date)
        if acc is None:
            days[date] = _DayAccumulator(
                date=date,
                min_temp=s.min_temperature,
                max_temp=s.max_temperature,
                icon=s.icon_code,
                icon_hour=hour,
            )
        else:
            acc.fold(s, hour)

    ordered = [days[d] for d in sorted(days)]
    return [acc.to_point() for acc in ordered[1 : 1 + DAILY_LIMIT]]


def compute_forecast_views(
    samples: Sequence[ForecastSample], now_utc: int, timezone_offset: int
) -> ForecastViews:
    return ForecastViews(
        hourly=build_hourly_view(samples, now_utc),
        daily=build_daily_view(samples, timezone_offset),
    )


def local_date_hour(timestamp_utc: int, timezone_offset: int) -> tuple[str, int]:
    """Local calendar date ("YYYY-MM-DD") and hour of a UTC instant.

    Pure integer arithmetic, so every integer timestamp maps to a date, even
    outside the year range of `datetime`.
    """
    days, seconds = divmod(timestamp_utc + timezone_offset, SECONDS_PER_DAY)
    year, month, day = _civil_from_days(days)
    return f"{year:04d}-{month:02d}-{day:02d}", seconds // 3600


def _civil_from_days(days: int) -> tuple[int, int, int]:
    # Proleptic Gregorian date for days since 1970-01-01 (Hinnant's civil_from_days)
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def _require_list(samples: object) -> None:
    if not isinstance(samples, (list, tuple)):
        raise MalformedInput(
            f"forecast samples must be a list, got {type(samples).__name__}"
        )
