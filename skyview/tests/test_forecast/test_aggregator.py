"""Tests for the hourly/daily forecast aggregation."""

import pytest

from skyview.errors import MalformedInput
from skyview.forecast.aggregator import (
    build_daily_view,
    build_hourly_view,
    compute_forecast_views,
    local_date_hour,
)
from skyview.models.forecast import ForecastSample

# 2026-03-01T00:00:00Z
T = 1772323200
HOUR = 3600


def _sample(ts: int, **kwargs) -> ForecastSample:
    return ForecastSample(timestamp_utc=ts, **kwargs)


def _series(start: int, count: int, step_hours: int = 3) -> list[ForecastSample]:
    return [
        _sample(
            start + i * step_hours * HOUR,
            temperature=float(i),
            min_temperature=float(i) - 1,
            max_temperature=float(i) + 1,
            icon_code=f"i{i}",
            precipitation_probability=0.1,
        )
        for i in range(count)
    ]


class TestHourlyView:
    def test_empty(self):
        assert build_hourly_view([], T) == []

    def test_caps_at_eight(self):
        points = build_hourly_view(_series(T, 16), T)
        assert len(points) == 8
        assert points[0].timestamp_utc == T
        assert points[-1].timestamp_utc == T + 21 * HOUR

    def test_excludes_past_samples(self):
        samples = _series(T, 10)
        now = T + 4 * HOUR
        points = build_hourly_view(samples, now)
        assert all(p.timestamp_utc >= now for p in points)
        assert points[0].timestamp_utc == T + 6 * HOUR
        assert len(points) == 8

    def test_sample_at_now_is_included(self):
        points = build_hourly_view(_series(T, 3), T + 3 * HOUR)
        assert [p.timestamp_utc for p in points] == [T + 3 * HOUR, T + 6 * HOUR]

    def test_fewer_than_eight_not_padded(self):
        points = build_hourly_view(_series(T, 3), T)
        assert len(points) == 3

    def test_preserves_received_order(self):
        samples = [_sample(T + 6 * HOUR), _sample(T), _sample(T + 3 * HOUR)]
        points = build_hourly_view(samples, T)
        assert [p.timestamp_utc for p in points] == [T + 6 * HOUR, T, T + 3 * HOUR]

    def test_missing_pop_defaults_to_zero(self):
        points = build_hourly_view([_sample(T, temperature=5.0)], T)
        assert points[0].precipitation_probability == 0
        assert points[0].temperature == 5.0
        assert points[0].icon_code is None

    def test_fields_mapped(self):
        sample = _sample(
            T, temperature=3.5, icon_code="10n", precipitation_probability=0.75
        )
        point = build_hourly_view([sample], T)[0]
        assert point.to_dict() == {"time": T, "temp": 3.5, "icon": "10n", "pop": 0.75}

    def test_length_bounded_by_qualifying_samples(self):
        samples = _series(T - 30 * HOUR, 14)
        qualifying = [s for s in samples if s.timestamp_utc >= T]
        points = build_hourly_view(samples, T)
        assert len(points) <= 8
        assert len(points) <= len(qualifying)

    def test_not_a_list(self):
        with pytest.raises(MalformedInput):
            build_hourly_view({"dt": T}, T)


class TestDailyView:
    def test_empty(self):
        assert build_daily_view([], 0) == []

    def test_single_day_returns_empty(self):
        assert build_daily_view(_series(T, 8), 0) == []

    def test_drops_first_day(self):
        days = build_daily_view(_series(T, 16), 0)
        assert [d.date for d in days] == ["2026-03-02"]

    def test_at_most_five_days(self):
        days = build_daily_view(_series(T, 8 * 8), 0)
        assert len(days) == 5
        assert [d.date for d in days] == [
            "2026-03-02",
            "2026-03-03",
            "2026-03-04",
            "2026-03-05",
            "2026-03-06",
        ]

    def test_sorted_and_unique(self):
        samples = list(reversed(_series(T, 40)))
        dates = [d.date for d in build_daily_view(samples, 0)]
        assert dates == sorted(dates)
        assert len(dates) == len(set(dates))

    def test_never_includes_earliest_local_date(self):
        samples = _series(T + 21 * HOUR, 20)
        earliest = min(
            local_date_hour(s.timestamp_utc, 0)[0] for s in samples
        )
        dates = [d.date for d in build_daily_view(samples, 0)]
        assert earliest not in dates

    def test_min_max_folding(self):
        day1 = T + 24 * HOUR
        samples = [
            _sample(T, min_temperature=0.0, max_temperature=0.0),
            _sample(day1, min_temperature=2.0, max_temperature=2.0),
            _sample(day1 + 3 * HOUR, min_temperature=-1.0, max_temperature=9.0),
            _sample(day1 + 6 * HOUR, min_temperature=5.0, max_temperature=5.0),
        ]
        (day,) = build_daily_view(samples, 0)
        assert day.min_temp == -1.0
        assert day.max_temp == 9.0

    def test_absent_min_does_not_suppress_real_value(self):
        day1 = T + 24 * HOUR
        samples = [
            _sample(T),
            _sample(day1, min_temperature=None, max_temperature=None),
            _sample(day1 + 3 * HOUR, min_temperature=4.0, max_temperature=7.0),
            _sample(day1 + 6 * HOUR),
        ]
        (day,) = build_daily_view(samples, 0)
        assert day.min_temp == 4.0
        assert day.max_temp == 7.0

    def test_absent_is_not_zero(self):
        day1 = T + 24 * HOUR
        samples = [
            _sample(T),
            _sample(day1, min_temperature=3.0, max_temperature=-3.0),
            _sample(day1 + 3 * HOUR),
        ]
        (day,) = build_daily_view(samples, 0)
        assert day.min_temp == 3.0
        assert day.max_temp == -3.0

    def test_all_absent_stays_absent(self):
        samples = [_sample(T), _sample(T + 24 * HOUR)]
        (day,) = build_daily_view(samples, 0)
        assert day.min_temp is None
        assert day.max_temp is None
        assert day.to_dict() == {"date": "2026-03-02"}

    def test_icon_closest_to_noon(self):
        day1 = T + 24 * HOUR
        samples = [
            _sample(T, icon_code="X"),
            _sample(day1 + 9 * HOUR, icon_code="A"),
            _sample(day1 + 13 * HOUR, icon_code="B"),
        ]
        (day,) = build_daily_view(samples, 0)
        assert day.icon == "B"

    def test_icon_tie_keeps_earlier(self):
        day1 = T + 24 * HOUR
        samples = [
            _sample(T, icon_code="X"),
            _sample(day1 + 9 * HOUR, icon_code="A"),
            _sample(day1 + 15 * HOUR, icon_code="B"),
        ]
        (day,) = build_daily_view(samples, 0)
        assert day.icon == "A"

    def test_icon_hour_uses_local_time(self):
        # +3h offset: 09:00 UTC is 12:00 local, 12:00 UTC is 15:00 local
        offset = 3 * HOUR
        day1 = T + 24 * HOUR
        samples = [
            _sample(T, icon_code="X"),
            _sample(day1 + 9 * HOUR, icon_code="noon"),
            _sample(day1 + 12 * HOUR, icon_code="afternoon"),
        ]
        (day,) = build_daily_view(samples, offset)
        assert day.icon == "noon"

    def test_offset_shifts_local_date(self):
        # 22:00 UTC on day 0 is 01:00 local on day 1 at UTC+3
        samples = [_sample(T), _sample(T + 22 * HOUR, max_temperature=8.0)]
        assert build_daily_view(samples, 0) == []
        (day,) = build_daily_view(samples, 3 * HOUR)
        assert day.date == "2026-03-02"
        assert day.max_temp == 8.0

    def test_negative_offset(self):
        # 02:00 UTC on day 1 is 21:00 local on day 0 at UTC-5
        samples = [
            _sample(T - 12 * HOUR),
            _sample(T + 26 * HOUR, max_temperature=1.0),
        ]
        (day,) = build_daily_view(samples, -5 * HOUR)
        assert day.date == "2026-03-01"

    def test_idempotent(self):
        samples = _series(T, 40)
        assert build_daily_view(samples, 3600) == build_daily_view(samples, 3600)

    def test_output_shape(self):
        days = build_daily_view(_series(T, 16), 0)
        assert set(days[0].to_dict()) == {"date", "minTemp", "maxTemp", "icon"}

    def test_not_a_list(self):
        with pytest.raises(MalformedInput):
            build_daily_view("not a list", 0)


class TestComputeForecastViews:
    def test_two_day_scenario(self):
        samples = _series(T, 16)
        views = compute_forecast_views(samples, T, 0)

        assert len(views.hourly) == 8
        assert views.hourly[0].timestamp_utc == T
        assert views.hourly[-1].timestamp_utc == T + 21 * HOUR

        assert 1 <= len(views.daily) <= 2
        assert views.daily[0].date == "2026-03-02"
        # Day 1 holds samples 8..15: min_temperature = i - 1, max = i + 1
        assert views.daily[0].min_temp == 7.0
        assert views.daily[0].max_temp == 16.0
        # 12:00 local is sample 12
        assert views.daily[0].icon == "i12"

    def test_empty(self):
        views = compute_forecast_views([], T, 0)
        assert views.hourly == []
        assert views.daily == []
        assert views.to_dict() == {"hourly": [], "daily": []}


class TestLocalDateHour:
    def test_epoch(self):
        assert local_date_hour(0, 0) == ("1970-01-01", 0)

    def test_offset_applied(self):
        assert local_date_hour(T + 22 * HOUR, 3 * HOUR) == ("2026-03-02", 1)

    def test_before_epoch(self):
        assert local_date_hour(-1, 0) == ("1969-12-31", 23)

    def test_leap_day(self):
        # 2024-02-29T12:00:00Z
        assert local_date_hour(1709164800 + 12 * HOUR, 0) == ("2024-02-29", 12)

    def test_beyond_datetime_range(self):
        # 10000-01-01T00:00:00Z
        assert local_date_hour(253402300800, 0) == ("10000-01-01", 0)

    def test_far_future_samples_do_not_raise(self):
        start = 253402300800
        samples = [_sample(start), _sample(start + 24 * HOUR, min_temperature=1.0)]
        days = build_daily_view(samples, 0)
        assert [d.date for d in days] == ["10000-01-02"]
