"""Shared test fixtures."""

import sqlite3
from pathlib import Path

import pytest
import yaml

from skyview.config.schema import AppConfig
from skyview.storage.database import connect, run_migrations

# 2026-03-01T00:00:00Z
DAY0 = 1772323200
HOUR = 3600


@pytest.fixture
def tmp_db(tmp_path: Path) -> sqlite3.Connection:
    """A migrated SQLite database in a temp directory."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        openweather={
            "api_key": "test-key",
            "weather_url": "https://owm.test/data/2.5/weather",
            "forecast_url": "https://owm.test/data/2.5/forecast",
            "geo_url": "https://owm.test/geo/1.0/direct",
            "timeout_seconds": 2.0,
        },
        auth={"jwt_secret": "test-secret"},
        storage={"db_path": str(tmp_path / "skyview.db")},
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "openweather": {"timeout_seconds": 5.0},
        "history": {"max_entries": 10},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def forecast_item(dt: int, temp: float = 10.0, icon: str = "01d", **extra) -> dict:
    """One OpenWeather /forecast list entry."""
    item = {
        "dt": dt,
        "main": {"temp": temp, "temp_min": temp - 1, "temp_max": temp + 1},
        "weather": [{"icon": icon, "description": "clear sky"}],
        "pop": 0.2,
    }
    item.update(extra)
    return item


@pytest.fixture
def geo_response() -> list[dict]:
    return [
        {"name": "London", "country": "GB", "lat": 51.5073, "lon": -0.1276},
        {"name": "London", "country": "CA", "lat": 42.9836, "lon": -81.2497},
    ]


@pytest.fixture
def current_response() -> dict:
    return {
        "name": "London",
        "main": {
            "temp": 11.2,
            "feels_like": 10.1,
            "humidity": 80,
            "pressure": 1012,
        },
        "weather": [{"description": "light rain", "icon": "10d"}],
        "visibility": 10000,
        "wind": {"speed": 4.6},
        "sys": {"country": "GB", "sunrise": DAY0 + 6 * HOUR, "sunset": DAY0 + 18 * HOUR},
        "timezone": 0,
    }


@pytest.fixture
def forecast_response() -> dict:
    """16 samples, 3h apart, starting at local midnight of DAY0 (offset 0)."""
    return {
        "list": [forecast_item(DAY0 + i * 3 * HOUR, temp=float(i)) for i in range(16)],
        "city": {"name": "London", "country": "GB", "timezone": 0},
    }
