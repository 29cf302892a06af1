"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

OPENWEATHER_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
OPENWEATHER_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
OPENWEATHER_GEO_URL = "https://api.openweathermap.org/geo/1.0/direct"


class OpenWeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    weather_url: str = OPENWEATHER_WEATHER_URL
    forecast_url: str = OPENWEATHER_FORECAST_URL
    geo_url: str = OPENWEATHER_GEO_URL
    units: str = "metric"
    geo_limit: int = Field(default=5, ge=1, le=5)
    timeout_seconds: float = Field(default=8.0, gt=0.0, le=30.0)


class AuthConfig(BaseModel):
    model_config = {"extra": "forbid"}

    jwt_secret: str = ""
    algorithm: str = "HS256"
    token_ttl_days: int = Field(default=7, ge=1)
    min_password_length: int = Field(default=6, ge=1)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/skyview.db"


class HistoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    max_entries: int = Field(default=20, ge=1)


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=1, le=65535)
    cors_origin: str = "http://localhost:5001"


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    openweather: OpenWeatherConfig = OpenWeatherConfig()
    auth: AuthConfig = AuthConfig()
    storage: StorageConfig = StorageConfig()
    history: HistoryConfig = HistoryConfig()
    server: ServerConfig = ServerConfig()
