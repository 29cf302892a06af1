"""SkyView HTTP API: weather lookup, auth, favorites, and search history."""

import logging
import os
import sqlite3
from collections.abc import Iterator

from fastapi import BackgroundTasks, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from skyview.auth.security import (
    create_access_token,
    decode_access_token,
    extract_token,
    hash_password,
    verify_password,
)
from skyview.config.loader import CONFIG_PATH_ENV, DEFAULT_CONFIG, load_config
from skyview.config.schema import AppConfig
from skyview.errors import AuthError, CityNotFound, ConfigurationError, UpstreamUnavailable
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.ingest.sanitize import normalize_city
from skyview.models.common import UserId
from skyview.models.user import User
from skyview.pipeline.history_recorder import HistoryRecorder
from skyview.pipeline.weather_lookup import WeatherLookup
from skyview.storage import favorite_repo, history_repo, user_repo
from skyview.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)

CITY_MIN_LENGTH = 2
CITY_MAX_LENGTH = 100
NO_STORE = {"Cache-Control": "no-store"}


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)
    password: str = Field(min_length=1, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=128)


class FavoriteRequest(BaseModel):
    city: str = Field(max_length=CITY_MAX_LENGTH * 2)
    country: str | None = Field(default=None, max_length=56)


def create_app(
    config: AppConfig | None = None, lookup: WeatherLookup | None = None
) -> FastAPI:
    config = config or load_config(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG))

    app = FastAPI(title="SkyView", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.server.cors_origin],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.lookup = lookup or WeatherLookup(OpenWeatherClient(config.openweather))
    app.state.recorder = HistoryRecorder(
        config.storage.db_path, config.history.max_entries
    )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            {"message": exc.detail}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in e["loc"][1:]), "message": e["msg"]}
            for e in exc.errors()
        ]
        message = errors[0]["message"] if errors else "Invalid request"
        return JSONResponse({"message": message, "errors": errors}, status_code=400)

    _register_routes(app)
    return app


# ── Dependencies ────────────────────────────────────────────────


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_conn(config: AppConfig = Depends(get_config)) -> Iterator[sqlite3.Connection]:
    conn = connect(config.storage.db_path)
    try:
        run_migrations(conn)
        yield conn
    finally:
        conn.close()


def _token_user_id(token: str, config: AppConfig) -> UserId:
    try:
        return decode_access_token(token, config.auth)
    except ConfigurationError:
        logger.exception("Auth is misconfigured")
        raise HTTPException(500, "Request failed")


def require_user_id(
    config: AppConfig = Depends(get_config),
    authorization: str | None = Header(default=None),
    x_auth_token: str | None = Header(default=None),
) -> UserId:
    token = extract_token(authorization, x_auth_token)
    if token is None:
        raise HTTPException(401, "Authentication required")
    try:
        return _token_user_id(token, config)
    except AuthError:
        raise HTTPException(401, "Invalid or expired token")


def optional_user_id(
    config: AppConfig = Depends(get_config),
    authorization: str | None = Header(default=None),
    x_auth_token: str | None = Header(default=None),
) -> UserId | None:
    """Like require_user_id, but a missing or invalid token means anonymous."""
    token = extract_token(authorization, x_auth_token)
    if token is None:
        return None
    try:
        return _token_user_id(token, config)
    except AuthError:
        return None


# ── Routes ──────────────────────────────────────────────────────


def _register_routes(app: FastAPI) -> None:
    @app.get("/api/health")
    def get_health():
        return {"status": "ok"}

    @app.get("/api/weather")
    async def get_weather(
        request: Request,
        background: BackgroundTasks,
        city: str = Query(default=""),
        user_id: UserId | None = Depends(optional_user_id),
    ):
        """Current conditions plus hourly and daily forecast for a city."""
        city = _validated_city(city)

        try:
            payload = await request.app.state.lookup.lookup(city)
        except CityNotFound:
            raise HTTPException(404, "City not found")
        except UpstreamUnavailable as e:
            if e.timed_out:
                raise HTTPException(504, "Weather service timeout")
            raise HTTPException(503, "Weather service unavailable")
        except Exception:
            logger.exception("Weather lookup failed for %r", city)
            raise HTTPException(500, "Request failed")

        if user_id is not None:
            background.add_task(
                request.app.state.recorder.record, user_id, payload.city, payload.country
            )
        return payload.to_dict()

    @app.post("/api/auth/register", status_code=201)
    def register(
        body: RegisterRequest,
        config: AppConfig = Depends(get_config),
        conn: sqlite3.Connection = Depends(get_conn),
    ):
        if len(body.password) < config.auth.min_password_length:
            raise HTTPException(
                400,
                f"Password must be at least {config.auth.min_password_length} "
                "characters long",
            )
        name = body.name.strip()
        if not name:
            raise HTTPException(400, "Name is required")
        if user_repo.get_user_by_email(conn, body.email) is not None:
            raise HTTPException(409, "Email already registered")

        try:
            user = user_repo.create_user(
                conn, name, body.email, hash_password(body.password)
            )
        except sqlite3.IntegrityError:
            raise HTTPException(409, "Email already registered")
        logger.info("Registered user %d", user.id)
        return {"token": _issue_token(user, config), "user": user.public_dict()}

    @app.post("/api/auth/login")
    def login(
        body: LoginRequest,
        config: AppConfig = Depends(get_config),
        conn: sqlite3.Connection = Depends(get_conn),
    ):
        user = user_repo.get_user_by_email(conn, body.email)
        if user is None or not verify_password(body.password, user.password_hash):
            raise HTTPException(401, "Invalid credentials")
        return {"token": _issue_token(user, config), "user": user.public_dict()}

    @app.get("/api/user/history")
    def get_history(
        user_id: UserId = Depends(require_user_id),
        conn: sqlite3.Connection = Depends(get_conn),
    ):
        history = history_repo.list_history(conn, user_id)
        return JSONResponse(
            {"history": [h.to_dict() for h in history]}, headers=NO_STORE
        )

    @app.get("/api/user/favorites")
    def get_favorites(
        user_id: UserId = Depends(require_user_id),
        conn: sqlite3.Connection = Depends(get_conn),
    ):
        return JSONResponse(_favorites_body(conn, user_id), headers=NO_STORE)

    @app.post("/api/user/favorites", status_code=201)
    def add_favorite(
        body: FavoriteRequest,
        user_id: UserId = Depends(require_user_id),
        conn: sqlite3.Connection = Depends(get_conn),
    ):
        city = _validated_city(body.city)
        country = (body.country or "").strip()
        if country and len(country) < 2:
            raise HTTPException(400, "Country must be between 2 and 56 characters")
        if user_repo.get_user(conn, user_id) is None:
            raise HTTPException(404, "User not found")
        if favorite_repo.find_favorite(conn, user_id, city, country) is not None:
            raise HTTPException(409, "City already in favorites")

        favorite_repo.add_favorite(conn, user_id, city, country)
        return _favorites_body(conn, user_id)

    @app.delete("/api/user/favorites/{favorite_id}")
    def remove_favorite(
        favorite_id: int,
        user_id: UserId = Depends(require_user_id),
        conn: sqlite3.Connection = Depends(get_conn),
    ):
        if user_repo.get_user(conn, user_id) is None:
            raise HTTPException(404, "User not found")
        if not favorite_repo.delete_favorite(conn, user_id, favorite_id):
            raise HTTPException(404, "Favorite not found")
        return _favorites_body(conn, user_id)


def _validated_city(raw: str) -> str:
    """Normalized city name; length bounds apply after whitespace is collapsed."""
    city = normalize_city(raw)
    if not city:
        raise HTTPException(400, "City is required")
    if not CITY_MIN_LENGTH <= len(city) <= CITY_MAX_LENGTH:
        raise HTTPException(
            400,
            f"City must be between {CITY_MIN_LENGTH} and {CITY_MAX_LENGTH} characters",
        )
    return city


def _issue_token(user: User, config: AppConfig) -> str:
    try:
        return create_access_token(user, config.auth)
    except ConfigurationError:
        logger.exception("Auth is misconfigured")
        raise HTTPException(500, "Request failed")


def _favorites_body(conn: sqlite3.Connection, user_id: UserId) -> dict:
    return {"favorites": [f.to_dict() for f in favorite_repo.list_favorites(conn, user_id)]}


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.config.server.host, port=app.state.config.server.port)
