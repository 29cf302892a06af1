"""CLI entry point for the SkyView weather service."""

import argparse
import asyncio
import json
import logging

from skyview.config.loader import (
    DEFAULT_CONFIG,
    get_config_value,
    load_config,
    redacted_dump,
    save_config,
    set_config_value,
)
from skyview.errors import CityNotFound, SkyViewError, UpstreamUnavailable
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.pipeline.weather_lookup import WeatherLookup
from skyview.storage.database import connect, run_migrations


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyview",
        description="City weather lookup service",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default=None)
    serve_p.add_argument("--port", type=int, default=None)

    # lookup
    lookup_p = sub.add_parser("lookup", help="Print the weather payload for a city")
    lookup_p.add_argument("city", nargs="+", help="City name")

    # migrate
    sub.add_parser("migrate", help="Apply pending database migrations")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = set_config_value(config, "storage.db_path", args.db)

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "lookup":
        return _cmd_lookup(config, args)
    elif args.command == "migrate":
        return _cmd_migrate(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config, args) -> int:
    import uvicorn

    from skyview.api import create_app

    uvicorn.run(
        create_app(config),
        host=args.host or config.server.host,
        port=args.port or config.server.port,
    )
    return 0


def _cmd_lookup(config, args) -> int:
    lookup = WeatherLookup(OpenWeatherClient(config.openweather))
    city = " ".join(args.city)
    try:
        payload = asyncio.run(lookup.lookup(city))
    except CityNotFound:
        print(f"City not found: {city}")
        return 1
    except UpstreamUnavailable as e:
        print(f"Weather service unavailable: {e.reason}")
        return 1
    except SkyViewError as e:
        print(f"Error: {e}")
        return 1
    print(json.dumps(payload.to_dict(), indent=2))
    return 0


def _cmd_migrate(config) -> int:
    conn = connect(config.storage.db_path)
    try:
        applied = run_migrations(conn)
    finally:
        conn.close()
    if applied:
        print(f"Applied: {', '.join(applied)}")
    else:
        print("Database is up to date")
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(redacted_dump(config))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        # Environment and --db overrides are not written back to the file
        file_config = load_config(args.config, environ={})
        try:
            new_config = set_config_value(file_config, key, value)
        except (KeyError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"{key} = {get_config_value(new_config, key)}")
        return 0
    else:
        print("Usage: skyview config {show|set}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
