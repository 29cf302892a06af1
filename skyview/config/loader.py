"""YAML config loader with environment overrides and runtime get/set."""

import hashlib
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from skyview.config.schema import AppConfig

DEFAULT_CONFIG = "config/skyview.yaml"
CONFIG_PATH_ENV = "SKYVIEW_CONFIG"

# Secrets and deployment-specific values may come from the environment.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "OPENWEATHER_API_KEY": ("openweather", "api_key"),
    "JWT_SECRET": ("auth", "jwt_secret"),
    "SKYVIEW_DB_PATH": ("storage", "db_path"),
    "CLIENT_ORIGIN": ("server", "cors_origin"),
}


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> AppConfig:
    """Load and validate config from a YAML file, then apply env overrides.

    A missing path or empty file yields the defaults.
    """
    raw: dict = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    env = os.environ if environ is None else environ
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            raw.setdefault(section, {})[key] = value

    return AppConfig(**raw)


def config_hash(config: AppConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def redacted_dump(config: AppConfig) -> str:
    """JSON dump with secrets masked, for display."""
    data = json.loads(config.model_dump_json())
    for section, key in (("openweather", "api_key"), ("auth", "jwt_secret")):
        if data[section][key]:
            data[section][key] = "***"
    return json.dumps(data, indent=2)


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'openweather.timeout_seconds'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: AppConfig, dotted_key: str, value: Any) -> AppConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new AppConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    old_value = target.get(parts[-1])
    if isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return AppConfig(**data)


def save_config(config: AppConfig, path: str | Path) -> None:
    """Write config back to YAML, omitting secrets."""
    data = json.loads(config.model_dump_json())
    data["openweather"].pop("api_key", None)
    data["auth"].pop("jwt_secret", None)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
