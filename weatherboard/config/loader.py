"""YAML config loader with environment credential override and runtime get/set."""

import hashlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from weatherboard.config.defaults import API_KEY_ENV
from weatherboard.config.schema import DashboardConfig
from weatherboard.errors import ConfigurationMissing

logger = logging.getLogger(__name__)


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> DashboardConfig:
    """Load and validate config from a YAML file.

    A missing file or empty YAML yields defaults. The provider API key is
    taken from the environment when set there, overriding the file.
    """
    if environ is None:
        environ = os.environ

    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.info("Config file %s not found, using defaults", path)

    env_key = environ.get(API_KEY_ENV, "").strip()
    if env_key:
        raw.setdefault("provider", {})
        raw["provider"]["api_key"] = env_key

    return DashboardConfig(**raw)


def save_config(config: DashboardConfig, path: str | Path) -> None:
    """Write config back to YAML. The API key is never written to disk."""
    data = json.loads(config.model_dump_json())
    data["provider"].pop("api_key", None)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)


def require_api_key(config: DashboardConfig) -> str:
    """Return the provider API key or raise ConfigurationMissing."""
    key = config.provider.api_key.strip()
    if not key:
        raise ConfigurationMissing(
            f"No weather provider API key configured; set {API_KEY_ENV} "
            "or provider.api_key in the config file"
        )
    return key


def config_hash(config: DashboardConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: DashboardConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'refresh.interval_seconds'."""
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


def set_config_value(
    config: DashboardConfig, dotted_key: str, value: Any
) -> DashboardConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new DashboardConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target[parts[-1]]
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return DashboardConfig(**data)
