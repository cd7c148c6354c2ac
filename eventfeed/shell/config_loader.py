"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config) are defined in eventfeed/core/config.py to avoid
information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from eventfeed.core.config import Config
from eventfeed.core.geo import Coordinate


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be an environment variable placeholder.

    "${VAR}" is replaced by the value of VAR. Unset variables leave the
    placeholder in place (validate_config warns about it).

    Args:
        value: Value to resolve

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_coordinate(data: dict[str, Any] | None) -> Coordinate | None:
    """Parse an optional coordinate from config data."""
    if not data:
        return None
    return Coordinate(
        latitude=float(_resolve_value(data["latitude"])),
        longitude=float(_resolve_value(data["longitude"])),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    location = data.get("location", {}) or {}

    return Config(
        events_api_url=_resolve_value(data.get("events_api_url", "")),
        request_timeout_seconds=int(data.get("request_timeout_seconds", 30)),
        default_radius_km=float(data.get("default_radius_km", 50.0)),
        timezone=data.get("timezone"),
        location_provider=location.get("provider", "none"),
        static_location=_parse_coordinate(location.get("static")),
        ip_location_url=location.get("ip_url", "https://ipapi.co/json/"),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: api=%s, location provider=%s, timezone=%s",
        config.events_api_url or "<unset>",
        config.location_provider,
        config.timezone or "<system>",
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        EVENTS_API_URL: Endpoint of the event retrieval service
        REQUEST_TIMEOUT_SECONDS: Timeout for outbound requests
        DEFAULT_RADIUS_KM: Radius used when a request gives none
        EVENTS_TIMEZONE: IANA zone for day boundaries
        LOCATION_PROVIDER: 'none', 'static' or 'ip'
        STATIC_LATITUDE / STATIC_LONGITUDE: Location for 'static'

    Returns:
        Config object from environment
    """
    static_location = None
    lat = os.environ.get("STATIC_LATITUDE")
    lon = os.environ.get("STATIC_LONGITUDE")
    if lat and lon:
        static_location = Coordinate(latitude=float(lat), longitude=float(lon))

    return Config(
        events_api_url=os.environ.get("EVENTS_API_URL", ""),
        request_timeout_seconds=int(os.environ.get("REQUEST_TIMEOUT_SECONDS", "30")),
        default_radius_km=float(os.environ.get("DEFAULT_RADIUS_KM", "50")),
        timezone=os.environ.get("EVENTS_TIMEZONE") or None,
        location_provider=os.environ.get("LOCATION_PROVIDER", "none"),
        static_location=static_location,
    )
