"""Route configuration files.

A route is a JSON document stored as ``<routes_dir>/<name>.json``::

    {
        "name": "Disneyland",
        "description": "Main Street loop",
        "gpxFile": "disneyland.gpx",
        "startingPoint": {"latitude": 33.8121, "longitude": -117.9190}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import aiofiles

from simroute.core.errors import RouteConfigError
from simroute.core.logging_utils import get_module_logger
from simroute.core.paths import ROUTES_DIR

logger = get_module_logger("RouteConfig")

ROUTE_FILE_SUFFIX = ".json"


@dataclass(frozen=True)
class StartingPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class RouteConfig:
    name: str
    description: str
    gpx_file: str
    starting_point: StartingPoint

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, default_name: str = "") -> "RouteConfig":
        """Build a RouteConfig from the decoded JSON document.

        ``gpxFile`` and ``startingPoint`` are required; ``name`` falls back to
        ``default_name`` and ``description`` to an empty string.
        """
        if not isinstance(data, Mapping):
            raise RouteConfigError("Route configuration must be a JSON object")

        gpx_file = data.get("gpxFile")
        if not isinstance(gpx_file, str) or not gpx_file.strip():
            raise RouteConfigError("Route configuration is missing 'gpxFile'")

        point = data.get("startingPoint")
        if not isinstance(point, Mapping):
            raise RouteConfigError("Route configuration is missing 'startingPoint'")

        return cls(
            name=str(data.get("name") or default_name),
            description=str(data.get("description") or ""),
            gpx_file=gpx_file.strip(),
            starting_point=StartingPoint(
                latitude=_coordinate(point, "latitude", -90.0, 90.0),
                longitude=_coordinate(point, "longitude", -180.0, 180.0),
            ),
        )


def _coordinate(point: Mapping[str, Any], key: str, low: float, high: float) -> float:
    value = point.get(key)
    # bool is an int subclass; true/false is never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RouteConfigError(f"startingPoint.{key} must be a number, got {value!r}")
    value = float(value)
    if not low <= value <= high:
        raise RouteConfigError(f"startingPoint.{key} {value} is outside [{low}, {high}]")
    return value


def route_config_path(name: str, routes_dir: Path = ROUTES_DIR) -> Path:
    """Return the file that holds the route called ``name``."""
    if not name or not name.strip():
        raise RouteConfigError("Route name must not be empty")
    if Path(name).name != name or name in (".", ".."):
        raise RouteConfigError(f"Invalid route name: {name!r}")
    return Path(routes_dir) / f"{name}{ROUTE_FILE_SUFFIX}"


async def load_route_config(name: str, routes_dir: Path = ROUTES_DIR) -> RouteConfig:
    """Read and validate the route called ``name``.

    Raises:
        RouteConfigError: the file is missing, unreadable, not JSON, or
            lacks the GPX file name or starting point.
    """
    config_path = route_config_path(name, routes_dir)
    logger.debug("Loading route configuration from %s", config_path)

    try:
        async with aiofiles.open(config_path, "r", encoding="utf-8") as fh:
            raw = await fh.read()
    except FileNotFoundError as exc:
        raise RouteConfigError(f"Route configuration not found: {config_path}") from exc
    except OSError as exc:
        raise RouteConfigError(f"Unable to read route configuration {config_path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RouteConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    config = RouteConfig.from_dict(data, default_name=name)
    logger.info(
        "Loaded route '%s' (gpx=%s, start=%.6f,%.6f)",
        config.name,
        config.gpx_file,
        config.starting_point.latitude,
        config.starting_point.longitude,
    )
    return config


__all__ = [
    "RouteConfig",
    "StartingPoint",
    "load_route_config",
    "route_config_path",
]
