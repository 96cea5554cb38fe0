"""GPX track loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

import aiofiles
import gpxpy
import gpxpy.gpx

from simroute.core.errors import TrackLoadError
from simroute.core.logging_utils import get_module_logger
from simroute.core.paths import GPX_DIR

logger = get_module_logger("TrackLoader")


@dataclass(frozen=True)
class Waypoint:
    latitude: float
    longitude: float

    def as_simctl_arg(self) -> str:
        return f"{self.latitude},{self.longitude}"


def parse_track(content: str) -> List[Waypoint]:
    """Return the points of the first track in ``content``, in document order.

    All segments of the first track are concatenated; later tracks, routes
    and standalone waypoints are ignored.
    """
    try:
        gpx = gpxpy.parse(content)
    except (gpxpy.gpx.GPXException, ValueError) as exc:
        raise TrackLoadError(f"Malformed GPX content: {exc}") from exc

    if not gpx.tracks:
        raise TrackLoadError("GPX file contains no tracks")

    track = gpx.tracks[0]
    points = [
        Waypoint(latitude=point.latitude, longitude=point.longitude)
        for segment in track.segments
        for point in segment.points
    ]
    if not points:
        raise TrackLoadError("No track points found in GPX file")
    return points


async def load_track(gpx_file: str, gpx_dir: Path = GPX_DIR) -> List[Waypoint]:
    """Read ``<gpx_dir>/<gpx_file>`` and return its first track's points.

    Raises:
        TrackLoadError: the file cannot be read, is not valid GPX, or its
            first track has no points.
    """
    path = Path(gpx_dir) / gpx_file
    logger.debug("Loading GPX track from %s", path)

    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as fh:
            content = await fh.read()
    except OSError as exc:
        raise TrackLoadError(f"Unable to read GPX file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise TrackLoadError(f"GPX file {path} is not UTF-8 text: {exc}") from exc

    waypoints = parse_track(content)
    logger.info("Loaded %d track points from %s", len(waypoints), path)
    return waypoints


__all__ = ["Waypoint", "load_track", "parse_track"]
