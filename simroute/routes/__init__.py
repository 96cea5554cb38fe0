from .route_config import RouteConfig, StartingPoint, load_route_config, route_config_path
from .track_loader import Waypoint, load_track, parse_track

__all__ = [
    "RouteConfig",
    "StartingPoint",
    "Waypoint",
    "load_route_config",
    "load_track",
    "parse_track",
    "route_config_path",
]
