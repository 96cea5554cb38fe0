"""Capability interface for whatever actually drives the simulators."""

from typing import List, Protocol, Sequence

from simroute.routes.track_loader import Waypoint


class DeviceController(Protocol):
    async def list_booted_devices(self) -> List[str]: ...
    async def set_location(self, device_id: str, latitude: float, longitude: float) -> None: ...
    async def start_route(
        self, device_id: str, waypoints: Sequence[Waypoint], speed: float, interval: float
    ) -> None: ...
    async def clear_location(self, device_id: str) -> None: ...
