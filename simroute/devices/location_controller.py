"""
Location Controller - per-device location commands with failure isolation.

Each operation targets a single simulator, reports success as a bool and
never lets a command failure escape, so one misbehaving simulator cannot
stop the others from being driven.
"""

from typing import List, Optional, Sequence

from simroute.core import console
from simroute.core.logging_utils import get_module_logger
from simroute.devices.controller import DeviceController
from simroute.devices.simulation_set import ActiveSimulationSet
from simroute.routes.track_loader import Waypoint


class LocationController:

    def __init__(
        self,
        device_controller: DeviceController,
        simulations: Optional[ActiveSimulationSet] = None,
    ):
        self.logger = get_module_logger("LocationController")
        self.device_controller = device_controller
        self.simulations = simulations if simulations is not None else ActiveSimulationSet()

    def _report_failure(self, action: str, device_id: str, exc: Exception) -> None:
        self.logger.error("Error %s for simulator %s: %s", action, device_id, exc)
        console.error(f"Error {action} for simulator {device_id}:", exc)

    async def list_devices(self) -> List[str]:
        """Return booted simulator ids. Errors propagate to the caller."""
        return await self.device_controller.list_booted_devices()

    async def set_position(self, device_id: str, latitude: float, longitude: float) -> bool:
        """Jump ``device_id`` to a fixed coordinate."""
        try:
            await self.device_controller.set_location(device_id, latitude, longitude)
        except Exception as exc:
            self._report_failure("setting location", device_id, exc)
            return False

        self.logger.info("Simulator %s positioned at %.6f,%.6f", device_id, latitude, longitude)
        return True

    async def start_route(
        self,
        device_id: str,
        waypoints: Sequence[Waypoint],
        speed: float,
        interval: float,
    ) -> bool:
        """
        Start playing ``waypoints`` on ``device_id``.

        A route already running on the device is stopped first, so a device
        never has more than one active route. Waypoints are passed through
        in the order given.
        """
        if device_id in self.simulations:
            self.logger.info("Simulator %s already running a route; stopping it first", device_id)
            await self.stop(device_id)

        self.logger.info(
            "Starting location simulation for simulator %s (%d points, speed=%s m/s, interval=%s s)",
            device_id,
            len(waypoints),
            speed,
            interval,
        )
        console.status(f"Starting location simulation for simulator {device_id}")

        try:
            await self.device_controller.start_route(device_id, waypoints, speed, interval)
        except Exception as exc:
            self._report_failure("setting location route", device_id, exc)
            return False

        self.simulations.add(device_id)
        return True

    async def stop(self, device_id: str) -> bool:
        """
        Clear the simulated location of ``device_id``.

        The device leaves the active set before the clear command runs.
        Calling this for a device with nothing running just re-issues the
        clear, which simctl accepts.
        """
        was_active = self.simulations.discard(device_id)

        try:
            await self.device_controller.clear_location(device_id)
        except Exception as exc:
            self._report_failure("stopping location simulation", device_id, exc)
            return False

        self.logger.info(
            "Stopped location simulation for simulator %s%s",
            device_id,
            "" if was_active else " (no active route)",
        )
        console.status(f"Stopped location simulation for simulator {device_id}")
        return True
