"""
Session Orchestrator - runs one route across every booted simulator.

Sequence:
1. Load the route configuration and its GPX track (fatal on failure)
2. Enumerate booted simulators (fatal if none)
3. Move every simulator to the route's starting point
4. Start the route on every simulator
5. Wait for a cancel request (ESC or a signal)
6. Re-enumerate and clear location simulation on every booted simulator

Device phases run one simulator at a time; a failure on one simulator is
logged and the next one is still processed.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol

from simroute.core import console
from simroute.core.asyncio_utils import create_logged_task
from simroute.core.errors import NoBootedDevicesError, RouteRunnerError
from simroute.core.logging_utils import get_module_logger
from simroute.core.paths import GPX_DIR, ROUTES_DIR
from simroute.core.session_state_machine import SessionState, SessionStateMachine
from simroute.devices.controller import DeviceController
from simroute.devices.location_controller import LocationController
from simroute.devices.simulation_set import ActiveSimulationSet
from simroute.routes.route_config import RouteConfig, load_route_config
from simroute.routes.track_loader import Waypoint, load_track

DEFAULT_SPEED = 20.0
DEFAULT_INTERVAL = 1.0

EXIT_OK = 0
EXIT_FATAL = 1


class CancelListener(Protocol):
    async def listen(self, on_cancel) -> None: ...
    def stop(self) -> None: ...


@dataclass
class SessionOptions:
    route: str
    speed: float = DEFAULT_SPEED
    interval: float = DEFAULT_INTERVAL
    routes_dir: Path = field(default_factory=lambda: ROUTES_DIR)
    gpx_dir: Path = field(default_factory=lambda: GPX_DIR)


class SessionOrchestrator:

    def __init__(
        self,
        options: SessionOptions,
        device_controller: DeviceController,
        key_listener: Optional[CancelListener] = None,
    ):
        self.logger = get_module_logger("SessionOrchestrator")
        self.options = options
        self.state = SessionStateMachine()
        self.simulations = ActiveSimulationSet()
        self.location = LocationController(device_controller, self.simulations)
        self.key_listener = key_listener
        self._listener_task: Optional[asyncio.Task] = None

    def request_cancel(self, source: str = "unknown") -> bool:
        """Ask the session to stop; safe to call from any phase, any number of times."""
        return self.state.request_cancel(source)

    # ------------------------------------------------------------------
    # Phases

    async def _initialize(self) -> tuple[RouteConfig, List[Waypoint], List[str]]:
        config = await load_route_config(self.options.route, self.options.routes_dir)
        waypoints = await load_track(config.gpx_file, self.options.gpx_dir)
        console.status(f"Found {len(waypoints)} track points")

        try:
            devices = await self.location.list_devices()
        except Exception as exc:
            self.logger.error("Error getting simulators: %s", exc)
            raise NoBootedDevicesError(f"Unable to list simulators: {exc}") from exc

        if not devices:
            raise NoBootedDevicesError("No booted simulators found")

        return config, waypoints, devices

    async def _start_routes(self, config: RouteConfig, waypoints: List[Waypoint], devices: List[str]) -> None:
        start = config.starting_point
        console.status("Setting initial location for all simulators")
        for device_id in devices:
            await self.location.set_position(device_id, start.latitude, start.longitude)

        console.status(f"Starting location simulation for {len(devices)} simulators")
        for device_id in devices:
            await self.location.start_route(
                device_id, waypoints, self.options.speed, self.options.interval
            )

    async def _stop_all(self) -> None:
        try:
            devices = await self.location.list_devices()
        except Exception as exc:
            devices = list(self.simulations)
            self.logger.warning(
                "Could not re-enumerate simulators (%s); stopping %d tracked simulators",
                exc,
                len(devices),
            )

        for device_id in self.simulations.snapshot() - set(devices):
            self.logger.warning("Simulator %s is no longer booted; dropping it", device_id)
            self.simulations.discard(device_id)

        for device_id in devices:
            await self.location.stop(device_id)

    # ------------------------------------------------------------------
    # Listener lifecycle

    def _start_listener(self) -> None:
        if self.key_listener is None:
            return
        self._listener_task = create_logged_task(
            self.key_listener.listen(self.request_cancel),
            logger=self.logger,
            context="keyboard listener",
        )

    async def _stop_listener(self) -> None:
        if self.key_listener is not None:
            self.key_listener.stop()
        task = self._listener_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._listener_task = None

    # ------------------------------------------------------------------

    async def run(self) -> int:
        """Run the session to completion and return the process exit code."""
        self.state.transition(SessionState.INITIALIZING)
        self._start_listener()

        try:
            try:
                config, waypoints, devices = await self._initialize()
            except RouteRunnerError as exc:
                self.logger.error("%s", exc)
                console.error(str(exc))
                self.state.transition(SessionState.TERMINATED)
                return EXIT_FATAL

            self.logger.info(
                "Route '%s': %d points on %d simulators (speed=%s m/s, interval=%s s)",
                config.name,
                len(waypoints),
                len(devices),
                self.options.speed,
                self.options.interval,
            )
            await self._start_routes(config, waypoints, devices)

            self.state.transition(SessionState.RUNNING)
            console.notice("Press ESC to stop the simulation")
            source = await self.state.wait_for_cancel()

            self.state.transition(SessionState.STOPPING)
            self.logger.info("Stopping simulation (requested by %s)", source)
            await self._stop_all()

            self.state.transition(SessionState.TERMINATED)
            console.notice("\nSimulation stopped.")
            return EXIT_OK
        finally:
            await self._stop_listener()
