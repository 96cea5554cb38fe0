"""
``xcrun simctl`` backend.

Enumerates booted iOS simulators and drives their location simulation
through the ``simctl location`` sub-commands. Every call spawns one
process and waits for it to exit; a non-zero exit becomes a SimctlError.
"""

from __future__ import annotations

import asyncio
import re
from typing import List, Sequence

from simroute.core.logging_utils import get_module_logger
from simroute.routes.track_loader import Waypoint

logger = get_module_logger("Simctl")

SIMCTL_COMMAND = ("xcrun", "simctl")
_UDID_PATTERN = re.compile(r"\(([A-F0-9-]+)\)")
_STDERR_LIMIT = 500


class SimctlError(RuntimeError):
    """A simctl invocation could not be launched or exited non-zero."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def parse_booted_devices(listing: str) -> List[str]:
    """Extract UDIDs of booted devices from ``simctl list devices`` output.

    Device lines look like ``    iPhone 15 (5A1C...-9F2B) (Booted)``.
    Order follows the listing; duplicates are dropped.
    """
    devices: List[str] = []
    for line in listing.splitlines():
        if "Booted" not in line:
            continue
        match = _UDID_PATTERN.search(line)
        if match and match.group(1) not in devices:
            devices.append(match.group(1))
    return devices


def _format_number(value: float) -> str:
    return repr(float(value))


class SimctlController:
    """DeviceController backed by the Xcode command-line tools."""

    def __init__(self, command: Sequence[str] = SIMCTL_COMMAND):
        self.command = tuple(command)

    async def _run(self, *args: str) -> str:
        cmd = [*self.command, *args]
        logger.debug("Command: %s", " ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SimctlError(f"Unable to launch {cmd[0]}: {exc}") from exc

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            stderr_str = stderr.decode("utf-8", errors="ignore").strip()
            raise SimctlError(
                f"{' '.join(cmd[:4])} failed (exit code {process.returncode}): {stderr_str[:_STDERR_LIMIT]}",
                returncode=process.returncode,
                stderr=stderr_str,
            )
        return stdout.decode("utf-8", errors="ignore")

    async def list_booted_devices(self) -> List[str]:
        listing = await self._run("list", "devices")
        devices = parse_booted_devices(listing)
        logger.debug("Booted simulators: %s", ", ".join(devices) or "none")
        return devices

    async def set_location(self, device_id: str, latitude: float, longitude: float) -> None:
        await self._run(
            "location", device_id, "set", f"{_format_number(latitude)},{_format_number(longitude)}"
        )

    async def start_route(
        self, device_id: str, waypoints: Sequence[Waypoint], speed: float, interval: float
    ) -> None:
        await self._run(
            "location",
            device_id,
            "start",
            f"--speed={_format_number(speed)}",
            f"--interval={_format_number(interval)}",
            *(waypoint.as_simctl_arg() for waypoint in waypoints),
        )

    async def clear_location(self, device_id: str) -> None:
        await self._run("location", device_id, "clear")


__all__ = ["SIMCTL_COMMAND", "SimctlController", "SimctlError", "parse_booted_devices"]
