from .controller import DeviceController
from .location_controller import LocationController
from .simctl import SimctlController, SimctlError, parse_booted_devices
from .simulation_set import ActiveSimulationSet

__all__ = [
    "ActiveSimulationSet",
    "DeviceController",
    "LocationController",
    "SimctlController",
    "SimctlError",
    "parse_booted_devices",
]
