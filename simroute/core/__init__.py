from .errors import (
    InvalidTransitionError,
    NoBootedDevicesError,
    RouteConfigError,
    RouteRunnerError,
    TrackLoadError,
)
from .session_state_machine import SessionState, SessionStateMachine

__all__ = [
    "InvalidTransitionError",
    "NoBootedDevicesError",
    "RouteConfigError",
    "RouteRunnerError",
    "SessionState",
    "SessionStateMachine",
    "TrackLoadError",
]
