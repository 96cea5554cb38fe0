"""Exception hierarchy for run-terminating failures."""


class RouteRunnerError(RuntimeError):
    """Raised when a run cannot continue; the CLI exits non-zero."""


class RouteConfigError(RouteRunnerError):
    """The named route configuration is missing or malformed."""


class TrackLoadError(RouteRunnerError):
    """The GPX track could not be read or holds no points."""


class NoBootedDevicesError(RouteRunnerError):
    """No simulator instance is booted."""


class InvalidTransitionError(RuntimeError):
    """A session state change that the state machine does not allow."""


__all__ = [
    "InvalidTransitionError",
    "NoBootedDevicesError",
    "RouteConfigError",
    "RouteRunnerError",
    "TrackLoadError",
]
