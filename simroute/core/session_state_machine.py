"""
Session State Machine - Tracks where a route run is in its lifecycle.

A run moves through:

    IDLE -> INITIALIZING -> RUNNING -> STOPPING -> TERMINATED

with one extra edge, INITIALIZING -> TERMINATED, for fatal start-up
failures. Cancel requests (ESC, SIGINT, SIGTERM) are funnelled through
``request_cancel()``; one arriving before RUNNING is held until the
session reaches RUNNING, so setup and teardown never interleave.
"""

import asyncio
from enum import Enum
from typing import Dict, FrozenSet, Optional

from simroute.core.errors import InvalidTransitionError
from simroute.core.logging_utils import get_module_logger


class SessionState(Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPING = "stopping"
    TERMINATED = "terminated"


_TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.INITIALIZING}),
    SessionState.INITIALIZING: frozenset({SessionState.RUNNING, SessionState.TERMINATED}),
    SessionState.RUNNING: frozenset({SessionState.STOPPING}),
    SessionState.STOPPING: frozenset({SessionState.TERMINATED}),
    SessionState.TERMINATED: frozenset(),
}

# States in which a cancel request is still meaningful.
_CANCELLABLE = frozenset({SessionState.IDLE, SessionState.INITIALIZING, SessionState.RUNNING})


class SessionStateMachine:
    """
    Single source of truth for the run state.

    The orchestrator drives transitions; the keyboard listener and signal
    handlers only ever call ``request_cancel()``.
    """

    def __init__(self):
        self.logger = get_module_logger("SessionStateMachine")
        self._state = SessionState.IDLE
        self._cancel_requested = asyncio.Event()
        self._cancel_source: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested.is_set()

    @property
    def cancel_source(self) -> Optional[str]:
        return self._cancel_source

    def can_transition(self, target: SessionState) -> bool:
        return target in _TRANSITIONS[self._state]

    def transition(self, target: SessionState) -> None:
        """Move to ``target``; raises InvalidTransitionError if not allowed."""
        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"Illegal session transition {self._state.value} -> {target.value}"
            )
        self.logger.debug("Session %s -> %s", self._state.value, target.value)
        self._state = target

    def request_cancel(self, source: str = "unknown") -> bool:
        """
        Record a cancel request.

        Returns True the first time a request is accepted. Later requests,
        and any request once stopping has begun, are ignored.
        """
        if self._cancel_requested.is_set() or self._state not in _CANCELLABLE:
            self.logger.debug(
                "Ignoring cancel from %s (state=%s)", source, self._state.value
            )
            return False

        self._cancel_source = source
        self._cancel_requested.set()
        if self._state == SessionState.RUNNING:
            self.logger.info("Cancel requested by %s", source)
        else:
            self.logger.info(
                "Cancel requested by %s during %s; queued until routes are running",
                source,
                self._state.value,
            )
        return True

    async def wait_for_cancel(self) -> str:
        """Block until a cancel request arrives; returns its source."""
        if self._state != SessionState.RUNNING:
            raise InvalidTransitionError(
                f"Cannot wait for cancel while {self._state.value}"
            )
        await self._cancel_requested.wait()
        return self._cancel_source or "unknown"
