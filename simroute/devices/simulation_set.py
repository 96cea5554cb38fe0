"""Bookkeeping for simulators that currently have a route playing."""

from typing import Iterator, Set


class ActiveSimulationSet:
    """Device ids whose location route is running.

    Owned by the orchestrator and handed to the LocationController, which
    adds a device after a successful start and removes it before clearing.
    """

    def __init__(self):
        self._active: Set[str] = set()

    def add(self, device_id: str) -> None:
        self._active.add(device_id)

    def discard(self, device_id: str) -> bool:
        """Remove ``device_id``; returns True if it was active."""
        if device_id in self._active:
            self._active.remove(device_id)
            return True
        return False

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._active

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._active))

    def __len__(self) -> int:
        return len(self._active)

    def snapshot(self) -> frozenset:
        return frozenset(self._active)

    def __repr__(self) -> str:
        return f"ActiveSimulationSet({sorted(self._active)!r})"
