"""Unit test fixtures for isolated, fast test execution.

Every fixture here keeps tests off the real ``xcrun simctl`` and out of the
user's home directory:
- route_workspace: temporary routes/ and gpx/ directories
- mock_controller: in-memory DeviceController recording every call
- isolated_env: temporary working directory and state directory
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

from tests.infrastructure.mocks import MockDeviceController, MockKeyListener


DISNEYLAND_START = {"latitude": 33.8121, "longitude": -117.9190}


@pytest.fixture(scope="function")
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty working directory with private state.

    Returns:
        Path to the isolated working directory
    """
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("SIMROUTE_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.delenv("SIMROUTE_CONFIG", raising=False)
    return work_dir


class RouteWorkspace:
    """Temporary routes/ and gpx/ directories with helpers to fill them."""

    def __init__(self, root: Path, fixtures_dir: Path):
        self.root = root
        self.fixtures_dir = fixtures_dir
        self.routes_dir = root / "routes"
        self.gpx_dir = root / "gpx"
        self.routes_dir.mkdir(parents=True, exist_ok=True)
        self.gpx_dir.mkdir(parents=True, exist_ok=True)

    def write_route(self, name: str, document: Any) -> Path:
        path = self.routes_dir / f"{name}.json"
        text = document if isinstance(document, str) else json.dumps(document)
        path.write_text(text, encoding="utf-8")
        return path

    def add_route(
        self,
        route_name: str = "x",
        gpx_file: str = "x.gpx",
        starting_point: Optional[Dict[str, float]] = None,
        **extra: Any,
    ) -> Path:
        document = {
            "gpxFile": gpx_file,
            "startingPoint": starting_point or dict(DISNEYLAND_START),
        }
        document.update(extra)
        return self.write_route(route_name, document)

    def copy_gpx(self, fixture_name: str, target_name: Optional[str] = None) -> Path:
        target = self.gpx_dir / (target_name or fixture_name)
        shutil.copyfile(self.fixtures_dir / fixture_name, target)
        return target

    def write_gpx(self, name: str, content: str) -> Path:
        path = self.gpx_dir / name
        path.write_text(content, encoding="utf-8")
        return path


@pytest.fixture
def route_workspace(tmp_path: Path, test_data_dir: Path) -> RouteWorkspace:
    return RouteWorkspace(tmp_path / "workspace", test_data_dir)


@pytest.fixture
def mock_controller_factory() -> Callable[..., MockDeviceController]:
    """Factory for MockDeviceController instances.

    Example:
        def test_two_devices(mock_controller_factory):
            controller = mock_controller_factory(booted=["A", "B"])
    """
    def _create(**kwargs: Any) -> MockDeviceController:
        return MockDeviceController(**kwargs)

    return _create


@pytest.fixture
def mock_controller() -> MockDeviceController:
    return MockDeviceController(booted=["SIM-A", "SIM-B"])


@pytest.fixture
def mock_key_listener() -> MockKeyListener:
    return MockKeyListener()
