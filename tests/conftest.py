"""Shared pytest configuration and fixtures for the simroute test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "simulator: mark test as requiring Xcode and a booted simulator"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-simulator",
        action="store_true",
        default=False,
        help="Run tests that drive a real booted iOS simulator",
    )


def pytest_collection_modifyitems(config, items):
    """Skip simulator tests unless --run-simulator is specified."""
    if config.getoption("--run-simulator"):
        return

    skip_simulator = pytest.mark.skip(reason="Need --run-simulator option to run")
    for item in items:
        if "simulator" in item.keywords:
            item.add_marker(skip_simulator)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def test_data_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "infrastructure" / "fixtures"


@pytest.fixture
def three_points_gpx(test_data_dir) -> Path:
    """GPX file whose single track has three points."""
    return test_data_dir / "three_points.gpx"
