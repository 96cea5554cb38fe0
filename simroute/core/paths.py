"""Centralized path constants for simroute."""

from __future__ import annotations

import os
from pathlib import Path

# Route and track directories are resolved against the working directory
# the tool is launched from.
ROUTES_DIR = Path("routes")
GPX_DIR = Path("gpx")

_CONFIG_ENV = os.environ.get("SIMROUTE_CONFIG")
CONFIG_PATH = Path(_CONFIG_ENV).expanduser() if _CONFIG_ENV else Path("simroute.txt")

# User-specific state (allows running from read-only project directories)
_USER_STATE_ENV = os.environ.get("SIMROUTE_STATE_DIR")
USER_STATE_DIR = Path(_USER_STATE_ENV).expanduser() if _USER_STATE_ENV else (Path.home() / ".simroute")
LOGS_DIR = USER_STATE_DIR / "logs"
DEFAULT_LOG_FILE = LOGS_DIR / "simroute.log"


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_LOG_FILE",
    "GPX_DIR",
    "LOGS_DIR",
    "ROUTES_DIR",
    "USER_STATE_DIR",
]
