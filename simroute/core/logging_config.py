"""Logging setup for a simroute run.

Records go to a rotating file under the user state directory and, on
request, to stdout. The status lines a user watches are printed through
:mod:`simroute.core.console` instead, so console logging is off by default.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping, Optional, Union

from .paths import DEFAULT_LOG_FILE

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
_MAX_BYTES = 500 * 1024
_BACKUP_COUNT = 2
_BANNER_RULE = "=" * 60

# simctl runs as a child process; asyncio debug chatter about it is noise.
_QUIET_LOGGERS = ("asyncio",)


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        name = level.upper()
        if not hasattr(logging, name):
            raise ValueError(f"Unknown log level '{level}'")
        return getattr(logging, name)
    return int(level)


def _open_log_file(log_file: Path, level: int) -> Optional[logging.Handler]:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"Warning: cannot write log file {log_file}: {exc}", file=sys.stderr)
        return None
    handler.setLevel(level)
    return handler


def configure_logging(
    level: Union[int, str] = "info",
    *,
    console: bool = False,
    log_file: Optional[Union[str, Path]] = DEFAULT_LOG_FILE,
) -> Optional[Path]:
    """Replace the root handlers for this run.

    An unwritable log file is reported on stderr and logging falls back to
    stdout, so a read-only home directory never stops a route.

    Returns:
        The log file actually in use, or None when no file is written.
    """
    numeric_level = _coerce_level(level)
    root = logging.getLogger()

    for handler in list(root.handlers):
        root.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    active_file: Optional[Path] = None

    if log_file:
        file_handler = _open_log_file(Path(log_file), numeric_level)
        if file_handler is not None:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            active_file = Path(log_file)
        else:
            console = True

    if console:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(numeric_level)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    root.setLevel(numeric_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)

    return active_file


def log_startup_banner(logger, title: str, settings: Mapping[str, object]) -> None:
    """Write a framed block of run settings, one ``key: value`` per line."""
    logger.info(_BANNER_RULE)
    logger.info(title)
    logger.info(_BANNER_RULE)
    for key, value in settings.items():
        logger.info("%s: %s", key, value)
    logger.info(_BANNER_RULE)


__all__ = ["configure_logging", "log_startup_banner", "LOG_FORMAT", "LOG_DATEFMT"]
