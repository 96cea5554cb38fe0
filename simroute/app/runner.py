import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from simroute.app.keyboard import KeyListener
from simroute.app.orchestrator import (
    DEFAULT_INTERVAL,
    DEFAULT_SPEED,
    SessionOptions,
    SessionOrchestrator,
)
from simroute.cli.common import (
    add_common_cli_arguments,
    install_exception_handlers,
    install_signal_handlers,
    positive_float,
)
from simroute.core.config_manager import get_config_manager
from simroute.core.logging_config import configure_logging, log_startup_banner
from simroute.core.logging_utils import get_module_logger
from simroute.core.paths import CONFIG_PATH, DEFAULT_LOG_FILE, GPX_DIR, ROUTES_DIR
from simroute.devices.simctl import SimctlController


logger = get_module_logger(__name__)

PROG_NAME = "simroute"


def _package_version() -> str:
    from simroute import __version__
    return __version__


def parse_args(argv: Optional[list[str]] = None, config_path: Path = CONFIG_PATH) -> argparse.Namespace:
    """Parse command-line arguments with settings file defaults."""
    config_manager = get_config_manager()
    config = config_manager.read_config(config_path)

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Set iOS Simulator locations from GPX files",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )

    parser.add_argument(
        "-r", "--route",
        required=True,
        metavar="NAME",
        help="Name of the route configuration to use",
    )

    parser.add_argument(
        "-s", "--speed",
        type=positive_float,
        metavar="M/S",
        default=config_manager.get_float(config, "speed", DEFAULT_SPEED),
        help="Speed of movement in meters per second (default: %(default)s)",
    )

    parser.add_argument(
        "-i", "--interval",
        type=positive_float,
        metavar="S",
        default=config_manager.get_float(config, "interval", DEFAULT_INTERVAL),
        help="Interval between location updates in seconds (default: %(default)s)",
    )

    parser.add_argument(
        "--routes-dir",
        type=Path,
        default=config_manager.get_path(config, "routes_dir", ROUTES_DIR),
        help="Directory holding <route>.json files (default: %(default)s)",
    )

    parser.add_argument(
        "--gpx-dir",
        type=Path,
        default=config_manager.get_path(config, "gpx_dir", GPX_DIR),
        help="Directory holding the GPX files routes refer to (default: %(default)s)",
    )

    add_common_cli_arguments(
        parser,
        default_log_level=config_manager.get_str(config, "log_level", "info").lower(),
        default_log_file=config_manager.get_path(config, "log_file", DEFAULT_LOG_FILE),
        default_console_output=config_manager.get_bool(config, "console_output", False),
    )

    return parser.parse_args(argv)


async def main(argv: Optional[list[str]] = None) -> int:
    """Entry point: run one route session and return the exit code."""
    args = parse_args(argv)

    log_file = configure_logging(
        args.log_level,
        console=args.console_output,
        log_file=args.log_file,
    )

    log_startup_banner(
        logger,
        f"simroute {_package_version()} starting",
        {
            "Route": args.route,
            "Speed (m/s)": args.speed,
            "Interval (s)": args.interval,
            "Routes directory": args.routes_dir,
            "GPX directory": args.gpx_dir,
            "Log file": log_file or "none",
        },
    )

    options = SessionOptions(
        route=args.route,
        speed=args.speed,
        interval=args.interval,
        routes_dir=args.routes_dir,
        gpx_dir=args.gpx_dir,
    )
    orchestrator = SessionOrchestrator(options, SimctlController(), KeyListener())

    loop = asyncio.get_running_loop()
    install_exception_handlers(logger.logger, loop)
    install_signal_handlers(orchestrator.request_cancel, loop)

    exit_code = await orchestrator.run()
    logger.info("simroute finished with exit code %d", exit_code)
    return exit_code


def run(argv: Optional[list[str]] = None) -> int:
    try:
        return asyncio.run(main(argv))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except Exception as exc:  # pragma: no cover - fatal guard
        logger.critical("Fatal error: %s", exc, exc_info=True)
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(run())
