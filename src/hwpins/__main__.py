"""
hwpins command line entry point.

Usage:
    python -m hwpins detect               # Report the detected board
    python -m hwpins pins                 # List the board's pins
    python -m hwpins read gpio83          # Read a digital pin
    python -m hwpins write gpio83 1       # Drive a digital pin
    python -m hwpins analog ain0          # Read an analog pin
    python -m hwpins --mock pins          # Use the simulated board
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from hwpins.core.config import HwpinsConfig, set_config
from hwpins.core.hardware_manager import HardwareManager
from hwpins.hal.base_module import PinMode
from hwpins.hal.errors import HwpinsError

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr),
    ],
)

logger = logging.getLogger("hwpins")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="hwpins",
        description="hwpins - pin abstraction layer for single-board computers",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the simulated board instead of detecting hardware",
    )
    parser.add_argument(
        "--driver",
        help="Use a named driver instead of detecting hardware",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Load configuration from this file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("detect", help="Report which driver matches this hardware")
    sub.add_parser("pins", help="List pin names and capabilities")

    read = sub.add_parser("read", help="Read a digital pin")
    read.add_argument("pin", help="Pin name")

    write = sub.add_parser("write", help="Write a digital pin")
    write.add_argument("pin", help="Pin name")
    write.add_argument("value", type=int, choices=[0, 1], help="Level to write")

    analog = sub.add_parser("analog", help="Read an analog pin")
    analog.add_argument("pin", help="Pin name")

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging level."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.getLogger("hwpins").setLevel(level)


def create_manager(args: argparse.Namespace, config: HwpinsConfig) -> HardwareManager:
    """Create the hardware manager selected by the arguments."""
    if args.mock:
        return HardwareManager(HardwareManager.create_driver("mock", config))
    if args.driver:
        return HardwareManager(HardwareManager.create_driver(args.driver, config))
    return HardwareManager.detect(config)


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command. Returns the process exit code."""
    config = HwpinsConfig.load(args.config)
    set_config(config)

    if args.command == "detect" and not args.mock and not args.driver:
        driver = HardwareManager.detect_driver(config)
        print(f"{driver.name} (revision {driver.board_revision()})")
        return 0

    with create_manager(args, config) as manager:
        if args.command == "detect":
            print(f"{manager.driver.name} (revision {manager.driver.board_revision()})")
        elif args.command == "pins":
            for pin, definition in manager.pin_map.all_pins():
                names = ", ".join(definition.names)
                caps = ", ".join(sorted(definition.capabilities))
                print(f"{pin:3d}  {names:<24} {caps}")
        elif args.command == "read":
            pin = manager.get_pin(args.pin)
            manager.pin_mode(pin, PinMode.INPUT)
            print(manager.digital_read(pin))
        elif args.command == "write":
            pin = manager.get_pin(args.pin)
            manager.pin_mode(pin, PinMode.OUTPUT)
            manager.digital_write(pin, args.value)
        elif args.command == "analog":
            pin = manager.get_pin(args.pin)
            print(manager.analog_read(pin))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        return run(args)
    except (HwpinsError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"hwpins: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
