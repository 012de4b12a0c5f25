"""Daemon entry point for hypibole.

Builds the pin registry from the whitelist flags and serves pin operations
over HTTP until terminated.
"""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import List, Optional

from .gpio import GpioAdapter, LibgpiodAdapter, NullGpioAdapter
from .http_server import create_server
from .pinset import PinListError, PinSet
from .registry import PinRegistry, RegistryError

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the daemon."""
    parser = argparse.ArgumentParser(description="hypibole GPIO HTTP service")
    parser.add_argument("-g", "--gets", default="", help="Comma-separated GPIO pins allowed for get")
    parser.add_argument("-s", "--sets", default="", help="Comma-separated GPIO pins allowed for set")
    parser.add_argument("--simgets", default="", help="Simulated gettable pins; real pins of the same index take priority")
    parser.add_argument("--simsets", default="", help="Simulated settable pins; real pins of the same index take priority")
    parser.add_argument("-a", "--address", default="0.0.0.0", help="IP address to bind the server to")
    parser.add_argument("-p", "--port", type=int, default=8080, help="Listening port for the server")
    parser.add_argument("--chip", default="/dev/gpiochip0", help="GPIO chip device for physical pins")
    parser.add_argument("--consumer", default="hypibole", help="Consumer label for requested GPIO lines")
    parser.add_argument("--no-gpio", action="store_true", help="Back physical pins with memory instead of hardware")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    """Set up basic logging for the daemon."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format="%(asctime)s %(levelname)s %(message)s")


def gpio_factory(args: argparse.Namespace):
    """Return a callable creating the GPIO adapter selected by ``args``."""

    def create() -> GpioAdapter:
        if args.no_gpio:
            LOGGER.warning("GPIO hardware disabled; physical pins are in-memory")
            return NullGpioAdapter()
        return LibgpiodAdapter(chip=args.chip, consumer=args.consumer)

    return create


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for running the daemon."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        pin_set = PinSet.from_strings(args.gets, args.sets, args.simgets, args.simsets)
    except PinListError as exc:
        LOGGER.error("%s", exc)
        return 1
    LOGGER.info(
        "Whitelists: gets=%s sets=%s simgets=%s simsets=%s",
        sorted(pin_set.get_whitelist),
        sorted(pin_set.set_whitelist),
        sorted(pin_set.get_simulated),
        sorted(pin_set.set_simulated),
    )

    try:
        registry = PinRegistry.build(pin_set, gpio_factory(args))
    except RegistryError as exc:
        LOGGER.error("Service error: %s", exc)
        return 1

    try:
        server = create_server(registry, args.address, args.port)
    except OSError as exc:
        LOGGER.error("Unable to listen on %s:%s: %s", args.address, args.port, exc)
        registry.close()
        return 1

    def shutdown(_signum=None, _frame=None):
        LOGGER.info("Shutting down")
        # serve_forever() runs on this thread; shutdown() waits for it to exit.
        threading.Thread(target=server.shutdown, daemon=True).start()

    signal.signal(signal.SIGTERM, shutdown)
    signal.signal(signal.SIGINT, shutdown)

    try:
        server.serve_forever()
    finally:
        server.server_close()
        registry.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
