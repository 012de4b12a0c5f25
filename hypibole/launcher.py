"""Launch the hypibole daemon with flags taken from a YAML config file.

The child inherits stdout/stderr, so its output goes wherever the launcher's
does (typically the journal under systemd).
"""

from __future__ import annotations

import argparse
import logging
import shlex
import signal
import subprocess
import sys
from typing import List, Optional

from .config import ConfigError, ServiceConfig, load_config

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/hypibole/hypibole.yaml"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the launcher."""
    parser = argparse.ArgumentParser(description="Run hypibole from a configuration file")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG_PATH, help="Path to the YAML config file")
    parser.add_argument(
        "--executable",
        default=None,
        help="Command for the hypibole daemon (default: this interpreter with -m hypibole.daemon)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    return parser.parse_args(argv)


def build_command(config: ServiceConfig, executable: Optional[str] = None) -> List[str]:
    """Return the daemon command line for ``config``."""
    if executable:
        command = shlex.split(executable)
        if not command:
            raise ValueError("Daemon executable is empty")
    else:
        command = [sys.executable, "-m", "hypibole.daemon"]
    return command + config.to_args()


def run(command: List[str]) -> int:
    """Run the daemon to completion, forwarding SIGTERM/SIGINT to it."""
    LOGGER.info("Starting: %s", " ".join(shlex.quote(part) for part in command))
    try:
        proc = subprocess.Popen(command, stdin=subprocess.DEVNULL)
    except OSError as exc:
        LOGGER.error("Failed to spawn hypibole: %s", exc)
        return 1

    def forward(signum, _frame):
        if proc.poll() is None:
            proc.send_signal(signum)

    previous = {sig: signal.signal(sig, forward) for sig in (signal.SIGTERM, signal.SIGINT)}
    try:
        rc = proc.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if rc < 0:
        LOGGER.error("hypibole terminated by signal %s", -rc)
        return 128 - rc
    if rc != 0:
        LOGGER.error("hypibole exited with code %s", rc)
    return rc


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the launcher."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(asctime)s %(levelname)s %(message)s")

    try:
        config = load_config(args.config)
        command = build_command(config, args.executable)
    except (ConfigError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1
    return run(command)


if __name__ == "__main__":
    raise SystemExit(main())
