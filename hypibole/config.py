"""Service configuration file for hypibole.

The file is YAML with two optional sections::

    network:
      address: 0.0.0.0
      port: 8080
    board:
      gets: "1,2"
      sets: "2"
      simgets: ""
      simsets: "10,11"

Pin lists may also be written as YAML lists of integers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

NETWORK_KEYS = ("address", "port")
BOARD_KEYS = ("gets", "sets", "simgets", "simsets")


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or malformed."""


@dataclass
class ServiceConfig:
    """Values from the config file; None means "use the daemon default"."""

    network: Dict[str, str] = field(default_factory=dict)
    board: Dict[str, str] = field(default_factory=dict)

    @property
    def address(self) -> Optional[str]:
        return self.network.get("address")

    @property
    def port(self) -> Optional[str]:
        return self.network.get("port")

    def to_args(self) -> List[str]:
        """Render the daemon command-line flags for the keys present."""
        args: List[str] = []
        for key in NETWORK_KEYS:
            if key in self.network:
                args.extend([f"--{key}", self.network[key]])
        for key in BOARD_KEYS:
            if key in self.board:
                args.extend([f"--{key}", self.board[key]])
        return args


def load_config(path: str | Path) -> ServiceConfig:
    """Load and validate a YAML service config."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    return parse_config(data, str(path))


def parse_config(data: Any, source: str = "<config>") -> ServiceConfig:
    """Validate decoded YAML data and normalise values to strings."""
    if data is None:
        return ServiceConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at top level")

    unknown = set(data).difference({"network", "board"})
    if unknown:
        raise ConfigError(f"{source}: unknown section(s) {sorted(unknown)}")

    network = _section(data, "network", NETWORK_KEYS, source)
    board = _section(data, "board", BOARD_KEYS, source)

    return ServiceConfig(
        network={key: _scalar(value, f"{source}: network.{key}") for key, value in network.items()},
        board={key: _pin_list(value, f"{source}: board.{key}") for key, value in board.items()},
    )


def _section(data: Dict[str, Any], name: str, allowed: tuple, source: str) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"{source}: {name} must be a mapping")
    unknown = set(section).difference(allowed)
    if unknown:
        raise ConfigError(f"{source}: unknown {name} key(s) {sorted(unknown)}")
    return {key: value for key, value in section.items() if value is not None}


def _scalar(value: Any, where: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigError(f"{where} must be a string or integer")
    return str(value)


def _pin_list(value: Any, where: str) -> str:
    if isinstance(value, list):
        items = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, int):
                raise ConfigError(f"{where} entries must be integers, got {item!r}")
            items.append(str(item))
        return ",".join(items)
    return _scalar(value, where)
