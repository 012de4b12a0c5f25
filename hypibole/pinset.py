"""Pin whitelists for hypibole.

Four index sets are configured at startup: physical pins allowed for get and
for set, and simulated pins allowed for get and for set. They never change
while the service runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

MAX_PIN_INDEX = 255


class PinListError(ValueError):
    """Raised when a comma-separated pin list cannot be parsed."""


def parse_pin_index(token: str) -> int:
    """Parse a single pin index (raises ValueError if invalid)."""
    if not token.isascii() or not token.isdigit():
        raise ValueError(f"invalid pin index {token!r}")
    index = int(token)
    if index > MAX_PIN_INDEX:
        raise ValueError(f"pin index {index} out of range (0..{MAX_PIN_INDEX})")
    return index


def parse_pin_list(text: str) -> FrozenSet[int]:
    """Parse "1,2,3" into a set of pin indices; empty entries are skipped."""
    indices = set()
    for token in text.split(","):
        if not token:
            continue
        try:
            indices.add(parse_pin_index(token))
        except ValueError as exc:
            raise PinListError(str(exc)) from exc
    return frozenset(indices)


@dataclass(frozen=True)
class PinSet:
    """Whitelists consulted for every request."""

    get_whitelist: FrozenSet[int] = frozenset()
    set_whitelist: FrozenSet[int] = frozenset()
    get_simulated: FrozenSet[int] = frozenset()
    set_simulated: FrozenSet[int] = frozenset()

    @classmethod
    def from_strings(cls, gets: str = "", sets: str = "", simgets: str = "", simsets: str = "") -> "PinSet":
        """Build a PinSet from the four comma-separated startup lists."""
        parsed = {}
        for name, text in (("gets", gets), ("sets", sets), ("simgets", simgets), ("simsets", simsets)):
            try:
                parsed[name] = parse_pin_list(text)
            except PinListError as exc:
                raise PinListError(f"Error parsing {name} list: {exc}") from exc
        return cls(
            get_whitelist=parsed["gets"],
            set_whitelist=parsed["sets"],
            get_simulated=parsed["simgets"],
            set_simulated=parsed["simsets"],
        )

    @property
    def uses_hardware(self) -> bool:
        """Physical pins are only acquired when both whitelists are populated."""
        return bool(self.get_whitelist) and bool(self.set_whitelist)
