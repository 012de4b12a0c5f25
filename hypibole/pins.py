"""Discrete pin backends: physical GPIO lines and simulated in-memory pins."""

from __future__ import annotations

import enum
import threading
from typing import Protocol

from .gpio import GpioLine


class Level(enum.Enum):
    """Logical level of a discrete pin."""

    HIGH = "high"
    LOW = "low"


class DiscretePin(Protocol):
    """A pin that can be read and driven to a Level."""

    def read(self) -> Level:
        ...

    def write(self, level: Level) -> None:
        ...


class SimulatedPin:
    """In-memory pin holding a level, starting low."""

    def __init__(self, level: Level = Level.LOW) -> None:
        self._level = level
        self._lock = threading.Lock()

    def read(self) -> Level:
        with self._lock:
            return self._level

    def write(self, level: Level) -> None:
        with self._lock:
            self._level = level


class PhysicalPin:
    """Pin backed by an acquired hardware line."""

    def __init__(self, line: GpioLine) -> None:
        self._line = line
        self._lock = threading.Lock()

    @property
    def line(self) -> GpioLine:
        return self._line

    def read(self) -> Level:
        with self._lock:
            return Level.HIGH if self._line.is_high() else Level.LOW

    def write(self, level: Level) -> None:
        with self._lock:
            if level is Level.HIGH:
                self._line.set_high()
            else:
                self._line.set_low()
