"""Shared fixtures: registries backed by the in-memory GPIO adapter."""

from __future__ import annotations

import pytest

from hypibole.gpio import NullGpioAdapter
from hypibole.pinset import PinSet
from hypibole.registry import PinRegistry


@pytest.fixture
def gpio():
    return NullGpioAdapter()


@pytest.fixture
def make_registry(gpio):
    """Build a registry from the four whitelist strings."""
    built = []

    def _make(gets="", sets="", simgets="", simsets=""):
        pin_set = PinSet.from_strings(gets, sets, simgets, simsets)
        registry = PinRegistry.build(pin_set, lambda: gpio)
        built.append(registry)
        return registry

    yield _make
    for registry in built:
        registry.close()
