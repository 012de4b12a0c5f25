"""Pin registry built once at startup from the configured PinSet."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional
import logging

from .gpio import GpioAdapter, GpioError
from .pins import PhysicalPin, SimulatedPin
from .pinset import PinSet

LOGGER = logging.getLogger(__name__)


class RegistryError(RuntimeError):
    """Raised when physical pins cannot be acquired at startup."""


class PinRegistry:
    """Physical and simulated pins by index, plus the whitelists they answer to.

    The maps are read-only once built; only the pins themselves hold mutable
    state. An index may appear in both maps, in which case the physical pin
    is the one requests reach.
    """

    def __init__(
        self,
        pin_set: PinSet,
        physical: Mapping[int, PhysicalPin],
        simulated: Mapping[int, SimulatedPin],
        gpio: Optional[GpioAdapter] = None,
    ) -> None:
        self.pin_set = pin_set
        self.physical: Mapping[int, PhysicalPin] = MappingProxyType(dict(physical))
        self.simulated: Mapping[int, SimulatedPin] = MappingProxyType(dict(simulated))
        self._gpio = gpio

    @classmethod
    def build(cls, pin_set: PinSet, gpio_factory: Callable[[], GpioAdapter]) -> "PinRegistry":
        """Acquire physical lines and create simulated pins for ``pin_set``."""
        gpio: Optional[GpioAdapter] = None
        physical: Dict[int, PhysicalPin] = {}
        if pin_set.uses_hardware:
            gpio, physical = _acquire_physical(pin_set, gpio_factory)
        elif pin_set.get_whitelist or pin_set.set_whitelist:
            LOGGER.info("Both gets and sets must be non-empty to use GPIO hardware; physical pins disabled")

        simulated: Dict[int, SimulatedPin] = {}
        for index in sorted(pin_set.set_simulated):
            simulated[index] = SimulatedPin()
        for index in sorted(pin_set.get_simulated):
            if index not in pin_set.set_whitelist and index not in simulated:
                simulated[index] = SimulatedPin()

        LOGGER.info(
            "Pin registry ready: physical=%s simulated=%s",
            sorted(physical),
            sorted(simulated),
        )
        return cls(pin_set, physical, simulated, gpio)

    def close(self) -> None:
        if self._gpio is not None:
            self._gpio.close()
            self._gpio = None


def _acquire_physical(pin_set: PinSet, gpio_factory: Callable[[], GpioAdapter]):
    try:
        gpio = gpio_factory()
    except (GpioError, OSError) as exc:
        raise RegistryError(f"Unable to open GPIO hardware: {exc}") from exc

    physical: Dict[int, PhysicalPin] = {}
    try:
        for index in sorted(pin_set.set_whitelist):
            physical[index] = PhysicalPin(gpio.acquire(index, output=True))
        for index in sorted(pin_set.get_whitelist):
            if index not in pin_set.set_whitelist:
                physical[index] = PhysicalPin(gpio.acquire(index, output=False))
    except (GpioError, OSError) as exc:
        gpio.close()
        raise RegistryError(f"Unable to acquire GPIO pin: {exc}") from exc
    return gpio, physical
