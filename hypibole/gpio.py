"""GPIO line acquisition for hypibole (libgpiod-backed)."""

from __future__ import annotations

from typing import Any, Dict, Optional
import logging

LOGGER = logging.getLogger(__name__)


class GpioError(RuntimeError):
    """Raised when a GPIO line cannot be acquired or driven."""


class GpioLine:
    """A single acquired line, configured once as input or output."""

    def __init__(self, index: int, output: bool) -> None:
        self.index = index
        self.output = output

    def is_high(self) -> bool:
        raise NotImplementedError

    def set_high(self) -> None:
        raise NotImplementedError

    def set_low(self) -> None:
        raise NotImplementedError

    def release(self) -> None:
        return


class GpioAdapter:
    """Abstract hardware capability provider."""

    def acquire(self, index: int, output: bool) -> GpioLine:
        raise NotImplementedError

    def close(self) -> None:
        return


class _MemoryLine(GpioLine):
    def __init__(self, index: int, output: bool) -> None:
        super().__init__(index, output)
        self.value = False

    def is_high(self) -> bool:
        return self.value

    def set_high(self) -> None:
        self.value = True

    def set_low(self) -> None:
        self.value = False


class NullGpioAdapter(GpioAdapter):
    """In-memory GPIO adapter for development and tests."""

    def __init__(self) -> None:
        self.lines: Dict[int, _MemoryLine] = {}

    def acquire(self, index: int, output: bool) -> GpioLine:
        if index in self.lines:
            raise GpioError(f"GPIO line {index} is already acquired")
        line = _MemoryLine(index, output)
        self.lines[index] = line
        return line

    def drive_input(self, index: int, high: bool) -> None:
        """Force the level seen on an acquired line (simulates external wiring)."""
        self.lines[index].value = bool(high)

    def close(self) -> None:
        self.lines.clear()


class _LibgpiodV2Line(GpioLine):
    def __init__(self, adapter: "LibgpiodAdapter", index: int, output: bool, request: Any) -> None:
        super().__init__(index, output)
        self._adapter = adapter
        self._request = request

    def is_high(self) -> bool:
        return self._adapter._value_is_active(self._request.get_value(self.index))

    def set_high(self) -> None:
        self._request.set_value(self.index, self._adapter._encode_value(True))

    def set_low(self) -> None:
        self._request.set_value(self.index, self._adapter._encode_value(False))

    def release(self) -> None:
        _release_handle(self._request)


class _LibgpiodV1Line(GpioLine):
    def __init__(self, index: int, output: bool, line_obj: Any) -> None:
        super().__init__(index, output)
        self._line = line_obj

    def is_high(self) -> bool:
        return bool(self._line.get_value())

    def set_high(self) -> None:
        self._line.set_value(1)

    def set_low(self) -> None:
        self._line.set_value(0)

    def release(self) -> None:
        _release_handle(self._line)


class LibgpiodAdapter(GpioAdapter):
    """libgpiod-backed GPIO adapter (supports v1/v2 APIs)."""

    def __init__(self, chip: str = "/dev/gpiochip0", consumer: str = "hypibole") -> None:
        self._chip_path = chip
        self._consumer = consumer
        self._backend = ""
        self._chip: Optional[Any] = None
        self._lines: Dict[int, GpioLine] = {}
        self._gpiod = self._load_gpiod()
        self._init_backend()

    def _load_gpiod(self):
        try:
            import gpiod
        except ImportError as exc:
            raise GpioError("gpiod is required for GPIO access (install python3-libgpiod)") from exc
        return gpiod

    def _init_backend(self) -> None:
        if hasattr(self._gpiod, "request_lines"):
            self._backend = "v2"
            line_mod = getattr(self._gpiod, "line", None)
            self._Direction = getattr(self._gpiod, "LineDirection", None) or getattr(line_mod, "Direction", None)
            self._Value = getattr(self._gpiod, "LineValue", None) or getattr(line_mod, "Value", None)
            self._LineSettings = getattr(self._gpiod, "LineSettings", None) or getattr(line_mod, "LineSettings", None)
            if not all((self._Direction, self._Value, self._LineSettings)):
                raise GpioError("Unsupported gpiod v2 API")
            return

        self._backend = "v1"
        self._Value = None
        try:
            self._chip = self._gpiod.Chip(self._chip_path)
        except (OSError, ValueError) as exc:
            raise GpioError(f"Unable to open {self._chip_path}: {exc}") from exc

    @property
    def backend(self) -> str:
        return self._backend

    def acquire(self, index: int, output: bool) -> GpioLine:
        if index in self._lines:
            raise GpioError(f"GPIO line {index} is already acquired")
        try:
            if self._backend == "v2":
                line = self._acquire_v2(index, output)
            else:
                line = self._acquire_v1(index, output)
        except (OSError, ValueError, TypeError) as exc:
            raise GpioError(f"Unable to acquire GPIO line {index}: {exc}") from exc
        self._lines[index] = line
        LOGGER.debug("Acquired GPIO line %s as %s (%s)", index, "output" if output else "input", self._backend)
        return line

    def _acquire_v2(self, index: int, output: bool) -> GpioLine:
        if output:
            settings = self._LineSettings(
                direction=self._Direction.OUTPUT,
                output_value=self._encode_value(False),
            )
        else:
            settings = self._LineSettings(direction=self._Direction.INPUT)
        request = self._gpiod.request_lines(
            self._chip_path,
            consumer=self._consumer,
            config={index: settings},
        )
        return _LibgpiodV2Line(self, index, output, request)

    def _acquire_v1(self, index: int, output: bool) -> GpioLine:
        line_obj = self._chip.get_line(index)
        if output:
            line_obj.request(consumer=self._consumer, type=self._gpiod.LINE_REQ_DIR_OUT, default_vals=[0])
        else:
            line_obj.request(consumer=self._consumer, type=self._gpiod.LINE_REQ_DIR_IN)
        return _LibgpiodV1Line(index, output, line_obj)

    def close(self) -> None:
        for line in self._lines.values():
            line.release()
        self._lines.clear()
        if self._chip is not None:
            try:
                self._chip.close()
            except OSError:
                pass
            self._chip = None

    def _encode_value(self, value: bool):
        if self._Value is not None:
            return self._Value.ACTIVE if value else self._Value.INACTIVE
        return 1 if value else 0

    def _value_is_active(self, value: Any) -> bool:
        if self._Value is not None:
            if value == self._Value.ACTIVE:
                return True
            if value == self._Value.INACTIVE:
                return False
        return bool(int(value))


def _release_handle(handle: Any) -> None:
    if handle is None:
        return
    release = getattr(handle, "release", None)
    if callable(release):
        try:
            release()
        except OSError:
            pass
