import threading

from hypibole.gpio import NullGpioAdapter
from hypibole.pins import Level, PhysicalPin, SimulatedPin


def test_simulated_pin_starts_low():
    assert SimulatedPin().read() is Level.LOW


def test_simulated_pin_read_after_write():
    pin = SimulatedPin()
    for i in range(100):
        level = Level.HIGH if i % 2 == 0 else Level.LOW
        pin.write(level)
        assert pin.read() is level


def test_simulated_pin_concurrent_writes_leave_a_written_value():
    pin = SimulatedPin()
    threads = [
        threading.Thread(target=pin.write, args=(Level.HIGH if i % 2 else Level.LOW,))
        for i in range(16)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert pin.read() in (Level.HIGH, Level.LOW)


def test_physical_pin_drives_line():
    gpio = NullGpioAdapter()
    pin = PhysicalPin(gpio.acquire(4, output=True))
    assert pin.read() is Level.LOW
    pin.write(Level.HIGH)
    assert gpio.lines[4].is_high()
    assert pin.read() is Level.HIGH
    pin.write(Level.HIGH)
    assert pin.read() is Level.HIGH
    pin.write(Level.LOW)
    assert pin.read() is Level.LOW


def test_physical_input_pin_reflects_external_level():
    gpio = NullGpioAdapter()
    pin = PhysicalPin(gpio.acquire(7, output=False))
    gpio.drive_input(7, True)
    assert pin.read() is Level.HIGH
