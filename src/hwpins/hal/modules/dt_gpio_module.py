"""
Digital GPIO module for Linux 3.7+ device-tree kernels.

Drives pins through the sysfs GPIO interface, so it works for any board
whose kernel exposes /sys/class/gpio (BeagleBone Black, Odroid,
Raspberry Pi). The pin -> kernel GPIO mapping is passed in by the driver
through configure().

The value file of an open pin is kept open and rewound before every
access. Reopening it per operation is an order of magnitude slower.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Optional, Union

from hwpins.hal import sysfs
from hwpins.hal.base_module import HIGH, LOW, DigitalModule, PinMode
from hwpins.hal.errors import ConfigurationError, NotOpenError
from hwpins.hal.pin_map import Pin

if TYPE_CHECKING:
    from hwpins.hal.pin_registry import PinAssignmentRegistry

logger = logging.getLogger(__name__)

DEFAULT_GPIO_ROOT = "/sys/class/gpio"


@dataclass
class GPIOOpenPin:
    """Runtime state of an exported GPIO pin."""

    pin: Pin
    gpio_logical: int
    gpio_root: Path
    mode: Optional[PinMode] = None
    directory: Optional[Path] = None
    value_file: Optional[BinaryIO] = None

    @property
    def is_open(self) -> bool:
        return self.value_file is not None

    def export(self) -> None:
        self.directory = sysfs.export_gpio(self.gpio_root, self.gpio_logical)

    def unexport(self) -> None:
        sysfs.unexport_gpio(self.gpio_root, self.gpio_logical)

    def set_direction(self, mode: PinMode) -> None:
        """Set the kernel direction and open the value file to match."""
        direction = sysfs.DIRECTION_OUT if mode == PinMode.OUTPUT else sysfs.DIRECTION_IN
        sysfs.set_gpio_direction(self.directory, direction)
        self.value_file = sysfs.open_gpio_value(self.directory, direction)
        self.mode = mode

    def get_value(self) -> int:
        data = sysfs.read_at_start(self.value_file, 1)
        return HIGH if data[:1] == b"1" else LOW

    def set_value(self, value: int) -> None:
        sysfs.write_at_start(self.value_file, b"1" if value else b"0")

    def close(self) -> None:
        if self.value_file is not None:
            f, self.value_file = self.value_file, None
            f.close()


class DTGPIOModule(DigitalModule):
    """
    sysfs-backed digital module.

    Pins are exported and opened on demand by set_mode(); enabling the
    module claims nothing.
    """

    def __init__(
        self,
        name: str,
        registry: "PinAssignmentRegistry",
        gpio_root: Union[str, Path] = DEFAULT_GPIO_ROOT,
    ):
        super().__init__(name, registry)
        self._gpio_root = Path(gpio_root)
        self._open_pins: dict[Pin, GPIOOpenPin] = {}

    @property
    def gpio_root(self) -> Path:
        return self._gpio_root

    @property
    def open_pins(self) -> set[Pin]:
        """Pins that currently have an open pin record."""
        with self._lock:
            return set(self._open_pins)

    def get_mode(self, pin: int) -> Optional[PinMode]:
        with self._lock:
            open_pin = self._open_pins.get(pin)
            return open_pin.mode if open_pin is not None else None

    def get_open_pin(self, pin: int) -> Optional[GPIOOpenPin]:
        """The open pin record of a pin, or None."""
        with self._lock:
            return self._open_pins.get(pin)

    def set_mode(self, pin: int, mode: PinMode) -> None:
        """
        Open a pin for input or output.

        If the pin is already open in another mode it is closed first.
        When the value file cannot be opened after the pin was exported,
        the pin stays exported and owned until close_pin() or disable().

        Raises:
            UnknownPinError: If the pin is not a GPIO pin of this module
            OwnershipError: If another module owns the pin
            ValueError: If the mode is not INPUT or OUTPUT
            OSError: If a sysfs operation fails
        """
        with self._lock:
            self._require_pin(pin, "set mode")
            if mode not in (PinMode.INPUT, PinMode.OUTPUT):
                raise ValueError(f"Module '{self.name}' cannot set pin {pin} to {mode.name}")
            if not self.is_enabled:
                raise ConfigurationError(f"Module '{self.name}' is not enabled")

            open_pin = self._open_pins.get(pin)
            if open_pin is not None:
                if open_pin.mode == mode and open_pin.is_open:
                    return
                self._close_locked(pin)

            self._registry.assign(pin, self)

            open_pin = GPIOOpenPin(pin=pin, gpio_logical=self._config.pins[pin], gpio_root=self._gpio_root)
            try:
                open_pin.export()
            except OSError as e:
                logger.error(f"Failed to export pin {pin} (GPIO {open_pin.gpio_logical}): {e}")
                self._registry.unassign(pin)
                raise
            self._open_pins[pin] = open_pin

            try:
                open_pin.set_direction(mode)
            except OSError as e:
                logger.error(
                    f"Failed to set pin {pin} (GPIO {open_pin.gpio_logical}) to {mode.name}, "
                    f"pin stays exported until closed: {e}"
                )
                raise

        logger.debug(f"Set GPIO pin {pin} to mode {mode.name}")

    def write(self, pin: int, value: int) -> None:
        with self._lock:
            self._require_pin(pin, "write")
            open_pin = self._open_pins.get(pin)
            if open_pin is None or not open_pin.is_open or open_pin.mode != PinMode.OUTPUT:
                raise NotOpenError(pin, "write", "set the pin to OUTPUT first")
            try:
                open_pin.set_value(value)
            except OSError as e:
                logger.error(f"Failed to write pin {pin}: {e}")
                raise

    def read(self, pin: int) -> int:
        with self._lock:
            self._require_pin(pin, "read")
            open_pin = self._open_pins.get(pin)
            if open_pin is None or not open_pin.is_open:
                raise NotOpenError(pin, "read", "call set_mode first")
            try:
                return open_pin.get_value()
            except OSError as e:
                logger.error(f"Failed to read pin {pin}: {e}")
                raise

    def close_pin(self, pin: int) -> None:
        """
        Unexport a pin, close its value file and release it.

        Raises:
            NotOpenError: If the pin was never opened
            OSError: If unexporting fails; the pin then stays open and owned
        """
        with self._lock:
            self._require_pin(pin, "close")
            self._close_locked(pin)
        logger.debug(f"Closed GPIO pin {pin}")

    def _close_locked(self, pin: int) -> None:
        open_pin = self._open_pins.get(pin)
        if open_pin is None:
            raise NotOpenError(pin, "close", "call set_mode first")
        try:
            open_pin.unexport()
        except OSError as e:
            logger.error(f"Failed to unexport pin {pin} (GPIO {open_pin.gpio_logical}): {e}")
            raise
        del self._open_pins[pin]
        try:
            open_pin.close()
        finally:
            if self._registry.owner_of(pin) is self:
                self._registry.unassign(pin)

    def _on_disable(self) -> None:
        first_error: Optional[OSError] = None
        for pin, open_pin in list(self._open_pins.items()):
            try:
                open_pin.unexport()
            except OSError as e:
                logger.warning(f"Error unexporting pin {pin} during disable: {e}")
                first_error = first_error or e
            try:
                open_pin.close()
            except OSError as e:
                logger.warning(f"Error closing pin {pin} during disable: {e}")
                first_error = first_error or e
        self._open_pins.clear()
        if first_error is not None:
            raise first_error
