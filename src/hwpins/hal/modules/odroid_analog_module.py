"""
Analog input module for the Odroid C1/C2 SAR ADC.

The ADC is not exposed through a generic kernel interface: each channel
has its own read-only file under /sys/class/saradc. All configured pins
are claimed and opened when the module is enabled.
"""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Optional

from hwpins.hal import sysfs
from hwpins.hal.base_module import AnalogModule
from hwpins.hal.errors import NotOpenError, ParseError
from hwpins.hal.pin_map import Pin

if TYPE_CHECKING:
    from hwpins.hal.pin_registry import PinAssignmentRegistry

logger = logging.getLogger(__name__)

DEFAULT_ANALOG_PATH_TEMPLATE = "/sys/class/saradc/saradc_ch{channel}"
DEFAULT_READ_SIZE = 5

_LEADING_DIGITS = re.compile(rb"\s*(\d+)")


def parse_sample(pin: int, raw: bytes) -> int:
    """Parse the leading decimal digits of a sample, ignoring the terminator."""
    match = _LEADING_DIGITS.match(raw)
    if match is None:
        raise ParseError(pin, raw)
    return int(match.group(1))


@dataclass
class AnalogOpenPin:
    """Runtime state of an opened analog channel."""

    pin: Pin
    analog_logical: int
    path: str
    value_file: Optional[BinaryIO] = None

    def open(self) -> None:
        self.value_file = sysfs.open_read_only(self.path)

    def read_raw(self, size: int) -> bytes:
        return sysfs.read_at_start(self.value_file, size)

    def close(self) -> None:
        if self.value_file is not None:
            f, self.value_file = self.value_file, None
            f.close()


class OdroidCXAnalogModule(AnalogModule):
    """Read-only analog module backed by per-channel saradc files."""

    def __init__(
        self,
        name: str,
        registry: "PinAssignmentRegistry",
        path_template: str = DEFAULT_ANALOG_PATH_TEMPLATE,
        read_size: int = DEFAULT_READ_SIZE,
    ):
        super().__init__(name, registry)
        self._path_template = path_template
        self._read_size = read_size
        self._open_pins: dict[Pin, AnalogOpenPin] = {}

    @property
    def open_pins(self) -> set[Pin]:
        with self._lock:
            return set(self._open_pins)

    def get_open_pin(self, pin: int) -> Optional[AnalogOpenPin]:
        with self._lock:
            return self._open_pins.get(pin)

    def channel_path(self, channel: int) -> str:
        """Device file of an ADC channel."""
        return self._path_template.format(channel=channel)

    def _on_enable(self) -> None:
        claimed: list[Pin] = []
        try:
            for pin, channel in self._config.pins.items():
                self._registry.assign(pin, self)
                claimed.append(pin)
                open_pin = AnalogOpenPin(pin=pin, analog_logical=channel, path=self.channel_path(channel))
                open_pin.open()
                self._open_pins[pin] = open_pin
        except Exception as e:
            logger.error(f"Failed to enable analog module '{self.name}': {e}")
            for open_pin in self._open_pins.values():
                open_pin.close()
            self._open_pins.clear()
            for pin in claimed:
                self._registry.unassign(pin)
            raise

    def read(self, pin: int) -> int:
        """
        Read the current sample of an analog pin.

        Raises:
            UnknownPinError: If the pin is not an analog pin of this module
            NotOpenError: If the module has not been enabled
            ParseError: If the device text holds no digits
            OSError: If the read itself fails
        """
        with self._lock:
            self._require_pin(pin, "analog read")
            open_pin = self._open_pins.get(pin)
            if open_pin is None or open_pin.value_file is None:
                raise NotOpenError(pin, "analog read", f"enable module '{self.name}' first")
            try:
                raw = open_pin.read_raw(self._read_size)
            except OSError as e:
                logger.error(f"Failed to read analog pin {pin} ({open_pin.path}): {e}")
                raise
        return parse_sample(pin, raw)

    def _on_disable(self) -> None:
        first_error: Optional[OSError] = None
        for pin, open_pin in list(self._open_pins.items()):
            try:
                open_pin.close()
            except OSError as e:
                logger.warning(f"Error closing analog pin {pin} during disable: {e}")
                first_error = first_error or e
        self._open_pins.clear()
        if first_error is not None:
            raise first_error
