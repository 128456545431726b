"""
Helpers built on top of the pin-level API.
"""

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

from hwpins.hal.base_module import HIGH, LOW

if TYPE_CHECKING:
    from hwpins.core.hardware_manager import HardwareManager

logger = logging.getLogger(__name__)


class BitOrder(Enum):
    """Order in which shift_out emits bits."""

    MSB_FIRST = auto()
    LSB_FIRST = auto()


def uint16_from_uint8(high: int, low: int) -> int:
    """Combine two bytes into a 16-bit value."""
    return ((high & 0xFF) << 8) | (low & 0xFF)


def shift_out(
    manager: "HardwareManager",
    data_pin: int,
    clock_pin: int,
    value: int,
    bit_order: BitOrder = BitOrder.MSB_FIRST,
    bits: int = 8,
) -> None:
    """
    Clock a value out one bit at a time, as for a shift register.

    For every bit the data pin is set to the bit's level and the clock
    pin is pulsed high then low. Both pins must already be outputs.
    """
    if bits <= 0:
        raise ValueError(f"bits must be positive, got {bits}")

    for i in range(bits):
        shift = bits - 1 - i if bit_order == BitOrder.MSB_FIRST else i
        level = HIGH if (value >> shift) & 1 else LOW
        manager.digital_write(data_pin, level)
        manager.digital_write(clock_pin, HIGH)
        manager.digital_write(clock_pin, LOW)
