"""
I2C bus module for device-tree kernels.

The device tree fixes which header pins carry each I2C bus, so those
pins are claimed as soon as the module is enabled and can never be used
as GPIO. The bus itself is handed out as an smbus2 SMBus on request.
"""

import logging
from typing import TYPE_CHECKING, Optional

from smbus2 import SMBus

from hwpins.hal.base_module import BusModule
from hwpins.hal.errors import ConfigurationError
from hwpins.hal.pin_map import Pin

if TYPE_CHECKING:
    from hwpins.hal.pin_registry import PinAssignmentRegistry

logger = logging.getLogger(__name__)


class DTI2CModule(BusModule):
    """Bus module that owns a fixed pin pair and one /dev/i2c-N device."""

    def __init__(self, name: str, registry: "PinAssignmentRegistry"):
        super().__init__(name, registry)
        self._bus: Optional[SMBus] = None

    @property
    def pins(self) -> list[Pin]:
        """The pins carrying this bus."""
        if self._config is None:
            return []
        return list(self._config.pins)

    def _on_enable(self) -> None:
        claimed: list[Pin] = []
        try:
            for pin in self._config.pins:
                self._registry.assign(pin, self)
                claimed.append(pin)
        except Exception:
            for pin in claimed:
                self._registry.unassign(pin)
            raise

    def open_bus(self) -> SMBus:
        """
        Open the bus device, reusing it if already open.

        Raises:
            ConfigurationError: If the module is not enabled
            OSError: If the device cannot be opened
        """
        with self._lock:
            if not self.is_enabled:
                raise ConfigurationError(f"Module '{self.name}' is not enabled")
            if self._bus is None:
                logger.debug(f"Opening I2C bus {self.device}")
                self._bus = SMBus(self.device)
            return self._bus

    def _on_disable(self) -> None:
        if self._bus is not None:
            bus, self._bus = self._bus, None
            bus.close()
