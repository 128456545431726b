"""
Mock modules - simulated digital and analog modules for use without hardware.

They follow the same registry and lifecycle rules as the sysfs modules
but keep pin values in memory.
"""

import logging
from typing import TYPE_CHECKING, Optional

from hwpins.hal.base_module import HIGH, LOW, AnalogModule, DigitalModule, PinMode
from hwpins.hal.errors import ConfigurationError, NotOpenError
from hwpins.hal.pin_map import Pin

if TYPE_CHECKING:
    from hwpins.hal.pin_registry import PinAssignmentRegistry

logger = logging.getLogger(__name__)


class MockGPIOModule(DigitalModule):
    """
    Mock digital module.

    Input pins read whatever was injected with mock_set_value(); output
    pins read back the last written level.
    """

    def __init__(self, name: str, registry: "PinAssignmentRegistry"):
        super().__init__(name, registry)
        self._modes: dict[Pin, PinMode] = {}
        self._values: dict[Pin, int] = {}

    @property
    def open_pins(self) -> set[Pin]:
        with self._lock:
            return set(self._modes)

    def get_mode(self, pin: int) -> Optional[PinMode]:
        with self._lock:
            return self._modes.get(pin)

    def set_mode(self, pin: int, mode: PinMode) -> None:
        with self._lock:
            self._require_pin(pin, "set mode")
            if mode not in (PinMode.INPUT, PinMode.OUTPUT):
                raise ValueError(f"Module '{self.name}' cannot set pin {pin} to {mode.name}")
            if not self.is_enabled:
                raise ConfigurationError(f"Module '{self.name}' is not enabled")
            current = self._modes.get(pin)
            if current == mode:
                return
            if current is not None:
                self._close_locked(pin)
            self._registry.assign(pin, self)
            self._modes[pin] = mode
            self._values[pin] = LOW
        logger.info(f"MockGPIO: Set pin {pin} mode to {mode.name}")

    def write(self, pin: int, value: int) -> None:
        with self._lock:
            self._require_pin(pin, "write")
            if self._modes.get(pin) != PinMode.OUTPUT:
                raise NotOpenError(pin, "write", "set the pin to OUTPUT first")
            self._values[pin] = HIGH if value else LOW
        logger.info(f"MockGPIO: Write pin {pin} = {'HIGH' if value else 'LOW'}")

    def read(self, pin: int) -> int:
        with self._lock:
            self._require_pin(pin, "read")
            if pin not in self._modes:
                raise NotOpenError(pin, "read", "call set_mode first")
            return self._values.get(pin, LOW)

    def close_pin(self, pin: int) -> None:
        with self._lock:
            self._require_pin(pin, "close")
            self._close_locked(pin)

    def _close_locked(self, pin: int) -> None:
        if pin not in self._modes:
            raise NotOpenError(pin, "close", "call set_mode first")
        del self._modes[pin]
        self._values.pop(pin, None)
        if self._registry.owner_of(pin) is self:
            self._registry.unassign(pin)

    def mock_set_value(self, pin: int, value: int) -> None:
        """Simulate an external level on a pin."""
        with self._lock:
            self._values[pin] = HIGH if value else LOW

    def mock_get_value(self, pin: int) -> Optional[int]:
        """Get the simulated level of a pin."""
        with self._lock:
            return self._values.get(pin)

    def _on_disable(self) -> None:
        self._modes.clear()
        self._values.clear()


class MockAnalogModule(AnalogModule):
    """Mock analog module returning a fixed or injected sample per pin."""

    def __init__(
        self,
        name: str,
        registry: "PinAssignmentRegistry",
        samples: Optional[dict[int, int]] = None,
    ):
        super().__init__(name, registry)
        self._samples: dict[int, int] = dict(samples or {})
        self._claimed: set[Pin] = set()

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
        self._claimed.update(claimed)

    def read(self, pin: int) -> int:
        with self._lock:
            self._require_pin(pin, "analog read")
            if pin not in self._claimed:
                raise NotOpenError(pin, "analog read", f"enable module '{self.name}' first")
            return self._samples.get(pin, 0)

    def mock_set_sample(self, pin: int, value: int) -> None:
        """Set the sample returned for a pin."""
        with self._lock:
            self._samples[pin] = value

    def _on_disable(self) -> None:
        self._claimed.clear()
