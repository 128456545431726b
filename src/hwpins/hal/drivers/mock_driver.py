"""
Mock Driver - simulated board for testing without hardware.

Provides a small virtual board whose modules keep pin state in memory
but otherwise follow the same ownership rules as real hardware.
"""

import logging
from typing import Optional, Sequence

from hwpins.core.config import HwpinsConfig
from hwpins.hal.base_driver import BaseDriver
from hwpins.hal.base_module import AnalogModuleConfig, GPIOModuleConfig
from hwpins.hal.modules.mock_modules import MockAnalogModule, MockGPIOModule
from hwpins.hal.pin_map import CAP_ANALOG, CAP_GPIO, CAP_UNASSIGNABLE, PinDefinition, pin_def

logger = logging.getLogger(__name__)

# P1-P10 are GPIO (P1 is pin 0), P11-P12 are analog, P13 is ground
MOCK_PINS = [pin_def([f"P{i}", f"gpio{i}"], [CAP_GPIO], i) for i in range(1, 11)] + [
    pin_def(["P11", "ain0"], [CAP_ANALOG], 0, 0),
    pin_def(["P12", "ain1"], [CAP_ANALOG], 0, 1),
    pin_def(["P13", "ground"], [CAP_UNASSIGNABLE]),
]

# Default samples per analog channel
MOCK_SAMPLES = {0: 1, 1: 1000}


class MockDriver(BaseDriver):
    """
    Mock driver implementation for testing.

    Never matches real hardware; select it explicitly.
    """

    def __init__(self, config: Optional[HwpinsConfig] = None):
        super().__init__(config or HwpinsConfig())

    @property
    def name(self) -> str:
        return "Mock Board"

    def matches_hardware(self) -> bool:
        return False

    def _pin_definitions(self, revision: int) -> Sequence[PinDefinition]:
        return MOCK_PINS

    def _create_modules(self) -> None:
        registry = self.registry

        gpio = self._add_module("gpio", MockGPIOModule("gpio", registry))
        gpio.configure(GPIOModuleConfig(
            pins={pin: d.gpio_logical for pin, d in self.pins_for(CAP_GPIO)}
        ))

        analog_pins = self.pins_for(CAP_ANALOG)
        analog = self._add_module("analog", MockAnalogModule(
            "analog",
            registry,
            samples={pin: MOCK_SAMPLES.get(d.analog_logical, 0) for pin, d in analog_pins},
        ))
        analog.configure(AnalogModuleConfig(
            pins={pin: d.analog_logical for pin, d in analog_pins}
        ))

        gpio.enable()
        analog.enable()
        logger.info("MockDriver: modules created (simulated)")
