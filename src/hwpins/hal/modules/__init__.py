"""
Capability module implementations for the hwpins HAL.
"""

from hwpins.hal.modules.dt_gpio_module import DTGPIOModule
from hwpins.hal.modules.dt_i2c_module import DTI2CModule
from hwpins.hal.modules.mock_modules import MockAnalogModule, MockGPIOModule
from hwpins.hal.modules.odroid_analog_module import OdroidCXAnalogModule

__all__ = [
    "DTGPIOModule",
    "DTI2CModule",
    "MockAnalogModule",
    "MockGPIOModule",
    "OdroidCXAnalogModule",
]
