"""
hwpins Hardware Abstraction Layer (HAL)

Maps logical pin names onto board-specific hardware, enforces that only
one module controls a pin at a time, and serves digital, analog and bus
capabilities through driver-provided modules.
"""

from hwpins.hal.base_driver import BaseDriver
from hwpins.hal.base_module import (
    HIGH,
    LOW,
    AnalogModule,
    BaseModule,
    BusModule,
    DigitalModule,
    ModuleState,
    PinMode,
)
from hwpins.hal.pin_map import Pin, PinDefinition, PinMap
from hwpins.hal.pin_registry import PinAssignmentRegistry

__all__ = [
    "AnalogModule",
    "BaseDriver",
    "BaseModule",
    "BusModule",
    "DigitalModule",
    "HIGH",
    "LOW",
    "ModuleState",
    "Pin",
    "PinAssignmentRegistry",
    "PinDefinition",
    "PinMap",
    "PinMode",
]
