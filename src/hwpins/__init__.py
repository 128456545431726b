"""
hwpins - pin abstraction layer for single-board computers

Refer to pins by stable names instead of kernel GPIO numbers, with
exclusive per-pin ownership across digital, analog and bus modules.
"""

__version__ = "1.0.0"

from hwpins.core.hardware_manager import HardwareManager
from hwpins.hal.base_module import HIGH, LOW, PinMode

__all__ = ["HardwareManager", "HIGH", "LOW", "PinMode", "__version__"]
