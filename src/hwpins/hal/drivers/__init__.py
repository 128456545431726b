"""
Board drivers for the hwpins HAL.
"""

from hwpins.hal.drivers.mock_driver import MockDriver
from hwpins.hal.drivers.odroid_cx_driver import OdroidCXDriver
from hwpins.hal.drivers.raspberry_pi_driver import RaspberryPiDriver

__all__ = ["MockDriver", "OdroidCXDriver", "RaspberryPiDriver"]
