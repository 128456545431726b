"""
Hardware Manager - the pin-level entry point for application code.

Keeps the registry of available board drivers, detects which one
matches the running hardware, and dispatches pin operations to the
module that serves each pin's capability. Applications receive a
HardwareManager at startup instead of relying on a global driver.
"""

import logging
from typing import Any, Optional, Type

from hwpins.core.config import HwpinsConfig
from hwpins.hal.base_driver import BaseDriver
from hwpins.hal.base_module import AnalogModule, BaseModule, BusModule, DigitalModule, PinMode
from hwpins.hal.errors import DriverNotFoundError, HwpinsError, UnknownPinError
from hwpins.hal.pin_map import CAP_ANALOG, CAP_GPIO, Pin, PinMap

logger = logging.getLogger(__name__)


class HardwareManager:
    """
    Facade over one initialised driver.

    Pins are resolved by name through the driver's pin map; digital
    operations go to the 'gpio' module and analog reads to the
    'analog' module.
    """

    # Registry of available board drivers
    _driver_registry: dict[str, Type[BaseDriver]] = {}

    def __init__(self, driver: BaseDriver):
        """
        Initialize the manager.

        Args:
            driver: The board driver to use; it is initialised if needed
        """
        self._driver = driver
        self._driver.initialize()

    @classmethod
    def register_driver(cls, name: str, driver_class: Type[BaseDriver]) -> None:
        """
        Register a board driver.

        Args:
            name: Driver identifier (e.g., "odroid", "raspberry_pi")
            driver_class: Driver class implementing BaseDriver
        """
        cls._driver_registry[name] = driver_class
        logger.debug(f"Registered driver: {name}")

    @classmethod
    def get_available_drivers(cls) -> list[str]:
        """Get list of available driver names."""
        return list(cls._driver_registry.keys())

    @classmethod
    def get_driver_class(cls, name: str) -> Optional[Type[BaseDriver]]:
        """Get a driver class by name."""
        return cls._driver_registry.get(name)

    @classmethod
    def create_driver(cls, name: str, config: Optional[HwpinsConfig] = None) -> BaseDriver:
        """
        Instantiate a registered driver by name.

        Raises:
            DriverNotFoundError: If no driver is registered under the name
        """
        driver_class = cls._driver_registry.get(name)
        if driver_class is None:
            raise DriverNotFoundError(
                f"Unknown driver '{name}', available: {', '.join(cls.get_available_drivers())}"
            )
        return driver_class(config)

    @classmethod
    def detect_driver(cls, config: Optional[HwpinsConfig] = None) -> BaseDriver:
        """
        Find the registered driver that matches the running hardware.

        Raises:
            DriverNotFoundError: If no driver matches
        """
        for name, driver_class in cls._driver_registry.items():
            driver = driver_class(config)
            if driver.matches_hardware():
                logger.info(f"Detected hardware: {driver.name} (driver '{name}')")
                return driver
        raise DriverNotFoundError("No driver matches this hardware")

    @classmethod
    def detect(cls, config: Optional[HwpinsConfig] = None) -> "HardwareManager":
        """Create a manager for the detected hardware."""
        return cls(cls.detect_driver(config))

    @property
    def driver(self) -> BaseDriver:
        return self._driver

    @property
    def pin_map(self) -> PinMap:
        return self._driver.pin_map

    def get_pin(self, name: str) -> Pin:
        """Resolve a pin name (case-insensitive) to a Pin."""
        return self._driver.pin_map.resolve(name)

    def get_defined_pins(self) -> PinMap:
        """The board's pin map, for inspecting pin capabilities."""
        return self._driver.pin_map

    def get_module(self, name: str) -> BaseModule:
        """Get a module of the driver by name."""
        return self._driver.get_module(name)

    def owner_of(self, pin: int) -> Optional[BaseModule]:
        """Module currently owning a pin, if any."""
        return self._driver.registry.owner_of(pin)

    def _module_for(self, pin: int, capability: str, operation: str, kind: type) -> Any:
        capabilities = self._driver.pin_map.capabilities_of(pin)
        if capability not in capabilities:
            raise UnknownPinError(pin, operation, capability)
        module = self._driver.get_module(capability)
        if not isinstance(module, kind):
            raise UnknownPinError(pin, operation, module.name)
        return module

    def _gpio(self, pin: int, operation: str) -> DigitalModule:
        return self._module_for(pin, CAP_GPIO, operation, DigitalModule)

    def pin_mode(self, pin: int, mode: PinMode) -> None:
        """Open a digital pin for input or output."""
        self._gpio(pin, "set mode").set_mode(pin, mode)

    def digital_write(self, pin: int, value: int) -> None:
        """Drive a digital output pin high or low."""
        self._gpio(pin, "write").write(pin, value)

    def digital_read(self, pin: int) -> int:
        """Read a digital pin."""
        return self._gpio(pin, "read").read(pin)

    def close_pin(self, pin: int) -> None:
        """Close an open digital pin and release it."""
        self._gpio(pin, "close").close_pin(pin)

    def analog_read(self, pin: int) -> int:
        """Read an analog input pin."""
        module: AnalogModule = self._module_for(pin, CAP_ANALOG, "analog read", AnalogModule)
        return module.read(pin)

    def get_bus(self, name: str = "i2c") -> BusModule:
        """Get a bus module by name."""
        module = self._driver.get_module(name)
        if not isinstance(module, BusModule):
            raise HwpinsError(f"Module '{name}' of driver '{self._driver.name}' is not a bus")
        return module

    def close(self) -> None:
        """Disable every module of the driver."""
        self._driver.close()

    def __enter__(self) -> "HardwareManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _register_builtin_drivers():
    """Register the built-in board drivers."""
    from hwpins.hal.drivers import MockDriver, OdroidCXDriver, RaspberryPiDriver

    HardwareManager.register_driver("odroid", OdroidCXDriver)
    HardwareManager.register_driver("raspberry_pi", RaspberryPiDriver)
    HardwareManager.register_driver("mock", MockDriver)


_register_builtin_drivers()
