"""
Abstract Base Classes for capability modules.

A module serves one capability (digital I/O, analog input, a bus) for a
subset of a board's pins. Drivers configure and enable modules; callers
reach them through the driver by name. Every module claims pins through
the driver's PinAssignmentRegistry before touching them.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Optional, Union

from hwpins.hal.errors import ConfigurationError, UnknownPinError
from hwpins.hal.pin_map import Pin, PinDefinition

if TYPE_CHECKING:
    from hwpins.hal.pin_registry import PinAssignmentRegistry

logger = logging.getLogger(__name__)

LOW = 0
HIGH = 1


class PinMode(Enum):
    """I/O modes a pin can be opened in."""

    INPUT = auto()
    OUTPUT = auto()
    ANALOG_INPUT = auto()


class ModuleState(Enum):
    """Lifecycle states of a module."""

    NEW = auto()
    CONFIGURED = auto()
    ENABLED = auto()
    DISABLED = auto()


def _check_pin(value: Any, module_name: str) -> Pin:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"Module '{module_name}' got invalid pin {value!r}, expected a non-negative integer"
        )
    return Pin(value)


def _logical_pins(options: Any, module_name: str, attribute: str) -> dict[Pin, int]:
    """Validate a 'pins' mapping of Pin -> logical index (or PinDefinition)."""
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"Module '{module_name}' options must be a mapping")
    pins = options.get("pins")
    if pins is None:
        raise ConfigurationError(f"Module '{module_name}' did not get 'pins' values")
    if not isinstance(pins, Mapping):
        raise ConfigurationError(
            f"Module '{module_name}' 'pins' must map pins to {attribute} indices"
        )

    result: dict[Pin, int] = {}
    for pin, value in pins.items():
        pin = _check_pin(pin, module_name)
        if isinstance(value, PinDefinition):
            value = getattr(value, attribute)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigurationError(
                f"Module '{module_name}' got invalid {attribute} index {value!r} for pin {pin}"
            )
        result[pin] = value
    return result


@dataclass
class GPIOModuleConfig:
    """Configuration for a digital module: pin -> kernel GPIO number."""

    pins: dict[Pin, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, options: Any, module_name: str = "gpio") -> "GPIOModuleConfig":
        """Validate an options bundle with a 'pins' key."""
        return cls(pins=_logical_pins(options, module_name, "gpio_logical"))


@dataclass
class AnalogModuleConfig:
    """Configuration for an analog module: pin -> ADC channel."""

    pins: dict[Pin, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, options: Any, module_name: str = "analog") -> "AnalogModuleConfig":
        """Validate an options bundle with a 'pins' key."""
        return cls(pins=_logical_pins(options, module_name, "analog_logical"))


@dataclass
class I2CModuleConfig:
    """Configuration for a bus module: its fixed pins and device path."""

    pins: list[Pin] = field(default_factory=list)
    device: str = ""

    @classmethod
    def from_dict(cls, options: Any, module_name: str = "i2c") -> "I2CModuleConfig":
        """Validate an options bundle with 'pins' and 'device' keys."""
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Module '{module_name}' options must be a mapping")
        pins = options.get("pins")
        if pins is None:
            raise ConfigurationError(f"Module '{module_name}' did not get 'pins' values")
        if isinstance(pins, (str, bytes)) or not isinstance(pins, Sequence):
            raise ConfigurationError(f"Module '{module_name}' 'pins' must be a sequence of pins")
        device = options.get("device")
        if not isinstance(device, str) or not device:
            raise ConfigurationError(f"Module '{module_name}' did not get a 'device' path")
        return cls(pins=[_check_pin(p, module_name) for p in pins], device=device)


ModuleConfig = Union[GPIOModuleConfig, AnalogModuleConfig, I2CModuleConfig]


class BaseModule(ABC):
    """
    Abstract Base Class for all capability modules.

    Lifecycle: configure() -> enable() -> disable(). Subclasses guard
    their open-handle tables with self._lock.
    """

    config_class: type = GPIOModuleConfig

    def __init__(self, name: str, registry: "PinAssignmentRegistry"):
        """
        Initialize the module.

        Args:
            name: Unique module name used for lookup
            registry: The owning driver's pin registry
        """
        self._name = name
        self._registry = registry
        self._config: Optional[ModuleConfig] = None
        self._state = ModuleState.NEW
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Stable identifier of this module."""
        return self._name

    @property
    @abstractmethod
    def module_type(self) -> str:
        """Capability variant of this module ('digital', 'analog' or 'bus')."""
        ...

    @property
    def registry(self) -> "PinAssignmentRegistry":
        """The registry this module claims pins from."""
        return self._registry

    @property
    def state(self) -> ModuleState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_enabled(self) -> bool:
        return self._state == ModuleState.ENABLED

    @property
    def config(self) -> Optional[ModuleConfig]:
        return self._config

    @property
    def configured_pins(self) -> set[Pin]:
        """Pins this module was configured to serve."""
        if self._config is None:
            return set()
        return set(self._config.pins)

    def configure(self, options: Union[ModuleConfig, Mapping[str, Any]]) -> None:
        """
        Accept this module's pin subset and settings.

        Args:
            options: A typed config for this module, or a mapping that is
                validated into one

        Raises:
            ConfigurationError: If required keys are missing or malformed
        """
        if isinstance(options, self.config_class):
            config = options
        elif isinstance(options, (GPIOModuleConfig, AnalogModuleConfig, I2CModuleConfig)):
            raise ConfigurationError(
                f"Module '{self._name}' expects {self.config_class.__name__}, "
                f"got {type(options).__name__}"
            )
        else:
            config = self.config_class.from_dict(options, self._name)

        with self._lock:
            self._config = config
            if self._state == ModuleState.NEW:
                self._state = ModuleState.CONFIGURED
        logger.debug(f"Module '{self._name}' configured with {len(config.pins)} pins")

    def enable(self) -> None:
        """Make the module ready to serve operations."""
        with self._lock:
            if self._config is None:
                raise ConfigurationError(f"Module '{self._name}' must be configured before enable")
            if self._state == ModuleState.ENABLED:
                return
            self._on_enable()
            self._state = ModuleState.ENABLED
        logger.info(f"Module '{self._name}' enabled")

    def disable(self) -> None:
        """Close every open handle and release every pin. Safe to call repeatedly."""
        with self._lock:
            if self._state == ModuleState.DISABLED:
                return
            try:
                self._on_disable()
            finally:
                # Never leave registry entries behind for a disabled module
                self._registry.release_module(self)
                if self._state != ModuleState.NEW:
                    self._state = ModuleState.DISABLED
        logger.info(f"Module '{self._name}' disabled")

    def _on_enable(self) -> None:
        """Hook for subclasses that claim pins at enable time."""
        pass

    @abstractmethod
    def _on_disable(self) -> None:
        """Close handles held by the module."""
        ...

    def _require_pin(self, pin: int, operation: str) -> None:
        """Raise UnknownPinError unless the pin is in the configured set. Call with the lock held."""
        if self._config is None or pin not in self._config.pins:
            raise UnknownPinError(pin, operation, self._name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self._name}' {self._state.name}>"


class DigitalModule(BaseModule):
    """Digital I/O variant: per-pin modes, read, write and close."""

    config_class = GPIOModuleConfig

    @property
    def module_type(self) -> str:
        return "digital"

    @abstractmethod
    def set_mode(self, pin: int, mode: PinMode) -> None:
        """Open a pin in a mode, reopening it if the mode changes."""
        ...

    @abstractmethod
    def write(self, pin: int, value: int) -> None:
        """Drive an output pin high (any non-zero value) or low."""
        ...

    @abstractmethod
    def read(self, pin: int) -> int:
        """Read the level of an open pin, HIGH or LOW."""
        ...

    @abstractmethod
    def close_pin(self, pin: int) -> None:
        """Close an open pin and release it."""
        ...

    @abstractmethod
    def get_mode(self, pin: int) -> Optional[PinMode]:
        """Mode an open pin is in, or None if it is not open."""
        ...


class AnalogModule(BaseModule):
    """Analog input variant: read-only, all pins opened at enable time."""

    config_class = AnalogModuleConfig

    @property
    def module_type(self) -> str:
        return "analog"

    @abstractmethod
    def read(self, pin: int) -> int:
        """Read the current sample of an analog pin."""
        ...


class BusModule(BaseModule):
    """Bus variant: claims a fixed pin set at enable time, exposes a device."""

    config_class = I2CModuleConfig

    @property
    def module_type(self) -> str:
        return "bus"

    @property
    def device(self) -> str:
        """Device path of the bus."""
        if self._config is None:
            raise ConfigurationError(f"Module '{self._name}' is not configured")
        return self._config.device
