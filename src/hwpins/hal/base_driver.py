"""
Abstract Base Class for board drivers.

A driver is the composition root for one family of boards: it detects
the hardware, builds the board's PinMap for the detected revision,
creates the PinAssignmentRegistry and wires up the capability modules.
New boards are added by providing a pin table and module wiring, not by
subclassing modules.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from hwpins.core.config import HwpinsConfig, get_config
from hwpins.hal.base_module import BaseModule
from hwpins.hal.errors import HwpinsError, ModuleLookupError
from hwpins.hal.pin_map import Pin, PinDefinition, PinMap
from hwpins.hal.pin_registry import PinAssignmentRegistry

logger = logging.getLogger(__name__)


class BaseDriver(ABC):
    """
    Abstract Base Class defining the contract for board drivers.

    Callers only ever touch pin names, module lookups and pin
    operations; the driver owns the pin map, registry and modules.
    """

    def __init__(self, config: Optional[HwpinsConfig] = None):
        """
        Initialize the driver.

        Args:
            config: Configuration to use; defaults to the global one
        """
        self._config = config or get_config()
        self._pin_map: Optional[PinMap] = None
        self._registry: Optional[PinAssignmentRegistry] = None
        self._modules: dict[str, BaseModule] = {}
        self._initialized = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the board family."""
        ...

    @property
    def config(self) -> HwpinsConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def pin_map(self) -> PinMap:
        """The board's pin map. Only available after initialize()."""
        if self._pin_map is None:
            raise HwpinsError(f"Driver '{self.name}' has not been initialized")
        return self._pin_map

    @property
    def registry(self) -> PinAssignmentRegistry:
        """The driver's pin registry. Only available after initialize()."""
        if self._registry is None:
            raise HwpinsError(f"Driver '{self.name}' has not been initialized")
        return self._registry

    @property
    def modules(self) -> dict[str, BaseModule]:
        """Modules by name, including aliases."""
        return self._modules.copy()

    @abstractmethod
    def matches_hardware(self) -> bool:
        """Examine the environment and report whether this driver handles it."""
        ...

    def board_revision(self) -> int:
        """Revision of the board, selecting the pin table. Defaults to 1."""
        return 1

    @abstractmethod
    def _pin_definitions(self, revision: int) -> Sequence[PinDefinition]:
        """Literal pin table for a board revision."""
        ...

    @abstractmethod
    def _create_modules(self) -> None:
        """
        Create, configure and enable the modules.

        Each module must be handed to _add_module() as soon as it is
        created, so a failure part way through can still disable it.
        """
        ...

    def _add_module(self, name: str, module: BaseModule) -> BaseModule:
        """Register a module (or an alias for one) under a name."""
        self._modules[name] = module
        return module

    def initialize(self) -> None:
        """
        Build the pin map and modules. Calling it again does nothing.

        If a module fails to configure or enable, every module created so
        far is disabled and the registry is left empty before the error
        is raised.
        """
        if self._initialized:
            return
        revision = self.board_revision()
        self._pin_map = PinMap(self._pin_definitions(revision))
        self._registry = PinAssignmentRegistry(self._pin_map)
        self._modules = {}
        try:
            self._create_modules()
        except Exception as e:
            logger.error(f"Failed to initialize driver '{self.name}': {e}")
            self._disable_modules()
            self._modules = {}
            self._registry = PinAssignmentRegistry(self._pin_map)
            raise
        self._initialized = True
        logger.info(
            f"Driver '{self.name}' initialized (revision {revision}, "
            f"{len(self._pin_map)} pins, modules: {', '.join(sorted(self._modules))})"
        )

    def get_module(self, name: str) -> BaseModule:
        """
        Get a module by name.

        Raises:
            ModuleLookupError: If the driver has no such module
        """
        module = self._modules.get(name)
        if module is None:
            raise ModuleLookupError(name)
        return module

    def pins_for(self, capability: str) -> list[tuple[Pin, PinDefinition]]:
        """Pins carrying a capability tag."""
        return self.pin_map.pins_with_capability(capability)

    def _disable_modules(self) -> Optional[Exception]:
        """Disable each distinct module once. Returns the first error."""
        first_error: Optional[Exception] = None
        seen: set[int] = set()
        for name, module in self._modules.items():
            if id(module) in seen:
                continue
            seen.add(id(module))
            try:
                module.disable()
            except Exception as e:
                logger.warning(f"Error disabling module '{name}': {e}")
                first_error = first_error or e
        return first_error

    def close(self) -> None:
        """Disable every module, leaving the registry empty."""
        first_error = self._disable_modules()
        logger.info(f"Driver '{self.name}' closed")
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "BaseDriver":
        self.initialize()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def to_dict(self) -> dict[str, Any]:
        """Serialize driver state to dictionary."""
        return {
            "name": self.name,
            "revision": self.board_revision(),
            "modules": {name: module.module_type for name, module in self._modules.items()},
            "assignments": self._registry.to_dict() if self._registry is not None else {},
        }
