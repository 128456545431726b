"""
Pin Assignment Registry for tracking pin ownership.

Prevents two modules from driving the same physical pin by recording
which module currently owns each pin. A registry belongs to a single
driver instance and is handed to every module the driver creates.
"""

import logging
import threading
from typing import TYPE_CHECKING, Optional

from hwpins.hal.errors import (
    NotAssignedError,
    OwnershipError,
    PinNotFoundError,
    UnassignablePinError,
)

if TYPE_CHECKING:
    from hwpins.hal.base_module import BaseModule
    from hwpins.hal.pin_map import PinMap

logger = logging.getLogger(__name__)


class PinAssignmentRegistry:
    """
    Exclusivity ledger mapping a pin to the module that owns it.

    All operations are thread-safe. Assigning a pin to the module that
    already owns it succeeds without change, so a module can re-claim a
    pin while changing its mode.
    """

    def __init__(self, pin_map: Optional["PinMap"] = None):
        """
        Initialize the registry.

        Args:
            pin_map: Optional pin map; when given, unknown and
                unassignable pins are refused
        """
        self._pin_map = pin_map
        self._lock = threading.RLock()
        self._owners: dict[int, "BaseModule"] = {}

    @property
    def pin_map(self) -> Optional["PinMap"]:
        """The pin map used to validate assignments, if any."""
        return self._pin_map

    @property
    def assigned_pins(self) -> set[int]:
        """Set of currently assigned pins."""
        with self._lock:
            return set(self._owners.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._owners)

    def assign(self, pin: int, module: "BaseModule") -> None:
        """
        Assign a pin to a module.

        Args:
            pin: Pin to claim
            module: Module claiming the pin

        Raises:
            OwnershipError: If a different module owns the pin
            UnassignablePinError: If the pin can never be claimed
            PinNotFoundError: If the pin is not in the pin map
        """
        if self._pin_map is not None:
            if pin not in self._pin_map:
                raise PinNotFoundError(pin)
            if not self._pin_map.is_assignable(pin):
                raise UnassignablePinError(pin, module.name)

        with self._lock:
            existing = self._owners.get(pin)
            if existing is module:
                return
            if existing is not None:
                raise OwnershipError(pin, existing.name, module.name)
            self._owners[pin] = module
        logger.debug(f"Pin {pin} assigned to module '{module.name}'")

    def unassign(self, pin: int) -> "BaseModule":
        """
        Release a pin.

        Returns:
            The module that owned the pin

        Raises:
            NotAssignedError: If the pin has no owner
        """
        with self._lock:
            module = self._owners.pop(pin, None)
        if module is None:
            raise NotAssignedError(pin)
        logger.debug(f"Pin {pin} released by module '{module.name}'")
        return module

    def owner_of(self, pin: int) -> Optional["BaseModule"]:
        """Get the module owning a pin, or None."""
        with self._lock:
            return self._owners.get(pin)

    def is_assigned(self, pin: int) -> bool:
        """Check if a pin currently has an owner."""
        with self._lock:
            return pin in self._owners

    def pins_for_module(self, module: "BaseModule") -> set[int]:
        """Get all pins owned by a module."""
        with self._lock:
            return {pin for pin, owner in self._owners.items() if owner is module}

    def release_module(self, module: "BaseModule") -> set[int]:
        """
        Release every pin owned by a module.

        Returns:
            The pins that were released
        """
        with self._lock:
            pins = {pin for pin, owner in self._owners.items() if owner is module}
            for pin in pins:
                del self._owners[pin]
        return pins

    def to_dict(self) -> dict[int, str]:
        """Serialize assignments to a pin -> module name dictionary."""
        with self._lock:
            return {pin: module.name for pin, module in self._owners.items()}

    def get_assignment_summary(self) -> str:
        """Get a human-readable summary of assignments."""
        assignments = self.to_dict()
        if not assignments:
            return "No pins assigned"

        lines = ["Pin Assignments:"]
        for pin in sorted(assignments):
            label = str(pin)
            if self._pin_map is not None and pin in self._pin_map:
                label = f"{pin} ({self._pin_map.name_of(pin)})"
            lines.append(f"  Pin {label}: {assignments[pin]}")
        return "\n".join(lines)
