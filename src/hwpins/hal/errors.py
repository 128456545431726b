"""
Exception hierarchy for the hwpins HAL.

Every error raised by the pin map, registry, modules and drivers derives
from HwpinsError. Errors about a specific pin carry the pin and the
operation that was attempted so callers can report them meaningfully.
Failures of the underlying OS calls are not wrapped: they propagate as
the original OSError.
"""

from typing import Any, Optional


class HwpinsError(Exception):
    """Base exception for all hwpins errors."""
    pass


class NotFoundError(HwpinsError):
    """Raised when a named pin, module or driver does not exist."""
    pass


class PinNotFoundError(NotFoundError):
    """Raised when a pin name or index is not defined in the pin map."""

    def __init__(self, pin: Any):
        self.pin = pin
        super().__init__(f"Pin '{pin}' is not defined by this board")


class ModuleLookupError(NotFoundError):
    """Raised when a driver has no module registered under a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No module named '{name}' is provided by this driver")


class DriverNotFoundError(NotFoundError):
    """Raised when no driver matches the requested name or the hardware."""
    pass


class ConfigurationError(HwpinsError):
    """Raised when module options or pin tables are missing or malformed."""
    pass


class PinError(HwpinsError):
    """Base class for errors about an operation on a specific pin."""

    def __init__(self, pin: int, operation: str, message: str):
        self.pin = pin
        self.operation = operation
        super().__init__(f"{operation} on pin {pin}: {message}")


class OwnershipError(PinError):
    """Raised when a pin is already owned by a different module."""

    def __init__(self, pin: int, existing_owner: str, new_owner: str):
        self.existing_owner = existing_owner
        self.new_owner = new_owner
        super().__init__(
            pin,
            "assign",
            f"already assigned to module '{existing_owner}', "
            f"cannot assign to '{new_owner}'",
        )


AlreadyAssignedError = OwnershipError


class UnassignablePinError(OwnershipError):
    """Raised when a module tries to claim a power, ground or reserved pin."""

    def __init__(self, pin: int, new_owner: str):
        self.existing_owner = None
        self.new_owner = new_owner
        PinError.__init__(
            self, pin, "assign", f"pin is unassignable, cannot assign to '{new_owner}'"
        )


class NotAssignedError(PinError):
    """Raised when releasing a pin that has no owner."""

    def __init__(self, pin: int):
        super().__init__(pin, "unassign", "pin is not assigned to any module")


class NotOpenError(PinError):
    """Raised when operating on a pin that has no active handle."""

    def __init__(self, pin: int, operation: str, hint: Optional[str] = None):
        message = "pin has not been opened"
        if hint:
            message = f"{message}, {hint}"
        super().__init__(pin, operation, message)


class UnknownPinError(PinError):
    """Raised when a module is asked to operate on a pin it was not configured with."""

    def __init__(self, pin: int, operation: str, module_name: str):
        self.module_name = module_name
        super().__init__(pin, operation, f"pin is not known to module '{module_name}'")


class ParseError(PinError):
    """Raised when an analog sample cannot be parsed as a decimal integer."""

    def __init__(self, pin: int, raw: bytes):
        self.raw = raw
        super().__init__(pin, "analog read", f"could not parse sample {raw!r}")
