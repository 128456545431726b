"""
Pin Map - the immutable, board-specific table of pin definitions.

A Pin is the index of a definition in the table. Drivers build one
PinMap per instance from a literal table and never change it afterwards,
so lookups need no locking.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, NewType, Optional, Sequence

from hwpins.hal.errors import ConfigurationError, PinNotFoundError

Pin = NewType("Pin", int)

# Capability tags used by the bundled drivers
CAP_GPIO = "gpio"
CAP_ANALOG = "analog"
CAP_I2C = "i2c"
CAP_SPI = "spi"
CAP_SERIAL = "serial"
CAP_UNASSIGNABLE = "unassignable"


@dataclass(frozen=True)
class PinDefinition:
    """Describes one physical pin position on a board."""

    names: tuple[str, ...]
    capabilities: frozenset[str] = field(default_factory=frozenset)
    gpio_logical: int = 0  # kernel GPIO number
    analog_logical: int = 0  # ADC channel

    def __post_init__(self):
        # Accept plain lists/sets from literal tables
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "capabilities", frozenset(self.capabilities))
        if not self.names:
            raise ConfigurationError("A pin definition needs at least one name")

    @property
    def name(self) -> str:
        """Canonical name of the pin."""
        return self.names[0]

    def used_by(self, capability: str) -> bool:
        """Whether this pin carries the given capability tag."""
        return capability in self.capabilities


def pin_def(
    names: Iterable[str],
    capabilities: Iterable[str],
    gpio_logical: int = 0,
    analog_logical: int = 0,
) -> PinDefinition:
    """Shorthand used by the driver pin tables."""
    return PinDefinition(tuple(names), frozenset(capabilities), gpio_logical, analog_logical)


class PinMap:
    """
    Ordered collection of pin definitions indexed by Pin.

    Name resolution is case-insensitive and matches any alias of any
    definition.
    """

    def __init__(self, definitions: Sequence[PinDefinition]):
        """
        Build the map.

        Args:
            definitions: Pin definitions in table order; the position of
                each definition becomes its Pin

        Raises:
            ConfigurationError: If two definitions share an alias
        """
        self._definitions: tuple[PinDefinition, ...] = tuple(definitions)
        self._by_name: dict[str, Pin] = {}
        for index, definition in enumerate(self._definitions):
            for alias in definition.names:
                key = alias.lower()
                if key in self._by_name:
                    raise ConfigurationError(
                        f"Pin name '{alias}' is defined for both pin "
                        f"{self._by_name[key]} and pin {index}"
                    )
                self._by_name[key] = Pin(index)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, pin: object) -> bool:
        return isinstance(pin, int) and 0 <= pin < len(self._definitions)

    def resolve(self, name: str) -> Pin:
        """
        Resolve a pin name to its Pin.

        Raises:
            PinNotFoundError: If no definition carries the name
        """
        pin = self._by_name.get(name.lower())
        if pin is None:
            raise PinNotFoundError(name)
        return pin

    def get(self, pin: int) -> Optional[PinDefinition]:
        """Get the definition for a pin, or None if it is not defined."""
        if pin not in self:
            return None
        return self._definitions[pin]

    def definition(self, pin: int) -> PinDefinition:
        """Get the definition for a pin, raising PinNotFoundError if undefined."""
        definition = self.get(pin)
        if definition is None:
            raise PinNotFoundError(pin)
        return definition

    def capabilities_of(self, pin: int) -> frozenset[str]:
        """Capability tags of a pin."""
        return self.definition(pin).capabilities

    def name_of(self, pin: int) -> str:
        """Canonical name of a pin."""
        return self.definition(pin).name

    def is_assignable(self, pin: int) -> bool:
        """Whether any module may ever claim this pin."""
        return not self.definition(pin).used_by(CAP_UNASSIGNABLE)

    def all_pins(self) -> list[tuple[Pin, PinDefinition]]:
        """All (Pin, definition) pairs in table order."""
        return [(Pin(i), d) for i, d in enumerate(self._definitions)]

    def pins_with_capability(self, capability: str) -> list[tuple[Pin, PinDefinition]]:
        """(Pin, definition) pairs carrying a capability tag, in table order."""
        return [(pin, d) for pin, d in self.all_pins() if d.used_by(capability)]

    def to_dict(self) -> dict[int, dict[str, Any]]:
        """Serialize the map to a dictionary."""
        return {
            pin: {
                "names": list(d.names),
                "capabilities": sorted(d.capabilities),
                "gpio_logical": d.gpio_logical,
                "analog_logical": d.analog_logical,
            }
            for pin, d in self.all_pins()
        }
