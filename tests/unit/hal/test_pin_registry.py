"""
Tests for hwpins.hal.pin_registry module.

Tests pin assignment, ownership conflicts and release.
"""

import threading

import pytest

from hwpins.hal.errors import (
    AlreadyAssignedError,
    NotAssignedError,
    OwnershipError,
    PinNotFoundError,
    UnassignablePinError,
)
from hwpins.hal.pin_registry import PinAssignmentRegistry


class TestOwnershipError:
    """Tests for OwnershipError exception."""

    def test_error_message(self):
        """Test OwnershipError message format."""
        error = OwnershipError(pin=13, existing_owner="gpio", new_owner="analog")

        assert "13" in str(error)
        assert "gpio" in str(error)
        assert "analog" in str(error)

    def test_error_attributes(self):
        """Test OwnershipError attributes."""
        error = OwnershipError(pin=13, existing_owner="gpio", new_owner="analog")

        assert error.pin == 13
        assert error.operation == "assign"
        assert error.existing_owner == "gpio"
        assert error.new_owner == "analog"

    def test_already_assigned_alias(self):
        """Test AlreadyAssignedError is the same error."""
        assert AlreadyAssignedError is OwnershipError


class TestPinAssignmentRegistry:
    """Tests for PinAssignmentRegistry class."""

    @pytest.fixture
    def gpio(self, module_factory):
        return module_factory("gpio")

    @pytest.fixture
    def spi(self, module_factory):
        return module_factory("spi")

    def test_init(self, registry, small_pin_map):
        """Test registry starts empty."""
        assert len(registry) == 0
        assert registry.assigned_pins == set()
        assert registry.pin_map is small_pin_map

    def test_assign(self, registry, gpio):
        """Test assigning a pin."""
        registry.assign(1, gpio)

        assert 1 in registry.assigned_pins
        assert registry.owner_of(1) is gpio
        assert registry.is_assigned(1)

    def test_assign_same_module_is_noop(self, registry, gpio):
        """Test re-assigning a pin to its owner succeeds."""
        registry.assign(1, gpio)
        registry.assign(1, gpio)

        assert registry.owner_of(1) is gpio
        assert len(registry) == 1

    def test_assign_different_module_raises(self, registry, gpio, spi):
        """Test assigning an owned pin to another module raises OwnershipError."""
        registry.assign(1, gpio)

        with pytest.raises(OwnershipError) as exc_info:
            registry.assign(1, spi)

        assert exc_info.value.pin == 1
        assert exc_info.value.existing_owner == "gpio"
        assert registry.owner_of(1) is gpio

    def test_assign_after_unassign(self, registry, gpio, spi):
        """Test a released pin can be claimed by another module."""
        registry.assign(1, gpio)
        registry.unassign(1)

        registry.assign(1, spi)
        assert registry.owner_of(1) is spi

    def test_unassign_returns_owner(self, registry, gpio):
        """Test unassign returns the previous owner."""
        registry.assign(2, gpio)

        assert registry.unassign(2) is gpio
        assert registry.owner_of(2) is None

    def test_unassign_not_assigned_raises(self, registry):
        """Test releasing an unowned pin raises NotAssignedError."""
        with pytest.raises(NotAssignedError) as exc_info:
            registry.unassign(2)

        assert exc_info.value.pin == 2
        assert exc_info.value.operation == "unassign"

    def test_unassignable_pin(self, registry, gpio):
        """Test ground/power pins can never be claimed."""
        with pytest.raises(UnassignablePinError):
            registry.assign(5, gpio)

        assert registry.owner_of(5) is None

    def test_unassignable_is_ownership_error(self, registry, gpio):
        """Test UnassignablePinError is caught as an OwnershipError."""
        with pytest.raises(OwnershipError):
            registry.assign(5, gpio)

    def test_unknown_pin(self, registry, gpio):
        """Test pins outside the map are refused."""
        with pytest.raises(PinNotFoundError):
            registry.assign(99, gpio)

    def test_without_pin_map_accepts_any_pin(self, gpio):
        """Test a registry without a pin map does no pin validation."""
        registry = PinAssignmentRegistry()
        registry.assign(99, gpio)

        assert registry.owner_of(99) is gpio

    def test_pins_for_module(self, registry, gpio, spi):
        """Test getting all pins owned by a module."""
        registry.assign(0, gpio)
        registry.assign(1, gpio)
        registry.assign(2, spi)

        assert registry.pins_for_module(gpio) == {0, 1}
        assert registry.pins_for_module(spi) == {2}

    def test_release_module(self, registry, gpio, spi):
        """Test releasing all pins of a module."""
        registry.assign(0, gpio)
        registry.assign(1, gpio)
        registry.assign(2, spi)

        released = registry.release_module(gpio)

        assert released == {0, 1}
        assert registry.assigned_pins == {2}

    def test_to_dict(self, registry, gpio):
        """Test serializing assignments to dictionary."""
        registry.assign(3, gpio)

        assert registry.to_dict() == {3: "gpio"}

    def test_get_assignment_summary_empty(self, registry):
        """Test assignment summary when empty."""
        assert "No pins assigned" in registry.get_assignment_summary()

    def test_get_assignment_summary_with_pins(self, registry, gpio):
        """Test assignment summary names the pin and the module."""
        registry.assign(3, gpio)

        summary = registry.get_assignment_summary()
        assert "P4" in summary
        assert "gpio" in summary

    def test_concurrent_assign_single_winner(self, registry, module_factory):
        """Test only one of many racing modules wins a pin."""
        modules = [module_factory(f"m{i}") for i in range(8)]
        winners = []
        barrier = threading.Barrier(len(modules))

        def claim(module):
            barrier.wait()
            try:
                registry.assign(0, module)
                winners.append(module)
            except OwnershipError:
                pass

        threads = [threading.Thread(target=claim, args=(m,)) for m in modules]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(winners) == 1
        assert registry.owner_of(0) is winners[0]
