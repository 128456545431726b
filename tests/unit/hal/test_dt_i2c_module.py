"""
Tests for hwpins.hal.modules.dt_i2c_module.

SMBus is patched out so no /dev/i2c-N device is needed.
"""

from unittest.mock import patch

import pytest

from hwpins.hal.errors import ConfigurationError, OwnershipError
from hwpins.hal.modules.dt_i2c_module import DTI2CModule


@pytest.fixture
def i2c_module(registry):
    """Provide a configured I2C module on pins 0 and 1."""
    module = DTI2CModule("i2c", registry)
    module.configure({"pins": [0, 1], "device": "/dev/i2c-1"})
    yield module
    module.disable()


class TestDTI2CModule:
    """Tests for DTI2CModule."""

    def test_properties(self, i2c_module):
        assert i2c_module.module_type == "bus"
        assert i2c_module.device == "/dev/i2c-1"
        assert i2c_module.pins == [0, 1]

    def test_enable_claims_pins(self, i2c_module, registry):
        """Test the bus pins are claimed at enable time."""
        i2c_module.enable()

        assert registry.owner_of(0) is i2c_module
        assert registry.owner_of(1) is i2c_module

    def test_enable_conflict_rolls_back(self, i2c_module, registry, module_factory):
        """Test a conflict on the second pin releases the first."""
        other = module_factory("gpio")
        registry.assign(1, other)

        with pytest.raises(OwnershipError):
            i2c_module.enable()

        assert registry.owner_of(0) is None
        assert registry.owner_of(1) is other
        registry.unassign(1)

    def test_open_bus(self, i2c_module):
        """Test the bus is opened once and reused."""
        i2c_module.enable()

        with patch("hwpins.hal.modules.dt_i2c_module.SMBus") as smbus:
            bus = i2c_module.open_bus()
            again = i2c_module.open_bus()

        smbus.assert_called_once_with("/dev/i2c-1")
        assert bus is again

    def test_open_bus_requires_enable(self, i2c_module):
        with pytest.raises(ConfigurationError):
            i2c_module.open_bus()

    def test_disable_closes_bus(self, i2c_module, registry):
        """Test disabling closes the bus and releases the pins."""
        i2c_module.enable()
        with patch("hwpins.hal.modules.dt_i2c_module.SMBus") as smbus:
            i2c_module.open_bus()

        i2c_module.disable()

        smbus.return_value.close.assert_called_once()
        assert len(registry) == 0

    def test_missing_device(self, registry):
        """Test options without a device path are rejected."""
        module = DTI2CModule("i2c", registry)

        with pytest.raises(ConfigurationError):
            module.configure({"pins": [0, 1]})
