"""
Tests for the board drivers in hwpins.hal.drivers.

The Odroid and Raspberry Pi drivers run against a fake sysfs tree and a
fake /proc/cpuinfo.
"""

import pytest

from hwpins.hal.base_module import AnalogModule, BusModule, DigitalModule, PinMode
from hwpins.hal.drivers import MockDriver, OdroidCXDriver, RaspberryPiDriver
from hwpins.hal.drivers.odroid_cx_driver import ODROID_C1_PINS, ODROID_C2_PINS
from hwpins.hal.drivers.raspberry_pi_driver import RPI_40_PIN_HEADER
from hwpins.hal.errors import HwpinsError, ModuleLookupError, OwnershipError


class TestPinTables:
    """Tests for the literal pin tables."""

    @pytest.mark.parametrize("table", [ODROID_C1_PINS, ODROID_C2_PINS, RPI_40_PIN_HEADER])
    def test_forty_pin_header(self, table):
        """Test index N of every table is header pin N."""
        assert len(table) == 41

    def test_odroid_analog_pins(self):
        for table in (ODROID_C1_PINS, ODROID_C2_PINS):
            assert table[37].name == "ain1"
            assert table[37].analog_logical == 1
            assert table[40].name == "ain0"
            assert table[40].analog_logical == 0

    def test_odroid_revisions_differ(self):
        assert ODROID_C1_PINS[7].gpio_logical == 83
        assert ODROID_C2_PINS[7].gpio_logical == 249


class TestOdroidCXDriver:
    """Tests for OdroidCXDriver."""

    @pytest.fixture
    def driver(self, sysfs_config, cpuinfo_file):
        cpuinfo_file("ODROIDC")
        driver = OdroidCXDriver(sysfs_config)
        yield driver
        driver.close()

    def test_matches_hardware(self, driver):
        assert driver.matches_hardware()
        assert driver.board_revision() == 1

    def test_c2_revision(self, sysfs_config, cpuinfo_file):
        cpuinfo_file("ODROID-C2")
        driver = OdroidCXDriver(sysfs_config)

        assert driver.matches_hardware()
        assert driver.board_revision() == 2

    def test_other_hardware(self, sysfs_config, cpuinfo_file):
        cpuinfo_file("BCM2835")
        assert not OdroidCXDriver(sysfs_config).matches_hardware()

    def test_missing_cpuinfo(self, sysfs_config):
        assert not OdroidCXDriver(sysfs_config).matches_hardware()

    def test_uninitialized(self, driver):
        with pytest.raises(HwpinsError):
            driver.pin_map

    def test_initialize(self, driver):
        """Test initialize wires the modules for the detected revision."""
        driver.initialize()

        assert driver.is_initialized
        assert driver.pin_map.resolve("gpio83") == 7
        assert isinstance(driver.get_module("gpio"), DigitalModule)
        assert isinstance(driver.get_module("analog"), AnalogModule)
        assert isinstance(driver.get_module("i2ca"), BusModule)
        assert driver.get_module("i2c") is driver.get_module("i2ca")

    def test_initialize_twice(self, driver):
        driver.initialize()
        pin_map = driver.pin_map

        driver.initialize()

        assert driver.pin_map is pin_map

    def test_enable_failure_releases_pins(self, sysfs_config, cpuinfo_file, temp_dir):
        """Test a module failing to enable leaves no pins claimed."""
        cpuinfo_file("ODROIDC")
        sysfs_config.sysfs.analog_path_template = str(temp_dir / "missing" / "saradc_ch{channel}")
        driver = OdroidCXDriver(sysfs_config)

        with pytest.raises(OSError):
            driver.initialize()

        assert driver.registry.to_dict() == {}
        assert driver.modules == {}
        assert not driver.is_initialized
        driver.close()

    def test_c2_pin_map(self, sysfs_config, cpuinfo_file):
        cpuinfo_file("ODROID-C2")
        with OdroidCXDriver(sysfs_config) as driver:
            assert driver.pin_map.resolve("gpio249") == 7
            assert "gpio83" not in [d.name for _, d in driver.pin_map.all_pins()]

    def test_startup_claims(self, driver):
        """Test I2C and analog pins are claimed at initialisation."""
        driver.initialize()
        registry = driver.registry

        assert registry.owner_of(3).name == "i2ca"
        assert registry.owner_of(5).name == "i2ca"
        assert registry.owner_of(27).name == "i2cb"
        assert registry.owner_of(28).name == "i2cb"
        assert registry.owner_of(37).name == "analog"
        assert registry.owner_of(40).name == "analog"
        assert registry.owner_of(7) is None

    def test_i2c_device_paths(self, driver, sysfs_config):
        driver.initialize()

        assert driver.get_module("i2ca").device == sysfs_config.i2c_device(1)
        assert driver.get_module("i2cb").device == sysfs_config.i2c_device(2)

    def test_analog_reads(self, driver):
        driver.initialize()
        analog = driver.get_module("analog")

        assert analog.read(40) == 1
        assert analog.read(37) == 1000

    def test_gpio_cannot_take_i2c_pin(self, driver):
        """Test an I2C pin cannot be claimed by another module."""
        driver.initialize()

        with pytest.raises(OwnershipError):
            driver.registry.assign(3, driver.get_module("gpio"))

    def test_gpio_pin(self, driver, exported_gpio):
        directory = exported_gpio(83)
        driver.initialize()
        gpio = driver.get_module("gpio")

        gpio.set_mode(7, PinMode.OUTPUT)
        gpio.write(7, 1)

        assert (directory / "value").read_text() == "1"

    def test_close_empties_registry(self, driver, exported_gpio):
        """Test closing the driver releases every pin."""
        exported_gpio(83)
        driver.initialize()
        driver.get_module("gpio").set_mode(7, PinMode.OUTPUT)

        driver.close()

        assert len(driver.registry) == 0

    def test_unknown_module(self, driver):
        driver.initialize()

        with pytest.raises(ModuleLookupError):
            driver.get_module("spi")

    def test_to_dict(self, driver):
        driver.initialize()
        data = driver.to_dict()

        assert data["name"] == "Odroid C1/C2"
        assert data["revision"] == 1
        assert data["modules"]["analog"] == "analog"
        assert data["assignments"][40] == "analog"


class TestRaspberryPiDriver:
    """Tests for RaspberryPiDriver."""

    def test_matches_hardware(self, sysfs_config, cpuinfo_file):
        cpuinfo_file("BCM2835")
        assert RaspberryPiDriver(sysfs_config).matches_hardware()

    def test_other_hardware(self, sysfs_config, cpuinfo_file):
        cpuinfo_file("ODROIDC")
        assert not RaspberryPiDriver(sysfs_config).matches_hardware()

    def test_initialize(self, sysfs_config):
        with RaspberryPiDriver(sysfs_config) as driver:
            pin_map = driver.pin_map

            assert pin_map.resolve("pin7") == pin_map.resolve("GPIO4") == 7
            assert pin_map.resolve("sda") == 3
            assert not pin_map.is_assignable(27)
            assert driver.registry.owner_of(3).name == "i2c"
            assert driver.get_module("i2c").device == sysfs_config.i2c_device(1)

        assert len(driver.registry) == 0


class TestMockDriver:
    """Tests for MockDriver."""

    @pytest.fixture
    def driver(self):
        with MockDriver() as driver:
            yield driver

    def test_never_matches(self):
        assert not MockDriver().matches_hardware()

    def test_pins(self, driver):
        pin_map = driver.pin_map

        assert len(pin_map) == 13
        assert pin_map.resolve("P1") == 0
        assert pin_map.resolve("ain1") == 11
        assert not pin_map.is_assignable(12)

    def test_analog_samples(self, driver):
        analog = driver.get_module("analog")

        assert analog.read(10) == 1
        assert analog.read(11) == 1000

    def test_gpio(self, driver):
        gpio = driver.get_module("gpio")
        gpio.set_mode(0, PinMode.OUTPUT)
        gpio.write(0, 1)

        assert gpio.read(0) == 1
        assert driver.registry.owner_of(0) is gpio
        assert gpio.mock_get_value(0) == 1
        assert gpio.mock_get_value(5) is None
