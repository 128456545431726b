"""
Driver for Odroid C1 and C2 boards running a device-tree kernel.

The 40-pin header is mostly Raspberry Pi compatible except for the GPIO
numbers, and pins 37 and 40 carry the SAR ADC inputs. GPIO is 3.3V,
analog input is 1.8V.

Known limitations:
- no pull-up/pull-down control through sysfs
- SPI and serial pins are listed but not served by a module
"""

import logging
from typing import Sequence

from hwpins.hal.base_driver import BaseDriver
from hwpins.hal.base_module import (
    AnalogModuleConfig,
    GPIOModuleConfig,
    I2CModuleConfig,
)
from hwpins.hal.cpuinfo import hardware_property
from hwpins.hal.modules.dt_gpio_module import DTGPIOModule
from hwpins.hal.modules.dt_i2c_module import DTI2CModule
from hwpins.hal.modules.odroid_analog_module import OdroidCXAnalogModule
from hwpins.hal.pin_map import (
    CAP_ANALOG,
    CAP_GPIO,
    CAP_SERIAL,
    CAP_SPI,
    CAP_UNASSIGNABLE,
    PinDefinition,
    pin_def,
)

logger = logging.getLogger(__name__)

U = CAP_UNASSIGNABLE

HARDWARE_REVISIONS = {
    "ODROIDC": 1,
    "ODROID-C2": 2,
}

# Index in the list is the header pin number; entry 0 is a spacer
ODROID_C1_PINS = [
    pin_def(["dummy"], [U]),
    pin_def(["3.3v-1"], [U]),
    pin_def(["5v-1"], [U]),
    pin_def(["sda1"], ["i2ca"]),
    pin_def(["5v-2"], [U]),
    pin_def(["scl1"], ["i2ca"]),
    pin_def(["ground-1"], [U]),
    pin_def(["gpio83"], [CAP_GPIO], 83),
    pin_def(["txd"], [CAP_SERIAL]),
    pin_def(["ground-2"], [U]),
    pin_def(["rxd"], [CAP_SERIAL]),
    pin_def(["gpio88"], [CAP_GPIO], 88),
    pin_def(["gpio87"], [CAP_GPIO], 87),
    pin_def(["gpio116"], [CAP_GPIO], 116),
    pin_def(["ground-3"], [U]),
    pin_def(["gpio115"], [CAP_GPIO], 115),
    pin_def(["gpio104"], [CAP_GPIO], 104),
    pin_def(["3.3v-2"], [U]),
    pin_def(["gpio102"], [CAP_GPIO], 102),
    pin_def(["mosi"], [CAP_SPI]),
    pin_def(["ground-4"], [U]),
    pin_def(["miso"], [CAP_SPI]),
    pin_def(["gpio103"], [CAP_GPIO], 103),
    pin_def(["sclk"], [CAP_SPI]),
    pin_def(["ce0"], [CAP_SPI]),
    pin_def(["ground-5"], [U]),
    pin_def(["gpio118"], [CAP_GPIO], 118),
    pin_def(["sda2"], ["i2cb"]),
    pin_def(["scl2"], ["i2cb"]),
    pin_def(["gpio101"], [CAP_GPIO], 101),
    pin_def(["ground-6"], [U]),
    pin_def(["gpio100"], [CAP_GPIO], 100),
    pin_def(["gpio99"], [CAP_GPIO], 99),
    pin_def(["gpio108"], [CAP_GPIO], 108),
    pin_def(["ground-7"], [U]),
    pin_def(["gpio97"], [CAP_GPIO], 97),
    pin_def(["gpio98"], [CAP_GPIO], 98),
    pin_def(["ain1"], [CAP_ANALOG], 26, 1),
    pin_def(["1.8v"], [U]),
    pin_def(["ground-8"], [U]),
    pin_def(["ain0"], [CAP_ANALOG], 21, 0),
]

ODROID_C2_PINS = [
    pin_def(["dummy"], [U]),
    pin_def(["3.3v-1"], [U]),
    pin_def(["5v-1"], [U]),
    pin_def(["sda1"], ["i2ca"]),
    pin_def(["5v-2"], [U]),
    pin_def(["scl1"], ["i2ca"]),
    pin_def(["ground-1"], [U]),
    pin_def(["gpio249"], [CAP_GPIO], 249),
    pin_def(["txd"], [CAP_SERIAL]),
    pin_def(["ground-2"], [U]),
    pin_def(["rxd"], [CAP_SERIAL]),
    pin_def(["gpio247"], [CAP_GPIO], 247),
    pin_def(["gpio238"], [CAP_GPIO], 238),
    pin_def(["gpio239"], [CAP_GPIO], 239),
    pin_def(["ground-3"], [U]),
    pin_def(["gpio237"], [CAP_GPIO], 237),
    pin_def(["gpio236"], [CAP_GPIO], 236),
    pin_def(["3.3v-2"], [U]),
    pin_def(["gpio233"], [CAP_GPIO], 233),
    pin_def(["gpio235"], [CAP_GPIO], 235),
    pin_def(["ground-4"], [U]),
    pin_def(["gpio232"], [CAP_GPIO], 232),
    pin_def(["gpio231"], [CAP_GPIO], 231),
    pin_def(["gpio230"], [CAP_GPIO], 230),
    pin_def(["gpio229"], [CAP_GPIO], 229),
    pin_def(["ground-5"], [U]),
    pin_def(["gpio225"], [CAP_GPIO], 225),
    pin_def(["sda2"], ["i2cb"]),
    pin_def(["scl2"], ["i2cb"]),
    pin_def(["gpio228"], [CAP_GPIO], 228),
    pin_def(["ground-6"], [U]),
    pin_def(["gpio219"], [CAP_GPIO], 219),
    pin_def(["gpio224"], [CAP_GPIO], 224),
    pin_def(["gpio234"], [CAP_GPIO], 234),
    pin_def(["ground-7"], [U]),
    pin_def(["gpio214"], [CAP_GPIO], 214),
    pin_def(["gpio218"], [CAP_GPIO], 218),
    pin_def(["ain1"], [CAP_ANALOG], 26, 1),
    pin_def(["1.8v"], [U]),
    pin_def(["ground-8"], [U]),
    pin_def(["ain0"], [CAP_ANALOG], 21, 0),
]

# Kernel bus numbers of the two header I2C buses
I2C_BUSES = {
    "i2ca": 1,
    "i2cb": 2,
}


class OdroidCXDriver(BaseDriver):
    """Driver for Odroid C1 (revision 1) and C2 (revision 2)."""

    @property
    def name(self) -> str:
        return "Odroid C1/C2"

    def _hardware(self):
        return hardware_property("Hardware", self._config.sysfs.cpuinfo_path)

    def matches_hardware(self) -> bool:
        return self._hardware() in HARDWARE_REVISIONS

    def board_revision(self) -> int:
        return HARDWARE_REVISIONS.get(self._hardware(), 1)

    def _pin_definitions(self, revision: int) -> Sequence[PinDefinition]:
        if revision == 2:
            return ODROID_C2_PINS
        return ODROID_C1_PINS

    def _create_modules(self) -> None:
        sysfs = self._config.sysfs
        registry = self.registry

        gpio = self._add_module("gpio", DTGPIOModule("gpio", registry, gpio_root=sysfs.gpio_root))
        gpio.configure(GPIOModuleConfig(
            pins={pin: d.gpio_logical for pin, d in self.pins_for(CAP_GPIO)}
        ))

        buses = []
        for bus_name, bus_number in I2C_BUSES.items():
            bus = self._add_module(bus_name, DTI2CModule(bus_name, registry))
            bus.configure(I2CModuleConfig(
                pins=[pin for pin, _ in self.pins_for(bus_name)],
                device=self._config.i2c_device(bus_number),
            ))
            buses.append(bus)

        # 'i2c' names the default bus on every board
        self._add_module("i2c", buses[0])

        analog = self._add_module("analog", OdroidCXAnalogModule(
            "analog",
            registry,
            path_template=sysfs.analog_path_template,
            read_size=sysfs.analog_read_size,
        ))
        analog.configure(AnalogModuleConfig(
            pins={pin: d.analog_logical for pin, d in self.pins_for(CAP_ANALOG)}
        ))

        # The device tree fixes the I2C pins, so claim them up front
        gpio.enable()
        for bus in buses:
            bus.enable()
        analog.enable()
