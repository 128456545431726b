"""
Driver for Raspberry Pi boards with the 40-pin header.

Uses the same sysfs GPIO module as the Odroid driver. Pins answer to
their physical header position (pin7), their BCM name (gpio4) and, for
special-function pins, the function name (sda, txd, ...).
"""

import logging
from typing import Sequence

from hwpins.hal.base_driver import BaseDriver
from hwpins.hal.base_module import GPIOModuleConfig, I2CModuleConfig
from hwpins.hal.cpuinfo import hardware_property
from hwpins.hal.modules.dt_gpio_module import DTGPIOModule
from hwpins.hal.modules.dt_i2c_module import DTI2CModule
from hwpins.hal.pin_map import (
    CAP_GPIO,
    CAP_I2C,
    CAP_SERIAL,
    CAP_SPI,
    CAP_UNASSIGNABLE,
    PinDefinition,
    pin_def,
)

logger = logging.getLogger(__name__)

U = CAP_UNASSIGNABLE

PI_HARDWARE = {"BCM2708", "BCM2709", "BCM2711", "BCM2835", "BCM2836", "BCM2837"}

# Index in the list is the header pin number; entry 0 is a spacer.
# Pins 27-28 carry the HAT ID EEPROM and are reserved.
RPI_40_PIN_HEADER = [
    pin_def(["dummy"], [U]),
    pin_def(["pin1", "3.3v-1"], [U]),
    pin_def(["pin2", "5v-1"], [U]),
    pin_def(["pin3", "gpio2", "sda"], [CAP_I2C], 2),
    pin_def(["pin4", "5v-2"], [U]),
    pin_def(["pin5", "gpio3", "scl"], [CAP_I2C], 3),
    pin_def(["pin6", "ground-1"], [U]),
    pin_def(["pin7", "gpio4"], [CAP_GPIO], 4),
    pin_def(["pin8", "gpio14", "txd"], [CAP_GPIO, CAP_SERIAL], 14),
    pin_def(["pin9", "ground-2"], [U]),
    pin_def(["pin10", "gpio15", "rxd"], [CAP_GPIO, CAP_SERIAL], 15),
    pin_def(["pin11", "gpio17"], [CAP_GPIO], 17),
    pin_def(["pin12", "gpio18"], [CAP_GPIO], 18),
    pin_def(["pin13", "gpio27"], [CAP_GPIO], 27),
    pin_def(["pin14", "ground-3"], [U]),
    pin_def(["pin15", "gpio22"], [CAP_GPIO], 22),
    pin_def(["pin16", "gpio23"], [CAP_GPIO], 23),
    pin_def(["pin17", "3.3v-2"], [U]),
    pin_def(["pin18", "gpio24"], [CAP_GPIO], 24),
    pin_def(["pin19", "gpio10", "mosi"], [CAP_GPIO, CAP_SPI], 10),
    pin_def(["pin20", "ground-4"], [U]),
    pin_def(["pin21", "gpio9", "miso"], [CAP_GPIO, CAP_SPI], 9),
    pin_def(["pin22", "gpio25"], [CAP_GPIO], 25),
    pin_def(["pin23", "gpio11", "sclk"], [CAP_GPIO, CAP_SPI], 11),
    pin_def(["pin24", "gpio8", "ce0"], [CAP_GPIO, CAP_SPI], 8),
    pin_def(["pin25", "ground-5"], [U]),
    pin_def(["pin26", "gpio7", "ce1"], [CAP_GPIO, CAP_SPI], 7),
    pin_def(["pin27", "id_sd"], [U]),
    pin_def(["pin28", "id_sc"], [U]),
    pin_def(["pin29", "gpio5"], [CAP_GPIO], 5),
    pin_def(["pin30", "ground-6"], [U]),
    pin_def(["pin31", "gpio6"], [CAP_GPIO], 6),
    pin_def(["pin32", "gpio12"], [CAP_GPIO], 12),
    pin_def(["pin33", "gpio13"], [CAP_GPIO], 13),
    pin_def(["pin34", "ground-7"], [U]),
    pin_def(["pin35", "gpio19"], [CAP_GPIO], 19),
    pin_def(["pin36", "gpio16"], [CAP_GPIO], 16),
    pin_def(["pin37", "gpio26"], [CAP_GPIO], 26),
    pin_def(["pin38", "gpio20"], [CAP_GPIO], 20),
    pin_def(["pin39", "ground-8"], [U]),
    pin_def(["pin40", "gpio21"], [CAP_GPIO], 21),
]

I2C_BUS = 1


class RaspberryPiDriver(BaseDriver):
    """Driver for Raspberry Pi models with a 40-pin header."""

    @property
    def name(self) -> str:
        return "Raspberry Pi"

    def matches_hardware(self) -> bool:
        return hardware_property("Hardware", self._config.sysfs.cpuinfo_path) in PI_HARDWARE

    def _pin_definitions(self, revision: int) -> Sequence[PinDefinition]:
        return RPI_40_PIN_HEADER

    def _create_modules(self) -> None:
        registry = self.registry

        gpio = self._add_module(
            "gpio", DTGPIOModule("gpio", registry, gpio_root=self._config.sysfs.gpio_root)
        )
        gpio.configure(GPIOModuleConfig(
            pins={pin: d.gpio_logical for pin, d in self.pins_for(CAP_GPIO)}
        ))

        i2c = self._add_module("i2c", DTI2CModule("i2c", registry))
        i2c.configure(I2CModuleConfig(
            pins=[pin for pin, _ in self.pins_for(CAP_I2C)],
            device=self._config.i2c_device(I2C_BUS),
        ))

        gpio.enable()
        i2c.enable()
