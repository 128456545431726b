"""
hwpins Test Configuration and Fixtures.

Provides shared fixtures for unit tests, including a fake sysfs tree
in a temporary directory that stands in for /sys/class/gpio.
"""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from hwpins.core.config import HwpinsConfig, SysfsConfig, set_config
from hwpins.hal.pin_map import PinMap, pin_def
from hwpins.hal.pin_registry import PinAssignmentRegistry

# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_file(temp_dir):
    """Provide a factory for creating temporary files."""

    def _create_file(name: str, content: str = "") -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    yield _create_file


# =============================================================================
# Fake sysfs Fixtures
# =============================================================================

@pytest.fixture
def gpio_root(temp_dir):
    """Provide an empty fake /sys/class/gpio directory."""
    root = temp_dir / "gpio"
    root.mkdir()
    return root


@pytest.fixture
def exported_gpio(gpio_root):
    """
    Provide a factory that creates a gpio<N> directory as the kernel
    would after an export.
    """

    def _export(gpio_logical: int, value: str = "0") -> Path:
        directory = gpio_root / f"gpio{gpio_logical}"
        directory.mkdir()
        (directory / "direction").write_text("in")
        (directory / "value").write_text(value)
        return directory

    return _export


@pytest.fixture
def saradc_dir(temp_dir):
    """Provide a fake saradc directory with channels 0 and 1."""
    directory = temp_dir / "saradc"
    directory.mkdir()
    (directory / "saradc_ch0").write_text("1\n")
    (directory / "saradc_ch1").write_text("1000\n")
    return directory


@pytest.fixture
def cpuinfo_file(temp_file):
    """Provide a factory for fake /proc/cpuinfo files."""

    def _create(hardware: str, processors: int = 4) -> Path:
        lines = []
        for i in range(processors):
            lines += [f"processor\t: {i}", "BogoMIPS\t: 100.00", ""]
        lines += [f"Hardware\t: {hardware}", "Revision\t: 0000", "Serial\t\t: 0000000000000000"]
        return temp_file("cpuinfo", "\n".join(lines) + "\n")

    return _create


@pytest.fixture
def sysfs_config(temp_dir, gpio_root, saradc_dir):
    """Provide a configuration pointing every kernel path into temp_dir."""
    config = HwpinsConfig(
        sysfs=SysfsConfig(
            gpio_root=str(gpio_root),
            analog_path_template=str(saradc_dir / "saradc_ch{channel}"),
            cpuinfo_path=str(temp_dir / "cpuinfo"),
            i2c_device_template=str(temp_dir / "i2c-{bus}"),
        )
    )
    return config


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the global configuration from leaking between tests."""
    set_config(HwpinsConfig())
    yield
    set_config(None)


# =============================================================================
# Pin Map / Registry Fixtures
# =============================================================================

@pytest.fixture
def small_pin_map():
    """Provide a small pin map: 0-3 GPIO, 4 analog, 5 ground."""
    return PinMap([
        pin_def(["P1", "gpio10"], ["gpio"], 10),
        pin_def(["P2", "gpio11"], ["gpio"], 11),
        pin_def(["P3", "gpio12"], ["gpio"], 12),
        pin_def(["P4", "gpio13"], ["gpio"], 13),
        pin_def(["P5", "ain0"], ["analog"], 0, 0),
        pin_def(["P6", "ground"], ["unassignable"]),
    ])


@pytest.fixture
def registry(small_pin_map):
    """Provide a fresh registry over the small pin map."""
    return PinAssignmentRegistry(small_pin_map)


@pytest.fixture
def module_factory():
    """Provide a factory for mock modules (registry tests only need .name)."""

    def _create(name: str):
        module = MagicMock()
        module.name = name
        return module

    return _create
