"""
Centralized Configuration for hwpins.

This module provides a single source of truth for the file system
locations the drivers talk to, so they can be pointed somewhere else
(a different kernel layout, or a fake tree in tests).
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class SysfsConfig:
    """Kernel interface locations."""

    # sysfs GPIO root holding export/unexport and gpio<N>/
    gpio_root: str = "/sys/class/gpio"

    # Per-channel ADC file, formatted with channel=N
    analog_path_template: str = "/sys/class/saradc/saradc_ch{channel}"

    # Bytes read per analog sample (4 digits plus terminator)
    analog_read_size: int = 5

    # Hardware identification
    cpuinfo_path: str = "/proc/cpuinfo"

    # I2C character devices, formatted with bus=N
    i2c_device_template: str = "/dev/i2c-{bus}"


@dataclass
class PathConfig:
    """Path-related configuration values."""

    # User configuration directory
    user_config_dir: Path = field(default_factory=lambda: Path.home() / ".hwpins")


@dataclass
class HwpinsConfig:
    """Main configuration container for hwpins."""

    sysfs: SysfsConfig = field(default_factory=SysfsConfig)
    paths: PathConfig = field(default_factory=PathConfig)

    def i2c_device(self, bus: int) -> str:
        """Device path of an I2C bus number."""
        return self.sysfs.i2c_device_template.format(bus=bus)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "sysfs": {
                "gpio_root": self.sysfs.gpio_root,
                "analog_path_template": self.sysfs.analog_path_template,
                "analog_read_size": self.sysfs.analog_read_size,
                "cpuinfo_path": self.sysfs.cpuinfo_path,
                "i2c_device_template": self.sysfs.i2c_device_template,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HwpinsConfig":
        """Create configuration from dictionary."""
        config = cls()

        if "sysfs" in data:
            for key, value in data["sysfs"].items():
                if hasattr(config.sysfs, key):
                    setattr(config.sysfs, key, value)
                else:
                    logger.warning(f"Ignoring unknown sysfs setting '{key}'")

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = self.paths.user_config_dir / "config.json"

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "HwpinsConfig":
        """Load configuration from file, using defaults if not found."""
        config = cls()

        if path is None:
            path = config.paths.user_config_dir / "config.json"

        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                config = cls.from_dict(data)
                logger.info(f"Configuration loaded from {path}")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load configuration from {path}: {e}")
                logger.info("Using default configuration")

        return config


# Global configuration instance - lazy loaded
_config: Optional[HwpinsConfig] = None


def get_config() -> HwpinsConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = HwpinsConfig.load()
    return _config


def set_config(config: Optional[HwpinsConfig]) -> None:
    """Set the global configuration instance (None reloads on next use)."""
    global _config
    _config = config
