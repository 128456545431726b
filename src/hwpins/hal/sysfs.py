"""
Helpers for the Linux sysfs GPIO file protocol.

Pins are materialised by writing their kernel number to the export
control file, configured through files in the resulting gpio<N>
directory and released through the unexport control file.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DIRECTION_IN = "in"
DIRECTION_OUT = "out"


def write_string_to_file(path: PathLike, value: str) -> None:
    """Write a short control string to a sysfs file."""
    with open(path, "w") as f:
        f.write(value)


def gpio_directory(gpio_root: PathLike, gpio_logical: int) -> Path:
    """Directory sysfs creates for an exported GPIO."""
    return Path(gpio_root) / f"gpio{gpio_logical}"


def export_gpio(gpio_root: PathLike, gpio_logical: int) -> Path:
    """
    Export a GPIO unless it is already exported.

    Returns:
        The gpio<N> directory of the pin
    """
    directory = gpio_directory(gpio_root, gpio_logical)
    if not directory.exists():
        logger.debug(f"Exporting GPIO {gpio_logical}")
        write_string_to_file(Path(gpio_root) / "export", str(gpio_logical))
    return directory


def unexport_gpio(gpio_root: PathLike, gpio_logical: int) -> None:
    """Release an exported GPIO."""
    logger.debug(f"Unexporting GPIO {gpio_logical}")
    write_string_to_file(Path(gpio_root) / "unexport", str(gpio_logical))


def set_gpio_direction(directory: PathLike, direction: str) -> None:
    """Set the direction of an exported GPIO to 'in' or 'out'."""
    if direction not in (DIRECTION_IN, DIRECTION_OUT):
        raise ValueError(f"Direction must be '{DIRECTION_IN}' or '{DIRECTION_OUT}', got '{direction}'")
    write_string_to_file(Path(directory) / "direction", direction)


def open_gpio_value(directory: PathLike, direction: str) -> BinaryIO:
    """
    Open the value file of an exported GPIO.

    Inputs are opened read-only. Outputs are opened read-write and
    truncated so the current level can be read back. The file is
    unbuffered and kept open; callers seek to the start before every
    access.
    """
    path = Path(directory) / "value"
    if direction == DIRECTION_OUT:
        fd = os.open(path, os.O_RDWR | os.O_TRUNC)
        return os.fdopen(fd, "r+b", buffering=0)
    return open(path, "rb", buffering=0)


def open_read_only(path: PathLike) -> BinaryIO:
    """Open a device file for unbuffered reading."""
    return open(path, "rb", buffering=0)


def read_at_start(f: BinaryIO, size: int) -> bytes:
    """Read up to size bytes from offset 0 of an open file."""
    f.seek(0)
    return f.read(size) or b""


def write_at_start(f: BinaryIO, data: bytes) -> None:
    """Write data at offset 0 of an open file."""
    f.seek(0)
    f.write(data)
