"""
Hardware identification from /proc/cpuinfo.

The file lists one block of "key : value" lines per processor. On ARM
boards the board-wide fields (Hardware, Revision, Serial) are printed
once after the last processor block, so they are attributed to the
highest-numbered processor.
"""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CPUINFO_PATH = "/proc/cpuinfo"


def parse_cpu_info(text: str) -> dict[int, dict[str, str]]:
    """
    Parse cpuinfo text into per-processor property dictionaries.

    Lines that appear before any "processor" line are attributed to
    processor 0.
    """
    records: dict[int, dict[str, str]] = {}
    current = 0
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip()
        if key == "processor":
            try:
                current = int(value)
            except ValueError:
                logger.debug(f"Ignoring malformed processor line: {line!r}")
                continue
        records.setdefault(current, {})[key] = value
    return records


def read_cpu_info(path: Union[str, Path] = DEFAULT_CPUINFO_PATH) -> dict[int, dict[str, str]]:
    """Read and parse a cpuinfo file. Returns an empty dict if it cannot be read."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return {}
    return parse_cpu_info(text)


def cpu_info(cpu: int, prop: str, path: Union[str, Path] = DEFAULT_CPUINFO_PATH) -> str:
    """Get a property of a specific processor, or '' if absent."""
    return read_cpu_info(path).get(cpu, {}).get(prop, "")


def hardware_property(prop: str, path: Union[str, Path] = DEFAULT_CPUINFO_PATH) -> Optional[str]:
    """
    Get a board-wide property from the highest-numbered processor record.

    Returns:
        The property value, or None if the record does not have it
    """
    records = read_cpu_info(path)
    if not records:
        return None
    return records[max(records)].get(prop)
