"""Disk throughput profiles for the supported disk types."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class DiskConfig:
    """Sequential read and write throughput of a disk, in MB/s."""

    read_speed: float
    write_speed: float


_DISK_CONFIGS = MappingProxyType(
    {
        "sata_hdd": DiskConfig(read_speed=120.0, write_speed=100.0),
        "sata_ssd": DiskConfig(read_speed=300.0, write_speed=250.0),
        "nvme": DiskConfig(read_speed=1500.0, write_speed=1200.0),
    }
)


def get_disk_configs():
    """Return the read-only mapping of disk type to its profile."""
    return _DISK_CONFIGS


def get_disk_config(disk_type):
    """Return the profile for ``disk_type``; raise ValueError if it is unknown."""
    try:
        return _DISK_CONFIGS[disk_type]
    except KeyError:
        raise ValueError(f"无效的磁盘类型: {disk_type}") from None