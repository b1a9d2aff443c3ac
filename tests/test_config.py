import pytest

from jvmsizer.config import DiskConfig, get_disk_config, get_disk_configs


def test_known_disk_types():
    assert set(get_disk_configs()) == {"sata_hdd", "sata_ssd", "nvme"}


@pytest.mark.parametrize(
    "disk_type, read, write",
    [("sata_hdd", 120.0, 100.0), ("sata_ssd", 300.0, 250.0), ("nvme", 1500.0, 1200.0)],
)
def test_disk_profiles(disk_type, read, write):
    assert get_disk_config(disk_type) == DiskConfig(read_speed=read, write_speed=write)


def test_reads_are_faster_than_writes():
    for config in get_disk_configs().values():
        assert config.read_speed > config.write_speed


def test_unknown_disk_type_raises():
    with pytest.raises(ValueError, match="无效的磁盘类型"):
        get_disk_config("floppy")


def test_configs_are_read_only():
    configs = get_disk_configs()
    with pytest.raises(TypeError):
        configs["tape"] = DiskConfig(read_speed=1.0, write_speed=1.0)
    assert "tape" not in get_disk_configs()