import pytest

from diskhealth.config import DiskHealthMetricsConfig


@pytest.mark.parametrize(
    "disks, expected",
    [
        (["*"], True),
        (["*", "/dev/sda"], False),
        (["/dev/sda"], False),
        ([], False),
    ],
)
def test_uses_all_disks(disks, expected):
    assert DiskHealthMetricsConfig(disks=disks).uses_all_disks() is expected


def test_disk_lists_are_independent():
    first = DiskHealthMetricsConfig()
    second = DiskHealthMetricsConfig()
    first.disks.append("/dev/sda")
    assert second.disks == []


def test_disks_copied_from_argument():
    source = ["/dev/sda"]
    cfg = DiskHealthMetricsConfig(disks=source)
    source.append("/dev/sdb")
    assert cfg.disks == ["/dev/sda"]


def test_disks_accept_any_iterable():
    cfg = DiskHealthMetricsConfig(disks=("/dev/nvme0",))
    assert cfg.disks == ["/dev/nvme0"]


def test_fields_are_kept():
    cfg = DiskHealthMetricsConfig(
        node_name="node-a",
        instance_id="inst-1",
        interval=10,
        lifetime_used_threshold=80,
        ceph_osd_base_path="/var/lib/ceph/osd",
    )
    assert cfg.node_name == "node-a"
    assert cfg.interval == 10
    assert cfg.lifetime_used_threshold == 80
    assert cfg.ceph_osd_base_path == "/var/lib/ceph/osd"