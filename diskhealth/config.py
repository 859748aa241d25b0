"""Settings of the disk health collector."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DiskHealthMetricsConfig:
    """What to collect, how often, and where to send it."""

    nats_url: str = ""
    nats_subject: str = ""
    use_nats: bool = False
    prometheus: bool = False
    prometheus_port: int = 0
    all_attributes: bool = False
    disks: list[str] = field(default_factory=list)
    include_zero_values: bool = False
    interval: int = 0  # seconds
    node_name: str = ""
    instance_id: str = ""

    # Thresholds that turn a NATS event into an alert.
    grown_defects_threshold: int = 0
    pending_sectors_threshold: int = 0
    reallocated_sectors_threshold: int = 0
    lifetime_used_threshold: int = 0  # percent

    ceph_osd_base_path: str = ""

    def __post_init__(self) -> None:
        self.disks = list(self.disks)

    def uses_all_disks(self) -> bool:
        """True when the disk list is the single wildcard ``*``."""
        return len(self.disks) == 1 and self.disks[0] == "*"