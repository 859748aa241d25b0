"""Collecting disk health samples and the monitoring loop that reports them."""

from __future__ import annotations

import argparse
import json
import logging
import time
from collections.abc import Iterable, Mapping, Sequence

from diskhealth.attributes import SmartAttribute, cleanup_smart_attributes, get_smart_attributes
from diskhealth.config import DiskHealthMetricsConfig
from diskhealth.drivedb import normalize_device_info
from diskhealth.events import NatsConnection, publish_to_nats
from diskhealth.normalize import device_info_from_smart_data, normalize_vendor
from diskhealth.nvmecli import (
    NvmeCliError,
    check_nvme_cli_installed,
    collect_nvme_controller_data,
    collect_nvme_error_log,
    enhance_nvme_data,
    process_nvme_specific_attributes,
)
from diskhealth.nvmetypes import NVMeErrorLog, NVMeIdController
from diskhealth.oem import enhance_device_info
from diskhealth.records import DeviceInfo, NormalizedSmartData
from diskhealth.smartctl import SmartCtlOutput
from diskhealth.smartctl_sections import AtaSmartEntry
from diskhealth.smartdata import (
    SmartctlError,
    check_smartctl_installed,
    collect_smart_data,
    discover_devices,
    process_smart_attributes,
)

log = logging.getLogger(__name__)

_GIB = 1024 * 1024 * 1024


def find_smart_attribute_by_id(
    entries: Iterable[AtaSmartEntry], attribute_id: int
) -> AtaSmartEntry | None:
    """Return the first ATA attribute entry with the given ID, else ``None``."""
    return next((entry for entry in entries if entry.id == attribute_id), None)


def _raw_by_id(entries: Sequence[AtaSmartEntry], attribute_id: int) -> int | None:
    entry = find_smart_attribute_by_id(entries, attribute_id)
    return None if entry is None else entry.raw.value


def normalize_smart_data(
    smart_data: SmartCtlOutput,
    device_info: DeviceInfo,
    attributes: Mapping[str, SmartAttribute],
    node_name: str,
    instance_id: str,
) -> NormalizedSmartData:
    """Condense one smartctl report and its processed attributes into a sample."""
    temperature = smart_data.temperature.current or None

    if device_info.capacity < 0 and smart_data.user_capacity is not None:
        device_info.capacity = smart_data.user_capacity.bytes / _GIB
    capacity_gb = device_info.capacity

    health = smart_data.nvme_smart_health_log
    ssd_life_used = None if health is None else health.percentage_used

    reallocated = pending = power_on_hours = None
    udma_crc_errors = 0
    protocol = smart_data.device.protocol
    if protocol == "ATA" and smart_data.ata_smart_attributes is not None:
        table = smart_data.ata_smart_attributes.table
        reallocated = _raw_by_id(table, 5)
        pending = _raw_by_id(table, 197)
        udma_crc_errors = _raw_by_id(table, 199) or 0
        power_on_hours = smart_data.power_on_time.hours
    elif protocol == "SCSI" and smart_data.scsi_start_stop_cycle_counter is not None:
        power_on_hours = smart_data.power_on_time.hours
        reallocated = smart_data.scsi_grown_defect_list

    enhance_device_info(device_info)

    return NormalizedSmartData(
        node_name=node_name,
        instance_id=instance_id,
        device=smart_data.device.name,
        device_info=device_info,
        capacity_gb=capacity_gb,
        temperature_celsius=temperature,
        reallocated_sectors=reallocated,
        pending_sectors=pending,
        power_on_hours=power_on_hours,
        ssd_life_used=ssd_life_used,
        error_counts={"UDMA_CRC_Error_Count": udma_crc_errors},
        attributes=dict(attributes),
    )


def _nvme_extras(disk: str) -> tuple[NVMeIdController | None, NVMeErrorLog | None]:
    controller: NVMeIdController | None = None
    errors: NVMeErrorLog | None = None
    try:
        controller = collect_nvme_controller_data(disk)
    except NvmeCliError as exc:
        log.warning("disk %s: failed to collect NVMe controller data: %s", disk, exc)
    try:
        errors = collect_nvme_error_log(disk)
    except NvmeCliError as exc:
        log.warning("disk %s: failed to collect NVMe error log: %s", disk, exc)
    return controller, errors


def collect_disk_health_metrics(config: DiskHealthMetricsConfig) -> list[NormalizedSmartData]:
    """Sample every configured disk; disks smartctl cannot read are skipped."""
    metrics: list[NormalizedSmartData] = []

    nvme_cli = check_nvme_cli_installed()
    if nvme_cli:
        log.info("nvme-cli detected, enhanced NVMe metrics will be available")

    for disk in config.disks:
        try:
            raw = collect_smart_data(disk)
        except SmartctlError as exc:
            log.error("disk %s: error running smartctl: %s", disk, exc)
            continue

        controller: NVMeIdController | None = None
        errors: NVMeErrorLog | None = None
        if nvme_cli and raw.device.protocol == "NVMe":
            controller, errors = _nvme_extras(disk)
            enhance_nvme_data(raw, controller, errors)

        device_info = device_info_from_smart_data(raw)
        normalize_vendor(device_info)
        normalize_device_info(device_info)

        attributes = get_smart_attributes()
        process_smart_attributes(attributes, raw)
        if controller is not None or errors is not None:
            process_nvme_specific_attributes(attributes, controller, errors)
        cleanup_smart_attributes(attributes)

        metrics.append(
            normalize_smart_data(
                raw, device_info, attributes, config.node_name, config.instance_id
            )
        )

    return metrics


def _report(
    metrics: list[NormalizedSmartData],
    config: DiskHealthMetricsConfig,
    connection: NatsConnection | None,
) -> None:
    if connection is not None:
        try:
            publish_to_nats(metrics, connection, config.nats_subject, config)
        except (ConnectionError, ValueError) as exc:
            log.error("error publishing metrics to nats: %s", exc)
        return
    payload = [metric.to_dict() for metric in metrics] or None
    print(json.dumps(payload), flush=True)


def _loop(config: DiskHealthMetricsConfig, connection: NatsConnection | None) -> None:
    while True:
        time.sleep(config.interval)
        _report(collect_disk_health_metrics(config), config, connection)


def start_monitoring(config: DiskHealthMetricsConfig) -> None:
    """Sample the configured disks every interval and report them, forever.

    Raises ``SmartctlError`` when smartctl is missing or discovery fails,
    ``ValueError`` when there is nothing to monitor or the interval is not
    positive, and ``ConnectionError`` when NATS cannot be reached.
    """
    if not check_smartctl_installed():
        raise SmartctlError("smartctl is not installed. please install smartmontools package.")

    if config.uses_all_disks():
        config.disks = [device.name for device in discover_devices().devices]

    if not config.disks:
        raise ValueError("No devices found for monitoring.")

    log.info("Devices for monitoring: %s", ", ".join(config.disks))

    if config.interval <= 0:
        raise ValueError(f"interval must be positive, got {config.interval}")

    if config.prometheus:
        log.warning("prometheus export is not available; metrics are reported only via output")

    if config.use_nats:
        with NatsConnection(config.nats_url) as connection:
            _loop(config, connection)
    else:
        _loop(config, None)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diskhealth", description="Collect SMART disk health metrics."
    )
    parser.add_argument(
        "--disks", default="*", help="comma-separated devices to watch, or * for all"
    )
    parser.add_argument("--interval", type=int, default=10, help="seconds between samples")
    parser.add_argument("--node-name", default="")
    parser.add_argument("--instance-id", default="")
    parser.add_argument("--use-nats", action="store_true")
    parser.add_argument("--nats-url", default="")
    parser.add_argument("--nats-subject", default="osd.disk.health")
    parser.add_argument("--prometheus", action="store_true")
    parser.add_argument("--prometheus-port", type=int, default=8080)
    parser.add_argument("--include-zero-values", action="store_true")
    parser.add_argument("--all-attributes", action="store_true")
    parser.add_argument("--grown-defects-threshold", type=int, default=10)
    parser.add_argument("--pending-sectors-threshold", type=int, default=3)
    parser.add_argument("--reallocated-sectors-threshold", type=int, default=10)
    parser.add_argument("--lifetime-used-threshold", type=int, default=80)
    parser.add_argument("--ceph-osd-base-path", default="")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point; returns the exit status."""
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = DiskHealthMetricsConfig(
        nats_url=args.nats_url,
        nats_subject=args.nats_subject,
        use_nats=args.use_nats,
        prometheus=args.prometheus,
        prometheus_port=args.prometheus_port,
        all_attributes=args.all_attributes,
        disks=[disk.strip() for disk in args.disks.split(",") if disk.strip()],
        include_zero_values=args.include_zero_values,
        interval=args.interval,
        node_name=args.node_name,
        instance_id=args.instance_id,
        grown_defects_threshold=args.grown_defects_threshold,
        pending_sectors_threshold=args.pending_sectors_threshold,
        reallocated_sectors_threshold=args.reallocated_sectors_threshold,
        lifetime_used_threshold=args.lifetime_used_threshold,
        ceph_osd_base_path=args.ceph_osd_base_path,
    )
    try:
        start_monitoring(config)
    except KeyboardInterrupt:
        return 0
    except (SmartctlError, ValueError, ConnectionError) as exc:
        log.error("%s", exc)
        return 1
    return 0