"""Running smartctl and folding its readings into the SMART attribute table."""

from __future__ import annotations

import logging
import math
import shutil
import subprocess
from collections.abc import MutableMapping
from pathlib import Path

from diskhealth.attributes import UNSET, SmartAttribute, resolve_alias
from diskhealth.smartctl import (
    SmartCtlOutput,
    SmartCtlScanOutput,
    parse_scan_output,
    parse_smartctl_output,
)
from diskhealth.smartctl_sections import ScsiErrorCounterLog

log = logging.getLogger(__name__)

Attributes = MutableMapping[str, SmartAttribute]

_SMARTCTL_ARGS = (
    "--json",
    "--info",
    "--health",
    "--attributes",
    "--tolerance=verypermissive",
    "--nocheck=standby",
    "--format=brief",
    "--log=error",
)

# ATA attributes reported as percent of life remaining.
_PERCENT_REMAINING = frozenset(
    {"media_wearout_indicator", "percent_life_remaining", "percent_lifetime_remain"}
)


class SmartctlError(Exception):
    """smartctl could not be run, or its output could not be read."""


def check_smartctl_installed() -> bool:
    """Whether ``smartctl`` is on the search path."""
    return shutil.which("smartctl") is not None


def _run(args: list[str], what: str) -> bytes:
    try:
        result = subprocess.run(args, capture_output=True, check=False)
    except OSError as exc:
        raise SmartctlError(f"error running {what}: {exc}") from exc
    if result.returncode != 0:
        raise SmartctlError(f"error running {what}: exit status {result.returncode}")
    return result.stdout


def discover_devices() -> SmartCtlScanOutput:
    """List the devices smartctl can monitor."""
    out = _run(["smartctl", "--scan-open", "-j"], "smartctl --scan-open")
    try:
        return parse_scan_output(out)
    except (ValueError, TypeError) as exc:
        raise SmartctlError(f"error parsing JSON: {exc}") from exc


def _parse(out: bytes | str) -> SmartCtlOutput:
    try:
        return parse_smartctl_output(out)
    except (ValueError, TypeError) as exc:
        raise SmartctlError(f"error parsing JSON: {exc}") from exc


def collect_smart_data(device_path: str) -> SmartCtlOutput:
    """Run smartctl on one device and parse its report."""
    return _parse(_run(["smartctl", *_SMARTCTL_ARGS, device_path], "smartctl"))


def load_smart_data(path: str | Path) -> SmartCtlOutput:
    """Parse a smartctl JSON report saved in a file."""
    try:
        out = Path(path).read_bytes()
    except OSError as exc:
        raise SmartctlError(f"error reading file: {exc}") from exc
    return _parse(out)


def update_attribute(
    attributes: Attributes,
    name: str,
    value: int,
    raw_value: int,
    threshold: int = UNSET,
    worst: int = UNSET,
    unit: str = "",
) -> bool:
    """Set the readings of a known attribute; returns whether it was known.

    Threshold and worst are left alone when given as -1, and the unit when empty.
    """
    name = resolve_alias(name)
    attr = attributes.get(name)
    if attr is None:
        log.warning("Unrecognized SMART attribute %r", name)
        return False
    attr.value = value
    attr.raw_value = raw_value
    if threshold != UNSET:
        attr.threshold = threshold
    if worst != UNSET:
        attr.worst = worst
    if unit and attr.unit != unit:
        attr.unit = unit
    return True


def parse_gigabytes(value: str) -> int:
    """Whole gigabytes from a decimal string; 0 when it is not a number."""
    try:
        number = float(value)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def calculate_percentage_used(value: int) -> int:
    """Percent used from percent remaining."""
    return 100 - value


def process_smart_attributes(attributes: Attributes, output: SmartCtlOutput) -> None:
    """Fold ATA, SCSI and NVMe readings of one report into ``attributes``."""
    if output.ata_smart_attributes is not None:
        process_ata_attributes(attributes, output)
    process_scsi_attributes(attributes, output)
    process_nvme_attributes(attributes, output)


def process_ata_attributes(attributes: Attributes, output: SmartCtlOutput) -> None:
    """Fold the ATA SMART attribute table into ``attributes``."""
    if output.ata_smart_attributes is None:
        return
    for entry in output.ata_smart_attributes.table:
        name = resolve_alias(entry.name.lower())
        attr = attributes.get(name)
        if attr is None:
            log.warning("Unrecognized ATA SMART attribute %r", name)
            continue
        if name in _PERCENT_REMAINING:
            attr.value = calculate_percentage_used(entry.value)
        else:
            attr.value = entry.value
            attr.worst = entry.worst
            attr.threshold = entry.thresh
            attr.raw_value = entry.raw.value


def _update_scsi_error_log(attributes: Attributes, error_log: ScsiErrorCounterLog) -> None:
    for name, value, unit in (
        ("read_errors_corrected", error_log.read.total_errors_corrected, "count"),
        ("write_errors_corrected", error_log.write.total_errors_corrected, "count"),
        ("verify_errors_corrected", error_log.verify.total_errors_corrected, "count"),
        ("read_gigabytes_processed", parse_gigabytes(error_log.read.gigabytes_processed), "GB"),
        (
            "write_gigabytes_processed",
            parse_gigabytes(error_log.write.gigabytes_processed),
            "GB",
        ),
        ("total_uncorrected_read_errors", error_log.read.total_uncorrected_errors, "count"),
        ("total_uncorrected_write_errors", error_log.write.total_uncorrected_errors, "count"),
        (
            "total_uncorrected_verify_errors",
            error_log.verify.total_uncorrected_errors,
            "count",
        ),
    ):
        update_attribute(attributes, name, value, value, UNSET, UNSET, unit)


def process_scsi_attributes(attributes: Attributes, output: SmartCtlOutput) -> None:
    """Fold power-on time, temperature and SCSI counters into ``attributes``."""
    hours = output.power_on_time.hours
    update_attribute(attributes, "power_on_hours", hours, hours, UNSET, UNSET, "hours")

    current = output.temperature.current
    if current > 0:
        update_attribute(
            attributes, "temperature_celsius", current, current, UNSET, UNSET, "Celsius"
        )
    else:
        log.warning("Unexpected temperature value: %d°C for SCSI device", current)

    cycles = output.scsi_start_stop_cycle_counter
    if cycles is not None:
        count = cycles.accumulated_start_stop_cycles
        update_attribute(attributes, "power_cycle_count", count, count, UNSET, UNSET, "count")

    defects = output.scsi_grown_defect_list
    if defects >= 0:
        update_attribute(
            attributes, "grown_defects_count", defects, defects, UNSET, UNSET, "count"
        )
    else:
        log.warning("Invalid grown defects count: %d for SCSI device", defects)

    if output.scsi_error_counter_log is not None:
        _update_scsi_error_log(attributes, output.scsi_error_counter_log)


def process_nvme_attributes(attributes: Attributes, output: SmartCtlOutput) -> None:
    """Fold the NVMe SMART / health log into ``attributes``."""
    health = output.nvme_smart_health_log
    if health is None:
        return

    def put(name: str, value: int, unit: str) -> None:
        update_attribute(attributes, name, value, value, UNSET, UNSET, unit)

    put("power_on_hours", health.power_on_hours, "hours")

    if health.temperature > 0:
        put("temperature_celsius", health.temperature, "Celsius")
    else:
        log.warning("Unexpected temperature value: %d°C for NVMe device", health.temperature)

    put("power_cycle_count", health.power_cycles, "count")
    put("unsafe_shutdowns", health.unsafe_shutdowns, "count")
    put("host_read_commands", health.host_reads, "commands")
    put("host_write_commands", health.host_writes, "commands")
    put("controller_busy_time", health.controller_busy_time, "minutes")
    put("error_information_log_entries", health.num_err_log_entries, "count")

    if 0 <= health.percentage_used <= 100:
        put("percentage_used", health.percentage_used, "percent")
    else:
        log.warning(
            "Unexpected percentage used value: %d for NVMe device", health.percentage_used
        )

    put("available_spare", health.available_spare, "percent")
    put("available_spare_threshold", health.available_spare_threshold, "percent")
    put("media_and_data_integrity_errors", health.media_errors, "count")