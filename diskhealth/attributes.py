"""SMART attribute metadata keyed by normalised attribute name."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass

UNSET = -1

# Different names smartctl uses for the same attribute.
_ALIASES: dict[str, str] = {
    "current_drive_temperature": "temperature_celsius",
}

_KNOWN_ATTRIBUTES: tuple[tuple[str, str, str], ...] = (
    ("airflow_temperature_cel", "Airflow Temperature in Celsius", "Celsius"),
    ("command_timeout", "Command Timeout", "ms"),
    ("current_pending_sector", "Current Pending Sector", "count"),
    ("end_to_end_error", "End-to-End Error", "count"),
    ("erase_fail_count", "Erase Fail Count", "count"),
    ("g_sense_error_rate", "G-sense Error Rate", "count"),
    ("hardware_ecc_recovered", "Hardware ECC Recovered", "count"),
    ("host_reads_mib", "Host Reads in MiB", "MiB"),
    ("host_reads_32mib", "Host Reads in 32 MiB", "32 MiB"),
    ("host_writes_mib", "Host Writes in MiB", "MiB"),
    ("host_writes_32mib", "Host Writes in 32 MiB", "32 MiB"),
    ("load_cycle_count", "Load Cycle Count", "count"),
    ("helium_level", "Helium Level", "percent"),
    ("media_wearout_indicator", "Media Wearout Indicator", "percent"),
    ("multi_zone_error_rate", "Multi-Zone Error Rate", "count"),
    ("wear_leveling_count", "Wear Leveling Count", "count"),
    ("nand_writes_1gib", "NAND Writes in 1 GiB", "GiB"),
    ("offline_uncorrectable", "Offline Uncorrectable", "count"),
    ("percent_life_remaining", "Percent Life Remaining", "percent"),
    ("percent_lifetime_remain", "Percent Lifetime Remaining", "percent"),
    ("percentage_used", "Percentage Used", "percent"),
    ("power_cycle_count", "Power Cycle Count", "count"),
    ("power_off_retract_count", "Power Off Retract Count", "count"),
    ("power_on_hours", "Power-On Hours", "hours"),
    ("program_fail_count", "Program Fail Count", "count"),
    ("raw_read_error_rate", "Raw Read Error Rate", "count"),
    ("reallocated_event_count", "Reallocated Event Count", "count"),
    ("reallocated_sector_ct", "Reallocated Sector Count", "count"),
    ("reallocate_nand_blk_cnt", "Reallocate NAND Block Count", "count"),
    ("reported_uncorrect", "Reported Uncorrectable Errors", "count"),
    ("sata_downshift_count", "SATA Downshift Count", "count"),
    ("seek_error_rate", "Seek Error Rate", "count"),
    ("spin_retry_count", "Spin Retry Count", "count"),
    ("spin_up_time", "Spin-Up Time", "ms"),
    ("start_stop_count", "Start/Stop Count", "count"),
    ("temperature_case", "Case Temperature", "Celsius"),
    ("temperature_celsius", "Temperature in Celsius", "Celsius"),
    ("temperature_internal", "Internal Temperature", "Celsius"),
    ("total_lbas_read", "Total LBAs Read", "sectors"),
    ("total_lbas_written", "Total LBAs Written", "sectors"),
    ("total_host_sector_write", "Total Host Sector Writes", "sectors"),
    ("udma_crc_error_count", "UDMA CRC Error Count", "count"),
    ("unsafe_shutdown_count", "Unsafe Shutdown Count", "count"),
    ("workld_host_reads_perc", "Workload Host Reads Percentage", "percent"),
    ("workld_media_wear_indic", "Workload Media Wear Indicator", "percent"),
    ("workload_minutes", "Workload Minutes", "minutes"),
    ("read_errors_corrected", "Read Errors Corrected", "count"),
    ("write_errors_corrected", "Write Errors Corrected", "count"),
    ("verify_errors_corrected", "Verify Errors Corrected", "count"),
    ("read_gigabytes_processed", "Read Gigabytes Processed", "GiB"),
    ("write_gigabytes_processed", "Write Gigabytes Processed", "GiB"),
    ("total_uncorrected_read_errors", "Total Uncorrected Read Errors", "count"),
    ("total_uncorrected_write_errors", "Total Uncorrected Write Errors", "count"),
    ("total_uncorrected_verify_errors", "Total Uncorrected Verify Errors", "count"),
    ("grown_defects_count", "Grown Defects Count", "count"),
    # NVMe-specific attributes from nvme-cli
    ("nvme_error_log_entries", "NVMe Error Log Entries", "count"),
    ("nvme_subsystem_nqn", "NVMe Subsystem NQN Length", "chars"),
    ("nvme_ieee_oui", "NVMe IEEE OUI", "hex"),
    ("nvme_vendor_id", "NVMe Vendor ID", "id"),
    ("nvme_subsystem_vendor_id", "NVMe Subsystem Vendor ID", "id"),
    ("nvme_fabric_warnings", "NVMe Fabric Warnings", "count"),
    ("nvme_sparse_errors", "NVMe Sparse Errors", "count"),
    ("nvme_change_notifications", "NVMe Change Notifications", "count"),
    ("nvme_media_errors", "NVMe Media Errors", "count"),
    ("nvme_aborted_commands", "NVMe Aborted Commands", "count"),
    ("nvme_timeout_errors", "NVMe Timeout Errors", "count"),
)


@dataclass
class SmartAttribute:
    """Metadata and current readings of one SMART attribute; -1 means unset."""

    description: str
    unit: str
    threshold: int = UNSET
    value: int = UNSET
    worst: int = UNSET
    raw_value: int = UNSET

    @property
    def is_unset(self) -> bool:
        return (
            self.threshold == UNSET
            and self.value == UNSET
            and self.worst == UNSET
            and self.raw_value == UNSET
        )


def resolve_alias(name: str) -> str:
    """Map an alternative attribute name to its canonical name."""
    return _ALIASES.get(name, name)


def get_smart_attributes() -> dict[str, SmartAttribute]:
    """Return a fresh table of all known attributes, every reading unset.

    Attributes are keyed by name rather than numeric ID, since vendors do not
    agree on what the IDs mean.
    """
    return {
        name: SmartAttribute(description, unit)
        for name, description, unit in _KNOWN_ATTRIBUTES
    }


def cleanup_smart_attributes(attributes: MutableMapping[str, SmartAttribute]) -> None:
    """Remove, in place, every attribute whose readings are all unset."""
    for name in [name for name, attr in attributes.items() if attr.is_unset]:
        del attributes[name]