"""Nested sections of smartctl's JSON output.

Missing or null keys fall back to zero values. A value of the wrong JSON
type raises ``TypeError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _mapping(data: Any, where: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"{where}: expected a JSON object, got {type(data).__name__}")
    return data


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"field {key!r}: expected an integer, got {value!r}")
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field {key!r}: expected a string, got {value!r}")
    return value


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"field {key!r}: expected a boolean, got {value!r}")
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"field {key!r}: expected an array, got {value!r}")
    return value


def _int_list(data: Mapping[str, Any], key: str) -> list[int]:
    items = _list(data, key)
    return [_int({key: item}, key) for item in items]


def _int_fields(data: Any, where: str, keys: tuple[str, ...]) -> dict[str, int]:
    section = _mapping(data, where)
    return {key: _int(section, key) for key in keys}


_COMPLETION_REGISTER_KEYS = ("count", "device", "error", "lba", "status")
_COMMAND_REGISTER_KEYS = ("command", "count", "device", "device_control", "features", "lba")


@dataclass
class AtaSmartFlags:
    """Flags of one ATA SMART attribute."""

    value: int = 0
    string: str = ""
    prefailure: bool = False
    updated_online: bool = False
    performance: bool = False
    error_rate: bool = False
    event_count: bool = False
    auto_keep: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> AtaSmartFlags:
        d = _mapping(data, "flags")
        return cls(
            value=_int(d, "value"),
            string=_str(d, "string"),
            prefailure=_bool(d, "prefailure"),
            updated_online=_bool(d, "updated_online"),
            performance=_bool(d, "performance"),
            error_rate=_bool(d, "error_rate"),
            event_count=_bool(d, "event_count"),
            auto_keep=_bool(d, "auto_keep"),
        )


@dataclass
class AtaSmartRaw:
    """Raw value of one ATA SMART attribute."""

    value: int = 0
    string: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> AtaSmartRaw:
        d = _mapping(data, "raw")
        return cls(value=_int(d, "value"), string=_str(d, "string"))


@dataclass
class AtaSmartEntry:
    """One row of the ATA SMART attribute table."""

    id: int = 0
    name: str = ""
    value: int = 0
    worst: int = 0
    thresh: int = 0
    when_failed: str = ""
    flags: AtaSmartFlags = field(default_factory=AtaSmartFlags)
    raw: AtaSmartRaw = field(default_factory=AtaSmartRaw)

    @classmethod
    def from_dict(cls, data: Any) -> AtaSmartEntry:
        d = _mapping(data, "ata_smart_attributes.table[]")
        return cls(
            id=_int(d, "id"),
            name=_str(d, "name"),
            value=_int(d, "value"),
            worst=_int(d, "worst"),
            thresh=_int(d, "thresh"),
            when_failed=_str(d, "when_failed"),
            flags=AtaSmartFlags.from_dict(d.get("flags")),
            raw=AtaSmartRaw.from_dict(d.get("raw")),
        )


@dataclass
class AtaSmartAttributes:
    """The ATA SMART attribute table."""

    revision: int = 0
    table: list[AtaSmartEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> AtaSmartAttributes:
        d = _mapping(data, "ata_smart_attributes")
        return cls(
            revision=_int(d, "revision"),
            table=[AtaSmartEntry.from_dict(item) for item in _list(d, "table")],
        )


@dataclass
class AtaErrorLogEntry:
    """One entry of the ATA SMART error log."""

    error_number: int = 0
    lifetime_hours: int = 0
    error_description: str = ""
    completion_registers: dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(_COMPLETION_REGISTER_KEYS, 0)
    )
    previous_commands: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> AtaErrorLogEntry:
        d = _mapping(data, "ata_smart_error_log.summary.table[]")
        commands = []
        for item in _list(d, "previous_commands"):
            cmd = _mapping(item, "previous_commands[]")
            commands.append(
                {
                    "command_name": _str(cmd, "command_name"),
                    "powerup_milliseconds": _int(cmd, "powerup_milliseconds"),
                    "registers": _int_fields(
                        cmd.get("registers"), "registers", _COMMAND_REGISTER_KEYS
                    ),
                }
            )
        return cls(
            error_number=_int(d, "error_number"),
            lifetime_hours=_int(d, "lifetime_hours"),
            error_description=_str(d, "error_description"),
            completion_registers=_int_fields(
                d.get("completion_registers"),
                "completion_registers",
                _COMPLETION_REGISTER_KEYS,
            ),
            previous_commands=commands,
        )


@dataclass
class AtaErrorLogSummary:
    """Summary of the ATA SMART error log."""

    count: int = 0
    revision: int = 0
    logged_count: int = 0
    table: list[AtaErrorLogEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> AtaErrorLogSummary:
        d = _mapping(data, "ata_smart_error_log.summary")
        return cls(
            count=_int(d, "count"),
            revision=_int(d, "revision"),
            logged_count=_int(d, "logged_count"),
            table=[AtaErrorLogEntry.from_dict(item) for item in _list(d, "table")],
        )


@dataclass
class ScsiErrorDetails:
    """Error counters of one SCSI operation kind (read, write or verify)."""

    correction_algorithm_invocations: int = 0
    errors_corrected_by_eccdelayed: int = 0
    errors_corrected_by_eccfast: int = 0
    errors_corrected_by_rereads_rewrites: int = 0
    gigabytes_processed: str = ""
    total_errors_corrected: int = 0
    total_uncorrected_errors: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ScsiErrorDetails:
        d = _mapping(data, "scsi_error_counter_log entry")
        return cls(
            correction_algorithm_invocations=_int(d, "correction_algorithm_invocations"),
            errors_corrected_by_eccdelayed=_int(d, "errors_corrected_by_eccdelayed"),
            errors_corrected_by_eccfast=_int(d, "errors_corrected_by_eccfast"),
            errors_corrected_by_rereads_rewrites=_int(
                d, "errors_corrected_by_rereads_rewrites"
            ),
            gigabytes_processed=_str(d, "gigabytes_processed"),
            total_errors_corrected=_int(d, "total_errors_corrected"),
            total_uncorrected_errors=_int(d, "total_uncorrected_errors"),
        )


@dataclass
class ScsiErrorCounterLog:
    """The SCSI error counter log."""

    read: ScsiErrorDetails = field(default_factory=ScsiErrorDetails)
    verify: ScsiErrorDetails = field(default_factory=ScsiErrorDetails)
    write: ScsiErrorDetails = field(default_factory=ScsiErrorDetails)

    @classmethod
    def from_dict(cls, data: Any) -> ScsiErrorCounterLog:
        d = _mapping(data, "scsi_error_counter_log")
        return cls(
            read=ScsiErrorDetails.from_dict(d.get("read")),
            verify=ScsiErrorDetails.from_dict(d.get("verify")),
            write=ScsiErrorDetails.from_dict(d.get("write")),
        )


@dataclass
class ScsiStartStopCycle:
    """The SCSI start-stop cycle counter."""

    accumulated_load_unload_cycles: int = 0
    accumulated_start_stop_cycles: int = 0
    specified_cycle_count_over_device_lifetime: int = 0
    specified_load_unload_count_over_device_lifetime: int = 0
    week_of_manufacture: str = ""
    year_of_manufacture: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ScsiStartStopCycle:
        d = _mapping(data, "scsi_start_stop_cycle_counter")
        return cls(
            accumulated_load_unload_cycles=_int(d, "accumulated_load_unload_cycles"),
            accumulated_start_stop_cycles=_int(d, "accumulated_start_stop_cycles"),
            specified_cycle_count_over_device_lifetime=_int(
                d, "specified_cycle_count_over_device_lifetime"
            ),
            specified_load_unload_count_over_device_lifetime=_int(
                d, "specified_load_unload_count_over_device_lifetime"
            ),
            week_of_manufacture=_str(d, "week_of_manufacture"),
            year_of_manufacture=_str(d, "year_of_manufacture"),
        )


@dataclass
class NVMePciVendor:
    """PCI vendor identifiers of an NVMe device."""

    id: int = 0
    subsystem_id: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> NVMePciVendor:
        d = _mapping(data, "nvme_pci_vendor")
        return cls(id=_int(d, "id"), subsystem_id=_int(d, "subsystem_id"))


@dataclass
class NVMeSmartHealthLog:
    """The NVMe SMART / health information log."""

    available_spare: int = 0
    available_spare_threshold: int = 0
    controller_busy_time: int = 0
    critical_comp_time: int = 0
    critical_warning: int = 0
    data_units_read: int = 0
    data_units_written: int = 0
    host_reads: int = 0
    host_writes: int = 0
    media_errors: int = 0
    num_err_log_entries: int = 0
    percentage_used: int = 0
    power_cycles: int = 0
    power_on_hours: int = 0
    temperature: int = 0
    temperature_sensors: list[int] = field(default_factory=list)
    unsafe_shutdowns: int = 0
    warning_temp_time: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> NVMeSmartHealthLog:
        d = _mapping(data, "nvme_smart_health_information_log")
        return cls(
            available_spare=_int(d, "available_spare"),
            available_spare_threshold=_int(d, "available_spare_threshold"),
            controller_busy_time=_int(d, "controller_busy_time"),
            critical_comp_time=_int(d, "critical_comp_time"),
            critical_warning=_int(d, "critical_warning"),
            data_units_read=_int(d, "data_units_read"),
            data_units_written=_int(d, "data_units_written"),
            host_reads=_int(d, "host_reads"),
            host_writes=_int(d, "host_writes"),
            media_errors=_int(d, "media_errors"),
            num_err_log_entries=_int(d, "num_err_log_entries"),
            percentage_used=_int(d, "percentage_used"),
            power_cycles=_int(d, "power_cycles"),
            power_on_hours=_int(d, "power_on_hours"),
            temperature=_int(d, "temperature"),
            temperature_sensors=_int_list(d, "temperature_sensors"),
            unsafe_shutdowns=_int(d, "unsafe_shutdowns"),
            warning_temp_time=_int(d, "warning_temp_time"),
        )


@dataclass
class NVMeCapacity:
    """A size given in blocks and bytes."""

    blocks: int = 0
    bytes: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> NVMeCapacity:
        d = _mapping(data, "capacity")
        return cls(blocks=_int(d, "blocks"), bytes=_int(d, "bytes"))


@dataclass
class NVMeNamespace:
    """One NVMe namespace."""

    id: int = 0
    size: NVMeCapacity = field(default_factory=NVMeCapacity)
    utilization: NVMeCapacity = field(default_factory=NVMeCapacity)
    capacity: NVMeCapacity = field(default_factory=NVMeCapacity)
    formatted_lba_size: int = 0
    eui64: dict[str, int] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> NVMeNamespace:
        d = _mapping(data, "nvme_namespaces[]")
        raw_eui = d.get("eui64")
        eui64 = None if raw_eui is None else _int_fields(raw_eui, "eui64", ("ext_id", "oui"))
        return cls(
            id=_int(d, "id"),
            size=NVMeCapacity.from_dict(d.get("size")),
            utilization=NVMeCapacity.from_dict(d.get("utilization")),
            capacity=NVMeCapacity.from_dict(d.get("capacity")),
            formatted_lba_size=_int(d, "formatted_lba_size"),
            eui64=eui64,
        )