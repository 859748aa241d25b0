"""Top-level structures of smartctl's JSON output.

Missing or null keys fall back to zero values; optional sections become
``None``. A value of the wrong JSON type raises ``TypeError`` and text that
is not JSON raises ``ValueError``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from diskhealth.smartctl_sections import (
    AtaErrorLogSummary,
    AtaSmartAttributes,
    NVMeNamespace,
    NVMePciVendor,
    NVMeSmartHealthLog,
    ScsiErrorCounterLog,
    ScsiStartStopCycle,
)


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
    return [_int({key: item}, key) for item in _list(data, key)]


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    return [_str({key: item}, key) for item in _list(data, key)]


def _fields(
    data: Any,
    where: str,
    ints: tuple[str, ...] = (),
    strs: tuple[str, ...] = (),
    bools: tuple[str, ...] = (),
) -> dict[str, Any]:
    section = _mapping(data, where)
    out: dict[str, Any] = {key: _int(section, key) for key in ints}
    out.update({key: _str(section, key) for key in strs})
    out.update({key: _bool(section, key) for key in bools})
    return out


def _optional_fields(
    data: Mapping[str, Any],
    key: str,
    ints: tuple[str, ...] = (),
    strs: tuple[str, ...] = (),
    bools: tuple[str, ...] = (),
) -> dict[str, Any] | None:
    raw = data.get(key)
    if raw is None:
        return None
    return _fields(raw, key, ints, strs, bools)


_SPEED_INTS = ("bits_per_unit", "sata_value", "units_per_second")


def _interface_speed(data: Mapping[str, Any]) -> dict[str, dict[str, Any]] | None:
    raw = data.get("interface_speed")
    if raw is None:
        return None
    section = _mapping(raw, "interface_speed")
    return {
        part: _fields(section.get(part), f"interface_speed.{part}", _SPEED_INTS, ("string",))
        for part in ("max", "current")
    }


def _optional(data: Mapping[str, Any], key: str, parser: Any) -> Any:
    raw = data.get(key)
    return None if raw is None else parser(raw)


@dataclass
class SmartCtlDevice:
    """The device smartctl looked at."""

    info_name: str = ""
    name: str = ""
    protocol: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> SmartCtlDevice:
        d = _mapping(data, "device")
        return cls(
            info_name=_str(d, "info_name"),
            name=_str(d, "name"),
            protocol=_str(d, "protocol"),
            type=_str(d, "type"),
        )


@dataclass
class PowerOnTime:
    """Power-on time of the device."""

    hours: int = 0
    minutes: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> PowerOnTime:
        d = _mapping(data, "power_on_time")
        return cls(hours=_int(d, "hours"), minutes=_int(d, "minutes"))


@dataclass
class Temperature:
    """Temperature readings of the device."""

    current: int = 0
    drive_trip: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> Temperature:
        d = _mapping(data, "temperature")
        return cls(current=_int(d, "current"), drive_trip=_int(d, "drive_trip"))


@dataclass
class SmartStatus:
    """Overall SMART health verdict."""

    passed: bool = False
    nvme: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SmartStatus:
        d = _mapping(data, "smart_status")
        raw_nvme = d.get("nvme")
        nvme = None if raw_nvme is None else _int(_mapping(raw_nvme, "smart_status.nvme"), "value")
        return cls(passed=_bool(d, "passed"), nvme=nvme)


@dataclass
class SmartSupport:
    """Whether SMART is available and enabled."""

    available: bool = False
    enabled: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> SmartSupport:
        d = _mapping(data, "smart_support")
        return cls(available=_bool(d, "available"), enabled=_bool(d, "enabled"))


@dataclass
class UserCapacity:
    """User-addressable capacity of the device."""

    blocks: int = 0
    bytes: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> UserCapacity:
        d = _mapping(data, "user_capacity")
        return cls(blocks=_int(d, "blocks"), bytes=_int(d, "bytes"))


@dataclass
class FormFactor:
    """Physical form factor of the device."""

    name: str = ""
    scsi_value: int = 0
    ata_value: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> FormFactor:
        d = _mapping(data, "form_factor")
        return cls(
            name=_str(d, "name"),
            scsi_value=_int(d, "scsi_value"),
            ata_value=_int(d, "ata_value"),
        )


@dataclass
class SmartCtlDetails:
    """How smartctl itself was run."""

    argv: list[str] = field(default_factory=list)
    build_info: str = ""
    drive_database_version: str = ""
    exit_status: int = 0
    platform_info: str = ""
    svn_revision: str = ""
    version: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> SmartCtlDetails:
        d = _mapping(data, "smartctl")
        db_version = _mapping(d.get("drive_database_version"), "drive_database_version")
        return cls(
            argv=_str_list(d, "argv"),
            build_info=_str(d, "build_info"),
            drive_database_version=_str(db_version, "string"),
            exit_status=_int(d, "exit_status"),
            platform_info=_str(d, "platform_info"),
            svn_revision=_str(d, "svn_revision"),
            version=_int_list(d, "version"),
        )


@dataclass
class SmartCtlOutput:
    """Everything ``smartctl --json`` reports about one device."""

    device: SmartCtlDevice = field(default_factory=SmartCtlDevice)
    json_format_version: list[int] = field(default_factory=list)
    smartctl: SmartCtlDetails = field(default_factory=SmartCtlDetails)
    local_time: dict[str, Any] = field(default_factory=lambda: {"asctime": "", "time_t": 0})
    in_smartctl_database: bool = False

    model_family: str = ""
    model_name: str = ""
    model_number: str = ""
    device_model: str = ""
    serial_number: str = ""
    firmware_version: str = ""
    vendor: str = ""
    product: str = ""
    logical_unit_id: str = ""

    logical_block_size: int = 0
    physical_block_size: int = 0
    power_cycle_count: int = 0
    rotation_rate: int = 0
    power_on_time: PowerOnTime = field(default_factory=PowerOnTime)
    temperature: Temperature = field(default_factory=Temperature)
    smart_status: SmartStatus = field(default_factory=SmartStatus)
    smart_support: SmartSupport = field(default_factory=SmartSupport)
    user_capacity: UserCapacity | None = None
    form_factor: FormFactor | None = None

    ata_version: dict[str, Any] | None = None
    sata_version: dict[str, Any] | None = None
    ata_smart_attributes: AtaSmartAttributes | None = None
    ata_smart_error_log: AtaErrorLogSummary | None = None
    device_type: dict[str, Any] | None = None
    interface_speed: dict[str, dict[str, Any]] | None = None
    temperature_warning: dict[str, Any] | None = None
    trim: dict[str, Any] | None = None
    wwn: dict[str, Any] | None = None

    scsi_error_counter_log: ScsiErrorCounterLog | None = None
    scsi_grown_defect_list: int = 0
    scsi_model_name: str = ""
    scsi_product: str = ""
    scsi_protection_interval_bytes_per_lb: int = 0
    scsi_protection_type: int = 0
    scsi_revision: str = ""
    scsi_start_stop_cycle_counter: ScsiStartStopCycle | None = None
    scsi_transport_protocol: dict[str, Any] | None = None
    scsi_vendor: str = ""
    scsi_version: str = ""

    nvme_controller_id: int = 0
    nvme_ieee_oui_identifier: int = 0
    nvme_namespaces: list[NVMeNamespace] = field(default_factory=list)
    nvme_number_of_namespaces: int = 0
    nvme_pci_vendor: NVMePciVendor | None = None
    nvme_smart_health_log: NVMeSmartHealthLog | None = None
    nvme_total_capacity: int = 0
    nvme_unallocated_capacity: int = 0
    nvme_version: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SmartCtlOutput:
        d = _mapping(data, "smartctl output")
        error_log = _optional(
            d,
            "ata_smart_error_log",
            lambda raw: AtaErrorLogSummary.from_dict(
                _mapping(raw, "ata_smart_error_log").get("summary")
            ),
        )
        return cls(
            device=SmartCtlDevice.from_dict(d.get("device")),
            json_format_version=_int_list(d, "json_format_version"),
            smartctl=SmartCtlDetails.from_dict(d.get("smartctl")),
            local_time=_fields(d.get("local_time"), "local_time", ("time_t",), ("asctime",)),
            in_smartctl_database=_bool(d, "in_smartctl_database"),
            model_family=_str(d, "model_family"),
            model_name=_str(d, "model_name"),
            model_number=_str(d, "model_number"),
            device_model=_str(d, "device_model"),
            serial_number=_str(d, "serial_number"),
            firmware_version=_str(d, "firmware_version"),
            vendor=_str(d, "vendor"),
            product=_str(d, "product"),
            logical_unit_id=_str(d, "logical_unit_id"),
            logical_block_size=_int(d, "logical_block_size"),
            physical_block_size=_int(d, "physical_block_size"),
            power_cycle_count=_int(d, "power_cycle_count"),
            rotation_rate=_int(d, "rotation_rate"),
            power_on_time=PowerOnTime.from_dict(d.get("power_on_time")),
            temperature=Temperature.from_dict(d.get("temperature")),
            smart_status=SmartStatus.from_dict(d.get("smart_status")),
            smart_support=SmartSupport.from_dict(d.get("smart_support")),
            user_capacity=_optional(d, "user_capacity", UserCapacity.from_dict),
            form_factor=_optional(d, "form_factor", FormFactor.from_dict),
            ata_version=_optional_fields(
                d, "ata_version", ("major_value", "minor_value"), ("string",)
            ),
            sata_version=_optional_fields(d, "sata_version", ("value",), ("string",)),
            ata_smart_attributes=_optional(
                d, "ata_smart_attributes", AtaSmartAttributes.from_dict
            ),
            ata_smart_error_log=error_log,
            device_type=_optional_fields(
                d, "device_type", ("scsi_value",), ("name", "scsi_terminology")
            ),
            interface_speed=_interface_speed(d),
            temperature_warning=_optional_fields(
                d, "temperature_warning", bools=("enabled",)
            ),
            trim=_optional_fields(d, "trim", bools=("supported",)),
            wwn=_optional_fields(d, "wwn", ("id", "naa", "oui")),
            scsi_error_counter_log=_optional(
                d, "scsi_error_counter_log", ScsiErrorCounterLog.from_dict
            ),
            scsi_grown_defect_list=_int(d, "scsi_grown_defect_list"),
            scsi_model_name=_str(d, "scsi_model_name"),
            scsi_product=_str(d, "scsi_product"),
            scsi_protection_interval_bytes_per_lb=_int(
                d, "scsi_protection_interval_bytes_per_lb"
            ),
            scsi_protection_type=_int(d, "scsi_protection_type"),
            scsi_revision=_str(d, "scsi_revision"),
            scsi_start_stop_cycle_counter=_optional(
                d, "scsi_start_stop_cycle_counter", ScsiStartStopCycle.from_dict
            ),
            scsi_transport_protocol=_optional_fields(
                d, "scsi_transport_protocol", ("value",), ("name",)
            ),
            scsi_vendor=_str(d, "scsi_vendor"),
            scsi_version=_str(d, "scsi_version"),
            nvme_controller_id=_int(d, "nvme_controller_id"),
            nvme_ieee_oui_identifier=_int(d, "nvme_ieee_oui_identifier"),
            nvme_namespaces=[
                NVMeNamespace.from_dict(item) for item in _list(d, "nvme_namespaces")
            ],
            nvme_number_of_namespaces=_int(d, "nvme_number_of_namespaces"),
            nvme_pci_vendor=_optional(d, "nvme_pci_vendor", NVMePciVendor.from_dict),
            nvme_smart_health_log=_optional(
                d, "nvme_smart_health_information_log", NVMeSmartHealthLog.from_dict
            ),
            nvme_total_capacity=_int(d, "nvme_total_capacity"),
            nvme_unallocated_capacity=_int(d, "nvme_unallocated_capacity"),
            nvme_version=_optional_fields(d, "nvme_version", ("value",), ("string",)),
        )


@dataclass
class SmartCtlScanOutput:
    """Result of ``smartctl --scan-open -j``."""

    json_format_version: list[int] = field(default_factory=list)
    smartctl: SmartCtlDetails = field(default_factory=SmartCtlDetails)
    devices: list[SmartCtlDevice] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> SmartCtlScanOutput:
        d = _mapping(data, "scan output")
        return cls(
            json_format_version=_int_list(d, "json_format_version"),
            smartctl=SmartCtlDetails.from_dict(d.get("smartctl")),
            devices=[SmartCtlDevice.from_dict(item) for item in _list(d, "devices")],
        )


def _load_object(text: str | bytes, where: str) -> Mapping[str, Any]:
    data = json.loads(text)
    if not isinstance(data, Mapping):
        raise TypeError(f"{where}: expected a JSON object, got {type(data).__name__}")
    return data


def parse_smartctl_output(text: str | bytes) -> SmartCtlOutput:
    """Parse the JSON printed by ``smartctl --json`` for one device."""
    return SmartCtlOutput.from_dict(_load_object(text, "smartctl output"))


def parse_scan_output(text: str | bytes) -> SmartCtlScanOutput:
    """Parse the JSON printed by ``smartctl --scan-open -j``."""
    return SmartCtlScanOutput.from_dict(_load_object(text, "scan output"))