"""Output of ``nvme id-ctrl`` and ``nvme error-log`` in JSON form."""

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


@dataclass
class NVMeIdController:
    """Identify Controller data as printed by ``nvme id-ctrl -o json``."""

    vendor_id: int = 0
    subsystem_vendor_id: int = 0
    model_number: str = ""
    serial_number: str = ""
    firmware_revision: str = ""
    subsystem_nqn: str = ""
    ieee: str = ""
    total_capacity: int = 0
    unallocated_capacity: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> NVMeIdController:
        d = _mapping(data, "id-ctrl")
        return cls(
            vendor_id=_int(d, "vid"),
            subsystem_vendor_id=_int(d, "ssvid"),
            model_number=_str(d, "mn"),
            serial_number=_str(d, "sn"),
            firmware_revision=_str(d, "fr"),
            subsystem_nqn=_str(d, "subnqn"),
            ieee=_str(d, "ieee"),
            total_capacity=_int(d, "tnvmcap"),
            unallocated_capacity=_int(d, "unvmcap"),
        )


@dataclass
class NVMeErrorEntry:
    """One entry of the NVMe error log."""

    error_count: int = 0
    submission_queue_id: int = 0
    command_id: int = 0
    status_field: int = 0
    phase_tag: int = 0
    parameter_error_location: int = 0
    lba: int = 0
    namespace: int = 0
    vendor_specific: int = 0
    transport_type: int = 0
    command_specific: int = 0
    transport_type_specific_info: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> NVMeErrorEntry:
        d = _mapping(data, "errors[]")
        return cls(
            error_count=_int(d, "error_count"),
            submission_queue_id=_int(d, "sqid"),
            command_id=_int(d, "cmdid"),
            status_field=_int(d, "status_field"),
            phase_tag=_int(d, "phase_tag"),
            parameter_error_location=_int(d, "parm_error_location"),
            lba=_int(d, "lba"),
            namespace=_int(d, "nsid"),
            vendor_specific=_int(d, "vs"),
            transport_type=_int(d, "trtype"),
            command_specific=_int(d, "cs"),
            transport_type_specific_info=_int(d, "trtype_spec_info"),
        )


@dataclass
class NVMeErrorLog:
    """The error log as printed by ``nvme error-log -o json``."""

    errors: list[NVMeErrorEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> NVMeErrorLog:
        d = _mapping(data, "error-log")
        items = d.get("errors")
        if items is None:
            return cls()
        if not isinstance(items, list):
            raise TypeError(f"field 'errors': expected an array, got {items!r}")
        return cls(errors=[NVMeErrorEntry.from_dict(item) for item in items])