"""Records produced by the collector: device details, samples and events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from diskhealth.attributes import SmartAttribute


@dataclass
class DeviceInfo:
    """Normalised identity and characteristics of a storage device."""

    model_family: str = ""
    device_model: str = ""
    serial_number: str = ""
    firmware_version: str = ""
    vendor: str = ""
    product: str = ""
    lun_id: str = ""
    capacity: float = 0.0  # GB
    dwpd: float = 0.0  # drive writes per day
    rpm: int = 0
    form_factor: str = ""
    media: str = ""
    health_status: bool = False


@dataclass
class NormalizedSmartAttribute:
    """A SMART attribute under its Prometheus name."""

    prom_name: str
    value: float


@dataclass
class DiskHealthMetrics:
    """Health metrics of one disk as a flat attribute list."""

    disk_name: str
    node_name: str = ""
    instance_id: str = ""
    attributes: list[NormalizedSmartAttribute] = field(default_factory=list)


def _device_info_dict(info: DeviceInfo) -> dict[str, Any]:
    return {
        "ModelFamily": info.model_family,
        "DeviceModel": info.device_model,
        "SerialNumber": info.serial_number,
        "FirmwareVersion": info.firmware_version,
        "Vendor": info.vendor,
        "Product": info.product,
        "LunID": info.lun_id,
        "Capacity": info.capacity,
        "DWPD": info.dwpd,
        "RPM": info.rpm,
        "FormFactor": info.form_factor,
        "Media": info.media,
        "HealthStatus": info.health_status,
    }


def _attribute_dict(attr: SmartAttribute) -> dict[str, Any]:
    return {
        "Description": attr.description,
        "Unit": attr.unit,
        "Threshold": attr.threshold,
        "Value": attr.value,
        "Worst": attr.worst,
        "RawValue": attr.raw_value,
    }


@dataclass
class NormalizedSmartData:
    """One device's SMART readings, normalised across ATA, SCSI and NVMe."""

    node_name: str = ""
    instance_id: str = ""
    device: str = ""
    device_info: DeviceInfo | None = None
    capacity_gb: float = 0.0
    health_status: bool | None = None
    temperature_celsius: int | None = None
    reallocated_sectors: int | None = None
    pending_sectors: int | None = None
    power_on_hours: int | None = None
    ssd_life_used: int | None = None
    error_counts: dict[str, int] = field(default_factory=dict)
    attributes: dict[str, SmartAttribute] = field(default_factory=dict)
    osd_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the record."""
        return {
            "node_name": self.node_name,
            "instance_id": self.instance_id,
            "device": self.device,
            "device_info": (
                None if self.device_info is None else _device_info_dict(self.device_info)
            ),
            "capacity_gb": self.capacity_gb,
            "health_status": self.health_status,
            "temperature_celsius": self.temperature_celsius,
            "reallocated_sectors": self.reallocated_sectors,
            "pending_sectors": self.pending_sectors,
            "power_on_hours": self.power_on_hours,
            "ssd_life_used": self.ssd_life_used,
            "error_counts": dict(self.error_counts),
            "attributes": {
                name: _attribute_dict(attr) for name, attr in self.attributes.items()
            },
            "osd_id": self.osd_id,
        }


@dataclass
class NatsEvent:
    """An event describing a device's health, as published to NATS."""

    node_name: str = ""
    instance_id: str = ""
    device: str = ""
    event_type: str = ""
    severity: str = ""
    message: str = ""
    details: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the event."""
        return {
            "node_name": self.node_name,
            "instance_id": self.instance_id,
            "device": self.device,
            "event_type": self.event_type,
            "severity": self.severity,
            "message": self.message,
            "details": dict(self.details),
        }