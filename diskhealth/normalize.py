"""Device details extracted from smartctl output, and vendor detection."""

from __future__ import annotations

import logging

from diskhealth.records import DeviceInfo
from diskhealth.smartctl import SmartCtlOutput

log = logging.getLogger(__name__)

_GIB = 1024 * 1024 * 1024

# Checked in order; the first group with a matching needle wins.
_VENDOR_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("dl2400",), "Seagate"),
    (("toshiba", "mg0"), "Toshiba"),
    (("intel",), "Intel"),
    (("kioxia",), "Kioxia"),
    (("western", "wdc", "wd100"), "WesternDigital"),
    (("seagate", "st12"), "Seagate"),
    (("hgst", "huhs"), "HGST"),
    (("micron", "mtfd"), "Micron"),
    (("sandisk",), "SanDisk"),
    (("samsung", "mz7"), "Samsung"),
)


def device_info_from_smart_data(smart_data: SmartCtlOutput) -> DeviceInfo:
    """Build device details from raw smartctl output for ATA, SCSI or NVMe."""
    info = DeviceInfo(
        device_model=smart_data.device_model,
        serial_number=smart_data.serial_number,
        firmware_version=smart_data.firmware_version,
    )

    protocol = smart_data.device.protocol
    if protocol == "ATA":
        info.model_family = smart_data.model_family
        info.vendor = "ATA"
        info.product = smart_data.device_model
        info.media = "hdd"
        if smart_data.rotation_rate > 0:
            info.rpm = smart_data.rotation_rate
        if smart_data.form_factor is not None:
            info.form_factor = smart_data.form_factor.name

    elif protocol == "SCSI":
        info.device_model = smart_data.scsi_model_name
        info.vendor = smart_data.scsi_vendor
        info.product = smart_data.scsi_product
        info.lun_id = smart_data.logical_unit_id
        info.media = "hdd"
        if smart_data.smart_support.available and "ssd" in smart_data.device.type.lower():
            info.media = "ssd"
        if smart_data.user_capacity is not None:
            info.capacity = smart_data.user_capacity.bytes / _GIB
        if smart_data.rotation_rate > 0:
            info.rpm = smart_data.rotation_rate
        if smart_data.form_factor is not None:
            info.form_factor = smart_data.form_factor.name

    elif protocol == "NVMe":
        vendor = smart_data.nvme_pci_vendor
        if vendor is not None:
            info.vendor = f"Vendor ID: {vendor.id}, Subsystem ID: {vendor.subsystem_id}"
        info.product = smart_data.device_model
        info.media = "nvme"
        if smart_data.nvme_total_capacity > 0:
            info.capacity = smart_data.nvme_total_capacity / _GIB
        elif smart_data.user_capacity is not None:
            info.capacity = smart_data.user_capacity.bytes / _GIB
        if smart_data.nvme_smart_health_log is not None:
            info.dwpd = float(smart_data.nvme_smart_health_log.percentage_used)
        info.rpm = 0

    info.health_status = smart_data.smart_status.passed
    return info


def normalize_vendor(device_info: DeviceInfo) -> str:
    """Fill an empty vendor from the model or model family, in place.

    Returns the vendor afterwards, ``""`` when it could not be determined.
    """
    if device_info.vendor:
        return device_info.vendor

    model = device_info.device_model.lower()
    family = device_info.model_family.lower()

    for needles, vendor in _VENDOR_PATTERNS:
        if any(needle in model or needle in family for needle in needles):
            device_info.vendor = vendor
            break

    if not device_info.vendor:
        log.warning("Unknown vendor for device model %r", device_info.device_model)
    return device_info.vendor