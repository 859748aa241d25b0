"""Vendor detection from model strings and virtualisation detection."""

from __future__ import annotations

import logging
import re
from pathlib import Path

log = logging.getLogger(__name__)

SYS_VENDOR_PATH = "/sys/devices/virtual/dmi/id/sys_vendor"

_VIRTUALIZATION_VENDORS = (
    "VMware",
    "VirtualBox",
    "QEMU",
    "Xen",
    "KVM",
    "Microsoft Hyper-V",
    "Parallels",
    "Oracle VM Server",
)

_VENDOR_PATTERNS = [
    (re.compile(pattern, re.IGNORECASE), vendor)
    for pattern, vendor in (
        (r"^DL2400", "Seagate"),
        (r"TOSHIBA", "Toshiba"),
        (r"^MG0[345678]", "Toshiba"),
        (r"INTEL", "Intel"),
        (r"KIOXIA", "Kioxia"),
        (r"WESTERN", "WesternDigital"),
        (r"WDC", "WesternDigital"),
        (r"^WD100", "WesternDigital"),
        (r"SEAGATE", "Seagate"),
        (r"^ST[12][0123456789]", "Seagate"),
        (r"HGST", "HGST"),
        (r"^HU[HS]", "HGST"),
        (r"MICRON", "Micron"),
        (r"MTFDD", "Micron"),
        (r"SANDISK", "SanDisk"),
        (r"SAMSUNG", "Samsung"),
        (r"^MZ7", "Samsung"),
    )
]


def is_virtualized(path: str | Path = SYS_VENDOR_PATH) -> bool:
    """Tell whether the DMI system vendor names a known hypervisor."""
    try:
        sys_vendor = Path(path).read_text().strip()
    except OSError as exc:
        log.error("error reading sys_vendor: %s", exc)
        return False
    return any(tech in sys_vendor for tech in _VIRTUALIZATION_VENDORS)


def find_vendor(device_model: str, model_family: str) -> str:
    """Return the vendor of the first pattern matching model or family, else ``""``."""
    for pattern, vendor in _VENDOR_PATTERNS:
        if pattern.search(device_model) or pattern.search(model_family):
            return vendor
    return ""