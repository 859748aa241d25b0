"""Detection of OEM rebranding from vendor, model and product strings."""

from __future__ import annotations

import re

from diskhealth.records import DeviceInfo

_WORD = re.compile(r"[^\W_]+(?:'[^\W_]+)*")


def _title(text: str) -> str:
    return _WORD.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


def _in_either(needle: str, model: str, product: str) -> bool:
    return needle in model or needle in product


def detect_oem_relationship(vendor: str, model: str, product: str) -> str:
    """Describe a known OEM relationship, or return ``""`` if none is found."""
    vendor = vendor.lower()
    model = model.lower()
    product = product.lower()

    if "lenovo" in vendor:
        if _in_either("toshiba", model, product):
            return "Lenovo (Toshiba OEM)"
        if _in_either("seagate", model, product):
            return "Lenovo (Seagate OEM)"
        if _in_either("hgst", model, product):
            return "Lenovo (HGST OEM)"

    if "dell" in vendor:
        if _in_either("seagate", model, product):
            return "Dell (Seagate OEM)"
        if _in_either("western digital", model, product) or "wd" in product:
            return "Dell (WD OEM)"
        if _in_either("toshiba", model, product):
            return "Dell (Toshiba OEM)"

    if "hp" in vendor or "hpe" in vendor:
        if _in_either("western digital", model, product) or "wd" in product:
            return "HP (WD OEM)"
        if _in_either("seagate", model, product):
            return "HP (Seagate OEM)"
        if _in_either("toshiba", model, product):
            return "HP (Toshiba OEM)"

    if "supermicro" in vendor:
        if _in_either("intel", model, product):
            return "Supermicro (Intel OEM)"
        if _in_either("samsung", model, product):
            return "Supermicro (Samsung OEM)"

    # The product field sometimes names the actual manufacturer.
    titled = _title(vendor)
    if "seagate" in product and "seagate" not in vendor:
        return f"{titled} (Seagate OEM)"
    if "western digital" in product or ("wd" in product and "western digital" not in vendor):
        return f"{titled} (WD OEM)"
    for maker, label in (
        ("toshiba", "Toshiba"),
        ("hgst", "HGST"),
        ("samsung", "Samsung"),
        ("intel", "Intel"),
    ):
        if maker in product and maker not in vendor:
            return f"{titled} ({label} OEM)"
    return ""


def enhance_device_info(device_info: DeviceInfo | None) -> None:
    """Fill an empty model family with the detected OEM relationship, in place."""
    if device_info is None:
        return
    oem = detect_oem_relationship(
        device_info.vendor, device_info.device_model, device_info.product
    )
    if oem and not device_info.model_family:
        device_info.model_family = oem