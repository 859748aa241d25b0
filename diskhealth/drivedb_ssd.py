"""Known solid-state drive models and their normalised device details."""

from __future__ import annotations

from typing import Any


def _ssd(
    vendor: str,
    product: str,
    capacity: float,
    form_factor: str,
    dwpd: float,
    device_model: str | None = None,
) -> dict[str, Any]:
    profile: dict[str, Any] = {}
    if device_model is not None:
        profile["device_model"] = device_model
    profile.update(
        product=product,
        capacity=float(capacity),
        vendor=vendor,
        media="ssd",
        form_factor=form_factor,
        dwpd=dwpd,
    )
    return profile


# Model strings are matched exactly, including any leading or trailing "*".
_SSD_PROFILES: dict[str, dict[str, Any]] = {
    "INTEL SSDSC2BX200G4R": _ssd("Intel", "S3610", 200, "sff", 3.0, "SSDSC2BX200G4R"),
    "*SSDSC2KG480G8R": _ssd("Intel", "S4610", 480, "sff", 3.0),
    "SSDSC2KG240G8R": _ssd("Intel", "S4610", 240, "sff", 3.0),
    "INTEL SSDSC2BB240G4": _ssd("Intel", "S3500", 240, "sff", 0.3, "SSDSC2BB240G4"),
    "*SSDSC2BB800G7": _ssd("Intel", "S3520", 800, "sff", 1.0, "SSDSC2BB800G7"),
    "Dell Express Flash NVMe P4610 1.6TB SFF": _ssd(
        "Intel", "P4610-Dell", 1600, "u2", 3.0, "P4610"
    ),
    "Dell Express Flash NVMe P4610 3.2TB SFF": _ssd(
        "Intel", "P4610-Dell", 3200, "u2", 3.0, "P4610"
    ),
    "Dell Express Flash NVMe P4600 3.2TB SFF": _ssd(
        "Intel", "P4600-Dell", 3200, "u2", 3.0, "P4600"
    ),
    "Dell Express Flash NVMe P4500 2.0TB*": _ssd(
        "Intel", "P4500-Dell", 2000, "u2", 1.0, "P4500"
    ),
    "Dell Ent NVMe P5600 MU U.2 3.2TB": _ssd("Intel", "P5600-Dell", 3200, "u2", 3.0, "P5600"),
    "Dell Ent NVMe P5600 MU U.2 1.6TB": _ssd("Intel", "P5600-Dell", 1600, "u2", 3.0, "P5600"),
    "*SSDSC2BB800G4": _ssd("Intel", "S3500", 800, "sff", 0.3, "S3500"),
    "INTEL SSDPE2KE016T8": _ssd("Intel", "P4610-Generic", 1600, "u2", 3.0, "SSDPE2KE016T8"),
    "INTEL SSDSC2KG019T8": _ssd("Intel", "S4610-Generic", 1600, "u2", 3.0, "SSDSC2KG019T8"),
    "INTEL SSDSC2BX800G4": _ssd("Intel", "S3610", 800, "sff", 3.0, "SSDSC2BX800G4"),
    "*SSDSC2BB160G4": _ssd("Intel", "S3500", 160, "sff", 0.3, "SSDSC2BB160G4"),
    "*SSDSC2BB240G6": _ssd("Intel", "S3510", 240, "sff", 0.3, "SSDSC2BB240G6"),
    "SSDSC2BB120G7R": _ssd("Intel", "S3520", 120, "sff", 1.0),
    "SSDSC2KG240G7R": _ssd("Intel", "S4600", 240, "sff", 1.0),
    "SSDSC2KG480GZR": _ssd("Intel", "S4620", 480, "sff", 3.0),
    "SSDSC2KB240G8R": _ssd("Intel", "S4510", 240, "sff", 2.0),
    "SSDSC2KB480G8R": _ssd("Intel", "S4510", 480, "sff", 1.3),
    "INTEL SSDSA2CW120G3": _ssd("Intel", "320", 120, "sff", 1.0, "SSDSA2CW120G3"),
    "INTEL SSDSC2CW120A3": _ssd("Intel", "520", 120, "sff", 2.0, "SSDSC2CW120A3"),
    "INTEL SSDPE2KX020T7T": _ssd("Intel", "S4500", 1920, "sff", 1.0, "SSDPE2KX020T7T"),
    "INTEL SSDSC2KG240G8": _ssd("Intel", "S4610", 240, "sff", 3.0, "SSDSC2KG240G8"),
    "HFS480G32FEH-BA10A": _ssd("Hynix", "HFS", 480, "sff", 3.0),
    "MZ7LH480HBHQ0D3": _ssd("Samsung", "PM883a", 480, "sff", 3.6),
    "MZ7KH480HAHQ0D3": _ssd("Samsung", "SM883", 480, "sff", 3.0),
    "MTFDDAV240TDU": _ssd("Micron", "5300", 240, "sff", 1.0),
    "MTFDDAK960TDN": _ssd("Micron", "5200MAX", 960, "sff", 5.0),
    "MTFDDAK480TDC": _ssd("Micron", "5200ECO", 480, "sff", 0.8),
}


def ssd_profile(model: str) -> dict[str, Any] | None:
    """Return the device details to apply for a known SSD model, else ``None``.

    The keys are ``DeviceInfo`` field names; ``device_model`` is present only
    when the model string itself is to be rewritten. A fresh dict is returned
    on every call.
    """
    profile = _SSD_PROFILES.get(model)
    return None if profile is None else dict(profile)