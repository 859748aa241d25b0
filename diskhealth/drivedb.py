"""Known hard-disk models and normalisation of device details against the drive tables."""

from __future__ import annotations

from typing import Any

from diskhealth.drivedb_ssd import ssd_profile
from diskhealth.records import DeviceInfo


def _hdd(
    vendor: str,
    product: str,
    capacity: float,
    form_factor: str,
    rpm: int,
    device_model: str | None = None,
) -> dict[str, Any]:
    profile: dict[str, Any] = {}
    if device_model is not None:
        profile["device_model"] = device_model
    profile.update(
        product=product,
        capacity=float(capacity),
        vendor=vendor,
        media="hdd",
        form_factor=form_factor,
        rpm=rpm,
    )
    return profile


_WD = "WesternDigital"

# Model strings are matched exactly, including any leading "*".
_HDD_PROFILES: dict[str, dict[str, Any]] = {
    "WDC WD8004FRYZ-01VAEB0": _hdd(_WD, "Gold", 8000, "lff", 7200, "WD8004FRYZ"),
    "HUS722T2TALA600": _hdd(_WD, "Ultrastar7k2", 2000, "lff", 7200),
    "HUS728T8TAL5200": _hdd(_WD, "UltrastarDC", 8000, "lff", 7200),
    "WDC WD2005FBYZ-01YCBB2": _hdd(_WD, "Gold", 2000, "lff", 7200, "WD2005FBYZ-01YCBB2"),
    "*HUS726040ALA614": _hdd(_WD, "Ultrastar7K6000", 4000, "lff", 7200, "HUS726040ALA614"),
    "WD1004FBYZ": _hdd(_WD, "Re", 1000, "lff", 7200),
    "WDC WD10JFCX-68N6GN0": _hdd(_WD, "RedPlus", 1000, "sff", 5400, "WD10JFCX-68N6GN0"),
    "WDC WD8002FRYZ-01FF2B0": _hdd(_WD, "Gold", 8000, "lff", 7200),
    "WDC WD121KRYZ-01W0RB0": _hdd(_WD, "Gold", 12000, "lff", 7200, "WD121KRYZ-01W0RB0"),
    "WDC WD101KRYZ-01JPDB1": _hdd(_WD, "Gold", 10000, "lff", 7200),
    "WDC WD8003FRYZ-01JPDB1": _hdd(_WD, "Gold", 8000, "lff", 7200),
    "WDC WD102KRYZ-01A5AB0": _hdd(_WD, "Gold", 10000, "lff", 7200, "WD102KRYZ-01A5AB0"),
    "WDC WD40EFRX-68WT0N0": _hdd(_WD, "Red", 4000, "lff", 5400, "WD40EFRX-68WT0N0"),
    "WDC WD60EFRX-68L0BN1": _hdd(_WD, "RedPlus", 6000, "lff", 5400, "WD60EFRX-68L0BN1"),
    "WDC WD60EFRX-68MYMN1": _hdd(_WD, "RedPlus", 6000, "lff", 5400, "WD60EFRX-68MYMN1"),
    "HUS722T1TALA600": _hdd(_WD, "Ultrastar7k2", 6000, "lff", 7200),
    "HUH721010AL5200": _hdd(_WD, "UltrastarHe10", 10000, "lff", 7200),
    "HGST HUS722T1TALA604": _hdd(_WD, "Ultrastar7K2", 1000, "lff", 7200, "HUS722T1TALA604"),
    "HGST HUS726060ALE610": _hdd(_WD, "Ultrastar7k6", 6000, "lff", 7200, "HUS726060ALE610"),
    "*HUS726T4TALA6L0": _hdd(_WD, "UltrastarHC310", 4000, "lff", 7200, "HUS726T4TALA6L0"),
    "WDC WD5000BHTZ-04JCPV1": _hdd(
        _WD, "VelociRaptor", 500, "sff", 10000, "WD5000BHTZ-04JCPV1"
    ),
    "WDC WD20EFRX-68EUZN0": _hdd(_WD, "RedPlus", 2000, "lff", 5400, "WD20EFRX-68EUZN0"),
    "WDC WD5000BHTZ-04JCPV0": _hdd(
        _WD, "VelociRaptor", 500, "sff", 10000, "WD5000BHTZ-04JCPV0"
    ),
    "ST8000NM014A": _hdd("Seagate", "Exos7E10", 8000, "lff", 7200, "ST8000NM014A"),
    "ST1000NM0055-1V410C": _hdd("Seagate", "Exos7E8", 1000, "lff", 7200),
    "ST300MP0026": _hdd("Seagate", "EntPerf", 300, "sff", 15000),
    "ST2000NM0155": _hdd("Seagate", "Exos7E8", 2000, "lff", 7200),
    "ST1000NM0033-9ZM173": _hdd("Seagate", "ConstellationES.3", 1000, "lff", 7200),
    "ST2000NM012A-2MP130": _hdd("Seagate", "Exos7E8", 2000, "lff", 7200),
    "ST10000NM0096": _hdd("Seagate", "ExosX10", 10000, "lff", 7200),
    "ST1000NX0473": _hdd("Seagate", "Exos7E2000", 1000, "sff", 7200),
    "ST1000NX0443": _hdd("Seagate", "Exos7E2000", 1000, "sff", 7200),
    "ST2000NM013A": _hdd("Seagate", "Exos7E8", 2000, "lff", 7200),
    "DL2400MM0159": _hdd("Seagate", "Exos10E2400", 2400, "sff", 10000),
    "ST4000NM018B-2TF130": _hdd("Seagate", "Exos7E10", 4000, "lff", 7200),
    "TOSHIBA MG03ACA100": _hdd("Toshiba", "MG03", 3000, "lff", 7200, "MG03ACA100"),
    "TOSHIBA MG04ACA200NY": _hdd("Toshiba", "MG04", 2000, "lff", 7200, "MG04ACA200NY"),
    "TOSHIBA MG04ACA400N": _hdd("Toshiba", "MG04", 4000, "lff", 7200, "MG04ACA400N"),
    "TOSHIBA MG08ADA400NY": _hdd("Toshiba", "MG08-D", 4000, "lff", 7200, "MG08ADA400NY"),
    "MG06SCA800EY": _hdd("Toshiba", "MG06", 8000, "lff", 7200),
    "MG04SCA20ENY": _hdd("Toshiba", "MG04", 2000, "lff", 7200),
    "TOSHIBA MG04ACA100NY": _hdd("Toshiba", "MGA04", 1000, "lff", 7200, "MG04ACA100NY"),
}


def hdd_profile(model: str) -> dict[str, Any] | None:
    """Return the device details to apply for a known HDD model, else ``None``.

    The keys are ``DeviceInfo`` field names; ``device_model`` is present only
    when the model string itself is to be rewritten. A fresh dict is returned
    on every call.
    """
    profile = _HDD_PROFILES.get(model)
    return None if profile is None else dict(profile)


def normalize_device_info(device_info: DeviceInfo) -> bool:
    """Overwrite device details with the known profile of its model, in place.

    The same drive is labelled differently by different systems; this maps the
    known labels to one consistent description. Returns whether a profile
    was applied.
    """
    model = device_info.device_model
    profile = ssd_profile(model) or hdd_profile(model)
    if profile is None:
        return False
    for name, value in profile.items():
        setattr(device_info, name, value)
    return True