"""Health events derived from SMART samples and their delivery to NATS."""

from __future__ import annotations

import json
import logging
import socket
import threading
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any, Protocol
from urllib.parse import urlsplit

from diskhealth.attributes import SmartAttribute
from diskhealth.config import DiskHealthMetricsConfig
from diskhealth.records import NatsEvent, NormalizedSmartData

log = logging.getLogger(__name__)

DEFAULT_NATS_PORT = 4222
DEFAULT_NATS_HOST = "127.0.0.1"

_WEAR_ATTRIBUTES = (
    "media_wearout_indicator",
    "wear_leveling_count",
    "perc_rated_life_used",
    "percent_life_used",
    "ssd_life_left_perc",
    "drive_life_used",
    "lifetime_used",
    "percent_lifetime_used",
)


class NatsConnection:
    """A minimal publishing client for a NATS server."""

    def __init__(self, url: str = "", timeout: float = 5.0) -> None:
        host, port = self._parse_url(url)
        self._lock = threading.Lock()
        self._closed = False
        try:
            self._sock = socket.create_connection((host, port), timeout)
        except OSError as exc:
            raise ConnectionError(f"cannot connect to nats at {host}:{port}: {exc}") from exc
        self._reader = self._sock.makefile("rb")
        try:
            self._handshake()
        except BaseException:
            self.close()
            raise
        self._sock.settimeout(None)
        self._pinger = threading.Thread(target=self._answer_pings, daemon=True)
        self._pinger.start()

    @staticmethod
    def _parse_url(url: str) -> tuple[str, int]:
        if not url:
            return DEFAULT_NATS_HOST, DEFAULT_NATS_PORT
        if "://" not in url:
            url = "nats://" + url
        parts = urlsplit(url)
        return parts.hostname or DEFAULT_NATS_HOST, parts.port or DEFAULT_NATS_PORT

    def _readline(self) -> bytes:
        raw = self._reader.readline()
        if not raw:
            raise ConnectionError("nats server closed the connection")
        return raw.rstrip(b"\r\n")

    def _handshake(self) -> None:
        line = self._readline()
        if not line.startswith(b"INFO"):
            raise ConnectionError(f"unexpected greeting from nats server: {line!r}")
        connect = {"verbose": False, "pedantic": False, "name": "diskhealth"}
        self._sock.sendall(
            b"CONNECT " + json.dumps(connect).encode() + b"\r\nPING\r\n"
        )
        while True:
            line = self._readline()
            if line == b"PONG":
                return
            if line == b"PING":
                self._sock.sendall(b"PONG\r\n")
            elif line.startswith(b"-ERR"):
                raise ConnectionError(f"nats server refused connection: {line.decode()}")

    def _answer_pings(self) -> None:
        try:
            while not self._closed:
                line = self._readline()
                if line == b"PING":
                    with self._lock:
                        self._sock.sendall(b"PONG\r\n")
                elif line.startswith(b"-ERR"):
                    log.error("nats server error: %s", line.decode(errors="replace"))
        except (OSError, ValueError):
            pass

    def publish(self, subject: str, payload: bytes | str) -> None:
        """Send one message on a subject."""
        if not subject or any(ch.isspace() for ch in subject):
            raise ValueError(f"invalid nats subject: {subject!r}")
        if isinstance(payload, str):
            payload = payload.encode()
        if self._closed:
            raise ConnectionError("nats connection is closed")
        frame = f"PUB {subject} {len(payload)}\r\n".encode() + payload + b"\r\n"
        with self._lock:
            try:
                self._sock.sendall(frame)
            except OSError as exc:
                raise ConnectionError(f"error publishing to nats: {exc}") from exc

    def close(self) -> None:
        """Close the connection; closing twice is harmless."""
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._reader.close()
        self._sock.close()

    def __enter__(self) -> NatsConnection:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class _Publisher(Protocol):
    def publish(self, subject: str, payload: bytes) -> None: ...


def _raw(attributes: Mapping[str, SmartAttribute], name: str) -> int:
    attr = attributes.get(name)
    return 0 if attr is None else attr.raw_value


def normalize_ssd_wear(attributes: Mapping[str, SmartAttribute]) -> int | None:
    """Turn the first known SSD wear attribute into percent of life used."""
    for name in _WEAR_ATTRIBUTES:
        attr = attributes.get(name)
        if attr is not None:
            return 100 - attr.raw_value
    return None


def check_thresholds(
    details: MutableMapping[str, str],
    data: NormalizedSmartData,
    config: DiskHealthMetricsConfig,
) -> tuple[str, str]:
    """Mark exceeded thresholds in ``details`` and return ``(severity, event_type)``."""
    severity, event_type = "info", "health"
    attrs = data.attributes

    for attr_name, key, threshold in (
        ("grown_defects_count", "GrownDefects", config.grown_defects_threshold),
        ("current_pending_sector", "PendingSectors", config.pending_sectors_threshold),
        ("reallocated_sector_ct", "ReallocatedSectors", config.reallocated_sectors_threshold),
    ):
        value = _raw(attrs, attr_name)
        if value > threshold:
            details[key] = f"{value} (Warning: Exceeds threshold of {threshold})"
            severity, event_type = "warning", "health_alert"

    wear = normalize_ssd_wear(attrs)
    if wear is not None and wear > config.lifetime_used_threshold:
        details["SSDLifeUsed"] = (
            f"{wear}% (Warning: Exceeds threshold of {config.lifetime_used_threshold}%)"
        )
        severity, event_type = "critical", "lifetime_alert"

    return severity, event_type


def generate_message(details: Mapping[str, str]) -> str:
    """Summarise the most important finding in ``details``."""
    if "GrownDefects" in details:
        return "SMART data indicates potential drive issues (grown defects)."
    if "PendingSectors" in details:
        return "SMART data indicates potential drive issues (pending sectors)."
    if "ReallocatedSectors" in details:
        return "SMART data indicates potential drive issues (reallocated sectors)."
    if "SSDLifeUsed" in details:
        return "SMART data indicates SSD nearing end of life."
    return "SMART data collected successfully."


def convert_to_event(data: NormalizedSmartData, config: DiskHealthMetricsConfig) -> NatsEvent:
    """Build the NATS event describing one device sample."""
    details: dict[str, str] = {}

    wear = normalize_ssd_wear(data.attributes)
    if wear is not None:
        details["SSDWearPercentage"] = str(wear)

    for key, value in (
        ("TemperatureCelsius", data.temperature_celsius),
        ("ReallocatedSectors", data.reallocated_sectors),
        ("PendingSectors", data.pending_sectors),
        ("PowerOnHours", data.power_on_hours),
        ("SSDLifeUsed", data.ssd_life_used),
    ):
        if value is not None:
            details[key] = str(value)

    severity, event_type = check_thresholds(details, data, config)

    for name, attr in data.attributes.items():
        if name != "SSDWearPercentage":
            details[name] = str(attr.raw_value)

    return NatsEvent(
        node_name=data.node_name,
        instance_id=data.instance_id,
        device=data.device,
        event_type=event_type,
        severity=severity,
        message=generate_message(details),
        details=details,
    )


def _event_json(event: NatsEvent) -> bytes:
    body = event.to_dict()
    body["details"] = dict(sorted(body["details"].items()))
    return json.dumps(body, separators=(",", ":")).encode()


def publish_to_nats(
    metrics: Iterable[NormalizedSmartData],
    connection: _Publisher,
    subject: str,
    config: DiskHealthMetricsConfig,
) -> None:
    """Publish one JSON event per sample; the first failure is raised."""
    for data in metrics:
        connection.publish(subject, _event_json(convert_to_event(data, config)))