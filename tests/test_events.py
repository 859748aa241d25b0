import json
import socket
import threading

import pytest

from diskhealth.attributes import SmartAttribute
from diskhealth.config import DiskHealthMetricsConfig
from diskhealth.events import (
    NatsConnection,
    check_thresholds,
    convert_to_event,
    generate_message,
    normalize_ssd_wear,
    publish_to_nats,
)
from diskhealth.records import NormalizedSmartData


def _attr(raw):
    return SmartAttribute("desc", "count", raw_value=raw)


class _FakeNatsServer:
    def __init__(self, greeting=b'INFO {"server_id":"test"}\r\n', refuse=False):
        self.greeting = greeting
        self.refuse = refuse
        self.received = bytearray()
        self.listener = socket.socket()
        self.listener.bind(("127.0.0.1", 0))
        self.listener.listen(1)
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _serve(self):
        conn, _ = self.listener.accept()
        with conn:
            conn.sendall(self.greeting)
            answered = 0
            while True:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                self.received += chunk
                pings = bytes(self.received).count(b"PING\r\n")
                while answered < pings:
                    conn.sendall(b"-ERR 'Authorization Violation'\r\n" if self.refuse else b"PONG\r\n")
                    answered += 1
        self.listener.close()

    def finish(self):
        self.thread.join(timeout=5)


class _Recorder:
    def __init__(self):
        self.messages = []

    def publish(self, subject, payload):
        self.messages.append((subject, payload))


def test_nats_connection_publishes_wire_frame():
    server = _FakeNatsServer()
    with NatsConnection(f"nats://127.0.0.1:{server.port}") as nc:
        nc.publish("disk.health", b"hello")
    server.finish()
    assert b"PUB disk.health 5\r\nhello\r\n" in bytes(server.received)
    assert bytes(server.received).startswith(b"CONNECT ")


def test_nats_connection_accepts_url_without_scheme():
    server = _FakeNatsServer()
    nc = NatsConnection(f"127.0.0.1:{server.port}")
    nc.publish("a.b", "xy")
    nc.close()
    server.finish()
    assert b"PUB a.b 2\r\nxy\r\n" in bytes(server.received)


def test_nats_connection_publish_after_close_fails():
    server = _FakeNatsServer()
    nc = NatsConnection(f"nats://127.0.0.1:{server.port}")
    nc.close()
    nc.close()
    server.finish()
    with pytest.raises(ConnectionError):
        nc.publish("disk.health", b"x")


def test_nats_connection_rejects_bad_subject():
    server = _FakeNatsServer()
    with NatsConnection(f"nats://127.0.0.1:{server.port}") as nc:
        with pytest.raises(ValueError):
            nc.publish("bad subject", b"x")
        with pytest.raises(ValueError):
            nc.publish("", b"x")
    server.finish()


def test_nats_connection_server_error():
    server = _FakeNatsServer(refuse=True)
    with pytest.raises(ConnectionError):
        NatsConnection(f"nats://127.0.0.1:{server.port}")
    server.finish()


def test_nats_connection_bad_greeting():
    server = _FakeNatsServer(greeting=b"HELLO\r\n")
    with pytest.raises(ConnectionError):
        NatsConnection(f"nats://127.0.0.1:{server.port}")
    server.finish()


def test_normalize_ssd_wear_value():
    assert normalize_ssd_wear({"wear_leveling_count": _attr(25)}) == 75


def test_normalize_ssd_wear_none_without_wear_attributes():
    assert normalize_ssd_wear({"power_on_hours": _attr(10)}) is None


def test_normalize_ssd_wear_prefers_first_listed():
    both = {"wear_leveling_count": _attr(40), "media_wearout_indicator": _attr(10)}
    only_media = {"media_wearout_indicator": _attr(10)}
    assert normalize_ssd_wear(both) == normalize_ssd_wear(only_media)


@pytest.mark.parametrize(
    "key, message",
    [
        ("GrownDefects", "SMART data indicates potential drive issues (grown defects)."),
        ("PendingSectors", "SMART data indicates potential drive issues (pending sectors)."),
        ("ReallocatedSectors", "SMART data indicates potential drive issues (reallocated sectors)."),
        ("SSDLifeUsed", "SMART data indicates SSD nearing end of life."),
    ],
)
def test_generate_message(key, message):
    assert generate_message({key: "1"}) == message


def test_generate_message_priority_and_default():
    assert generate_message({"SSDLifeUsed": "1", "GrownDefects": "2"}) == (
        "SMART data indicates potential drive issues (grown defects)."
    )
    assert generate_message({}) == "SMART data collected successfully."


def test_check_thresholds_below_limits():
    details = {"x": "y"}
    data = NormalizedSmartData(attributes={"grown_defects_count": _attr(1)})
    config = DiskHealthMetricsConfig(grown_defects_threshold=1)
    assert check_thresholds(details, data, config) == ("info", "health")
    assert details == {"x": "y"}


def test_check_thresholds_pending_sectors():
    details = {"PendingSectors": "7"}
    data = NormalizedSmartData(attributes={"current_pending_sector": _attr(7)})
    config = DiskHealthMetricsConfig(pending_sectors_threshold=3)
    assert check_thresholds(details, data, config) == ("warning", "health_alert")
    assert details["PendingSectors"] == "7 (Warning: Exceeds threshold of 3)"


def test_check_thresholds_lifetime_is_critical():
    details = {}
    data = NormalizedSmartData(
        attributes={"reallocated_sector_ct": _attr(9), "media_wearout_indicator": _attr(10)}
    )
    config = DiskHealthMetricsConfig(reallocated_sectors_threshold=1, lifetime_used_threshold=50)
    assert check_thresholds(details, data, config) == ("critical", "lifetime_alert")
    assert details["ReallocatedSectors"] == "9 (Warning: Exceeds threshold of 1)"
    wear = normalize_ssd_wear(data.attributes)
    assert details["SSDLifeUsed"] == f"{wear}% (Warning: Exceeds threshold of 50%)"


def test_convert_to_event_healthy():
    data = NormalizedSmartData(
        node_name="node-a", instance_id="i-1", device="/dev/sda", temperature_celsius=40
    )
    event = convert_to_event(data, DiskHealthMetricsConfig())
    assert event.severity == "info"
    assert event.event_type == "health"
    assert event.message == "SMART data collected successfully."
    assert event.details == {"TemperatureCelsius": "40"}
    assert (event.node_name, event.instance_id, event.device) == ("node-a", "i-1", "/dev/sda")


def test_convert_to_event_grown_defects():
    data = NormalizedSmartData(device="/dev/sdb", attributes={"grown_defects_count": _attr(5)})
    config = DiskHealthMetricsConfig(grown_defects_threshold=2)
    event = convert_to_event(data, config)
    assert event.severity == "warning"
    assert event.event_type == "health_alert"
    assert event.message == "SMART data indicates potential drive issues (grown defects)."
    assert event.details["GrownDefects"] == "5 (Warning: Exceeds threshold of 2)"
    assert event.details["grown_defects_count"] == "5"


def test_convert_to_event_wear_details_agree():
    data = NormalizedSmartData(attributes={"media_wearout_indicator": _attr(10)})
    event = convert_to_event(data, DiskHealthMetricsConfig(lifetime_used_threshold=50))
    assert event.severity == "critical"
    assert event.details["SSDLifeUsed"].split("%")[0] == event.details["SSDWearPercentage"]
    assert event.details["media_wearout_indicator"] == "10"


def test_publish_to_nats_sends_one_event_per_sample():
    config = DiskHealthMetricsConfig()
    metrics = [
        NormalizedSmartData(device="/dev/sda", power_on_hours=12),
        NormalizedSmartData(device="/dev/sdb", attributes={"grown_defects_count": _attr(3)}),
    ]
    recorder = _Recorder()
    publish_to_nats(metrics, recorder, "disk.health", config)
    assert [subject for subject, _ in recorder.messages] == ["disk.health", "disk.health"]
    decoded = [json.loads(payload) for _, payload in recorder.messages]
    assert decoded == [convert_to_event(m, config).to_dict() for m in metrics]


def test_publish_to_nats_raises_first_failure():
    class _Failing:
        def publish(self, subject, payload):
            raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        publish_to_nats([NormalizedSmartData()], _Failing(), "s", DiskHealthMetricsConfig())