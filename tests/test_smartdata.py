import json
import subprocess
from unittest import mock

import pytest

from diskhealth.attributes import get_smart_attributes
from diskhealth.smartctl import SmartCtlOutput
from diskhealth.smartdata import (
    SmartctlError,
    calculate_percentage_used,
    check_smartctl_installed,
    collect_smart_data,
    discover_devices,
    load_smart_data,
    parse_gigabytes,
    process_ata_attributes,
    process_nvme_attributes,
    process_scsi_attributes,
    process_smart_attributes,
    update_attribute,
)


def _completed(stdout=b"", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=b"")


def test_update_attribute_sets_readings():
    attrs = get_smart_attributes()
    assert update_attribute(attrs, "power_on_hours", 5, 6, 7, 8, "h") is True
    attr = attrs["power_on_hours"]
    assert (attr.value, attr.raw_value, attr.threshold, attr.worst, attr.unit) == (5, 6, 7, 8, "h")


def test_update_attribute_keeps_unset_threshold_and_unit():
    attrs = get_smart_attributes()
    update_attribute(attrs, "power_on_hours", 1, 1, 9, 9, "hours")
    update_attribute(attrs, "power_on_hours", 2, 2, -1, -1, "")
    attr = attrs["power_on_hours"]
    assert (attr.value, attr.threshold, attr.worst, attr.unit) == (2, 9, 9, "hours")


def test_update_attribute_resolves_alias():
    attrs = get_smart_attributes()
    assert update_attribute(attrs, "current_drive_temperature", 40, 40, -1, -1, "Celsius")
    assert attrs["temperature_celsius"].raw_value == 40


def test_update_attribute_unknown_name():
    attrs = get_smart_attributes()
    before = dict(attrs)
    assert update_attribute(attrs, "no_such_attribute", 1, 1, -1, -1, "") is False
    assert set(attrs) == set(before)


def test_parse_gigabytes():
    assert parse_gigabytes("12.7") == 12
    assert parse_gigabytes("not a number") == 0
    assert parse_gigabytes("") == 0
    assert parse_gigabytes("inf") == 0


@pytest.mark.parametrize("value", [0, 30, 100])
def test_calculate_percentage_used(value):
    assert calculate_percentage_used(value) + value == 100


def test_process_ata_attributes():
    out = SmartCtlOutput.from_dict(
        {
            "device": {"protocol": "ATA"},
            "ata_smart_attributes": {
                "table": [
                    {"id": 5, "name": "Reallocated_Sector_Ct", "value": 100, "worst": 99,
                     "thresh": 10, "raw": {"value": 3}},
                    {"id": 233, "name": "Media_Wearout_Indicator", "value": 90, "worst": 90,
                     "thresh": 0, "raw": {"value": 0}},
                    {"id": 250, "name": "Unknown_Vendor_Attr", "value": 1, "raw": {"value": 1}},
                ]
            },
        }
    )
    attrs = get_smart_attributes()
    process_ata_attributes(attrs, out)
    realloc = attrs["reallocated_sector_ct"]
    assert (realloc.value, realloc.worst, realloc.threshold, realloc.raw_value) == (100, 99, 10, 3)
    wear = attrs["media_wearout_indicator"]
    assert wear.value == calculate_percentage_used(90)
    assert wear.raw_value == -1
    assert "unknown_vendor_attr" not in attrs


def test_process_scsi_attributes():
    out = SmartCtlOutput.from_dict(
        {
            "device": {"protocol": "SCSI"},
            "power_on_time": {"hours": 1234},
            "temperature": {"current": 35},
            "scsi_start_stop_cycle_counter": {"accumulated_start_stop_cycles": 17},
            "scsi_grown_defect_list": 4,
            "scsi_error_counter_log": {
                "read": {"total_errors_corrected": 11, "gigabytes_processed": "250.9",
                         "total_uncorrected_errors": 1},
                "write": {"total_errors_corrected": 12, "gigabytes_processed": "bad"},
                "verify": {"total_errors_corrected": 13},
            },
        }
    )
    attrs = get_smart_attributes()
    process_scsi_attributes(attrs, out)
    assert attrs["power_on_hours"].raw_value == 1234
    assert attrs["temperature_celsius"].raw_value == 35
    assert attrs["power_cycle_count"].raw_value == 17
    assert attrs["grown_defects_count"].raw_value == 4
    assert attrs["read_errors_corrected"].raw_value == 11
    assert attrs["verify_errors_corrected"].raw_value == 13
    assert attrs["read_gigabytes_processed"].raw_value == parse_gigabytes("250.9")
    assert attrs["read_gigabytes_processed"].unit == "GB"
    assert attrs["write_gigabytes_processed"].raw_value == 0
    assert attrs["total_uncorrected_read_errors"].raw_value == 1


def test_process_scsi_zero_temperature_is_skipped():
    out = SmartCtlOutput.from_dict({"temperature": {"current": 0}})
    attrs = get_smart_attributes()
    process_scsi_attributes(attrs, out)
    assert attrs["temperature_celsius"].raw_value == -1
    assert attrs["power_cycle_count"].raw_value == -1


def test_process_nvme_attributes():
    out = SmartCtlOutput.from_dict(
        {
            "device": {"protocol": "NVMe"},
            "nvme_smart_health_information_log": {
                "power_on_hours": 500, "temperature": 41, "power_cycles": 9,
                "percentage_used": 150,
            },
        }
    )
    attrs = get_smart_attributes()
    process_nvme_attributes(attrs, out)
    assert attrs["power_on_hours"].raw_value == 500
    assert attrs["temperature_celsius"].raw_value == 41
    assert attrs["power_cycle_count"].raw_value == 9
    assert attrs["percentage_used"].raw_value == -1


def test_process_nvme_without_log_changes_nothing():
    attrs = get_smart_attributes()
    process_nvme_attributes(attrs, SmartCtlOutput())
    assert all(attr.is_unset for attr in attrs.values())


def test_process_smart_attributes_combines_sections():
    out = SmartCtlOutput.from_dict(
        {
            "power_on_time": {"hours": 10},
            "nvme_smart_health_information_log": {"power_on_hours": 20, "percentage_used": 5},
        }
    )
    attrs = get_smart_attributes()
    process_smart_attributes(attrs, out)
    assert attrs["power_on_hours"].raw_value == 20
    assert attrs["percentage_used"].raw_value == 5


def test_load_smart_data(tmp_path):
    path = tmp_path / "sda.json"
    path.write_text(json.dumps({"device": {"name": "/dev/sda", "protocol": "ATA"}}))
    out = load_smart_data(path)
    assert out.device.name == "/dev/sda"
    assert out.device.protocol == "ATA"


def test_load_smart_data_missing_file(tmp_path):
    with pytest.raises(SmartctlError):
        load_smart_data(tmp_path / "missing.json")


def test_load_smart_data_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(SmartctlError):
        load_smart_data(path)


def test_check_smartctl_installed():
    with mock.patch("shutil.which", return_value="/usr/sbin/smartctl"):
        assert check_smartctl_installed() is True
    with mock.patch("shutil.which", return_value=None):
        assert check_smartctl_installed() is False


def test_collect_smart_data_runs_smartctl():
    body = json.dumps({"device": {"name": "/dev/sdz", "protocol": "SCSI"}}).encode()
    with mock.patch("subprocess.run", return_value=_completed(body)) as run:
        out = collect_smart_data("/dev/sdz")
    assert out.device.name == "/dev/sdz"
    args = run.call_args[0][0]
    assert args[0] == "smartctl"
    assert args[-1] == "/dev/sdz"
    assert "--json" in args


def test_collect_smart_data_nonzero_exit():
    with mock.patch("subprocess.run", return_value=_completed(b"{}", returncode=2)):
        with pytest.raises(SmartctlError):
            collect_smart_data("/dev/sdz")


def test_collect_smart_data_missing_binary():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("smartctl")):
        with pytest.raises(SmartctlError):
            collect_smart_data("/dev/sdz")


def test_discover_devices():
    body = json.dumps(
        {"devices": [{"name": "/dev/sda", "protocol": "ATA"}, {"name": "/dev/nvme0"}]}
    ).encode()
    with mock.patch("subprocess.run", return_value=_completed(body)) as run:
        scan = discover_devices()
    assert [d.name for d in scan.devices] == ["/dev/sda", "/dev/nvme0"]
    assert run.call_args[0][0] == ["smartctl", "--scan-open", "-j"]


def test_discover_devices_bad_output():
    with mock.patch("subprocess.run", return_value=_completed(b"[1, 2]")):
        with pytest.raises(SmartctlError):
            discover_devices()