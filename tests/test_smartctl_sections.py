import pytest

from diskhealth.smartctl_sections import (
    AtaErrorLogEntry,
    AtaErrorLogSummary,
    AtaSmartAttributes,
    AtaSmartEntry,
    AtaSmartFlags,
    AtaSmartRaw,
    NVMeCapacity,
    NVMeNamespace,
    NVMePciVendor,
    NVMeSmartHealthLog,
    ScsiErrorCounterLog,
    ScsiErrorDetails,
    ScsiStartStopCycle,
)

ENTRY = {
    "id": 5,
    "name": "Reallocated_Sector_Ct",
    "value": 100,
    "worst": 100,
    "thresh": 10,
    "when_failed": "",
    "flags": {
        "value": 51,
        "string": "PO--CK ",
        "prefailure": True,
        "updated_online": True,
        "performance": False,
        "error_rate": False,
        "event_count": True,
        "auto_keep": True,
    },
    "raw": {"value": 8, "string": "8"},
}


def test_ata_entry_reads_every_field():
    entry = AtaSmartEntry.from_dict(ENTRY)
    assert entry.id == ENTRY["id"]
    assert entry.name == ENTRY["name"]
    assert entry.thresh == ENTRY["thresh"]
    assert entry.raw == AtaSmartRaw(value=8, string="8")
    assert entry.flags.prefailure is True
    assert entry.flags.performance is False
    assert entry.flags.string == ENTRY["flags"]["string"]


def test_ata_attributes_table_keeps_order():
    second = dict(ENTRY, id=197, name="Current_Pending_Sector")
    attrs = AtaSmartAttributes.from_dict({"revision": 16, "table": [ENTRY, second]})
    assert attrs.revision == 16
    assert [e.id for e in attrs.table] == [5, 197]


@pytest.mark.parametrize(
    "cls",
    [
        AtaSmartFlags,
        AtaSmartRaw,
        AtaSmartEntry,
        AtaSmartAttributes,
        AtaErrorLogEntry,
        AtaErrorLogSummary,
        ScsiErrorDetails,
        ScsiErrorCounterLog,
        ScsiStartStopCycle,
        NVMePciVendor,
        NVMeSmartHealthLog,
        NVMeCapacity,
        NVMeNamespace,
    ],
)
def test_missing_and_null_fall_back_to_defaults(cls):
    assert cls.from_dict({}) == cls()
    assert cls.from_dict(None) == cls()


def test_wrong_type_for_integer_raises():
    with pytest.raises(TypeError):
        AtaSmartRaw.from_dict({"value": "eight"})


def test_boolean_is_not_an_integer():
    with pytest.raises(TypeError):
        NVMePciVendor.from_dict({"id": True})


def test_non_object_section_raises():
    with pytest.raises(TypeError):
        AtaSmartAttributes.from_dict([1, 2])


def test_table_must_be_array():
    with pytest.raises(TypeError):
        AtaSmartAttributes.from_dict({"table": {"id": 1}})


def test_error_log_summary_with_entries():
    data = {
        "count": 2,
        "revision": 1,
        "logged_count": 2,
        "table": [
            {
                "error_number": 2,
                "lifetime_hours": 1234,
                "error_description": "UNC",
                "completion_registers": {"error": 64, "status": 81, "lba": 4096},
                "previous_commands": [
                    {
                        "command_name": "READ FPDMA QUEUED",
                        "powerup_milliseconds": 777,
                        "registers": {"command": 96, "lba": 4096},
                    }
                ],
            }
        ],
    }
    summary = AtaErrorLogSummary.from_dict(data)
    assert summary.count == 2
    entry = summary.table[0]
    assert entry.lifetime_hours == 1234
    assert entry.completion_registers["lba"] == 4096
    assert entry.completion_registers["count"] == AtaErrorLogEntry().completion_registers["count"]
    command = entry.previous_commands[0]
    assert command["command_name"] == "READ FPDMA QUEUED"
    assert command["registers"]["command"] == 96
    assert set(command["registers"]) == {
        "command", "count", "device", "device_control", "features", "lba"
    }


def test_scsi_error_counter_log():
    read = {
        "total_errors_corrected": 11,
        "total_uncorrected_errors": 0,
        "gigabytes_processed": "1234.567",
    }
    log = ScsiErrorCounterLog.from_dict({"read": read, "write": {"total_errors_corrected": 3}})
    assert log.read.gigabytes_processed == "1234.567"
    assert log.read.total_errors_corrected == 11
    assert log.write.total_errors_corrected == 3
    assert log.verify == ScsiErrorDetails()


def test_scsi_start_stop_cycle():
    data = {
        "accumulated_start_stop_cycles": 42,
        "week_of_manufacture": "12",
        "year_of_manufacture": "2020",
    }
    cycle = ScsiStartStopCycle.from_dict(data)
    assert cycle.accumulated_start_stop_cycles == 42
    assert cycle.year_of_manufacture == "2020"
    assert cycle.accumulated_load_unload_cycles == ScsiStartStopCycle().accumulated_load_unload_cycles


def test_nvme_health_log():
    data = {
        "percentage_used": 3,
        "power_on_hours": 9000,
        "temperature": 35,
        "temperature_sensors": [35, 40],
        "media_errors": 0,
    }
    health = NVMeSmartHealthLog.from_dict(data)
    assert health.percentage_used == 3
    assert health.power_on_hours == 9000
    assert health.temperature_sensors == [35, 40]


def test_nvme_health_log_rejects_non_integer_sensor():
    with pytest.raises(TypeError):
        NVMeSmartHealthLog.from_dict({"temperature_sensors": [35, "hot"]})


def test_nvme_namespace_with_and_without_eui64():
    data = {
        "id": 1,
        "size": {"blocks": 100, "bytes": 51200},
        "capacity": {"blocks": 100, "bytes": 51200},
        "formatted_lba_size": 512,
        "eui64": {"oui": 1, "ext_id": 2},
    }
    ns = NVMeNamespace.from_dict(data)
    assert ns.size == NVMeCapacity(blocks=100, bytes=51200)
    assert ns.utilization == NVMeCapacity()
    assert ns.eui64 == {"oui": 1, "ext_id": 2}
    assert NVMeNamespace.from_dict({"id": 1}).eui64 is None


def test_pci_vendor():
    vendor = NVMePciVendor.from_dict({"id": 32902, "subsystem_id": 4136})
    assert (vendor.id, vendor.subsystem_id) == (32902, 4136)