# diskhealth

Disk health monitoring built on `smartctl` (from smartmontools) and,
where present, `nvme-cli`. It reads SMART data from ATA, SCSI and NVMe
devices, normalises vendor, model and capacity details across a mixed
fleet, and emits one record per disk as JSON on standard output, or as
events on a NATS subject, with warnings when grown defects, pending
sectors, reallocated sectors or SSD wear cross configured thresholds.

## Installation

```
pip install .
```

The package has no third-party dependencies. `smartctl` must be on the
`PATH`. `nvme` is optional; when it is found, NVMe devices get extra
controller and error-log attributes.

## Running the monitor

```
diskhealth --help
```

`diskhealth` starts the collection loop. After each interval it runs
`smartctl` on every configured disk, normalises the results and either
prints them as a JSON array (or `null` when no disk could be read) or,
with `--use-nats`, publishes one JSON event per disk.

Main options:

- `--disks` – comma-separated devices, or `*` (the default) for every
  device that `smartctl --scan-open` finds
- `--interval` – seconds between samples (default 10; must be positive)
- `--node-name`, `--instance-id` – labels copied into every record
- `--use-nats`, `--nats-url`, `--nats-subject` – publish events to NATS
  (an empty URL means `127.0.0.1:4222`; the subject defaults to
  `osd.disk.health`)
- `--grown-defects-threshold` (10), `--pending-sectors-threshold` (3),
  `--reallocated-sectors-threshold` (10), `--lifetime-used-threshold`
  (80 percent) – limits above which an event becomes an alert
- `-v`, `--verbose` – debug logging

The command exits with status 1 when `smartctl` is missing, device
discovery fails, no device is left to watch, the interval is not
positive, or the NATS server cannot be reached; Ctrl-C ends it with
status 0.

## Using the library

The steps of the pipeline can be used on their own, for instance on
saved `smartctl --json` output:

```python
from pathlib import Path

from diskhealth.smartctl import parse_smartctl_output
from diskhealth.normalize import device_info_from_smart_data, normalize_vendor
from diskhealth.drivedb import normalize_device_info
from diskhealth.attributes import get_smart_attributes, cleanup_smart_attributes
from diskhealth.smartdata import process_smart_attributes
from diskhealth.monitor import normalize_smart_data

output = parse_smartctl_output(Path("sda.json").read_text())

info = device_info_from_smart_data(output)
normalize_vendor(info)
normalize_device_info(info)

attributes = get_smart_attributes()
process_smart_attributes(attributes, output)
cleanup_smart_attributes(attributes)

record = normalize_smart_data(output, info, attributes, "node-1", "instance-1")
print(record.to_dict())
```

`diskhealth.smartdata.load_smart_data` reads such a report straight from
a file, and `collect_smart_data` / `discover_devices` run `smartctl`
themselves, raising `SmartctlError` on failure. `diskhealth.nvmecli`
does the same for `nvme id-ctrl` and `nvme error-log` (raising
`NvmeCliError`) and folds their data into the report and attribute table.

`diskhealth.events.convert_to_event` turns a record into a `NatsEvent`
with a severity (`info`, `warning` or `critical`), an event type and a
short message; `publish_to_nats` sends such events through a
`NatsConnection` or any object with a `publish(subject, payload)` method.
`diskhealth.vendors.find_vendor` guesses a vendor from a model string,
`diskhealth.vendors.is_virtualized` checks the DMI system vendor for a
hypervisor, and `diskhealth.oem.detect_oem_relationship` recognises
rebranded OEM drives.

## What it does not do

- There is no Prometheus exporter. `--prometheus` only logs a warning,
  and `--prometheus-port` is accepted but unused.
- Disks are not mapped to Ceph OSD ids: the `osd_id` of every record is
  empty, and `--ceph-osd-base-path` is accepted but unused.
- `--include-zero-values` and `--all-attributes` are accepted and stored
  in the configuration, but nothing acts on them.
- `NatsConnection` is a small plain-TCP publishing client: no TLS, no
  authentication, no reconnection, no subscriptions.

## Tests

```
pip install ".[test]"
pytest
```