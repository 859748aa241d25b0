"""Running nvme-cli and folding its controller data and error log into SMART data."""

from __future__ import annotations

import json
import logging
import re
import shutil
import subprocess
from collections.abc import Callable, MutableMapping
from typing import Any, TypeVar

from diskhealth.attributes import UNSET, SmartAttribute
from diskhealth.nvmetypes import NVMeErrorLog, NVMeIdController
from diskhealth.smartctl import SmartCtlOutput
from diskhealth.smartdata import update_attribute

log = logging.getLogger(__name__)

_T = TypeVar("_T")

_STATUS_MASK = 0x7FF
_MEDIA_ERROR = 0x281
_MEDIA_ERROR_ALT = 0x282
_ABORTED_COMMAND = 0x7
_COMMAND_TIMEOUT = 0x4

_HEX = re.compile(r"[+-]?[0-9a-fA-F]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class NvmeCliError(Exception):
    """nvme-cli could not be run, or its output could not be read."""


def check_nvme_cli_installed() -> bool:
    """Whether ``nvme`` is on the search path."""
    return shutil.which("nvme") is not None


def _run_json(subcommand: str, device_path: str, parser: Callable[[Any], _T]) -> _T:
    args = ["nvme", subcommand, device_path, "-o", "json"]
    try:
        result = subprocess.run(args, capture_output=True, check=False)
    except OSError as exc:
        raise NvmeCliError(f"error running nvme {subcommand}: {exc}") from exc
    if result.returncode != 0:
        raise NvmeCliError(f"error running nvme {subcommand}: exit status {result.returncode}")
    try:
        return parser(json.loads(result.stdout))
    except (ValueError, TypeError, AttributeError, KeyError) as exc:
        raise NvmeCliError(f"error parsing nvme {subcommand} JSON: {exc}") from exc


def collect_nvme_controller_data(device_path: str) -> NVMeIdController:
    """Run ``nvme id-ctrl`` on a device and parse its report."""
    return _run_json("id-ctrl", device_path, NVMeIdController.from_dict)


def collect_nvme_error_log(device_path: str) -> NVMeErrorLog:
    """Run ``nvme error-log`` on a device and parse its report."""
    return _run_json("error-log", device_path, NVMeErrorLog.from_dict)


def _status_code(status_field: int) -> int:
    return status_field & _STATUS_MASK


def enhance_nvme_data(
    smart_data: SmartCtlOutput,
    controller: NVMeIdController | None,
    errors: NVMeErrorLog | None,
) -> None:
    """Overlay nvme-cli identity and error counts onto smartctl output, in place."""
    if controller is not None:
        if controller.model_number:
            smart_data.model_name = controller.model_number.strip()
        if controller.serial_number:
            smart_data.serial_number = controller.serial_number.strip()
        if controller.firmware_revision:
            smart_data.firmware_version = controller.firmware_revision.strip()
        if controller.total_capacity > 0:
            smart_data.nvme_total_capacity = controller.total_capacity
        if controller.unallocated_capacity > 0:
            smart_data.nvme_unallocated_capacity = controller.unallocated_capacity
        if controller.vendor_id > 0:
            smart_data.vendor = f"VID:0x{controller.vendor_id:04x}"
        if controller.subsystem_nqn:
            smart_data.product = controller.subsystem_nqn
            log.debug("SubsystemNQN %r added for rebranding detection", controller.subsystem_nqn)
        if controller.ieee:
            smart_data.logical_unit_id = controller.ieee

    if errors is None or not errors.errors:
        return

    total_errors = media_errors = aborted_commands = 0
    for entry in errors.errors:
        if entry.error_count <= 0:
            continue
        total_errors += entry.error_count
        code = _status_code(entry.status_field)
        if code == _MEDIA_ERROR:
            media_errors += entry.error_count
        elif code == _ABORTED_COMMAND:
            aborted_commands += entry.error_count

    health = smart_data.nvme_smart_health_log
    if health is not None:
        health.media_errors = media_errors
        health.num_err_log_entries = len(errors.errors)

    log.debug(
        "NVMe error analysis complete: total=%d media=%d aborted=%d",
        total_errors,
        media_errors,
        aborted_commands,
    )


def _parse_oui(ieee: str) -> int | None:
    text = ieee.replace("0x", "")
    if not _HEX.fullmatch(text):
        return None
    value = int(text, 16)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def process_nvme_specific_attributes(
    attributes: MutableMapping[str, SmartAttribute],
    controller: NVMeIdController | None,
    errors: NVMeErrorLog | None,
) -> None:
    """Fold nvme-cli controller identity and error classification into ``attributes``."""

    def put(name: str, value: int, unit: str) -> None:
        update_attribute(attributes, name, value, value, UNSET, UNSET, unit)

    if controller is not None:
        if controller.subsystem_nqn:
            # Only the length is kept: attribute readings are integers.
            put("nvme_subsystem_nqn", len(controller.subsystem_nqn), "chars")
        if controller.ieee:
            oui = _parse_oui(controller.ieee)
            if oui is not None:
                put("nvme_ieee_oui", oui, "hex")
        if controller.vendor_id > 0:
            put("nvme_vendor_id", controller.vendor_id, "id")
        if controller.subsystem_vendor_id > 0:
            put("nvme_subsystem_vendor_id", controller.subsystem_vendor_id, "id")

    if errors is None:
        return

    put("nvme_error_log_entries", len(errors.errors), "count")

    fabric_warnings = sparse_errors = change_notifications = 0
    media_errors = aborted_commands = timeout_errors = 0

    for entry in errors.errors:
        count = entry.error_count
        if count <= 0:
            continue
        code = _status_code(entry.status_field)
        if code == _MEDIA_ERROR:
            media_errors += count
        elif code == _ABORTED_COMMAND:
            aborted_commands += count
        elif code == _COMMAND_TIMEOUT:
            timeout_errors += count
        if entry.transport_type > 0 and entry.transport_type_specific_info > 0:
            fabric_warnings += count
        if entry.lba > 0 and code in (_MEDIA_ERROR, _MEDIA_ERROR_ALT):
            sparse_errors += count
        if entry.vendor_specific > 0:
            change_notifications += count

    for name, value in (
        ("nvme_fabric_warnings", fabric_warnings),
        ("nvme_sparse_errors", sparse_errors),
        ("nvme_change_notifications", change_notifications),
        ("nvme_media_errors", media_errors),
        ("nvme_aborted_commands", aborted_commands),
        ("nvme_timeout_errors", timeout_errors),
    ):
        if value > 0:
            put(name, value, "count")

    log.debug(
        "NVMe error classification complete: fabric=%d sparse=%d change=%d",
        fabric_warnings,
        sparse_errors,
        change_notifications,
    )