"""Accounting of the resident memory of the whole process through the Linux proc filesystem.

The current usage corresponds to the ``VmRSS`` and the peak to the ``VmHWM`` (the high water mark)
lines of ``/proc/self/status``. Writing ``5`` to ``/proc/self/clear_refs`` resets the high water
mark to the current resident set size.

Note that the resident memory is noisier than tracemalloc: the allocators may keep the freed
memory for future use, so the released objects do not always decrease the current usage.
"""
from __future__ import annotations

# Standard Imports
import gc

# Third-Party Imports

# Peakram Imports
from peakram.accounting import AccountingService
from peakram.utils.common import common_kit
from peakram.utils.exceptions import AccountingServiceException, MalformedSnapshotException
from peakram.utils.structs import MemorySnapshot


STATUS_PATH: str = "/proc/self/status"
CLEAR_REFS_PATH: str = "/proc/self/clear_refs"
CURRENT_LABEL: str = "VmRSS"
PEAK_LABEL: str = "VmHWM"
RESET_PEAK_COMMAND: str = "5"


def lookup_reading(status: str, label: str) -> float:
    """Looks up the reading of the given label in the contents of the status file

    The lines are of form ``VmRSS:     12345 kB``.

    :param str status: contents of the status file
    :param str label: label of the reading (without the colon)
    :raises MalformedSnapshotException: when the label is missing or its value is malformed
    :return: reading in MiB
    """
    for line in status.splitlines():
        key, _, value = line.partition(":")
        if key.strip() != label:
            continue
        amount, *unit = value.split() or [""]
        if unit and unit[0].lower() != "kb":
            break
        try:
            return common_kit.kib_to_mib(float(amount))
        except ValueError:
            break
    raise MalformedSnapshotException(ResidentAccounting.name, label)


def parse_status(status: str) -> MemorySnapshot:
    """Parses the contents of the status file into snapshot

    :param str status: contents of the status file
    :return: snapshot of the resident memory in MiB
    """
    return MemorySnapshot(lookup_reading(status, CURRENT_LABEL), lookup_reading(status, PEAK_LABEL))


class ResidentAccounting(AccountingService):
    """Accounting service backed by the resident set size reported by the kernel

    :ivar str status_path: path to the status file of the process
    :ivar str clear_refs_path: path to the file resetting the high water mark
    """

    __slots__ = ["status_path", "clear_refs_path"]
    name = "resident"

    def __init__(self, status_path: str = STATUS_PATH, clear_refs_path: str = CLEAR_REFS_PATH):
        self.status_path = status_path
        self.clear_refs_path = clear_refs_path

    def force_collect(self, reset_peak: bool) -> MemorySnapshot:
        """Collects the garbage, optionally resets the high water mark and reads the status

        :param bool reset_peak: if set to true, the high water mark is reset to the current usage
        :raises AccountingServiceException: when the proc files cannot be accessed
        :return: snapshot of resident memory in MiB
        """
        gc.collect()
        try:
            if reset_peak:
                with open(self.clear_refs_path, "w") as clear_refs_handle:
                    clear_refs_handle.write(RESET_PEAK_COMMAND)
            with open(self.status_path, "r") as status_handle:
                status = status_handle.read()
        except OSError as os_error:
            raise AccountingServiceException(self.name, str(os_error)) from os_error
        return parse_status(status)
