"""Accounting services provide the readings of the memory used by the running process.

Each service is a process-wide, non-reentrant resource: it exposes a forced, synchronous collection
of garbage together with a snapshot of current and peak memory, where the peak can be reset to
the current level. The measurements of two concurrently running units of work would observe each
other's allocations, hence it is the obligation of the caller to never run two measurements (or
other code forcing the collections and resetting the peaks) at the same time.

Currently, we support the following services:

  1. ``tracemalloc``: measures the memory allocated by python allocators (and by the extension
     modules that report to it, such as numpy).
  2. ``resident``: measures the resident set size of the whole process as reported by Linux kernel.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Optional
import abc
import types

# Third-Party Imports

# Peakram Imports
from peakram.utils.exceptions import InvalidParameterException
from peakram.utils.structs import MemorySnapshot


class AccountingService(abc.ABC):
    """Abstract accounting service of the memory

    The service is used as context manager: entering prepares the service for the measurement
    (e.g. starts the tracing) and exiting releases what was prepared.

    :ivar str name: name of the service used in configuration and command line
    """

    name: str = "abstract"

    def __enter__(self) -> AccountingService:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        pass

    @abc.abstractmethod
    def force_collect(self, reset_peak: bool) -> MemorySnapshot:
        """Synchronously runs the full collection and returns snapshot of current and peak memory

        :param bool reset_peak: if set to true, the peak of all subsequent snapshots is measured
            relative to this call (i.e. it is rebased to the current memory)
        :return: snapshot of current and peak memory in MiB
        """


def _registered_services() -> dict[str, type[AccountingService]]:
    """
    :return: mapping of names of the services to their classes
    """
    # Imported here to break the cycle between the registry and the services
    from peakram.accounting import resident, tracemalloc_service

    return {
        tracemalloc_service.TracemallocAccounting.name: tracemalloc_service.TracemallocAccounting,
        resident.ResidentAccounting.name: resident.ResidentAccounting,
    }


def supported_services() -> list[str]:
    """
    :return: list of names of supported accounting services
    """
    return list(_registered_services().keys())


def get_accounting_service(name: str, **params: Any) -> AccountingService:
    """Creates the accounting service registered under the given name

    :param str name: name of the service
    :param dict params: additional parameters of the service
    :raises InvalidParameterException: if there is no such service
    :return: constructed service
    """
    registry = _registered_services()
    if name not in registry:
        raise InvalidParameterException(
            "accounting", name, f"(choose from {', '.join(registry.keys())})"
        )
    return registry[name](**params)
