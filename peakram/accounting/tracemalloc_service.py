"""Accounting of the memory through the tracemalloc module.

Tracemalloc traces the blocks allocated by the python memory allocators (and by the extension
modules that report their allocations, e.g. numpy arrays). It keeps both the size of currently
traced blocks and the peak size since the start of tracing or the last reset of the peak.
"""
from __future__ import annotations

# Standard Imports
from typing import Optional
import gc
import tracemalloc
import types

# Third-Party Imports

# Peakram Imports
from peakram.accounting import AccountingService
from peakram.utils import log
from peakram.utils.common import common_kit
from peakram.utils.exceptions import AccountingServiceException
from peakram.utils.structs import MemorySnapshot


class TracemallocAccounting(AccountingService):
    """Accounting service backed by the tracemalloc

    If the tracing is not running when entering the service, it is started and stopped again at
    exit. Tracing started by someone else is left intact.

    :ivar int frames: number of frames stored in the traceback of the traced blocks
    :ivar bool started_tracing: whether the service started the tracing by itself
    """

    __slots__ = ["frames", "started_tracing"]
    name = "tracemalloc"

    def __init__(self, frames: int = 1) -> None:
        """
        :param int frames: number of frames stored for each traced block; more frames give nothing
            to the measurement and only increase the overhead
        """
        self.frames = frames
        self.started_tracing = False

    def __enter__(self) -> TracemallocAccounting:
        if not tracemalloc.is_tracing():
            log.msg_to_stdout(f"Starting tracemalloc with {self.frames} frame(s)", log.VERBOSE_DEBUG)
            tracemalloc.start(self.frames)
            self.started_tracing = True
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        if self.started_tracing:
            tracemalloc.stop()
            self.started_tracing = False

    def force_collect(self, reset_peak: bool) -> MemorySnapshot:
        """Collects the garbage and reads the traced memory

        :param bool reset_peak: if set to true, the peak is rebased to the current traced memory
        :raises AccountingServiceException: when the tracemalloc is not tracing
        :return: snapshot of traced memory in MiB
        """
        if not tracemalloc.is_tracing():
            raise AccountingServiceException(
                self.name, "tracing is not running (use the service as a context manager)"
            )
        gc.collect()
        if reset_peak:
            tracemalloc.reset_peak()
        current, peak = tracemalloc.get_traced_memory()
        return MemorySnapshot(common_kit.bytes_to_mib(current), common_kit.bytes_to_mib(peak))
