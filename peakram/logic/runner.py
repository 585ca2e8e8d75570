"""Runner measures the time and memory costs of the units of work.

Each unit is measured by the following protocol:

  1. the garbage is collected and the peak tracker of the accounting service is reset to the
     current memory, giving the baseline snapshot,
  2. the unit is evaluated and its wall-clock time is measured,
  3. if the unit evaluated to a deferred computation (e.g. lambda), the computation is invoked
     and its time replaces the time of the evaluation,
  4. the reference to the evaluated value is dropped, so only the output of the unit is kept,
  5. the garbage is collected again (without resetting the peak), giving the final snapshot,
  6. the retained and peak memory are computed as differences of the two snapshots.

The differences are reported as they are: the total memory can be negative (if the collection
freed more than the unit retained) and the peak is never clamped.

Units are measured strictly one after another in the given order. The accounting service keeps
a process-wide state, so nothing else may force collections or reset its peak during the run.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Iterable
import time

# Third-Party Imports

# Peakram Imports
from peakram.accounting import AccountingService
from peakram.utils import log
from peakram.utils.common import common_kit
from peakram.utils.exceptions import MalformedSnapshotException, UnitEvaluationException
from peakram.utils.structs import (
    FailurePolicy,
    MeasurementResult,
    MemorySnapshot,
    UnitOfWork,
    is_thunk,
)


def read_snapshot(snapshot: Any) -> MemorySnapshot:
    """Reads the current and peak readings of the snapshot returned by accounting service

    :param object snapshot: object with `current` and `peak` readings
    :raises MalformedSnapshotException: when any of the readings is missing or is not a number
    :return: validated snapshot
    """
    readings = []
    for field in ("current", "peak"):
        reading = getattr(snapshot, field, None)
        if isinstance(reading, bool) or not isinstance(reading, (int, float)):
            raise MalformedSnapshotException(type(snapshot).__name__, field)
        readings.append(float(reading))
    return MemorySnapshot(*readings)


def measure_unit(
    unit: UnitOfWork, accounting: AccountingService, position: int = 1
) -> MeasurementResult:
    """Measures the elapsed time, retained memory and peak memory of single unit of work

    :param UnitOfWork unit: measured unit of work
    :param AccountingService accounting: service providing the snapshots of the memory
    :param int position: 1-based position of the unit in the measured batch
    :raises UnitEvaluationException: when the unit (or the computation it evaluated to) raises
    :return: measured costs of the unit
    """
    start = read_snapshot(accounting.force_collect(reset_peak=True))

    try:
        before = time.perf_counter()
        result = unit.thunk()
        elapsed = time.perf_counter() - before

        if is_thunk(result):
            before = time.perf_counter()
            output = result()
            elapsed = time.perf_counter() - before
        else:
            output = result
        del result
    except Exception as exc:
        raise UnitEvaluationException(unit.label, position, exc) from exc

    end = read_snapshot(accounting.force_collect(reset_peak=False))
    del output

    return MeasurementResult(
        unit.label,
        elapsed,
        end.current - start.current,
        end.peak - start.peak,
        None,
    )


def run_units(
    units: Iterable[UnitOfWork],
    accounting: AccountingService,
    on_failure: FailurePolicy = FailurePolicy.ABORT,
) -> list[MeasurementResult]:
    """Measures the units of work one by one in the given order

    Exactly one result is produced for each unit and the results keep the order of the units.
    Under the ABORT policy, the first failing unit ends the whole run and no results are returned.
    Under the CONTINUE policy, the failing unit is recorded with NaN measurements and the error.
    Failures of the accounting service always end the run.

    :param iterable units: ordered units of work
    :param AccountingService accounting: service providing the snapshots of the memory
    :param FailurePolicy on_failure: how to handle the units that raise during the evaluation
    :raises UnitEvaluationException: when some unit fails under ABORT policy
    :return: list of measured results in the order of units
    """
    units = list(units)
    results: list[MeasurementResult] = []
    verbose = log.is_verbose_enough(log.VERBOSE_INFO)
    if verbose:
        log.major_info(f"Measuring {common_kit.str_to_plural(len(units), 'unit')}", no_title=True)

    for position, unit in enumerate(units, start=1):
        progress = f"[{common_kit.format_counter_number(position, len(units))}/{len(units)}]"
        try:
            result = measure_unit(unit, accounting, position)
        except UnitEvaluationException as failure:
            if verbose:
                log.unit_failed(progress, unit.label)
            if on_failure == FailurePolicy.ABORT:
                raise
            log.warn(str(failure))
            result = MeasurementResult.failed(
                unit.label, f"{type(failure.cause).__name__}: {failure.cause}"
            )
        else:
            if verbose:
                log.unit_succeeded(
                    progress,
                    unit.label,
                    result.elapsed_seconds,
                    result.total_ram_used_mib,
                    result.peak_ram_used_mib,
                )
        results.append(result)

    return results
