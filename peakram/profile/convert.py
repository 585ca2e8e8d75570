"""``peakram.profile.convert`` is a module which specifies interface for conversion of the measured
results to other formats.

.. _pandas: https://pandas.pydata.org/

The results are primarily converted to the `pandas`_ data frame, with one row for each measured
unit of work (indexed from 1) and the following columns:

    1. ``Function_Call``: label of the measured unit,
    2. ``Elapsed_Time_sec``: elapsed wall-clock time in seconds,
    3. ``Total_RAM_Used_MiB``: memory retained after the evaluation of the unit,
    4. ``Peak_RAM_Used_MiB``: memory transiently used during the evaluation of the unit.

Moreover, the results can be converted to the list of flat resources (similar to the profiles of
performance collectors) and to the whole profile, which can be stored as JSON.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Iterable
import time

# Third-Party Imports
import numpy
import pandas

# Peakram Imports
from peakram.utils.structs import MeasurementResult


LABEL_COLUMN: str = "Function_Call"
ELAPSED_COLUMN: str = "Elapsed_Time_sec"
TOTAL_COLUMN: str = "Total_RAM_Used_MiB"
PEAK_COLUMN: str = "Peak_RAM_Used_MiB"
ERROR_COLUMN: str = "Error"
COLUMNS: list[str] = [LABEL_COLUMN, ELAPSED_COLUMN, TOTAL_COLUMN, PEAK_COLUMN]
UNITS: dict[str, str] = {"time": "s", "memory": "MiB"}


def results_to_dataframe(results: Iterable[MeasurementResult]) -> pandas.DataFrame:
    """Converts the measured results to the `pandas`_ data frame.

    E.g. the measurement of four units could result into the following table::

                            Function_Call  Elapsed_Time_sec  Total_RAM_Used_MiB  Peak_RAM_Used_MiB
        1  lambda: np.arange(N, dtype=...)          0.0191           38.146973          38.147125
        2         np.arange(N, dtype=...)          0.0187           38.146973          38.146973
        3  np.arange(N, ...) + np.arange(...)      0.0514           38.146973          76.293945
        4        np.arange(N, ...) * 2.0           0.0533           76.293945         114.440918

    The ``Error`` column is added only if some of the units failed; the measurements of the failed
    units are NaN.

    :param iterable results: measured results in the order of the units
    :return: data frame with one row per result, indexed from 1
    """
    results = list(results)
    values: dict[str, list[Any]] = {
        LABEL_COLUMN: [result.label for result in results],
        ELAPSED_COLUMN: [result.elapsed_seconds for result in results],
        TOTAL_COLUMN: [result.total_ram_used_mib for result in results],
        PEAK_COLUMN: [result.peak_ram_used_mib for result in results],
    }
    columns = list(COLUMNS)
    if any(result.is_failed for result in results):
        values[ERROR_COLUMN] = [result.error or "" for result in results]
        columns.append(ERROR_COLUMN)

    dataframe = pandas.DataFrame(values, columns=columns)
    dataframe = dataframe.astype({ELAPSED_COLUMN: float, TOTAL_COLUMN: float, PEAK_COLUMN: float})
    dataframe.index = pandas.RangeIndex(start=1, stop=len(results) + 1)
    return dataframe


def results_to_resources(results: Iterable[MeasurementResult]) -> list[dict[str, Any]]:
    """Converts the measured results to the list of flat resources.

    Each unit is represented by three resources: its time and its total and peak memory, e.g.::

        {
            "amount": 38.14,
            "type": "memory",
            "subtype": "total",
            "uid": "np.arange(N, dtype=np.int32)",
            "order": 2
        }

    The failed units are skipped, since they have no measurements.

    :param iterable results: measured results in the order of the units
    :return: list of resources
    """
    resources = []
    for order, result in enumerate(results, start=1):
        if result.is_failed:
            continue
        for resource_type, subtype, amount in (
            ("time", "elapsed", result.elapsed_seconds),
            ("memory", "total", result.total_ram_used_mib),
            ("memory", "peak", result.peak_ram_used_mib),
        ):
            resources.append(
                {
                    "amount": float(amount),
                    "type": resource_type,
                    "subtype": subtype,
                    "uid": result.label,
                    "order": order,
                }
            )
    return resources


def results_to_profile(
    results: Iterable[MeasurementResult], accounting: str, params: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Converts the measured results to the profile, which can be stored as JSON

    :param iterable results: measured results in the order of the units
    :param str accounting: name of the accounting service used for the measurement
    :param dict params: additional parameters of the measurement
    :return: dictionary with header, info about the accounting and resources
    """
    results = list(results)
    return {
        "header": {
            "type": "mixed",
            "units": dict(UNITS),
            "timestamp": time.time(),
        },
        "collector_info": {"name": accounting, "params": params or {}},
        "failures": [
            {"uid": result.label, "order": order, "error": result.error}
            for order, result in enumerate(results, start=1)
            if result.is_failed
        ],
        "resources": results_to_resources(results),
    }


def summarize(dataframe: pandas.DataFrame) -> dict[str, float]:
    """Computes the summary of measured table, ignoring the failed (NaN) rows

    :param pandas.DataFrame dataframe: data frame created by :func:`results_to_dataframe`
    :return: overall elapsed time, overall retained memory and the maximal peak
    """
    return {
        ELAPSED_COLUMN: float(numpy.nansum(dataframe[ELAPSED_COLUMN].to_numpy())),
        TOTAL_COLUMN: float(numpy.nansum(dataframe[TOTAL_COLUMN].to_numpy())),
        PEAK_COLUMN: (
            float(numpy.nanmax(dataframe[PEAK_COLUMN].to_numpy()))
            if dataframe[PEAK_COLUMN].notna().any()
            else numpy.nan
        ),
    }
