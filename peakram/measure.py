"""Measures the time, retained memory and peak memory of arbitrary python expressions or functions.

When working with big data, the memory conservation is critically important. However, it is not
always enough to just monitor the sizes of the created objects: some expressions need much more
memory during their evaluation than the size of their result, e.g. because they create large
temporary copies. The :func:`peak_ram` makes it easy to monitor both the retained and the peak
memory, so one can quickly identify and eliminate memory hungry code::

    >>> import numpy as np
    >>> from peakram.measure import peak_ram
    >>> N = 10_000_000
    >>> peak_ram(
    ...     lambda: np.arange(N, dtype=np.int32),
    ...     "np.arange(N, dtype=np.int32)",
    ...     "np.arange(N, dtype=np.int32) + np.arange(N, dtype=np.int32)",
    ...     "np.arange(N, dtype=np.int32) * 2.0",
    ... )

The expressions given as strings are evaluated in the scope of the caller. The callables are
invoked without arguments and only their invocation is measured.

Note that the measurement relies on process-wide state of the accounting service, hence the
function must never be called concurrently from more threads.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Mapping, Optional
import inspect

# Third-Party Imports
import pandas

# Peakram Imports
from peakram.accounting import AccountingService, get_accounting_service
from peakram.logic import config, runner, units as peakram_units
from peakram.profile import convert
from peakram.utils.exceptions import InvalidParameterException
from peakram.utils.structs import FailurePolicy, MeasurementResult


def resolve_failure_policy(on_failure: Optional[str | FailurePolicy] = None) -> FailurePolicy:
    """Resolves the failure policy either from the given value or from the configuration

    :param str on_failure: name of the policy or the policy itself, if None, then the
        ``measure.on_failure`` key is looked up in the configuration
    :raises InvalidParameterException: when the policy is not supported
    :return: resolved failure policy
    """
    if isinstance(on_failure, FailurePolicy):
        return on_failure
    policy_name = on_failure or config.lookup_key_recursively(
        "measure.on_failure", FailurePolicy.ABORT.value
    )
    try:
        return FailurePolicy(policy_name)
    except ValueError:
        raise InvalidParameterException(
            "on_failure", policy_name, f"(choose from {', '.join(FailurePolicy.supported())})"
        ) from None


def resolve_accounting(accounting: Optional[str | AccountingService] = None) -> AccountingService:
    """Resolves the accounting service either from the given value or from the configuration

    :param str accounting: name of the service or the service itself, if None, then the
        ``measure.accounting`` key is looked up in the configuration
    :return: accounting service
    """
    if isinstance(accounting, AccountingService):
        return accounting
    name = accounting or config.lookup_key_recursively("measure.accounting", "tracemalloc")
    params = {}
    if name == "tracemalloc":
        params["frames"] = config.lookup_int_recursively("measure.trace_frames", 1, minimum=1)
    return get_accounting_service(name, **params)


def measure_results(
    units: list[Any],
    global_ns: dict[str, Any],
    local_ns: Optional[Mapping[str, Any]] = None,
    accounting: Optional[str | AccountingService] = None,
    on_failure: Optional[str | FailurePolicy] = None,
) -> list[MeasurementResult]:
    """Measures the units, with expressions evaluated in the given namespaces

    :param list units: expressions (strings), zero-argument callables or units of work
    :param dict global_ns: global namespace for evaluation of expressions
    :param dict local_ns: local namespace for evaluation of expressions
    :param object accounting: name of the accounting service or the service itself
    :param object on_failure: name of the failure policy or the policy itself
    :return: list of measured results in the order of units
    """
    captured = peakram_units.capture(units, global_ns, local_ns)
    policy = resolve_failure_policy(on_failure)
    with resolve_accounting(accounting) as service:
        return runner.run_units(captured, service, policy)


def peak_ram(
    *units: Any,
    accounting: Optional[str | AccountingService] = None,
    on_failure: Optional[str | FailurePolicy] = None,
    namespace: Optional[dict[str, Any]] = None,
) -> pandas.DataFrame:
    """Measures the elapsed time, retained memory and peak memory of the units of work

    :param list units: python expressions (strings), zero-argument callables (e.g. lambdas) or
        units of work; the expressions are evaluated in the scope of the caller
    :param object accounting: name of the accounting service or the service itself (e.g. fake
        service for tests); by default it is looked up in configuration
    :param object on_failure: policy for the units that raise, either ``abort`` (the default,
        the first failure is propagated as UnitEvaluationException and nothing is returned) or
        ``continue`` (the failed unit is reported in the ``Error`` column)
    :param dict namespace: namespace where the expressions are evaluated instead of the caller's
    :return: data frame with columns ``Function_Call``, ``Elapsed_Time_sec``,
        ``Total_RAM_Used_MiB`` and ``Peak_RAM_Used_MiB`` and one row per unit, indexed from 1
    """
    if namespace is not None:
        global_ns, local_ns = namespace, None
    else:
        caller = inspect.currentframe().f_back  # type: ignore
        global_ns, local_ns = caller.f_globals, caller.f_locals
        del caller
    return convert.results_to_dataframe(
        measure_results(list(units), global_ns, local_ns, accounting, on_failure)
    )
