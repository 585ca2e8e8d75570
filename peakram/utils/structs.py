"""List of helper and globally used structures"""
from __future__ import annotations

# Standard Imports
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
import functools
import inspect
import math

# Third-Party Imports

# Peakram Imports


class FailurePolicy(Enum):
    """Policies of handling the unit of work that raised during its evaluation

    ABORT propagates the failure and ends the whole batch without any results. CONTINUE records
    the failure in the row of the unit and continues with the following units.
    """

    ABORT = "abort"
    CONTINUE = "continue"

    @classmethod
    def supported(cls) -> list[str]:
        """
        :return: list of names of the supported policies
        """
        return [policy.value for policy in cls]


@dataclass(frozen=True)
class UnitOfWork:
    """Deferred computation, whose memory footprint and running time is measured

    :ivar str label: human-readable description of the unit (e.g. the source of expression)
    :ivar callable thunk: zero-argument function which evaluates the unit
    """

    __slots__ = ["label", "thunk"]

    label: str
    thunk: Callable[[], Any]


class Thunk:
    """Explicit marker of deferred zero-argument computation

    When the unit of work evaluates to the Thunk, the runner calls it and measures the call
    instead of the evaluation of the unit.
    """

    __slots__ = ["func"]

    def __init__(self, func: Callable[[], Any]) -> None:
        """
        :param callable func: wrapped zero-argument function
        """
        self.func = func

    def __call__(self) -> Any:
        return self.func()

    def __repr__(self) -> str:
        return f"Thunk({self.func!r})"


def is_thunk(value: Any) -> bool:
    """Checks whether the evaluated value is a deferred computation that should be invoked

    We treat as thunks only explicit :class:`Thunk` markers and function-like objects, i.e.
    functions, lambdas, methods, builtins and partial applications. Classes and other callable
    objects are values.

    :param object value: value produced by the unit of work
    :return: true if the value should be invoked and the invocation measured
    """
    return (
        isinstance(value, (Thunk, functools.partial))
        or inspect.isfunction(value)
        or inspect.ismethod(value)
        or inspect.isbuiltin(value)
    )


@dataclass(frozen=True)
class MemorySnapshot:
    """Reading of the accounting service at one point in time

    :ivar float current: memory (in MiB) attributed to live objects
    :ivar float peak: maximal memory (in MiB) attributed since the last reset of peak tracker
    """

    __slots__ = ["current", "peak"]

    current: float
    peak: float


@dataclass(frozen=True)
class MeasurementResult:
    """Measured costs of one unit of work

    :ivar str label: label of the measured unit
    :ivar float elapsed_seconds: wall-clock time of the evaluation
    :ivar float total_ram_used_mib: memory retained after the evaluation (may be negative)
    :ivar float peak_ram_used_mib: memory transiently allocated during the evaluation
    :ivar str error: description of the failure if the unit failed, otherwise None
    """

    __slots__ = ["label", "elapsed_seconds", "total_ram_used_mib", "peak_ram_used_mib", "error"]

    label: str
    elapsed_seconds: float
    total_ram_used_mib: float
    peak_ram_used_mib: float
    error: Optional[str]

    @classmethod
    def failed(cls, label: str, error: str) -> MeasurementResult:
        """Creates the record of the unit that failed during its evaluation

        :param str label: label of the failed unit
        :param str error: description of the failure
        :return: result with NaN measurements
        """
        return cls(label, math.nan, math.nan, math.nan, error)

    @property
    def is_failed(self) -> bool:
        """
        :return: true if the unit failed during its evaluation
        """
        return self.error is not None
