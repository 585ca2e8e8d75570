"""Collection of helper exception classes"""
from __future__ import annotations

# Standard Imports
from typing import Any

# Third-Party Imports

# Peakram Imports


class InvalidParameterException(Exception):
    """Raises when the given parameter is invalid"""

    __slots__ = ["parameter", "value", "choices_msg"]

    def __init__(self, parameter: str, parameter_value: Any, choices_msg: str = "") -> None:
        """
        :param str parameter: name of the parameter that is invalid
        :param object parameter_value: value of the parameter
        :param str choices_msg: string with choices for the valid parameters
        """
        super().__init__("")
        self.parameter = parameter
        self.value = str(parameter_value)
        self.choices_msg = " " + choices_msg

    def __str__(self) -> str:
        return (
            f"Invalid value '{self.value}' for the parameter '{self.parameter}'" + self.choices_msg
        )


class MissingConfigSectionException(Exception):
    """Raised when the section in config is missing"""

    __slots__ = ["section_key"]

    def __init__(self, section_key: str) -> None:
        super().__init__("")
        self.section_key = section_key

    def __str__(self) -> str:
        return f"key '{self.section_key}' is not specified in configuration."


class InvalidUnitException(Exception):
    """Raised when the given argument cannot be turned into a unit of work"""

    __slots__ = ["unit", "reason"]

    def __init__(self, unit: Any, reason: str) -> None:
        """
        :param object unit: the offending argument
        :param str reason: why the argument cannot be measured
        """
        super().__init__("")
        self.unit = unit
        self.reason = reason

    def __str__(self) -> str:
        return f"cannot measure '{self.unit!r}': {self.reason}"


class UnitEvaluationException(Exception):
    """Raised when the measured unit of work raises during its evaluation.

    The batch of measurement is aborted and no partial results are returned.
    """

    __slots__ = ["label", "position", "cause"]

    def __init__(self, label: str, position: int, cause: BaseException) -> None:
        """
        :param str label: label of the unit that failed
        :param int position: 1-based position of the unit in the measured batch
        :param Exception cause: the exception raised by the unit
        """
        super().__init__("")
        self.label = label
        self.position = position
        self.cause = cause

    def __str__(self) -> str:
        return (
            f"evaluation of unit #{self.position} '{self.label}' failed: "
            f"{type(self.cause).__name__}: {self.cause}"
        )


class AccountingServiceException(Exception):
    """Raised when the memory accounting service cannot be used in the current environment"""

    __slots__ = ["service", "reason"]

    def __init__(self, service: str, reason: str) -> None:
        """
        :param str service: name of the accounting service
        :param str reason: the reason why the service is unusable
        """
        super().__init__("")
        self.service = service
        self.reason = reason

    def __str__(self) -> str:
        return f"accounting service '{self.service}' is unusable: {self.reason}"


class MalformedSnapshotException(Exception):
    """Raised when the snapshot of the accounting service lacks some of the expected readings"""

    __slots__ = ["service", "field"]

    def __init__(self, service: str, field: str) -> None:
        """
        :param str service: name of the accounting service (or type of the snapshot)
        :param str field: the missing or malformed field
        """
        super().__init__("")
        self.service = service
        self.field = field

    def __str__(self) -> str:
        return f"malformed snapshot of '{self.service}': missing or invalid reading '{self.field}'"
