"""Set of helper constants and helper functions for peakram"""
from __future__ import annotations

# Standard Imports
from typing import Iterable, Literal
import re

# Third-Party Imports

# Peakram Imports

# Types
ColorChoiceType = Literal["red", "yellow", "blue", "light_grey", "white"]
AttrChoiceType = Iterable[Literal["bold", "underline"]]

# Memory units
BYTES_IN_KIB: int = 1024
BYTES_IN_MIB: int = 1024 * 1024

WHITESPACE_RUN = re.compile(r"\s+")


def bytes_to_mib(amount: float) -> float:
    """
    :param float amount: number of bytes
    :return: number of MiB
    """
    return amount / BYTES_IN_MIB


def kib_to_mib(amount: float) -> float:
    """Converts the kibibytes (which the kernel reports as 'kB') to mebibytes

    :param float amount: number of KiB
    :return: number of MiB
    """
    return amount / BYTES_IN_KIB


def str_to_plural(count: int, noun: str) -> str:
    """
    :param int count: number of the things
    :param str noun: name of one thing
    :return: count followed by the noun in singular or (naive) plural form, e.g. ``3 units``
    """
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_counter_number(count: int, max_number: int) -> str:
    """Right-justifies the counter to the width of the maximal number, e.g. `` 3`` for 3 of 12

    :param int count: the current number of the counter
    :param int max_number: the maximal number of counter
    :return: justified counter
    """
    return str(count).rjust(len(str(max_number)))


def collapse_whitespace(text: str) -> str:
    """Collapses every run of whitespace (including newlines) into single space

    :param str text: collapsed text
    :return: text on single line without the leading and trailing whitespace
    """
    return WHITESPACE_RUN.sub(" ", text).strip()

