"""Printing of the progress, warnings and errors of peakram

All the output goes through this module, so the verbosity and the colours are controlled at one
place. The measured values are always printed outside of the measured window of the units.
"""
from __future__ import annotations

# Standard Imports
from typing import Optional
import sys
import traceback

# Third-Party Imports
import termcolor

# Peakram Imports
from peakram.utils.common.common_kit import AttrChoiceType, ColorChoiceType


VERBOSITY: int = 0
COLOR_OUTPUT: bool = True

# Levels of verbosity
VERBOSE_DEBUG: int = 2
VERBOSE_INFO: int = 1
VERBOSE_RELEASE: int = 0


def is_verbose_enough(verbosity: int) -> bool:
    """
    :param int verbosity: required level of the verbosity
    :return: true if the messages of the given level should be printed
    """
    return VERBOSITY >= verbosity


def msg_to_stdout(message: str, msg_verbosity: int) -> None:
    """Prints the message only if the current verbosity is at least @p msg_verbosity

    :param str message: printed message
    :param int msg_verbosity: verbosity level of the message
    """
    if is_verbose_enough(msg_verbosity):
        write(message)


def print_current_stack(raised_exception: Optional[BaseException] = None) -> None:
    """Prints the frames of peakram leading to the error (or to the current point)

    Frames of the other modules (e.g. click or the measured code) and of this module are left out.

    :param Exception raised_exception: exception whose traceback is printed
    """
    trace = (
        traceback.extract_tb(raised_exception.__traceback__)
        if raised_exception
        else traceback.extract_stack()
    )
    own_frames = [
        frame
        for frame in trace
        if "peakram" in frame.filename
        and frame.name != "<module>"
        and not frame.filename.endswith("log.py")
    ]
    print(in_color("".join(traceback.format_list(own_frames)), "red"), file=sys.stderr)


def write(msg: str, end: str = "\n") -> None:
    """Prints the message without any decoration

    :param str msg: printed message
    :param str end: ending of the printed message
    """
    print(msg, end=end)


def error(
    msg: str,
    recoverable: bool = False,
    raised_exception: Optional[BaseException] = None,
) -> None:
    """Prints the error to standard error output and ends peakram unless it is recoverable

    In the debug verbosity, the stack leading to the error is printed as well.

    :param str msg: error message
    :param bool recoverable: if set to true, the program continues after printing the message
    :param Exception raised_exception: exception that caused the error
    """
    print(f"{tag('error', 'red')} {in_color(msg, 'red')}", file=sys.stderr)
    if is_verbose_enough(VERBOSE_DEBUG):
        print_current_stack(raised_exception)

    if not recoverable:
        sys.exit(1)


def warn(msg: str) -> None:
    """
    :param str msg: warning printed to the standard output
    """
    write(f"{tag('warning', 'yellow')} {msg}")


def major_info(msg: str, no_title: bool = False) -> None:
    """Prints the header of the major step in bold brackets, surrounded by blank lines

    :param str msg: name of the step
    :param bool no_title: if set to true, the message is printed as is, without title casing
    """
    stripped_msg = msg.strip() if no_title else msg.strip().title()
    write("")
    write("[" + in_color(stripped_msg, "blue", ["bold"]) + "]")
    write("")


def minor_status(msg: str, status: str = "") -> None:
    """Prints one line of the form ` - Action - status`

    Only the first letter of the message is capitalized, since the message may contain measured
    expressions, which are case-sensitive.

    :param str msg: the action
    :param str status: the result of the action
    """
    msg = msg.strip()
    write(f" - {msg[:1].upper() + msg[1:]} - {status}")


def minor_info(msg: str) -> None:
    """Prints one line of the form ` - Message.`

    :param str msg: printed message, it is capitalized and ended by a full stop
    """
    msg = msg.strip().capitalize()
    if msg and msg[-1] not in ".!;":
        msg += "."
    write(f" - {msg}")


def unit_succeeded(
    progress: str, label: str, elapsed: float, total_mib: float, peak_mib: float
) -> None:
    """Prints the measured costs of single unit of work

    :param str progress: position of the unit in the batch, e.g. ``[1/3]``
    :param str label: label of the unit
    :param float elapsed: elapsed time in seconds
    :param float total_mib: retained memory in MiB
    :param float peak_mib: peak memory in MiB
    """
    minor_status(
        f"{progress} {cmd_style(label)}",
        status=f"{elapsed:0.4f}s, total {format_mib(total_mib)}, peak {format_mib(peak_mib)}",
    )


def unit_failed(progress: str, label: str) -> None:
    """
    :param str progress: position of the unit in the batch, e.g. ``[2/3]``
    :param str label: label of the failed unit
    """
    minor_status(f"{progress} {cmd_style(label)}", status=in_color("failed", "red", ["bold"]))


def tag(tag_str: str, colour: ColorChoiceType) -> str:
    """
    :param str tag_str: text of the tag, e.g. ``error``
    :param str colour: colour of the tag
    :return: upper-cased tag in bold brackets, e.g. ``[ERROR]``
    """
    return "[" + in_color(tag_str.upper(), colour, ["bold"]) + "]"


def path_style(path_str: str) -> str:
    """
    :param str path_str: path to the file
    :return: path in bold yellow
    """
    return in_color(path_str, "yellow", ["bold"])


def cmd_style(cmd_str: str) -> str:
    """
    :param str cmd_str: measured expression or command
    :return: expression in backticks and grey colour
    """
    return in_color(f"`{cmd_str}`", "light_grey")


def in_color(
    output: str, color: ColorChoiceType = "white", attribute_style: Optional[AttrChoiceType] = None
) -> str:
    """Colours the output, if the colours are enabled

    :param str output: the coloured text
    :param str color: the colour
    :param list attribute_style: additional styles, e.g. bold

    :return str: coloured output or the output itself when the colours are disabled
    """
    if COLOR_OUTPUT:
        return termcolor.colored(output, color, attrs=attribute_style, force_color=True)
    return output


def format_mib(amount: float) -> str:
    """Formats the amount of MiB for the status messages, keeping the sign of the amount

    :param float amount: amount of memory in MiB (possibly negative or NaN)
    :return: formatted amount
    """
    return f"{amount:+.2f} MiB"
