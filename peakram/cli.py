"""Peakram can be run from the command line (if correctly installed) using the command interface.

The Command Line Interface is implemented using the Click_ library, which allows both effective
definition of new commands and finer parsing of the command line arguments. The interface
consists of the following commands:

    1. ``run``: measures the time, retained memory and peak memory of the given python
       expressions and prints them as a table.

    2. ``config``: gets and sets the keys of the local and shared configuration.

.. _Click: https://click.palletsprojects.com/
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Optional
import faulthandler

# Third-Party Imports
import click

# Peakram Imports
from peakram.accounting import supported_services
from peakram.cli_groups import config_cli
from peakram.logic import commands
from peakram.utils import log as peakram_log
from peakram.utils.common import cli_kit
from peakram.utils.exceptions import (
    AccountingServiceException,
    InvalidParameterException,
    InvalidUnitException,
    MalformedSnapshotException,
    UnitEvaluationException,
)
from peakram.utils.structs import FailurePolicy


DEV_MODE: bool = False


@click.group()
@click.option(
    "--dev-mode",
    "-d",
    default=False,
    is_flag=True,
    help="Propagates all the exceptions from the CLI and enables the faulthandler.",
)
@click.option("--no-color", "-nc", default=False, is_flag=True, help="Disables the colored output.")
@click.option(
    "--verbose",
    "-v",
    count=True,
    default=0,
    help=(
        "Increases the verbosity of the standard output. Verbosity is incremental, and each level"
        " increases the extent of output."
    ),
)
@click.option(
    "--version",
    help="Prints the current version of peakram.",
    is_eager=True,
    is_flag=True,
    default=False,
    callback=cli_kit.print_version,
)
def cli(dev_mode: bool = False, no_color: bool = False, verbose: int = 0, **_: Any) -> None:
    """Peakram measures the time and memory costs of python expressions.

    For each expression, peakram reports the elapsed time, the memory retained after the
    evaluation and the peak memory used during the evaluation. E.g. the following compares
    the memory needed for the creation of one and two temporary arrays::

        peakram run -s "import numpy as np" "np.ones(10**7)" "np.ones(10**7) + np.ones(10**7)"
    """
    global DEV_MODE
    DEV_MODE = dev_mode
    if dev_mode:
        faulthandler.enable()
    peakram_log.COLOR_OUTPUT = not no_color

    # set the verbosity level of the log
    if peakram_log.VERBOSITY < verbose:
        peakram_log.VERBOSITY = verbose


@cli.command()
@click.argument("expressions", nargs=-1, required=True, metavar="<expression>...")
@click.option(
    "--setup",
    "-s",
    multiple=True,
    metavar="<code>",
    help=(
        "Python statement executed before the measurement in the namespace of the measured"
        " expressions, e.g. ``import numpy as np``. Can be repeated."
    ),
)
@click.option(
    "--accounting",
    "-a",
    type=click.Choice(supported_services()),
    default=None,
    callback=cli_kit.set_runtime_option_from("measure.accounting"),
    help="Accounting service used for the measurement of memory (see :ckey:`measure.accounting`).",
)
@click.option(
    "--on-failure",
    "-e",
    type=click.Choice(FailurePolicy.supported()),
    default=None,
    callback=cli_kit.set_runtime_option_from("measure.on_failure"),
    help=(
        "Either ``abort`` the whole measurement when any expression fails (default), or"
        " ``continue`` and report the failure in the table."
    ),
)
@click.option(
    "--format",
    "-f",
    "tablefmt",
    default=None,
    callback=cli_kit.process_table_format,
    metavar="<format>",
    help="Format of the outputted table (see tabulate formats, :ckey:`format.table`).",
)
@click.option(
    "--precision",
    "-p",
    type=click.IntRange(min=0),
    default=None,
    help="Number of decimal places of the measured values (see :ckey:`format.precision`).",
)
@click.option(
    "--output-file",
    "-o",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Target output file, where the table will be saved instead of printed.",
)
@click.option(
    "--save-profile",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Stores the measured results as JSON profile into the given file.",
)
def run(
    expressions: tuple[str, ...],
    setup: tuple[str, ...],
    accounting: Optional[str],
    on_failure: Optional[str],
    tablefmt: str,
    precision: Optional[int],
    output_file: Optional[str],
    save_profile: Optional[str],
) -> None:
    """Measures the time, retained and peak memory of the python <expression>s.

    The expressions are measured one by one in the given order, each one
    isolated from the others by the collection of the garbage and the reset
    of the peak memory. Expressions evaluating to functions (e.g. ``lambda:
    [0] * 10**7``) are invoked and only the invocation is measured.

    \b
      * **Time**: elapsed wall-clock time in seconds
      * **Total RAM**: memory retained after the evaluation in MiB (can be negative)
      * **Peak RAM**: memory transiently used during the evaluation in MiB

    The example output of the run is as follows::

        \b
            Function_Call                    Elapsed_Time_sec    Total_RAM_Used_MiB    Peak_RAM_Used_MiB
        --  -----------------------------  ------------------  --------------------  -------------------
         1  np.arange(10**7, dtype='i4')              0.0180               38.1470              38.1470
         2  np.arange(10**7, dtype='i4')*2.0          0.0410               76.2940             114.4410
    """
    try:
        commands.run_expressions(
            list(expressions),
            setup,
            accounting,
            on_failure,
            tablefmt,
            precision,
            output_file,
            save_profile,
        )
    except (
        UnitEvaluationException,
        InvalidUnitException,
        AccountingServiceException,
        MalformedSnapshotException,
        InvalidParameterException,
    ) as exception:
        if DEV_MODE:
            raise
        peakram_log.error(
            f"could not measure the expressions: {exception}", raised_exception=exception
        )


cli.add_command(config_cli.config)


def launch_cli() -> None:
    """Runs the CLI"""
    cli()


if __name__ == "__main__":
    launch_cli()
