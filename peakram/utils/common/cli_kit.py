"""Set of helper functions for working with command line.

Contains functions for click api, for processing parameters from command line, validating keys,
and returning default values.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Optional

# Third-Party Imports
import click
import tabulate

# Peakram Imports
from peakram.logic import config
from peakram.utils import log
import peakram


def print_version(ctx: click.Context, __: click.Option, value: bool) -> None:
    """Prints the version of peakram and ends the command line"""
    if value:
        log.write(f"peakram {peakram.__version__}")
        ctx.exit(0)


def config_key_validation_callback(_: click.Context, param: click.Option, value: str) -> str:
    """Rejects the configuration keys, which are not names of sections delimited by dots

    :param click.Context _: context of the command line
    :param click.Option param: the key argument
    :param str value: given key
    :returns: the valid key
    """
    if not config.is_valid_key(str(value)):
        raise click.BadParameter(
            f"'{value}' is not a valid key; keys are names of sections delimited by dots,"
            " e.g. measure.accounting",
            param=param,
        )
    return value


def set_runtime_option_from(key: str) -> Any:
    """Creates callback, which sets the value of the option into the runtime configuration

    The runtime config has the highest priority, so the options given in command line override
    those from local and shared configuration.

    :param str key: key of the option in the configuration
    :return: click callback
    """

    def callback(_: click.Context, __: click.Option, value: Optional[Any]) -> Optional[Any]:
        """Stores the value in the runtime config, unless it was not set"""
        if value is not None:
            config.runtime().set(key, value)
        return value

    return callback


def process_table_format(_: click.Context, param: click.Option, value: Optional[str]) -> str:
    """Processes the format of the table, looking it up in configuration if it was not given

    :param click.Context _: called context of the command line
    :param click.Option param: called option (format of the table)
    :param str value: format given in command line
    :return: valid format of the table
    """
    tablefmt = value or str(config.lookup_key_recursively("format.table", "simple"))
    if tablefmt not in tabulate.tabulate_formats:
        raise click.BadParameter(
            f"invalid table format '{tablefmt}' (choose from {', '.join(tabulate.tabulate_formats)})",
            param=param,
        )
    return tablefmt
