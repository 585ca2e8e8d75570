"""Group of CLI commands used for manipulation with config"""
from __future__ import annotations

# Standard Imports
from typing import Any

# Third-Party Imports
import click

# Peakram Imports
from peakram.logic import commands
from peakram.utils import log as peakram_log
from peakram.utils.common import cli_kit
from peakram.utils.exceptions import MissingConfigSectionException


@click.group()
@click.option(
    "--local",
    "-l",
    "store_type",
    flag_value="local",
    help="Sets the local config, i.e. ``.peakram.yml`` in current directory, as the source config.",
)
@click.option(
    "--shared",
    "-h",
    "store_type",
    flag_value="shared",
    help="Sets the shared config, i.e. ``shared.yml``, as the source config",
)
@click.option(
    "--nearest",
    "-n",
    "store_type",
    flag_value="recursive",
    default=True,
    help=(
        "Sets the nearest suitable config as the source config. For ``get`` the key is looked"
        " up in local and then in shared config, ``set`` stores the key in shared config."
    ),
)
@click.pass_context
def config(ctx: click.Context, **kwargs: Any) -> None:
    """Manages the stored local and shared configuration.

    Peakram supports two external configurations:

        1. ``.peakram.yml``: the local configuration stored in the current
           directory, overriding the shared keys for the project.

        2. ``shared.yml``: the configuration shared by all runs of peakram,
           stored in ``~/.config/peakram`` (or in ``$PEAKRAM_CONFIG_DIR``).

    The syntax of the ``<key>`` consists of section separated by dots, e.g.
    ``measure.accounting`` specifies ``accounting`` key in ``measure``
    section. The following keys are supported:

    \b
      * ``measure.accounting``: accounting service (tracemalloc or resident)
      * ``measure.on_failure``: handling of failed units (abort or continue)
      * ``measure.trace_frames``: number of frames traced by tracemalloc
      * ``format.table``: format of the printed table (see tabulate)
      * ``format.precision``: number of decimal places in the printed table

    E.g. using the following one can retrieve the used accounting service:

    .. code-block:: bash

        $ peakram config get measure.accounting
        measure.accounting: tracemalloc
    """
    ctx.obj = kwargs


@config.command("get")
@click.argument(
    "key",
    required=True,
    metavar="<key>",
    type=click.STRING,
    callback=cli_kit.config_key_validation_callback,
)
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Looks up the given ``<key>`` within the configuration hierarchy and returns
    the stored value.

    .. code-block:: bash

        $ peakram config --shared get format.table
        format.table: simple
    """
    try:
        commands.config_get(ctx.obj["store_type"], key)
    except MissingConfigSectionException as mcs_err:
        peakram_log.error(f"error while getting key '{key}': {mcs_err}")


@config.command("set")
@click.argument(
    "key",
    required=True,
    metavar="<key>",
    type=click.STRING,
    callback=cli_kit.config_key_validation_callback,
)
@click.argument("value", required=True, metavar="<value>")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: Any) -> None:
    """Sets the value of the ``<key>`` to the given ``<value>`` in the target
    configuration file.

    .. code-block:: bash

        $ peakram config --local set measure.on_failure continue
    """
    commands.config_set(ctx.obj["store_type"], key, value)
