"""Table interpretation of the measured results"""
from __future__ import annotations

# Standard Imports
from typing import Optional

# Third-Party Imports
import pandas
import tabulate

# Peakram Imports
from peakram.profile import convert
from peakram.utils import log


def create_table_from(
    dataframe: pandas.DataFrame, tablefmt: str = "simple", precision: int = 4
) -> str:
    """Using the tabulate package, transforms the measured results into table.

    The first column of the table is the 1-based position of the unit, followed by the columns of
    the data frame.

    :param pandas.DataFrame dataframe: data frame with the measured results
    :param str tablefmt: format of the table (see tabulate.tabulate_formats)
    :param int precision: number of decimal places of the measured values
    :return: tabular representation of the results in string
    """
    headers = [""] + list(dataframe.columns)
    # tabulate replaces only None by the missing value, not NaN
    values = dataframe.astype(object).where(dataframe.notna(), None)
    rows = [[index] + list(row) for index, row in zip(values.index, values.values.tolist())]
    return tabulate.tabulate(
        rows,
        headers=headers,
        tablefmt=tablefmt,
        floatfmt=f".{precision}f",
        missingval="NA",
        # labels are never reformatted as numbers
        disable_numparse=[1],
    )


def output_table_to(table: str, target_file: Optional[str] = None) -> None:
    """Outputs the table either to stdout or file

    :param str table: outputted table
    :param str target_file: name of the output file, if not set, the table is printed
    """
    if target_file:
        with open(target_file, "w") as table_handle:
            table_handle.write(table + "\n")
        log.minor_status("Table saved to", status=log.path_style(target_file))
    else:
        print(table)


def print_summary(dataframe: pandas.DataFrame) -> None:
    """Prints the overall time, retained memory and maximal peak of the measured units

    :param pandas.DataFrame dataframe: data frame with the measured results
    """
    summary = convert.summarize(dataframe)
    log.minor_status("Overall elapsed time", status=f"{summary[convert.ELAPSED_COLUMN]:0.4f}s")
    log.minor_status(
        "Overall retained memory", status=log.format_mib(summary[convert.TOTAL_COLUMN])
    )
    log.minor_status("Maximal peak memory", status=log.format_mib(summary[convert.PEAK_COLUMN]))
