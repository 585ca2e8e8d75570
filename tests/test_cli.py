"""Basic tests for the command line interface of peakram.

The tests invoke the commands through the CliRunner of click and check the exit codes and the
printed output.
"""
from __future__ import annotations

# Standard Imports
import json
import os

# Third-Party Imports
from click.testing import CliRunner
import pytest

# Peakram Imports
from peakram import cli
from peakram.profile import convert
from peakram.testing import asserts
import peakram


def test_version():
    """Test printing of the version"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["--version"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, f"peakram {peakram.__version__}" in result.output)


def test_run_expressions():
    """Test measuring the expressions with setup code"""
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        [
            "--no-color",
            "run",
            "-a",
            "tracemalloc",
            "-s",
            "import math",
            "[0] * 1000",
            "math.sqrt(4)",
        ],
    )
    asserts.predicate_from_cli(result, result.exit_code == 0)
    for column in convert.COLUMNS:
        asserts.predicate_from_cli(result, column in result.output)
    asserts.predicate_from_cli(result, "[0] * 1000" in result.output)
    asserts.predicate_from_cli(result, "math.sqrt(4)" in result.output)


def test_run_verbose():
    """Test that verbose run prints the progress and the summary"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["-v", "--no-color", "run", "list(range(10))"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "[1/1] `list(range(10))`" in result.output)
    asserts.predicate_from_cli(result, "Overall elapsed time" in result.output)
    asserts.predicate_from_cli(result, "Maximal peak memory" in result.output)


def test_run_table_format():
    """Test the formatting options of the table"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["--no-color", "run", "-f", "github", "-p", "1", "1 + 1"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "| Function_Call" in result.output)

    result = runner.invoke(cli.cli, ["run", "-f", "fancy-nonsense", "1 + 1"])
    asserts.predicate_from_cli(result, result.exit_code == 2)
    asserts.predicate_from_cli(result, "invalid table format" in result.output)

    result = runner.invoke(cli.cli, ["run", "-p", "-1", "1 + 1"])
    asserts.predicate_from_cli(result, result.exit_code == 2)


def test_run_abort_on_failure():
    """Test that the failing expression ends the measurement with error"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["--no-color", "run", "1 + 1", "1 / 0", "2 + 2"])
    asserts.predicate_from_cli(result, result.exit_code == 1)
    asserts.predicate_from_cli(result, "unit #2 '1 / 0'" in result.output)
    asserts.predicate_from_cli(result, "ZeroDivisionError" in result.output)
    asserts.predicate_from_cli(result, "Function_Call" not in result.output)


def test_run_continue_on_failure():
    """Test that with continue policy the failure is reported in the table"""
    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["--no-color", "run", "-e", "continue", "1 + 1", "1 / 0", "2 + 2"]
    )
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "Error" in result.output)
    asserts.predicate_from_cli(result, "ZeroDivisionError: division by zero" in result.output)
    asserts.predicate_from_cli(result, "NA" in result.output)


@pytest.mark.parametrize(
    "args,message",
    [
        (["1 +"], "invalid syntax"),
        (["-s", "import nonexistent_module_of_peakram", "1"], "setup failed"),
        (["-s", "import (", "1"], "invalid syntax"),
    ],
)
def test_run_invalid_units(args, message):
    """Test that invalid expressions and setup end with error before the measurement"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["--no-color", "run"] + args)
    asserts.predicate_from_cli(result, result.exit_code == 1)
    asserts.predicate_from_cli(result, message in result.output)


def test_run_without_expressions():
    """Test that at least one expression is required"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["run"])
    asserts.predicate_from_cli(result, result.exit_code == 2)


@pytest.mark.usefixtures("cleandir")
def test_run_outputs():
    """Test saving of the table and the profile into the files"""
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        [
            "--no-color",
            "run",
            "-o",
            "table.txt",
            "--save-profile",
            "profile.json",
            "list(range(1000))",
            "sum(range(1000))",
        ],
    )
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "Table saved to - table.txt" in result.output)
    asserts.predicate_from_cli(result, "Profile saved to - profile.json" in result.output)

    with open("table.txt", "r") as table_handle:
        assert "sum(range(1000))" in table_handle.read()
    with open("profile.json", "r") as profile_handle:
        profile = json.load(profile_handle)
    assert profile["collector_info"]["name"] == "tracemalloc"
    assert len(profile["resources"]) == 6
    assert [resource["uid"] for resource in profile["resources"]][::3] == [
        "list(range(1000))",
        "sum(range(1000))",
    ]


@pytest.mark.usefixtures("cleandir")
def test_config_cli():
    """Test getting and setting the configuration from command line"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["config", "--shared", "get", "format.table"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "format.table: simple" in result.output)

    result = runner.invoke(cli.cli, ["config", "--local", "set", "format.precision", "2"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    assert os.path.exists(".peakram.yml")

    result = runner.invoke(cli.cli, ["config", "get", "format.precision"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "format.precision: 2" in result.output)

    result = runner.invoke(cli.cli, ["--no-color", "run", "1.23456"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    asserts.predicate_from_cli(result, "1.23456" in result.output)


def test_config_cli_errors():
    """Test the invalid and missing keys"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["config", "get", "format..table"])
    asserts.predicate_from_cli(result, result.exit_code == 2)

    result = runner.invoke(cli.cli, ["--no-color", "config", "get", "format.missing"])
    asserts.predicate_from_cli(result, result.exit_code == 1)
    asserts.predicate_from_cli(result, "format.missing" in result.output)


@pytest.mark.usefixtures("cleandir")
def test_run_invalid_integer_options():
    """Test that malformed integer options in config end with error instead of traceback"""
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["config", "--local", "set", "format.precision", "abc"])
    asserts.predicate_from_cli(result, result.exit_code == 0)

    result = runner.invoke(cli.cli, ["--no-color", "run", "1 + 1"])
    asserts.predicate_from_cli(result, result.exit_code == 1)
    asserts.predicate_from_cli(result, "[ERROR]" in result.output)
    asserts.predicate_from_cli(result, "format.precision" in result.output)
    asserts.predicate_from_cli(result, not isinstance(result.exception, ValueError))

    result = runner.invoke(cli.cli, ["config", "--local", "set", "format.precision", "2"])
    asserts.predicate_from_cli(result, result.exit_code == 0)
    result = runner.invoke(cli.cli, ["config", "--local", "set", "measure.trace_frames", "0"])
    asserts.predicate_from_cli(result, result.exit_code == 0)

    result = runner.invoke(cli.cli, ["--no-color", "run", "-a", "tracemalloc", "1 + 1"])
    asserts.predicate_from_cli(result, result.exit_code == 1)
    asserts.predicate_from_cli(result, "measure.trace_frames" in result.output)
