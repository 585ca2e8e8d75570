"""Commands is a core of the peakram implementation containing the basic commands.

Commands contains the implementation of the command line commands, i.e. measuring of the
expressions and manipulation with the configuration. The commands can be used without the
click interface as well.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Iterable, Optional

# Third-Party Imports
import pandas

# Peakram Imports
from peakram import measure
from peakram.logic import config as peakram_config
from peakram.profile import convert
from peakram.utils import log as peakram_log, streams
from peakram.utils.exceptions import InvalidParameterException, InvalidUnitException
from peakram.view import table


CONFIG_STORE_TYPES: tuple[str, ...] = ("runtime", "local", "shared", "recursive")


def get_config_store(store_type: str) -> peakram_config.Config:
    """Returns the configuration corresponding to the type of the store

    :param str store_type: type of the store (runtime, local or shared)
    :raises InvalidParameterException: when the type of the store is unknown
    :return: config of the given type
    """
    if store_type == "runtime":
        return peakram_config.runtime()
    elif store_type == "local":
        return peakram_config.local()
    elif store_type in ("shared", "recursive"):
        return peakram_config.shared()
    raise InvalidParameterException(
        "store_type", store_type, f"(choose from {', '.join(CONFIG_STORE_TYPES)})"
    )


def config_get(store_type: str, key: str) -> None:
    """Gets from the store_type configuration the value of the given key.

    :param str store_type: type of the store lookup (runtime, local, shared or recursive)
    :param str key: list of section delimited by dot (.)
    """
    # Note, this is bare output, since, it "might" be used in scripts or CI or anything parsed
    if store_type == "recursive":
        value = peakram_config.lookup_key_recursively(key)
    else:
        value = get_config_store(store_type).get(key)
    peakram_log.write(f"{key}: {value}")


def config_set(store_type: str, key: str, value: Any) -> None:
    """Sets in the store_type configuration the key to the given value.

    For the recursive store type, the value is set in the shared configuration.

    :param str store_type: type of the store lookup (runtime, local, shared or recursive)
    :param str key: list of section delimited by dot (.)
    :param object value: arbitrary value that will be set in the configuration
    """
    peakram_log.major_info("Setting new key in Config")
    get_config_store(store_type).set(key, value)
    peakram_log.minor_info(f"Value '{value}' set for key '{key}'")


def prepare_namespace(setup: Iterable[str]) -> dict[str, Any]:
    """Executes the setup code in fresh namespace, in which the expressions are later measured

    :param iterable setup: list of python statements (e.g. imports)
    :raises InvalidUnitException: when some of the setup statements is not valid or fails
    :return: namespace populated by the setup
    """
    namespace: dict[str, Any] = {"__name__": "__peakram__"}
    for statement in setup:
        try:
            code = compile(statement, "<peakram-setup>", "exec")
        except SyntaxError as syntax_error:
            raise InvalidUnitException(statement, f"invalid syntax: {syntax_error.msg}") from None
        peakram_log.msg_to_stdout(f"Running setup: {statement}", peakram_log.VERBOSE_DEBUG)
        try:
            exec(code, namespace)
        except Exception as exc:
            raise InvalidUnitException(
                statement, f"setup failed with {type(exc).__name__}: {exc}"
            ) from exc
    return namespace


def run_expressions(
    expressions: list[str],
    setup: Iterable[str] = (),
    accounting: Optional[str] = None,
    on_failure: Optional[str] = None,
    tablefmt: str = "simple",
    precision: Optional[int] = None,
    output_file: Optional[str] = None,
    profile_file: Optional[str] = None,
) -> pandas.DataFrame:
    """Measures the expressions and outputs the table of results

    :param list expressions: measured python expressions
    :param iterable setup: statements executed before the measurement, e.g. the imports
    :param str accounting: name of the accounting service, looked up in config if not set
    :param str on_failure: name of the failure policy, looked up in config if not set
    :param str tablefmt: format of the outputted table
    :param int precision: number of decimal places in the table, looked up in config if not set
    :param str output_file: file where the table is stored, if not set the table is printed
    :param str profile_file: if set, the results are stored as JSON profile to this file
    :return: data frame with measured results
    """
    if precision is None:
        precision = peakram_config.lookup_int_recursively("format.precision", 4)
    setup = list(setup)
    namespace = prepare_namespace(setup)
    service = measure.resolve_accounting(accounting)
    results = measure.measure_results(expressions, namespace, None, service, on_failure)
    dataframe = convert.results_to_dataframe(results)

    table.output_table_to(table.create_table_from(dataframe, tablefmt, precision), output_file)
    if peakram_log.is_verbose_enough(peakram_log.VERBOSE_INFO):
        table.print_summary(dataframe)

    if profile_file:
        streams.store_json(
            convert.results_to_profile(results, service.name, {"setup": setup}),
            profile_file,
        )
        peakram_log.minor_status("Profile saved to", status=peakram_log.path_style(profile_file))
    return dataframe
