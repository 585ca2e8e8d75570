"""Runtime, local and shared configuration of peakram.

The options are looked up in three configurations, first match wins:

  1. runtime: kept only in memory for one run of peakram, e.g. the options given in command line,
  2. local: ``.peakram.yml`` in the current working directory, overriding the options for one
     project,
  3. shared: ``shared.yml`` in the user's configuration directory, created with the defaults
     on the first use.

The stored configurations are YAML documents with nested sections; the options are addressed by
dot separated keys, e.g. ``measure.accounting``.
"""
from __future__ import annotations

# Standard Imports
from typing import Any, Iterator, Optional
import dataclasses
import os
import re
import sys

# Third-Party Imports
from ruamel.yaml import YAML

# Peakram Imports
from peakram.utils import decorators, exceptions, log as peakram_log, streams


LOCAL_CONFIG_FILE: str = ".peakram.yml"
SHARED_CONFIG_FILE: str = "shared.yml"
CONFIG_DIR_VARIABLE: str = "PEAKRAM_CONFIG_DIR"
DEFAULT_CONFIG: str = """
measure:
    accounting: tracemalloc
    on_failure: abort
    trace_frames: 1

format:
    table: simple
    precision: 4
"""
KEY_PATTERN = re.compile(r"^[a-zA-Z0-9_]+(\.[a-zA-Z0-9_]+)*$")


def is_valid_key(key: str) -> bool:
    """Checks that the key consists of names of sections (letters, digits or underscores)
    delimited by dots

    :param str key: checked key
    :returns: true if the key is well-formed
    """
    return KEY_PATTERN.match(key) is not None


@dataclasses.dataclass
class Config:
    """One configuration of the hierarchy

    The data are (possibly nested) sections, e.g.::

        {
            'measure': {'accounting': 'tracemalloc', 'on_failure': 'abort'},
            'format': {'table': 'simple', 'precision': 4}
        }

    Configurations with path are written back to the path after each modification.

    :ivar str type: type of the configuration (runtime, local or shared)
    :ivar str path: path of the stored configuration, empty for in-memory configurations
    :ivar dict data: sections of the configuration
    """

    __slots__ = ["type", "path", "data"]

    type: str
    path: str
    data: dict[str, Any]

    @decorators.validate_arguments(["key"], is_valid_key)
    def set(self, key: str, value: Any) -> None:
        """Sets the key to the value, creating the missing sections on the way

        :param str key: dot separated sections ending with the option
        :param object value: new value of the option
        """
        *sections, option = key.split(".")
        section = self.data
        for name in sections:
            section = section.setdefault(name, {})
        section[option] = value
        if self.path:
            write_config_to(self.path, self.data)

    @decorators.validate_arguments(["key"], is_valid_key)
    def get(self, key: str) -> Any:
        """
        :param str key: dot separated sections ending with the option
        :raises exceptions.MissingConfigSectionException: if some of the sections is missing
        :returns: value of the option
        """
        value: Any = self.data
        for name in key.split("."):
            if not isinstance(value, dict) or name not in value:
                raise exceptions.MissingConfigSectionException(name)
            value = value[name]
        return value


def write_config_to(path: str, config_data: dict[str, Any]) -> None:
    """
    :param str path: target file
    :param dict config_data: stored sections
    """
    with open(path, "w") as yaml_file:
        YAML().dump(config_data, yaml_file)


def lookup_shared_config_dir() -> str:
    """Finds the directory of the shared configuration

    The directory given by ``PEAKRAM_CONFIG_DIR`` takes precedence. Otherwise, the per-user
    configuration directory of the platform is used, i.e. ``AppData\\Local\\peakram`` on Windows
    and ``~/.config/peakram`` elsewhere.

    :returns: directory of the shared configuration
    """
    environment_dir = os.environ.get(CONFIG_DIR_VARIABLE)
    if environment_dir:
        return environment_dir

    home_directory = os.path.expanduser("~")
    if sys.platform == "win32":
        return os.path.join(home_directory, "AppData", "Local", "peakram")
    return os.path.join(home_directory, ".config", "peakram")


@decorators.singleton
def shared() -> Config:
    """Loads the shared configuration, creating it with the defaults if it does not exist yet

    When the configuration cannot be created (e.g. the directory is read-only), the defaults are
    used only in memory.

    :returns: shared configuration
    """
    shared_config_file = os.path.join(lookup_shared_config_dir(), SHARED_CONFIG_FILE)
    try:
        if not os.path.exists(shared_config_file):
            os.makedirs(os.path.dirname(shared_config_file), exist_ok=True)
            write_config_to(shared_config_file, streams.safely_load_yaml_from_stream(DEFAULT_CONFIG))
        return Config("shared", shared_config_file, read_config_from(shared_config_file))
    except OSError as os_error:
        peakram_log.warn(f"cannot initialize shared config, using defaults: {os_error}")
        return Config("shared", "", streams.safely_load_yaml_from_stream(DEFAULT_CONFIG))


def local(path: Optional[str] = None) -> Config:
    """Loads the local configuration from the directory

    The local configuration is not cached, since the working directory may change, and is never
    created implicitly: the file is written only after the first modification.

    :param str path: directory with the local configuration, current working directory by default
    :returns: local configuration
    """
    local_config_file = os.path.join(path or os.getcwd(), LOCAL_CONFIG_FILE)
    if os.path.exists(local_config_file):
        return Config("local", local_config_file, read_config_from(local_config_file))
    return Config("local", local_config_file, {})


@decorators.singleton
def runtime() -> Config:
    """
    :returns: in-memory configuration of the current run, e.g. with the command line options
    """
    return Config("runtime", "", {})


def read_config_from(path: str) -> dict[str, Any]:
    """
    :param str path: file with the stored configuration
    :returns: sections of the configuration
    """
    return streams.safely_load_yaml_from_file(path)


def get_hierarchy() -> Iterator[Config]:
    """
    :returns: configurations in the order in which the options are looked up
    """
    yield runtime()
    yield local()
    yield shared()


def lookup_key_recursively(key: str, default: Optional[Any] = None) -> Any:
    """Looks up the option in runtime, local and shared configuration, in this order

    :param str key: dot separated sections ending with the option
    :param object default: value used when the option is in none of the configurations
    :raises exceptions.MissingConfigSectionException: if the key is nowhere and there is no default
    :returns: value of the option
    """
    for config_instance in get_hierarchy():
        try:
            return config_instance.get(key)
        except exceptions.MissingConfigSectionException:
            continue
    if default is not None:
        return default
    raise exceptions.MissingConfigSectionException(key)


def lookup_int_recursively(key: str, default: int, minimum: int = 0) -> int:
    """Looks up the integer option in the hierarchy of configurations

    :param str key: dot separated sections ending with the option
    :param int default: value used when the option is in none of the configurations
    :param int minimum: the smallest allowed value of the option
    :raises exceptions.InvalidParameterException: if the option is not integer or is too small
    :returns: value of the option converted to integer
    """
    value = lookup_key_recursively(key, default)
    try:
        converted = int(value)
    except (TypeError, ValueError):
        converted = None
    if converted is None or converted < minimum or isinstance(value, (bool, float)):
        raise exceptions.InvalidParameterException(
            key, value, f"(expected integer greater or equal to {minimum})"
        )
    return converted
