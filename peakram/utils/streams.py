"""Loading and storing of the YAML configurations and JSON profiles"""
from __future__ import annotations

# Standard Imports
from typing import Any, TextIO
import json
import os

# Third-Party Imports
from ruamel.yaml import YAML

# Peakram Imports
from peakram.utils import log


def store_json(profile: dict[str, Any], file_path: str) -> None:
    """Stores the profile of the measured units as indented JSON

    :param dict profile: profile created from the measured results
    :param str file_path: target file of the profile
    """
    with open(file_path, "w") as profile_handle:
        json.dump(profile, profile_handle, indent=2)
        profile_handle.write("\n")


def safely_load_yaml_from_file(yaml_file: str) -> dict[str, Any]:
    """Loads the YAML file, warning about files that are missing

    :param str yaml_file: path to the loaded file
    :return: loaded mapping or empty dictionary
    """
    if not os.path.exists(yaml_file):
        log.warn(f"yaml source file '{yaml_file}' does not exist")
        return {}

    with open(yaml_file, "r") as yaml_handle:
        return safely_load_yaml_from_stream(yaml_handle)


def safely_load_yaml_from_stream(yaml_stream: TextIO | str) -> dict[str, Any]:
    """Loads the YAML document, warning about malformed documents instead of raising

    :param object yaml_stream: opened stream or string with the YAML document
    :return: loaded mapping or empty dictionary, if the document is empty or malformed
    """
    try:
        return YAML().load(yaml_stream) or {}
    except Exception as exc:
        log.warn(f"malformed yaml stream: {exc}")
        return {}
