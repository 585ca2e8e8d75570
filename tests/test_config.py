"""Basic tests for operating with the peakram configuration through 'peakram config'.

Tests adding and getting keys from local, shared and runtime configurations.
"""
from __future__ import annotations

# Standard Imports
import os

# Third-Party Imports
import pytest

# Peakram Imports
from peakram.logic import commands, config
from peakram.utils.exceptions import InvalidParameterException, MissingConfigSectionException


def test_shared_defaults(shared_config_dir):
    """Test that the shared config is initialized with defaults"""
    shared = config.shared()
    assert shared.path == os.path.join(shared_config_dir, config.SHARED_CONFIG_FILE)
    assert os.path.exists(shared.path)
    assert shared.get("measure.accounting") == "tracemalloc"
    assert shared.get("measure.on_failure") == "abort"
    assert shared.get("format.precision") == 4
    assert config.shared() is shared


def test_set_and_get():
    """Test setting and getting the keys, including the nested sections"""
    runtime = config.runtime()
    runtime.set("format.table", "grid")
    runtime.set("deeply.nested.key", 1)

    assert runtime.get("format.table") == "grid"
    assert runtime.get("deeply.nested.key") == 1
    assert runtime.get("deeply") == {"nested": {"key": 1}}

    with pytest.raises(MissingConfigSectionException):
        runtime.get("format.missing")
    with pytest.raises(MissingConfigSectionException):
        runtime.get("format.table.deeper")


def test_integer_lookup():
    """Test that integer options are converted and validated"""
    runtime = config.runtime()
    assert config.lookup_int_recursively("format.precision", 4) == 4
    runtime.set("format.precision", "2")
    assert config.lookup_int_recursively("format.precision", 4) == 2

    for invalid in ["abc", "1.5", -1, 2.5, True]:
        runtime.set("format.precision", invalid)
        with pytest.raises(InvalidParameterException) as exc:
            config.lookup_int_recursively("format.precision", 4)
        assert "format.precision" in str(exc.value)

    runtime.set("measure.trace_frames", 0)
    with pytest.raises(InvalidParameterException):
        config.lookup_int_recursively("measure.trace_frames", 1, minimum=1)


@pytest.mark.parametrize("key", ["", "format..table", "format table", ".format"])
def test_invalid_keys(key):
    """Test that keys in invalid format are rejected"""
    assert not config.is_valid_key(key)
    with pytest.raises(InvalidParameterException):
        config.runtime().set(key, 1)
    with pytest.raises(InvalidParameterException):
        config.runtime().get(key)


@pytest.mark.usefixtures("cleandir")
def test_local_config():
    """Test that local config is created only after modification and is persisted"""
    local = config.local()
    assert local.data == {}
    assert not os.path.exists(config.LOCAL_CONFIG_FILE)

    local.set("measure.on_failure", "continue")
    assert os.path.exists(config.LOCAL_CONFIG_FILE)
    assert config.local().get("measure.on_failure") == "continue"


@pytest.mark.usefixtures("cleandir")
def test_hierarchy():
    """Test that runtime overrides local and local overrides shared"""
    assert config.lookup_key_recursively("format.table") == "simple"

    config.local().set("format.table", "github")
    assert config.lookup_key_recursively("format.table") == "github"

    config.runtime().set("format.table", "plain")
    assert config.lookup_key_recursively("format.table") == "plain"

    assert config.lookup_key_recursively("format.missing", "fallback") == "fallback"
    with pytest.raises(MissingConfigSectionException):
        config.lookup_key_recursively("format.missing")


def test_unwritable_shared_config(tmp_path, monkeypatch, capsys):
    """Test that the defaults are used when shared config cannot be created"""
    blocking_file = tmp_path / "blocking"
    blocking_file.write_text("")
    monkeypatch.setenv("PEAKRAM_CONFIG_DIR", str(blocking_file / "peakram"))

    shared = config.shared()
    assert shared.path == ""
    assert shared.get("measure.accounting") == "tracemalloc"
    out, _ = capsys.readouterr()
    assert "cannot initialize shared config" in out


@pytest.mark.usefixtures("cleandir")
def test_config_commands(capsys):
    """Test getting and setting the keys through the commands"""
    commands.config_get("shared", "format.table")
    out, _ = capsys.readouterr()
    assert out == "format.table: simple\n"

    commands.config_set("local", "format.precision", 2)
    commands.config_get("recursive", "format.precision")
    out, _ = capsys.readouterr()
    assert out.endswith("format.precision: 2\n")

    with pytest.raises(MissingConfigSectionException):
        commands.config_get("local", "format.table")
    with pytest.raises(InvalidParameterException):
        commands.get_config_store("global")
