"""Shared fixtures for the testing of functionality of peakram measurements and commands."""
from __future__ import annotations

# Standard Imports
import os
import shutil
import tempfile

# Third-Party Imports
import pytest

# Peakram Imports
from peakram.testing.accounting import FakeAccounting
from peakram.utils import decorators, log


@pytest.fixture(scope="function")
def cleandir():
    """Runs the test in the clean new dir, which is purged afterwards"""
    previous_dir = os.getcwd()
    temp_path = tempfile.mkdtemp()
    os.chdir(temp_path)
    yield temp_path
    os.chdir(previous_dir)
    shutil.rmtree(temp_path)


@pytest.fixture(scope="function")
def fake_accounting():
    """Returns fresh deterministic accounting service with zero baseline"""
    yield FakeAccounting()


@pytest.fixture(autouse=True)
def shared_config_dir(tmp_path, monkeypatch):
    """Redirects the shared configuration to the temporary directory"""
    config_dir = tmp_path / "shared-config"
    monkeypatch.setenv("PEAKRAM_CONFIG_DIR", str(config_dir))
    yield str(config_dir)


@pytest.fixture(autouse=True)
def setup():
    """Resets the singletons and the state of the log before each test"""
    decorators.reset_singletons()
    log.VERBOSITY = log.VERBOSE_RELEASE
    log.COLOR_OUTPUT = True
    yield
    decorators.reset_singletons()
