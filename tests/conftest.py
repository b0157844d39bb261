# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Shared pytest fixtures."""

import pytest
from click.testing import CliRunner

from wire_evolve import ConversionRegistry
from helpers.chains import CALLS


@pytest.fixture(autouse=True)
def reset_calls():
    """Reset the conversion call counters of the sample chains."""
    CALLS.clear()
    yield
    CALLS.clear()


@pytest.fixture
def registry():
    """Fresh conversion registry for chains declared inside a test."""
    return ConversionRegistry()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """
    Run the test from an empty temporary directory.

    Keeps config discovery from picking up files of the surrounding project.

    Returns:
        Path of the directory
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path
