"""Pytest configuration and shared fixtures for tenexlog tests.

This module provides an auto-use fixture that keeps TENEXLOG_* environment
variables from the developer's shell out of the tests.
"""

import os
import shutil
import tempfile

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Auto-use fixture that clears TENEXLOG_* variables for each test.

    Tests that need a setting use monkeypatch.setenv explicitly, so results
    never depend on the environment pytest was started from.
    """
    for key in list(os.environ):
        if key.startswith('TENEXLOG_'):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    tmp_dir = tempfile.mkdtemp(prefix='tenexlog_test_')
    yield tmp_dir
    shutil.rmtree(tmp_dir, ignore_errors=True)


@pytest.fixture
def write_log(temp_dir):
    """Factory fixture: write lines (or raw bytes) to a file and return its path."""

    def _write(lines: list[str] | bytes, name: str = 'access.tsv') -> str:
        path = os.path.join(temp_dir, name)
        if isinstance(lines, bytes):
            data = lines
        else:
            data = ''.join(line + '\n' for line in lines).encode('utf-8')
        with open(path, 'wb') as f:
            f.write(data)
        return path

    return _write
