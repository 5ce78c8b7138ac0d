"""Shared fixtures: every test starts from default configuration."""

import os

import pytest

from config_logging import reset_config


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Clear DEEPDIFF_* overrides and the cached global config."""
    for key in list(os.environ):
        if key.startswith('DEEPDIFF_'):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()
