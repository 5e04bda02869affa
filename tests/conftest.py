"""Shared fixtures."""

from __future__ import annotations

import pytest

from tunnelgate.core.config import clear_config


@pytest.fixture(autouse=True)
def _fresh_config():
    """Don't let cached settings leak between tests."""
    clear_config()
    yield
    clear_config()
