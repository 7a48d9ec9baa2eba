"""Shared fixtures."""

import pytest

from schemaflow.config import configure


@pytest.fixture(autouse=True)
def default_settings():
    """Every test starts and ends with default settings."""
    configure()
    yield
    configure()
