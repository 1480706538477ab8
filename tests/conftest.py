"""
Pytest configuration and global fixtures.

This module provides shared fixtures used across all tests.
"""

import os
from collections.abc import Generator

import pytest

from barkbridge.utils import config as settings_module
from barkbridge.utils.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Create settings pointing at the fake ledger service address."""
    return Settings(
        bark_address="http://bark.test:3000",
        bark_timeout_seconds=5,
        log_level="DEBUG",
        json_logs=False,
        dev_mode=True,
    )


@pytest.fixture(autouse=True)
def reset_env() -> Generator[None, None, None]:
    """Reset environment variables and cached settings after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
    settings_module._settings = None


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
