"""Pytest configuration and fixtures for modbatch tests."""

from __future__ import annotations

import pytest

from modbatch.composer.endpoints import endpoint_path


@pytest.fixture
def device_path() -> str:
    """Endpoint path of a test device (unit 1)."""
    return endpoint_path("tcp://192.168.1.100:502", 1)
