"""
pytest configuration

Shared fixtures for the mock weather service tests
"""
import sys
import pytest
from pathlib import Path
from unittest.mock import patch

# project root on the path so the root-level scripts import
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from weather_mock.main import app


@pytest.fixture
def client():
    """TestClient with the latency injection switched off"""
    with patch("weather_mock.main.pick_delay_ms", return_value=0):
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def force_status():
    """Pins the next status draw(s) to a given code"""
    patchers = []

    def _force(code):
        patcher = patch("weather_mock.main.pick_status_code", return_value=code)
        patcher.start()
        patchers.append(patcher)

    yield _force
    for patcher in patchers:
        patcher.stop()


@pytest.fixture
def anyio_backend():
    """The async tests use asyncio primitives directly"""
    return "asyncio"
