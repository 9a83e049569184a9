"""
pytest fixtures for scenario-scoped mock state.

Load with ``pytest_plugins = ["restmock.testing.fixtures"]`` in a conftest.
State is reset at the start of each test, never at its end, so a failing
scenario leaves its records in place for inspection.
"""

import pytest

import restmock
from restmock.client import MockConnection
from restmock.config import MockConfig
from restmock.service import MockService


@pytest.fixture
def mock_service():
    """The process-wide default service, reset for this scenario.

    Definitions made at import or session level survive the reset.
    """
    service = restmock.get_service()
    service.reset()
    yield service


@pytest.fixture
def isolated_mock_service():
    """A private service with default configuration and seeded fake values."""
    yield MockService(MockConfig(), seed=1234)


@pytest.fixture
def mock_connection(mock_service):
    """A simulated client connection answering from ``mock_service``."""
    yield MockConnection(mock_service)
