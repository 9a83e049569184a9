"""
Pytest configuration for restmock tests.

Loads the scenario fixtures and sets up automatic parametrization for test
classes that inherit from MultiDriverTestBase.
"""

import pytest

from restmock import diagnostics
from restmock.config import MockConfig
from restmock.service import MockService
from restmock.testing import MultiDriverTestBase

pytest_plugins = ["restmock.testing.fixtures"]


def pytest_generate_tests(metafunc):
    """
    Pytest hook to automatically parametrize the 'mock_api' fixture for MultiDriverTestBase subclasses.

    This ensures every test method in classes that inherit from MultiDriverTestBase
    gets run against all enabled drivers.
    """
    if (metafunc.cls is not None and
            issubclass(metafunc.cls, MultiDriverTestBase) and
            'mock_api' in metafunc.fixturenames):

        drivers = metafunc.cls.get_available_drivers()
        metafunc.parametrize(
            'mock_api',
            drivers,
            indirect=True,
            ids=[f"driver-{d}" for d in drivers]
        )


@pytest.fixture
def service():
    """A fresh service with default configuration."""
    return MockService(MockConfig(), seed=1234)


@pytest.fixture(autouse=True)
def diagnostics_off():
    """Keep the process-wide diagnostics toggle from leaking between tests."""
    diagnostics.disable()
    yield
    diagnostics.disable()
