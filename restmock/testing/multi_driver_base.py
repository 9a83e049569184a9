"""
Multi-driver test base for automatic driver discovery and execution.

Each test class inherits from MultiDriverTestBase and defines a single
configure() method that declares the types its scenarios rely on. Every test
then runs once per enabled driver, against a fresh service.
"""

import pytest
from typing import List, Optional
from abc import ABC, abstractmethod

from restmock.config import MockConfig
from restmock.service import MockService
from .dsl import MockServiceDsl
from .drivers import (
    ClientDriver,
    DriverInterface,
    RouterDriver,
)


class MultiDriverTestBase(ABC):
    """
    Base class for multi-driver tests.

    Automatically runs each test method against all available drivers.
    Subclasses must implement configure() to declare resource types.
    """

    # Override this in subclasses to control which drivers to test
    ENABLED_DRIVERS = [
        'router',           # Dispatches straight into the router
        'client-json',      # Through MockConnection, JSON encoding
        'client-xml',       # Through MockConnection, XML encoding
    ]

    # Optional: Override to exclude specific drivers for certain test files
    EXCLUDED_DRIVERS: List[str] = []

    @abstractmethod
    def configure(self, service: MockService) -> None:
        """Declare the resource types the scenarios in this class use."""
        pass

    @classmethod
    def get_available_drivers(cls) -> List[str]:
        """Get list of available driver names for this test class."""
        return [driver for driver in cls.ENABLED_DRIVERS if driver not in cls.EXCLUDED_DRIVERS]

    @classmethod
    def create_driver(cls, driver_name: str, service: MockService) -> DriverInterface:
        """Create a driver instance for the given driver name."""
        driver_map = {
            'router': lambda service: RouterDriver(service),
            'client-json': lambda service: ClientDriver(service, format="json"),
            'client-xml': lambda service: ClientDriver(service, format="xml"),
        }

        if driver_name not in driver_map:
            pytest.skip(f"Driver '{driver_name}' not available. Available: {list(driver_map.keys())}")

        return driver_map[driver_name](service)

    @pytest.fixture
    def mock_api(self, request):
        """
        Parametrized fixture providing the DSL for each enabled driver.

        Every scenario gets its own service, so no state leaks between tests.
        """
        driver_name = request.param
        service = MockService(MockConfig(), seed=1234)
        self.configure(service)
        yield MockServiceDsl(service, self.create_driver(driver_name, service)), driver_name


def multi_driver_test_class(enabled_drivers: Optional[List[str]] = None,
                            excluded_drivers: Optional[List[str]] = None):
    """
    Class decorator to configure multi-driver testing.

    Usage:
        @multi_driver_test_class(enabled_drivers=['router'])
        class TestMyMocks(MultiDriverTestBase):
            def configure(self, service):
                service.define("book", lambda t: t.uniquify("name"))
    """
    def decorator(cls):
        if enabled_drivers is not None:
            cls.ENABLED_DRIVERS = enabled_drivers
        if excluded_drivers is not None:
            cls.EXCLUDED_DRIVERS = excluded_drivers
        return cls
    return decorator


def skip_driver(driver_name: str, reason: str = "Driver not supported for this test"):
    """
    Decorator to skip a specific test for a particular driver.

    Usage:
        @skip_driver('router', 'This test inspects the encoded body')
        def test_something(self, mock_api):
            api, driver_name = mock_api
    """
    def decorator(func):
        def wrapper(self, mock_api, *args, **kwargs):
            _, current_driver = mock_api
            if current_driver == driver_name:
                pytest.skip(reason)
            return func(self, mock_api, *args, **kwargs)
        return wrapper
    return decorator


def only_drivers(*driver_names: str):
    """
    Decorator to run a test only on specific drivers.

    Usage:
        @only_drivers('client-xml')
        def test_something(self, mock_api):
            api, driver_name = mock_api
    """
    def decorator(func):
        def wrapper(self, mock_api, *args, **kwargs):
            _, current_driver = mock_api
            if current_driver not in driver_names:
                pytest.skip(f"Test only runs on drivers: {driver_names}")
            return func(self, mock_api, *args, **kwargs)
        return wrapper
    return decorator
