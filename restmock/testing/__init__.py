"""
Test framework for mock-backed scenarios using 4-layer architecture.
"""

from .dsl import MockServiceDsl, MockRequest, MockReply
from .drivers import DriverInterface, RouterDriver, ClientDriver
from .multi_driver_base import (
    MultiDriverTestBase,
    multi_driver_test_class,
    skip_driver,
    only_drivers
)

__all__ = [
    'MockServiceDsl',
    'MockRequest',
    'MockReply',
    'DriverInterface',
    'RouterDriver',
    'ClientDriver',
    'MultiDriverTestBase',
    'multi_driver_test_class',
    'skip_driver',
    'only_drivers'
]
