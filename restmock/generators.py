"""
Value generators for attribute defaults.

Faker-backed generators give realistic values; sequences give predictable
counters. Both return zero-argument callables, so they plug straight into
``plain`` and ``uniquify``:

    def author(t):
        t.uniquify("name", generators.fake("name"))
        t.plain("email", generators.fake("email"))
        t.plain("code", sequence("A-{n:03d}"))
"""

import itertools
import logging
from typing import Any, Callable, Optional

from faker import Faker

logger = logging.getLogger(__name__)


def sequence(template: str = "{n}", start: int = 1) -> Callable[[], str]:
    """Generator yielding ``template`` formatted with an increasing ``n``.

    Example:
        >>> next_code = sequence("book-{n}")
        >>> next_code(), next_code()
        ('book-1', 'book-2')
    """
    counter = itertools.count(start)

    def next_value() -> str:
        return template.format(n=next(counter))

    return next_value


class FakeValues:
    """Faker-backed generators sharing one seeded Faker instance.

    Re-seeding at scenario start makes generated values reproducible across
    runs.
    """

    def __init__(self, seed: Optional[int] = None, locale: Optional[str] = None):
        self.seed = seed
        self.faker = Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)

    def fake(self, provider: str, *args: Any, **kwargs: Any) -> Callable[[], Any]:
        """Generator calling a Faker provider, e.g. ``fake("name")``.

        Raises:
            AttributeError: If Faker has no such provider
        """
        method = getattr(self.faker, provider)

        def generate() -> Any:
            return method(*args, **kwargs)

        generate.__name__ = f"fake_{provider}"
        return generate

    def reseed(self) -> None:
        """Restart the value stream from the configured seed."""
        if self.seed is not None:
            self.faker.seed_instance(self.seed)
            logger.debug(f"Re-seeded fake values with {self.seed}")
