"""Configuration for the mock service.

Values resolve in the order: explicit argument, environment variable, default.
"""

import logging
import os
from dataclasses import dataclass
from typing import Literal, Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off')

FORMATS = ('json', 'xml')


def env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None when unset or unrecognized."""
    env_value = os.environ.get(name, '').lower()
    if env_value in _TRUE_VALUES:
        return True
    elif env_value in _FALSE_VALUES:
        return False
    return None


@dataclass
class MockConfig:
    """Configuration for a MockService.

    Attributes:
        diagnostics: Record every dispatched path and its document for
                     end-of-scenario inspection. Purely observational.

        unique_attempts: How many candidate values the factory tries for a
                         uniquified attribute before giving up with
                         UniquenessExhausted.

        strict_types: Raise UnknownType when creating or finding a type that
                      was never defined. Off by default: undefined types are
                      treated as empty schemas.

        default_format: Encoding used by the simulated client when a request
                        path carries no format extension ("json" or "xml").

    Examples:
        # Defaults
        MockConfig()

        # Fail fast on typos in type names
        MockConfig(strict_types=True)

        # Resolve from RESTMOCK_* environment variables
        MockConfig.from_env()
    """

    diagnostics: bool = False
    unique_attempts: int = 100
    strict_types: bool = False
    default_format: Literal["json", "xml"] = "json"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a value is out of range
        """
        if self.unique_attempts < 1:
            raise ValueError(
                f"unique_attempts must be at least 1, got {self.unique_attempts}"
            )
        if self.default_format not in FORMATS:
            raise ValueError(
                f"default_format must be one of {FORMATS}, got {self.default_format!r}"
            )

    @classmethod
    def from_env(
        cls,
        diagnostics: Optional[bool] = None,
        unique_attempts: Optional[int] = None,
        strict_types: Optional[bool] = None,
        default_format: Optional[str] = None,
    ) -> "MockConfig":
        """Build a configuration from arguments, falling back to RESTMOCK_* variables."""
        if diagnostics is None:
            diagnostics = env_flag('RESTMOCK_DIAGNOSTICS') or False

        if strict_types is None:
            strict_types = env_flag('RESTMOCK_STRICT_TYPES') or False

        if unique_attempts is None:
            attempts_str = os.environ.get('RESTMOCK_UNIQUE_ATTEMPTS', '100')
            try:
                unique_attempts = int(attempts_str)
            except ValueError:
                logger.warning(f"Ignoring invalid RESTMOCK_UNIQUE_ATTEMPTS={attempts_str!r}")
                unique_attempts = 100

        if default_format is None:
            default_format = os.environ.get('RESTMOCK_DEFAULT_FORMAT', 'json').lower()

        config = cls(
            diagnostics=diagnostics,
            unique_attempts=unique_attempts,
            strict_types=strict_types,
            default_format=default_format,  # type: ignore[arg-type]
        )
        config.validate()
        return config
