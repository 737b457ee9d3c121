"""
Core primitives shared by every component.

This package contains:
- enums.py: Interval, Exchange
- exceptions.py: Custom exceptions
"""

from bargen.core.enums import Interval, Exchange
from bargen.core.exceptions import (
    BarGeneratorError,
    MissingTimestampError,
    ConfigurationError,
)

__all__ = [
    # Enums
    'Interval',
    'Exchange',

    # Exceptions
    'BarGeneratorError',
    'MissingTimestampError',
    'ConfigurationError',
]
