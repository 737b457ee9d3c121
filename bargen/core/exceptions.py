"""
Custom exceptions for the bar generator.

All custom exceptions are defined here for easy discovery and consistent
error handling. Only MissingTimestampError ever reaches a caller of
update_tick/update_bar; sink failures and empty ticks are absorbed.
"""


class BarGeneratorError(Exception):
    """Base exception for all bar generator errors."""
    pass


class MissingTimestampError(BarGeneratorError):
    """Raised when a tick or bar carries no usable timestamp."""
    pass


class ConfigurationError(BarGeneratorError):
    """Raised when a generator is constructed with invalid options."""
    pass
