"""bargen - streaming tick to minute to window OHLCV bar generator"""

from bargen.core import (
    Interval,
    Exchange,
    BarGeneratorError,
    MissingTimestampError,
    ConfigurationError,
)
from bargen.models import TickData, BarData, TickSource
from bargen.bar_generation import BarGenerator, WindowBoundaryPolicy

__version__ = "1.0.0"

__all__ = [
    "Interval",
    "Exchange",
    "BarGeneratorError",
    "MissingTimestampError",
    "ConfigurationError",
    "TickData",
    "BarData",
    "TickSource",
    "BarGenerator",
    "WindowBoundaryPolicy",
]
