"""Streaming Bar Generation

Tick -> 1m -> window bar pipeline for a single instrument:
- TickAggregator: ticks -> minute bars
- BarWindowAggregator: minute bars -> N x {minute, hour, day, week, month}
- WindowBoundaryPolicy: target-set or counter window completion
- StaleBarWatchdog: force-closes a minute bar when the feed goes quiet
- BarGenerator: lock + sinks around all of the above
"""

from bargen.bar_generation.boundary import (
    BoundaryDecision,
    BoundaryMode,
    WindowBoundaryPolicy,
)
from bargen.bar_generation.generator import BarGenerator, BarGeneratorConfig
from bargen.bar_generation.state import GeneratorState
from bargen.bar_generation.tick_aggregator import TickAggregator
from bargen.bar_generation.watchdog import StaleBarWatchdog
from bargen.bar_generation.window_aggregator import BarWindowAggregator

__all__ = [
    'BarGenerator',
    'BarGeneratorConfig',
    'BarWindowAggregator',
    'BoundaryDecision',
    'BoundaryMode',
    'GeneratorState',
    'StaleBarWatchdog',
    'TickAggregator',
    'WindowBoundaryPolicy',
]
