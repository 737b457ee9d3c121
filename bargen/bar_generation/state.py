"""Generator State

All mutable state of one BarGenerator, kept in a single aggregate so one
lock can guard it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Set

from bargen.models.market_data import BarData, TickData


@dataclass
class GeneratorState:
    """Per-instrument reducer state.

    Attributes:
        bar: In-progress minute bar
        last_tick: Most recent non-empty tick
        window_bar: In-progress window bar
        last_bar: Most recent bar fed to the window reducer
        interval_count: Period transitions seen by the counter policy
        reset_count: Cleared together with interval_count on window emission
        flushed_timestamps: Bar timestamps already force-emitted by the watchdog
    """
    bar: Optional[BarData] = None
    last_tick: Optional[TickData] = None
    window_bar: Optional[BarData] = None
    last_bar: Optional[BarData] = None
    interval_count: int = 0
    reset_count: int = 0
    flushed_timestamps: Set[datetime] = field(default_factory=set)

    def reset_window_counters(self) -> None:
        """Clear per-window bookkeeping after a window bar is emitted."""
        self.interval_count = 0
        self.reset_count = 0
        self.flushed_timestamps.clear()
