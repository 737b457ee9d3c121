"""Window Boundary Policy

Decides when an in-progress window bar is complete.

Two policies exist:
- TARGET_SET: calendar aligned. A window closes when the new period
  value is one of a precomputed set of targets (e.g. minutes 0, 5, 10 ...
  for 5-minute windows). Used when slicing is enabled and the window
  divides the natural cycle of the granularity.
- COUNTER: transition counting. Every period change bumps a counter and
  the window closes on every Nth change. Used for everything else,
  including MONTHLY windows and unrecognized combinations.
"""
from datetime import datetime
from enum import Enum
from typing import FrozenSet, NamedTuple, Optional

from bargen.core.enums import Interval
from bargen.logger import logger


class BoundaryMode(Enum):
    """Boundary detection strategy."""
    TARGET_SET = "target_set"
    COUNTER = "counter"


class BoundaryDecision(NamedTuple):
    """Outcome of one boundary check."""
    finished: bool
    interval_count: int


# Natural cycle lengths used to decide target-set eligibility.
# MINUTE uses 60 for sub-hour windows and 1440 (minutes per day) otherwise.
_CYCLE_LENGTHS = {
    Interval.HOUR: 24,
    Interval.DAILY: 7,
    Interval.WEEKLY: 52,
}

# Legal period values per granularity as (start, stop) for range()
_TARGET_RANGES = {
    Interval.MINUTE: (0, 60),
    Interval.HOUR: (0, 24),
    Interval.DAILY: (1, 32),
    Interval.WEEKLY: (1, 54),
}


class WindowBoundaryPolicy:
    """Pure decision object for window completion.

    Example usage:
        policy = WindowBoundaryPolicy(Interval.MINUTE, window=5)
        value = policy.period_value(bar.timestamp)
        if value != policy.period_value(last_bar.timestamp):
            decision = policy.decide(value, state.interval_count)
    """

    def __init__(self, interval: Interval, window: int, interval_slice: bool = True):
        """Initialize policy.

        Args:
            interval: Target window granularity
            window: Number of periods per window (>= 1)
            interval_slice: Allow calendar-aligned (target set) windows
        """
        self.interval = interval
        self.window = window
        self.interval_slice = interval_slice
        self.mode = self._resolve_mode()
        self.targets: Optional[FrozenSet[int]] = self._build_targets()

        logger.debug(
            f"WindowBoundaryPolicy: interval={interval.value} window={window} "
            f"slice={interval_slice} -> {self.mode.value}"
        )

    @property
    def minute_of_day(self) -> bool:
        """MINUTE windows of an hour or more compare minute-of-day."""
        return (
            self.interval == Interval.MINUTE
            and self.interval_slice
            and self.window >= 60
        )

    def _resolve_mode(self) -> BoundaryMode:
        if not self.interval_slice:
            return BoundaryMode.COUNTER

        if self.interval == Interval.MINUTE:
            cycle = 60 if self.window < 60 else 1440
        elif self.interval in _CYCLE_LENGTHS:
            cycle = _CYCLE_LENGTHS[self.interval]
        else:
            # MONTHLY and TICK never use target sets
            return BoundaryMode.COUNTER

        if cycle % self.window == 0:
            return BoundaryMode.TARGET_SET
        return BoundaryMode.COUNTER

    def _build_targets(self) -> Optional[FrozenSet[int]]:
        if self.mode != BoundaryMode.TARGET_SET or self.minute_of_day:
            return None
        start, stop = _TARGET_RANGES[self.interval]
        return frozenset(range(start, stop, self.window))

    def period_value(self, dt: datetime) -> int:
        """Scalar period identifier of dt for this granularity."""
        if self.interval == Interval.MINUTE:
            if self.minute_of_day:
                return dt.hour * 60 + dt.minute
            return dt.minute
        if self.interval == Interval.HOUR:
            return dt.hour
        if self.interval == Interval.DAILY:
            return dt.day
        if self.interval == Interval.WEEKLY:
            return dt.isocalendar()[1]
        if self.interval == Interval.MONTHLY:
            return dt.month
        return 0

    def is_target(self, value: int) -> bool:
        """Membership test for the target-set policy."""
        if self.minute_of_day:
            return value % self.window == 0
        return self.targets is not None and value in self.targets

    def decide(self, value: int, interval_count: int) -> BoundaryDecision:
        """Decide whether the window closes at a period change.

        Must only be called after the caller has seen the period value
        change from the previous bar.

        Args:
            value: New period value
            interval_count: Current transition counter

        Returns:
            BoundaryDecision with the (possibly incremented) counter
        """
        if self.mode == BoundaryMode.TARGET_SET:
            return BoundaryDecision(self.is_target(value), interval_count)

        interval_count += 1
        return BoundaryDecision(interval_count % self.window == 0, interval_count)
