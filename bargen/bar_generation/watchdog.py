"""Stale Bar Watchdog

Force-closes an in-progress minute bar when the feed goes quiet, so
downstream consumers still receive a terminal bar.
"""
from datetime import datetime, timedelta
from typing import Optional

from bargen.models.market_data import BarData
from bargen.bar_generation.state import GeneratorState
from bargen.bar_generation.time_utils import align_to, trim_to_minute
from bargen.logger import logger


class StaleBarWatchdog:
    """Staleness check invoked periodically by an external scheduler.

    A forced bar gets a synthetic timestamp of now minus the forced bar
    offset, so its label is approximate rather than tick accurate.
    """

    def __init__(
        self,
        stale_threshold: timedelta = timedelta(minutes=2),
        forced_bar_offset: timedelta = timedelta(minutes=1)
    ):
        """Initialize watchdog.

        Args:
            stale_threshold: Age past which an untouched bar is force-closed
            forced_bar_offset: Subtracted from now to label a forced bar
        """
        self.stale_threshold = stale_threshold
        self.forced_bar_offset = forced_bar_offset

    def check(self, state: GeneratorState, now: datetime) -> Optional[BarData]:
        """Detach the in-progress bar if it is stale.

        A bar is force-emitted at most once per last-tick timestamp; the
        timestamp is remembered in state.flushed_timestamps until the next
        window closes. A straggler tick that reopens an already flushed
        minute starts a bar with a new timestamp, so it is flushed again
        once it goes stale.

        Args:
            state: Generator state (mutated in place)
            now: Current wall-clock time

        Returns:
            The forced bar, or None when nothing was stale
        """
        bar = state.bar
        if bar is None or bar.timestamp is None:
            return None

        if bar.timestamp in state.flushed_timestamps:
            return None

        now = align_to(bar.timestamp, now)
        if now - bar.timestamp <= self.stale_threshold:
            return None

        logger.bind(vt_symbol=bar.vt_symbol).warning(
            f"{bar.vt_symbol}: latest bar at {bar.timestamp} is stale, "
            f"forcing minute bar emission"
        )
        state.flushed_timestamps.add(bar.timestamp)
        return self.force_flush(state, now)

    def force_flush(self, state: GeneratorState, now: datetime) -> Optional[BarData]:
        """Detach the in-progress bar unconditionally.

        Returns:
            The detached bar relabeled to now - forced_bar_offset (trimmed
            to the minute), or None if there was no bar
        """
        bar = state.bar
        if bar is None:
            return None

        state.bar = None
        if bar.timestamp is not None:
            now = align_to(bar.timestamp, now)
        bar.timestamp = trim_to_minute(now - self.forced_bar_offset)
        return bar
