"""Bar Generator

Per-instrument facade that wires the tick reducer, the window reducer and
the stale-bar watchdog around one shared state and one lock.

Locking discipline: every entry point mutates GeneratorState while holding
the lock, detaches any finished bar, releases the lock and only then calls
the sink. A sink may therefore call back into the generator (the usual
wiring is on_bar=generator.update_bar) without deadlocking.
"""
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from bargen.config import settings
from bargen.core.enums import Interval
from bargen.core.exceptions import ConfigurationError
from bargen.models.market_data import BarData, TickData
from bargen.bar_generation.boundary import BoundaryMode, WindowBoundaryPolicy
from bargen.bar_generation.state import GeneratorState
from bargen.bar_generation.tick_aggregator import TickAggregator
from bargen.bar_generation.time_utils import get_exchange_timezone
from bargen.bar_generation.watchdog import StaleBarWatchdog
from bargen.bar_generation.window_aggregator import BarWindowAggregator
from bargen.logger import logger


BarCallback = Callable[[BarData], None]
Clock = Callable[[], datetime]


class BarGeneratorConfig(BaseModel):
    """Validated construction options."""
    window: int = Field(default=1, ge=1)
    interval: Interval = Interval.MINUTE
    interval_slice: bool = True

    @field_validator("interval", mode="before")
    @classmethod
    def parse_interval(cls, value):
        if value is None:
            return Interval.MINUTE
        return Interval.parse(value)


def _exchange_now() -> datetime:
    return datetime.now(get_exchange_timezone())


class BarGenerator:
    """Streaming tick -> minute bar -> window bar generator.

    Example usage:
        def on_window_bar(bar):
            print(bar)

        generator = BarGenerator(window=5, on_window_bar=on_window_bar)
        generator.on_bar = generator.update_bar

        generator.update_tick(tick)   # from the market data feed
        generator.check_stale_bar()   # from a timer, e.g. WatchdogThread
    """

    def __init__(
        self,
        on_bar: Optional[BarCallback] = None,
        window: int = 1,
        on_window_bar: Optional[BarCallback] = None,
        interval: Union[Interval, str, None] = Interval.MINUTE,
        interval_slice: bool = True,
        clock: Optional[Clock] = None
    ):
        """Initialize generator.

        Args:
            on_bar: Sink for finished minute bars (including forced ones)
            window: Number of interval periods per window bar
            on_window_bar: Sink for finished window bars
            interval: Window granularity (Interval or its name/value)
            interval_slice: Allow calendar-aligned windows
            clock: Returns "now" for the watchdog (defaults to exchange time)

        Raises:
            ConfigurationError: If window or interval is invalid
        """
        try:
            config = BarGeneratorConfig(
                window=window,
                interval=interval,
                interval_slice=interval_slice
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid bar generator options: {e}") from e

        self.config = config
        self.on_bar = on_bar
        self.on_window_bar = on_window_bar

        self._state = GeneratorState()
        self._lock = threading.Lock()
        self._clock = clock or _exchange_now

        self._policy = WindowBoundaryPolicy(
            config.interval, config.window, config.interval_slice
        )
        self._tick_aggregator = TickAggregator()
        self._window_aggregator = BarWindowAggregator(self._policy)
        self._watchdog = StaleBarWatchdog(
            stale_threshold=timedelta(seconds=settings.BAR_GENERATOR.stale_threshold_seconds),
            forced_bar_offset=timedelta(seconds=settings.BAR_GENERATOR.forced_bar_offset_seconds),
        )

        logger.debug(
            f"BarGenerator initialized: interval={config.interval.value} "
            f"window={config.window} slice={config.interval_slice} "
            f"policy={self._policy.mode.value}"
        )

    # ------------------------------------------------------------------
    # Configuration accessors
    # ------------------------------------------------------------------

    @property
    def interval(self) -> Interval:
        return self.config.interval

    @property
    def window(self) -> int:
        return self.config.window

    @property
    def interval_slice(self) -> bool:
        return self.config.interval_slice

    @property
    def boundary_mode(self) -> BoundaryMode:
        return self._policy.mode

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def update_tick(self, tick: TickData) -> None:
        """Feed one tick.

        Raises:
            MissingTimestampError: If the tick has no timestamp
        """
        with self._lock:
            finished = self._tick_aggregator.ingest(self._state, tick)

        if finished is not None:
            self._deliver(self.on_bar, finished, "on_bar")

    def update_bar(self, bar: BarData) -> None:
        """Feed one finished base bar into the window reducer.

        Raises:
            MissingTimestampError: If the bar has no timestamp
        """
        with self._lock:
            finished = self._window_aggregator.ingest(self._state, bar)

        if finished is not None:
            self._deliver(self.on_window_bar, finished, "on_window_bar")

    def check_stale_bar(self, now: Optional[datetime] = None) -> bool:
        """Force-close the in-progress minute bar if the feed went quiet.

        Args:
            now: Current time (defaults to the generator clock)

        Returns:
            True if a bar was force-emitted
        """
        now = now or self._clock()
        with self._lock:
            forced = self._watchdog.check(self._state, now)

        if forced is None:
            return False

        self._deliver(self.on_bar, forced, "on_bar")
        return True

    def generate(self, now: Optional[datetime] = None) -> bool:
        """Unconditionally emit the in-progress minute bar, if any.

        The bar is labeled now - forced bar offset, like a watchdog flush.

        Returns:
            True if a bar was emitted
        """
        now = now or self._clock()
        with self._lock:
            forced = self._watchdog.force_flush(self._state, now)

        if forced is None:
            return False

        self._deliver(self.on_bar, forced, "on_bar")
        return True

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def current_bar(self) -> Optional[BarData]:
        """Copy of the in-progress minute bar."""
        with self._lock:
            bar = self._state.bar
            return bar.model_copy() if bar is not None else None

    def current_window_bar(self) -> Optional[BarData]:
        """Copy of the in-progress window bar."""
        with self._lock:
            bar = self._state.window_bar
            return bar.model_copy() if bar is not None else None

    def get_stats(self) -> dict:
        """Snapshot of reducer counters for diagnostics."""
        with self._lock:
            return {
                "interval": self.config.interval.value,
                "window": self.config.window,
                "policy": self._policy.mode.value,
                "has_bar": self._state.bar is not None,
                "has_window_bar": self._state.window_bar is not None,
                "interval_count": self._state.interval_count,
                "reset_count": self._state.reset_count,
                "flushed_timestamps": len(self._state.flushed_timestamps),
            }

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _deliver(self, callback: Optional[BarCallback], bar: BarData, name: str) -> None:
        """Invoke a sink outside the lock; sink failures are logged only."""
        if callback is None:
            return
        try:
            callback(bar)
        except Exception as e:
            logger.bind(vt_symbol=bar.vt_symbol).exception(
                f"{name} sink failed for {bar.vt_symbol} @ {bar.timestamp}: {e}"
            )

    def __repr__(self) -> str:
        return (
            f"BarGenerator(interval={self.config.interval.value}, "
            f"window={self.config.window})"
        )
