"""Tick Aggregator

Reduces ticks into in-progress 1-minute bars.
"""
from typing import Optional

from bargen.core.enums import Interval
from bargen.core.exceptions import MissingTimestampError
from bargen.models.market_data import BarData, TickData
from bargen.bar_generation.state import GeneratorState
from bargen.bar_generation.time_utils import to_exchange_time, trim_to_minute
from bargen.logger import logger


class TickAggregator:
    """Builds minute bars from a single instrument's tick stream.

    The aggregator itself is stateless; it mutates the GeneratorState it
    is handed. Callers hold the generator lock around ingest().
    """

    def ingest(self, state: GeneratorState, tick: TickData) -> Optional[BarData]:
        """Fold one tick into the in-progress minute bar.

        Args:
            state: Generator state (mutated in place)
            tick: Incoming tick

        Returns:
            The finished minute bar (timestamp trimmed to the minute) when
            this tick opened a new minute, else None

        Raises:
            MissingTimestampError: If the tick has no timestamp
        """
        if tick.is_empty:
            logger.trace(f"Skipping empty tick for {tick.vt_symbol}")
            return None

        if tick.timestamp is None:
            raise MissingTimestampError(f"Tick for {tick.vt_symbol} has no timestamp")

        tick_dt = to_exchange_time(tick.timestamp)
        last_tick = state.last_tick

        volume_change = 0.0
        if last_tick is not None:
            volume_change = max(tick.volume - last_tick.volume, 0.0)

        finished: Optional[BarData] = None
        bar = state.bar

        if bar is None or trim_to_minute(bar.timestamp) != trim_to_minute(tick_dt):
            finished = bar
            bar = BarData(
                symbol=tick.symbol,
                exchange=tick.exchange,
                timestamp=tick_dt,
                interval=Interval.MINUTE,
                open=tick.last_price,
                high=tick.last_price,
                low=tick.last_price,
                close=tick.last_price,
                volume=0.0,
                open_interest=tick.open_interest,
                gateway_name=tick.gateway_name,
            )
            state.bar = bar
        else:
            bar.high = max(bar.high, tick.last_price)
            bar.low = min(bar.low, tick.last_price)
            bar.close = tick.last_price
            bar.timestamp = tick_dt

        bar.open_interest = tick.open_interest

        # The very first tick has no baseline, so it contributes no volume
        if last_tick is not None:
            bar.volume += volume_change

        state.last_tick = tick

        if finished is not None:
            finished.timestamp = trim_to_minute(finished.timestamp)
        return finished
