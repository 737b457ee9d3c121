"""Bar Window Aggregator

Reduces base bars (normally minute bars) into coarser window bars.
"""
from typing import Optional

from bargen.core.exceptions import MissingTimestampError
from bargen.models.market_data import BarData
from bargen.bar_generation.boundary import WindowBoundaryPolicy
from bargen.bar_generation.state import GeneratorState
from bargen.bar_generation.time_utils import to_exchange_time, window_start
from bargen.logger import logger


class BarWindowAggregator:
    """Folds bars into a window bar and detaches it when the policy says so.

    OHLCV rules:
    - Open: first bar's open
    - High: maximum high
    - Low: minimum low
    - Close: last bar's close
    - Volume: sum of volumes
    - Open interest: last bar's open interest
    """

    def __init__(self, policy: WindowBoundaryPolicy):
        self.policy = policy
        self.interval = policy.interval

    def ingest(self, state: GeneratorState, bar: BarData) -> Optional[BarData]:
        """Fold one bar into the window.

        Args:
            state: Generator state (mutated in place)
            bar: Finished base bar

        Returns:
            The finished window bar when this bar closed the window, else None

        Raises:
            MissingTimestampError: If the bar has no timestamp
        """
        if bar.timestamp is None:
            raise MissingTimestampError(f"Bar for {bar.vt_symbol} has no timestamp")

        bar_dt = to_exchange_time(bar.timestamp)
        window_bar = state.window_bar

        if window_bar is None:
            window_bar = BarData(
                symbol=bar.symbol,
                exchange=bar.exchange,
                timestamp=window_start(bar_dt, self.interval),
                interval=self.interval,
                open=bar.open,
                high=bar.high,
                low=bar.low,
                close=bar.close,
                volume=0.0,
                open_interest=bar.open_interest,
                gateway_name=bar.gateway_name,
            )
            state.window_bar = window_bar
        else:
            window_bar.high = max(window_bar.high, bar.high)
            window_bar.low = min(window_bar.low, bar.low)

        window_bar.close = bar.close
        window_bar.volume += bar.volume
        window_bar.open_interest = bar.open_interest

        finished: Optional[BarData] = None
        last_bar = state.last_bar

        if last_bar is not None and last_bar.timestamp is not None:
            value = self.policy.period_value(bar_dt)
            last_value = self.policy.period_value(to_exchange_time(last_bar.timestamp))

            if value != last_value:
                decision = self.policy.decide(value, state.interval_count)
                state.interval_count = decision.interval_count

                if decision.finished:
                    finished = state.window_bar
                    state.window_bar = None
                    state.reset_window_counters()
                    logger.debug(
                        f"Window {self.interval.value}x{self.policy.window} closed for "
                        f"{finished.vt_symbol} at period value {value}"
                    )

        state.last_bar = bar
        return finished
