"""Unit Tests for TickData / BarData models"""
import pytest
from datetime import datetime
from pydantic import ValidationError

from bargen.core.enums import Exchange, Interval
from bargen.models.market_data import BarData, TickData, TickSource


class FeedQuote:
    """Upstream object satisfying the TickSource contract."""

    def __init__(self, when, price, volume, open_interest):
        self._when = when
        self._price = price
        self._volume = volume
        self._open_interest = open_interest

    def time(self):
        return self._when

    def price(self):
        return self._price

    def volume(self):
        return self._volume

    def open_interest(self):
        return self._open_interest


class TestTickData:

    def test_exchange_parsed_from_string(self):
        tick = TickData(symbol="IF2503", exchange="CFFEX", last_price=3900.0)
        assert tick.exchange is Exchange.CFFEX

    def test_lowercase_exchange_rejected(self):
        with pytest.raises(ValidationError):
            TickData(symbol="IF2503", exchange="cffex", last_price=3900.0)

    def test_unknown_exchange_rejected(self):
        with pytest.raises(ValidationError):
            TickData(symbol="IF2503", exchange="MOON", last_price=3900.0)

    def test_vt_symbol(self):
        tick = TickData(symbol="ZC", exchange=Exchange.CBOT, gateway_name="IB", last_price=1.0)
        assert tick.vt_symbol == "ZC_CBT/IB"

    @pytest.mark.parametrize("price,empty", [(0.0, True), (-1.0, True), (0.01, False)])
    def test_is_empty(self, price, empty):
        tick = TickData(symbol="rb2501", exchange=Exchange.SHFE, last_price=price)
        assert tick.is_empty is empty

    def test_timestamp_optional(self):
        tick = TickData(symbol="rb2501", exchange=Exchange.SHFE, last_price=3500.0)
        assert tick.timestamp is None

    def test_from_source(self):
        when = datetime(2025, 1, 6, 9, 30, 15)
        source = FeedQuote(when, 3500.0, 1200.0, 88000.0)

        assert isinstance(source, TickSource)

        tick = TickData.from_source(source, symbol="rb2501", exchange=Exchange.SHFE, gateway_name="CTP")

        assert tick.timestamp == when
        assert tick.last_price == 3500.0
        assert tick.volume == 1200.0
        assert tick.open_interest == 88000.0
        assert tick.vt_symbol == "rb2501_SHFE/CTP"


class TestBarData:

    def test_interval_parsed_from_string(self):
        bar = BarData(symbol="rb2501", exchange="SHFE", interval="1h",
                      open=1.0, high=1.0, low=1.0, close=1.0)
        assert bar.interval is Interval.HOUR

    def test_default_interval_is_minute(self):
        bar = BarData(symbol="rb2501", exchange="SHFE")
        assert bar.interval is Interval.MINUTE

    def test_negative_volume_rejected(self):
        with pytest.raises(ValidationError):
            BarData(symbol="rb2501", exchange="SHFE", volume=-1.0)

    def test_inconsistent_ohlc_rejected(self):
        with pytest.raises(ValidationError):
            BarData(symbol="rb2501", exchange="SHFE",
                    open=10.0, high=9.0, low=8.0, close=8.5)

    def test_close_outside_range_rejected(self):
        with pytest.raises(ValidationError):
            BarData(symbol="rb2501", exchange="SHFE",
                    open=10.0, high=11.0, low=9.0, close=12.0)

    def test_model_copy_is_independent(self):
        bar = BarData(symbol="rb2501", exchange="SHFE",
                      open=10.0, high=11.0, low=9.0, close=10.5, volume=5.0)
        copy = bar.model_copy()
        copy.volume = 99.0

        assert bar.volume == 5.0
