"""
Market data models consumed and produced by the bar generator
"""
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable
from pydantic import BaseModel, Field, field_validator, model_validator

from bargen.core.enums import Exchange, Interval


@runtime_checkable
class TickSource(Protocol):
    """Minimal contract an upstream producer must satisfy to feed ticks.

    Anything exposing these four accessors can be turned into a TickData
    with TickData.from_source(); the generator never inspects foreign
    objects beyond this.
    """

    def time(self) -> Optional[datetime]: ...

    def price(self) -> float: ...

    def volume(self) -> float: ...

    def open_interest(self) -> float: ...


def _build_vt_symbol(symbol: str, exchange: Exchange, gateway_name: str) -> str:
    return f"{symbol}_{exchange.value}/{gateway_name}"


class TickData(BaseModel):
    """Single trade update.

    volume and open_interest are cumulative for the trading day; the
    generator derives per-bar volume from consecutive differences.
    A tick with last_price <= 0 is an empty tick and is skipped.
    """
    symbol: str
    exchange: Exchange
    timestamp: Optional[datetime] = None
    last_price: float = 0.0
    volume: float = 0.0
    open_interest: float = 0.0
    gateway_name: str = ""

    @field_validator("exchange", mode="before")
    @classmethod
    def parse_exchange(cls, value):
        return Exchange.parse(value)

    @property
    def vt_symbol(self) -> str:
        return _build_vt_symbol(self.symbol, self.exchange, self.gateway_name)

    @property
    def is_empty(self) -> bool:
        return self.last_price <= 0

    @classmethod
    def from_source(
        cls,
        source: TickSource,
        symbol: str,
        exchange: Exchange,
        gateway_name: str = ""
    ) -> "TickData":
        """Build a tick from any object satisfying TickSource."""
        return cls(
            symbol=symbol,
            exchange=exchange,
            timestamp=source.time(),
            last_price=source.price(),
            volume=source.volume(),
            open_interest=source.open_interest(),
            gateway_name=gateway_name,
        )


class BarData(BaseModel):
    """OHLCV bar for one bucket of the given interval.

    timestamp is the bucket start. volume is the total for the bucket
    (not cumulative); open_interest is the last value observed.
    """
    symbol: str
    exchange: Exchange
    timestamp: Optional[datetime] = None
    interval: Optional[Interval] = Interval.MINUTE
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: float = Field(default=0.0, ge=0)
    open_interest: float = 0.0
    gateway_name: str = ""

    @field_validator("exchange", mode="before")
    @classmethod
    def parse_exchange(cls, value):
        return Exchange.parse(value)

    @field_validator("interval", mode="before")
    @classmethod
    def parse_interval(cls, value):
        if value is None:
            return None
        return Interval.parse(value)

    @model_validator(mode="after")
    def check_price_range(self) -> "BarData":
        if not (self.low <= self.open <= self.high and self.low <= self.close <= self.high):
            raise ValueError(
                f"Inconsistent OHLC: open={self.open} high={self.high} "
                f"low={self.low} close={self.close}"
            )
        return self

    @property
    def vt_symbol(self) -> str:
        return _build_vt_symbol(self.symbol, self.exchange, self.gateway_name)
