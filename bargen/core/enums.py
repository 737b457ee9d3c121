"""
Core enumerations used throughout the bar generator.

Interval and Exchange are closed sets. Each has a strict parse() that
accepts a member name or value and rejects everything else.
"""

from enum import Enum


class Interval(str, Enum):
    """
    Bar granularity.

    Values follow the usual short notation; note that "1m" (minute) and
    "1M" (month) differ only by case, so Interval.parse is case-sensitive.
    """
    TICK = "tick"
    MINUTE = "1m"
    HOUR = "1h"
    DAILY = "1d"
    WEEKLY = "1w"
    MONTHLY = "1M"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Interval":
        """Parse a member name ("MINUTE") or value ("1m").

        Raises:
            ValueError: If text is not exactly a name or value
        """
        if isinstance(text, cls):
            return text
        if not isinstance(text, str):
            raise ValueError(f"Interval must be a string, got {type(text).__name__}")
        if text in cls.__members__:
            return cls.__members__[text]
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unrecognized interval: '{text}'")


class Exchange(str, Enum):
    """
    Exchange identifier.

    A few venues display under a different code than their name
    (CBOT -> CBT, EUREX -> EUX, OTC -> PINK); both spellings parse.
    """
    # Chinese
    CFFEX = "CFFEX"
    SHFE = "SHFE"
    CZCE = "CZCE"
    DCE = "DCE"
    GFEX = "GFEX"
    INE = "INE"
    SSE = "SSE"
    SZSE = "SZSE"
    BSE = "BSE"
    SGE = "SGE"
    WXE = "WXE"
    CFETS = "CFETS"

    # Global
    SMART = "SMART"
    NYSE = "NYSE"
    NASDAQ = "NASDAQ"
    ARCA = "ARCA"
    EDGEA = "EDGEA"
    ISLAND = "ISLAND"
    BATS = "BATS"
    IEX = "IEX"
    NYMEX = "NYMEX"
    COMEX = "COMEX"
    GLOBEX = "GLOBEX"
    IDEALPRO = "IDEALPRO"
    CME = "CME"
    ICE = "ICE"
    SEHK = "SEHK"
    HKFE = "HKFE"
    HKSE = "HKSE"
    SGX = "SGX"
    CBOT = "CBT"
    CBOE = "CBOE"
    CFE = "CFE"
    DME = "DME"
    EUREX = "EUX"
    APEX = "APEX"
    LME = "LME"
    BMD = "BMD"
    TOCOM = "TOCOM"
    EUNX = "EUNX"
    KRX = "KRX"
    OTC = "PINK"
    IBKRATS = "IBKRATS"
    TSE = "TSE"
    AMEX = "AMEX"

    # Crypto
    BITMEX = "BITMEX"
    OKX = "OKX"
    HUOBI = "HUOBI"
    HUOBIP = "HUOBIP"
    HUOBIM = "HUOBIM"
    HUOBIF = "HUOBIF"
    HUOBISWAP = "HUOBISWAP"
    BITGETS = "BITGETS"
    BITFINEX = "BITFINEX"
    BITHUMB = "BITHUMB"
    BINANCE = "BINANCE"
    BINANCEF = "BINANCEF"
    BINANCES = "BINANCES"
    COINBASE = "COINBASE"
    BYBIT = "BYBIT"
    BYBITSPOT = "BYBITSPOT"
    KRAKEN = "KRAKEN"
    DERIBIT = "DERIBIT"
    GATEIO = "GATEIO"
    BITSTAMP = "BITSTAMP"
    BINGXS = "BINGXS"
    ORANGEX = "ORANGEX"
    KUCOIN = "KUCOIN"
    DYDX = "DYDX"
    HYPE = "HYPE"
    HYPESPOT = "HYPESPOT"

    # Simulated / local data
    LOCAL = "LOCAL"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Exchange":
        """Parse an exchange member name ("CBOT") or display code ("CBT").

        Raises:
            ValueError: If text is not exactly a name or display code
        """
        if isinstance(text, cls):
            return text
        if not isinstance(text, str):
            raise ValueError(f"Exchange must be a string, got {type(text).__name__}")
        if text in cls.__members__:
            return cls.__members__[text]
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unrecognized exchange: '{text}'")
