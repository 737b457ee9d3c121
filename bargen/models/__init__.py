"""
Data models
"""
from bargen.models.market_data import TickData, BarData, TickSource

__all__ = ["TickData", "BarData", "TickSource"]
