"""Trade statistics for tradelog."""

from tradelog.stats.analytics import analyze
from tradelog.stats.daily import aggregate_by_day
from tradelog.stats.filters import PERIODS, filter_trades, period_start
from tradelog.stats.matching import attach_realized_pnl
from tradelog.stats.summary import summarize

__all__ = [
    "PERIODS",
    "aggregate_by_day",
    "analyze",
    "attach_realized_pnl",
    "filter_trades",
    "period_start",
    "summarize",
]
