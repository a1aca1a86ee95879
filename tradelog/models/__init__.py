"""Data models for tradelog."""

from tradelog.models.trade import TradeRecord
from tradelog.models.stats import (
    AnalyticsOverview,
    BucketStat,
    DailyStat,
    OverallStats,
    SymbolStat,
    TradeAnalytics,
)
from tradelog.models.imports import ImportResult, ParseReport, SkippedRow

__all__ = [
    "AnalyticsOverview",
    "BucketStat",
    "DailyStat",
    "ImportResult",
    "OverallStats",
    "ParseReport",
    "SkippedRow",
    "SymbolStat",
    "TradeAnalytics",
    "TradeRecord",
]
