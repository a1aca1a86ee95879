"""Per-day trade aggregation."""

import math
from collections import defaultdict
from typing import Iterable

from tradelog.models import DailyStat, TradeRecord


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def aggregate_by_day(records: Iterable[TradeRecord]) -> list[DailyStat]:
    """Group trades by calendar date and compute daily figures.

    Within a date, trades are grouped by symbol before win/loss
    classification, so a round trip split across several fills counts
    as a single outcome. Multiple unrelated round trips in the same
    symbol on the same day are merged into one outcome as well.

    Args:
        records: Trade records (missing net P&L counts as zero).

    Returns:
        One DailyStat per distinct date, ascending by date.
    """
    by_date: dict[str, list[TradeRecord]] = defaultdict(list)
    for record in records:
        by_date[record.trade_date].append(record)

    daily_stats = []
    for day, day_trades in by_date.items():
        symbol_pnl: dict[str, float] = defaultdict(float)
        for trade in day_trades:
            symbol_pnl[trade.symbol] += trade.pnl

        wins = sum(1 for pnl in symbol_pnl.values() if pnl > 0)
        losses = sum(1 for pnl in symbol_pnl.values() if pnl < 0)
        decided = wins + losses

        daily_stats.append(DailyStat(
            date=day,
            pnl=sum(symbol_pnl.values()),
            trades=len(day_trades),
            win_rate=round_half_up(wins / decided * 100) if decided else None,
        ))

    return sorted(daily_stats, key=lambda stat: stat.date)
