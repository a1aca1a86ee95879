"""Symbol, weekday and hour-of-day breakdowns."""

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from tradelog.models import (
    AnalyticsOverview,
    BucketStat,
    SymbolStat,
    TradeAnalytics,
    TradeRecord,
)
from tradelog.parsers.dates import parse_broker_time, split_date_time

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _weekday(trade: TradeRecord) -> Optional[str]:
    try:
        return WEEKDAYS[date.fromisoformat(trade.trade_date).weekday()]
    except ValueError:
        return None


def _hour(trade: TradeRecord) -> Optional[int]:
    _, entry_time = split_date_time(trade.entry_date)
    parsed = parse_broker_time(entry_time or trade.time)
    return parsed.hour if parsed else None


def analyze(records: Iterable[TradeRecord]) -> Optional[TradeAnalytics]:
    """Break trades down by symbol, weekday and hour.

    Args:
        records: Trade records.

    Returns:
        TradeAnalytics, or None when there are no trades.
    """
    trades = list(records)
    if not trades:
        return None

    by_symbol: dict[str, list[TradeRecord]] = defaultdict(list)
    for trade in trades:
        by_symbol[trade.symbol].append(trade)

    symbol_stats = sorted(
        (
            SymbolStat(
                symbol=symbol,
                trades=len(symbol_trades),
                pnl=sum(t.pnl for t in symbol_trades),
                wins=sum(1 for t in symbol_trades if t.pnl > 0),
                losses=sum(1 for t in symbol_trades if t.pnl < 0),
            )
            for symbol, symbol_trades in by_symbol.items()
        ),
        key=lambda s: s.pnl,
        reverse=True,
    )

    weekday_totals = {day: [0, 0.0] for day in WEEKDAYS}
    hour_totals: dict[int, list] = defaultdict(lambda: [0, 0.0])
    for trade in trades:
        day = _weekday(trade)
        if day:
            weekday_totals[day][0] += 1
            weekday_totals[day][1] += trade.pnl
        hour = _hour(trade)
        if hour is not None:
            hour_totals[hour][0] += 1
            hour_totals[hour][1] += trade.pnl

    wins = sum(s.wins for s in symbol_stats)
    losses = sum(s.losses for s in symbol_stats)
    unique_days = len({t.trade_date for t in trades})

    overview = AnalyticsOverview(
        total_trades=len(trades),
        unique_days=unique_days,
        total_pnl=sum(s.pnl for s in symbol_stats),
        win_rate=(wins / (wins + losses) * 100) if wins + losses else 0.0,
        wins=wins,
        losses=losses,
        avg_trades_per_day=len(trades) / unique_days if unique_days else 0.0,
    )

    return TradeAnalytics(
        overview=overview,
        by_symbol=symbol_stats,
        by_weekday={
            day: BucketStat(trades=count, pnl=pnl)
            for day, (count, pnl) in weekday_totals.items()
        },
        by_hour={
            f"{hour}:00": BucketStat(trades=count, pnl=pnl)
            for hour, (count, pnl) in sorted(hour_totals.items())
        },
    )
