"""Trade filtering by symbol, side and date range."""

import calendar
from datetime import date, timedelta
from typing import Iterable, Optional

from tradelog.models import TradeRecord

PERIODS = ("day", "week", "month", "year", "all")

SIDE_ALIASES = {
    "BUY": "BUY",
    "LONG": "BUY",
    "SELL": "SELL",
    "SHORT": "SELL",
}


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + day.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def period_start(period: str, today: Optional[date] = None) -> Optional[date]:
    """First date included in a reporting period.

    Args:
        period: One of "day", "week", "month", "year", "all".
        today: Reference date (defaults to today).

    Returns:
        Start date, or None for "all".

    Raises:
        ValueError: If the period is unknown.
    """
    today = today or date.today()
    if period == "day":
        return today
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return _months_back(today, 1)
    if period == "year":
        return _months_back(today, 12)
    if period == "all":
        return None
    raise ValueError(f"Unknown period '{period}'. Choose from: {', '.join(PERIODS)}")


def filter_trades(
    records: Iterable[TradeRecord],
    symbol: Optional[str] = None,
    side: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[TradeRecord]:
    """Filter trades.

    Args:
        records: Trade records.
        symbol: Keep only this symbol (case-insensitive).
        side: Keep only this side (BUY/SELL or LONG/SHORT).
        start: Keep trades dated on or after this date.
        end: Keep trades dated on or before this date.

    Returns:
        Matching trades in input order.

    Raises:
        ValueError: If the side is not recognized.
    """
    wanted_side = None
    if side:
        try:
            wanted_side = SIDE_ALIASES[side.upper()]
        except KeyError:
            raise ValueError(f"Unknown side '{side}'. Use BUY, SELL, LONG or SHORT.") from None

    wanted_symbol = symbol.upper() if symbol else None
    low = start.isoformat() if start else None
    high = end.isoformat() if end else None

    filtered = []
    for trade in records:
        if wanted_symbol and trade.symbol.upper() != wanted_symbol:
            continue
        if wanted_side and trade.side != wanted_side:
            continue
        if low and trade.trade_date < low:
            continue
        if high and trade.trade_date > high:
            continue
        filtered.append(trade)
    return filtered
