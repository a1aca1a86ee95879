"""Trade journal operations.

Ties the CSV parser, the trade store and the statistics together:
import broker exports, record manual trades, and report daily and
overall performance.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from tradelog.db.store import TradeStore, with_ids
from tradelog.errors import ManualTradeError
from tradelog.models import DailyStat, ImportResult, OverallStats, TradeAnalytics, TradeRecord
from tradelog.parsers.csv_parser import ColumnMapper, parse_report, parse_trades
from tradelog.parsers.formats import decode_upload
from tradelog.stats.analytics import analyze
from tradelog.stats.daily import aggregate_by_day
from tradelog.stats.matching import attach_realized_pnl
from tradelog.stats.summary import summarize

logger = logging.getLogger(__name__)

PREVIEW_SIZE = 3
MAX_SYMBOL_LENGTH = 20
IMPORT_TAG = "csv-import"
MANUAL_TAG = "manual-entry"

__all__ = [
    "build_manual_trade",
    "compute_analytics",
    "compute_daily_stats",
    "compute_overall_stats",
    "import_and_persist",
    "import_file",
    "parse_trades",
]


def import_and_persist(
    raw_text: str,
    store: TradeStore,
    match_fills: bool = True,
    fee_per_trade: float = 0.0,
    fee_per_share: float = 0.0,
    mapper: Optional[ColumnMapper] = None,
) -> ImportResult:
    """Parse CSV text and save the trades.

    Nothing is written when no trades were parsed. Store failures
    propagate; the save is a single write, so a failure means nothing
    from this import was stored.

    Args:
        raw_text: Decoded CSV text.
        store: Trade store to save into.
        match_fills: Attach realized P&L by FIFO-matching fills.
        fee_per_trade: Flat fee per closing fill when matching.
        fee_per_share: Per-share fee when matching.
        mapper: Column mapper for the parser.

    Returns:
        ImportResult with the saved count and a preview of the first trades.

    Raises:
        StoreError: If the store cannot be read or written.
    """
    report = parse_report(raw_text, mapper)
    records = report.accepted

    if not records:
        logger.info("Nothing to import (%d rows skipped)", len(report.skipped))
        return ImportResult(saved_count=0, preview=[], skipped_count=len(report.skipped))

    records = [r.model_copy(update={"tags": [*r.tags, IMPORT_TAG]}) for r in records]
    if match_fills:
        records = attach_realized_pnl(records, fee_per_trade, fee_per_share)

    records = with_ids(records)
    saved = store.save_all(records)
    logger.info("Imported %d trades (%d rows skipped)", saved, len(report.skipped))

    return ImportResult(
        saved_count=saved,
        preview=records[:PREVIEW_SIZE],
        skipped_count=len(report.skipped),
    )


def import_file(path: Path, store: TradeStore, **options) -> ImportResult:
    """Import a broker export file.

    Args:
        path: CSV file path.
        store: Trade store to save into.
        **options: Passed through to import_and_persist.

    Raises:
        UnsupportedFormatError: If the file is a spreadsheet or binary.
        StoreError: If the store cannot be read or written.
    """
    text = decode_upload(path.read_bytes(), path.name)
    return import_and_persist(text, store, **options)


def compute_daily_stats(store: TradeStore) -> list[DailyStat]:
    """Daily P&L, trade count and win rate for every stored date."""
    return aggregate_by_day(store.get_all())


def compute_overall_stats(store: TradeStore) -> OverallStats:
    """All-time statistics over every stored trade."""
    return summarize(store.get_all())


def compute_analytics(store: TradeStore) -> Optional[TradeAnalytics]:
    """Symbol, weekday and hour breakdowns; None when no trades are stored."""
    return analyze(store.get_all())


def build_manual_trade(
    symbol: str,
    side: str,
    entry_price: float,
    shares: int,
    entry_date: datetime,
    exit_price: Optional[float] = None,
    exit_date: Optional[datetime] = None,
    notes: Optional[str] = None,
    fees: float = 0.0,
) -> TradeRecord:
    """Build a trade entered by hand.

    A trade with an exit price is closed and gets its net P&L computed:
    ``(exit - entry) * shares`` for longs, ``(entry - exit) * shares``
    for shorts, less fees.

    Args:
        symbol: Ticker symbol.
        side: LONG/SHORT (or BUY/SELL).
        entry_price: Entry price.
        shares: Number of shares.
        entry_date: Entry timestamp.
        exit_price: Optional exit price.
        exit_date: Optional exit timestamp (defaults to entry_date).
        notes: Optional notes.
        fees: Round-trip fees deducted from P&L.

    Returns:
        TradeRecord (without an id).

    Raises:
        ManualTradeError: If any field is invalid.
    """
    symbol = (symbol or "").strip().upper()
    if not 1 <= len(symbol) <= MAX_SYMBOL_LENGTH:
        raise ManualTradeError("Invalid symbol")

    normalized_side = {"LONG": "BUY", "BUY": "BUY", "SHORT": "SELL", "SELL": "SELL"}.get(
        (side or "").upper()
    )
    if normalized_side is None:
        raise ManualTradeError("Side must be LONG or SHORT")

    if entry_price <= 0 or shares <= 0:
        raise ManualTradeError("Entry price and shares must be positive")

    if exit_price is not None and exit_price <= 0:
        raise ManualTradeError("Exit price must be positive")

    net_pnl = None
    exit_iso = None
    if exit_price is not None:
        price_diff = exit_price - entry_price if normalized_side == "BUY" else entry_price - exit_price
        net_pnl = price_diff * shares - fees
        exit_iso = (exit_date or entry_date).isoformat(timespec="seconds")

    return TradeRecord(
        symbol=symbol,
        side=normalized_side,
        quantity=shares,
        price=entry_price,
        date=entry_date.date().isoformat(),
        time=entry_date.strftime("%H:%M:%S"),
        entry_date=entry_date.isoformat(timespec="seconds"),
        net_pnl=net_pnl,
        exit_price=exit_price,
        exit_date=exit_iso,
        notes=notes,
        tags=[MANUAL_TAG],
    )
