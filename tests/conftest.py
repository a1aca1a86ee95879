"""Shared fixtures and strategies for tradelog tests."""

import tempfile
from datetime import date
from pathlib import Path

import pytest
from hypothesis import strategies as st

from tradelog.db.store import SqliteKeyValueStore, TradeStore
from tradelog.models import TradeRecord


@pytest.fixture
def temp_store():
    """Create a trade store backed by a temporary SQLite database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield TradeStore(SqliteKeyValueStore(db_path))


def make_trade(
    symbol: str = "AAPL",
    side: str = "BUY",
    quantity: int = 100,
    price: float = 150.0,
    entry_date: str = "2024-01-02T09:31:00",
    net_pnl=None,
    **extra,
) -> TradeRecord:
    """Build a TradeRecord with sensible defaults."""
    return TradeRecord(
        symbol=symbol,
        side=side,
        quantity=quantity,
        price=price,
        date=entry_date.split("T")[0],
        entry_date=entry_date,
        net_pnl=net_pnl,
        **extra,
    )


def trade_strategy():
    """Generate TradeRecords with optional realized P&L."""
    return st.builds(
        make_trade,
        symbol=st.sampled_from(["AAPL", "TSLA", "MSFT", "SPY"]),
        side=st.sampled_from(["BUY", "SELL"]),
        quantity=st.integers(min_value=1, max_value=10000),
        price=st.floats(min_value=0.01, max_value=10000.0, allow_nan=False, allow_infinity=False),
        entry_date=st.dates(
            min_value=date(2023, 1, 1),
            max_value=date(2024, 12, 31),
        ).map(lambda d: f"{d.isoformat()}T10:00:00"),
        net_pnl=st.one_of(
            st.none(),
            st.integers(min_value=-10000, max_value=10000).map(float),
        ),
    )
