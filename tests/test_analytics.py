"""Tests for analytics breakdowns and trade filters.

**Feature: trade-journal**
"""

from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import make_trade, trade_strategy
from tradelog.stats.analytics import WEEKDAYS, analyze
from tradelog.stats.filters import filter_trades, period_start


class TestAnalyze:
    """
    **Feature: trade-journal, Property 15: Breakdowns Cover Every Trade**
    **Validates: Requirements 4.4**
    """

    def test_empty(self):
        assert analyze([]) is None

    def test_breakdowns(self):
        trades = [
            # 2024-01-01 is a Monday
            make_trade(symbol="AAPL", entry_date="2024-01-01T09:31:00", net_pnl=100.0),
            make_trade(symbol="AAPL", entry_date="2024-01-01T14:05:00", net_pnl=-20.0),
            make_trade(symbol="TSLA", entry_date="2024-01-03T09:45:00", net_pnl=-50.0),
            make_trade(symbol="MSFT", entry_date="2024-01-03", net_pnl=None),
        ]

        result = analyze(trades)

        assert result.overview.total_trades == 4
        assert result.overview.unique_days == 2
        assert result.overview.avg_trades_per_day == 2.0
        assert result.overview.total_pnl == 30.0
        assert result.overview.wins == 1
        assert result.overview.losses == 2

        assert [s.symbol for s in result.by_symbol] == ["AAPL", "MSFT", "TSLA"]
        aapl = result.by_symbol[0]
        assert (aapl.trades, aapl.pnl, aapl.wins, aapl.losses) == (2, 80.0, 1, 1)

        assert list(result.by_weekday) == WEEKDAYS
        assert result.by_weekday["Monday"].trades == 2
        assert result.by_weekday["Wednesday"].pnl == -50.0
        assert result.by_weekday["Sunday"].trades == 0

        assert set(result.by_hour) == {"9:00", "14:00"}
        assert result.by_hour["9:00"].trades == 2
        assert result.by_hour["9:00"].pnl == 50.0

    def test_camel_case_output(self):
        dumped = analyze([make_trade(net_pnl=1.0)]).model_dump(by_alias=True)

        assert set(dumped) == {"overview", "bySymbol", "byDayOfWeek", "byHour"}
        assert "avgTradesPerDay" in dumped["overview"]

    @given(trades=st.lists(trade_strategy(), min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_counts_consistent(self, trades):
        result = analyze(trades)

        assert sum(s.trades for s in result.by_symbol) == len(trades)
        assert sum(b.trades for b in result.by_weekday.values()) == len(trades)
        assert result.overview.wins + result.overview.losses <= len(trades)


class TestFilters:
    """Symbol, side and date filters."""

    @pytest.fixture
    def trades(self):
        return [
            make_trade(symbol="AAPL", side="BUY", entry_date="2024-01-01T10:00:00"),
            make_trade(symbol="AAPL", side="SELL", entry_date="2024-02-01T10:00:00"),
            make_trade(symbol="TSLA", side="SELL", entry_date="2024-03-01T10:00:00"),
        ]

    def test_symbol(self, trades):
        assert len(filter_trades(trades, symbol="aapl")) == 2

    def test_side_aliases(self, trades):
        assert len(filter_trades(trades, side="SHORT")) == 2
        assert len(filter_trades(trades, side="long")) == 1

    def test_unknown_side(self, trades):
        with pytest.raises(ValueError, match="Unknown side"):
            filter_trades(trades, side="FLAT")

    def test_date_range(self, trades):
        selected = filter_trades(trades, start=date(2024, 1, 15), end=date(2024, 3, 1))
        assert [t.trade_date for t in selected] == ["2024-02-01", "2024-03-01"]

    def test_no_filters(self, trades):
        assert filter_trades(trades) == trades


class TestPeriodStart:
    """Reporting period boundaries."""

    @pytest.mark.parametrize(
        "period,expected",
        [
            ("day", date(2024, 3, 31)),
            ("week", date(2024, 3, 24)),
            ("month", date(2024, 2, 29)),
            ("year", date(2023, 3, 31)),
            ("all", None),
        ],
    )
    def test_periods(self, period, expected):
        assert period_start(period, today=date(2024, 3, 31)) == expected

    def test_january_month_back(self):
        assert period_start("month", today=date(2024, 1, 15)) == date(2023, 12, 15)

    def test_unknown(self):
        with pytest.raises(ValueError):
            period_start("decade")
