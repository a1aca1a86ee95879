"""Property-based tests for the stats summarizer.

**Feature: trade-journal**
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import make_trade, trade_strategy
from tradelog.models import OverallStats
from tradelog.stats.summary import profit_factor, summarize


def _trades(*pnls):
    return [
        make_trade(entry_date=f"2024-01-{i + 1:02d}T10:00:00", net_pnl=pnl)
        for i, pnl in enumerate(pnls)
    ]


class TestEmptySummary:
    """
    **Feature: trade-journal, Property 12: Empty Set Summarizes To Zeros**
    **Validates: Requirements 4.4, 7**
    """

    def test_all_zero(self):
        stats = summarize([])

        assert stats == OverallStats()
        assert stats.total_trades == 0
        assert stats.win_rate == 0.0
        assert stats.total_pnl == 0.0
        assert stats.avg_pnl == 0.0
        assert stats.best_trade == 0.0
        assert stats.worst_trade == 0.0
        assert stats.profit_factor == 0.0


class TestCountsBounded:
    """
    **Feature: trade-journal, Property 13: Wins And Losses Bounded By Total**
    **Validates: Requirements 4.4, 8**

    *For any* trade set, win count plus loss count never exceeds the
    number of trades.
    """

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=50))
    @settings(max_examples=100)
    def test_bounded(self, trades):
        stats = summarize(trades)

        assert stats.win_count + stats.loss_count <= stats.total_trades
        assert stats.win_count + stats.loss_count + stats.breakeven_count == stats.total_trades
        assert 0 <= stats.win_rate <= 100
        assert stats.total_pnl == sum(t.pnl for t in trades)


class TestSummaryFigures:
    """Averages, extremes and profit factor."""

    def test_mixed_trades(self):
        stats = summarize(_trades(100.0, -50.0, 0.0, 200.0, None, -25.0))

        assert stats.total_trades == 6
        assert stats.win_count == 2
        assert stats.loss_count == 2
        assert stats.breakeven_count == 2
        assert stats.win_rate == 50.0
        assert stats.total_pnl == 225.0
        assert stats.avg_pnl == 37.5
        assert stats.avg_winner == 150.0
        assert stats.avg_loser == -37.5
        assert stats.gross_profit == 300.0
        assert stats.gross_loss == 75.0
        assert stats.profit_factor == 4.0
        assert stats.best_trade == 200.0
        assert stats.worst_trade == -50.0

    def test_wins_without_losses(self):
        stats = summarize(_trades(10.0, 20.0))

        assert stats.profit_factor is None
        assert stats.model_dump(by_alias=True)["profitFactor"] is None

    def test_only_losses(self):
        assert summarize(_trades(-10.0)).profit_factor == 0.0

    def test_only_breakeven(self):
        stats = summarize(_trades(0.0, None))

        assert stats.profit_factor == 0.0
        assert stats.win_rate == 0.0

    def test_profit_factor_convention(self):
        assert profit_factor(0.0, 0.0, has_wins=False) == 0.0
        assert profit_factor(50.0, 0.0, has_wins=True) is None
        assert profit_factor(50.0, 25.0, has_wins=True) == 2.0

    def test_camel_case_output(self):
        dumped = summarize(_trades(10.0)).model_dump(by_alias=True)

        for key in ("totalTrades", "winCount", "lossCount", "winRate", "totalPnl",
                    "avgPnl", "avgWinner", "avgLoser", "profitFactor", "bestTrade",
                    "worstTrade"):
            assert key in dumped


class TestStreaksAndDrawdown:
    """Streaks and drawdown follow entry-date order."""

    def test_streaks(self):
        stats = summarize(_trades(10.0, 20.0, 30.0, -5.0, -5.0, 0.0, 15.0, 5.0))

        assert stats.max_win_streak == 3
        assert stats.max_loss_streak == 2
        assert stats.current_streak == 2

    def test_current_losing_streak(self):
        assert summarize(_trades(10.0, -1.0, -2.0)).current_streak == -2

    def test_drawdown(self):
        stats = summarize(_trades(100.0, -30.0, -50.0, 40.0, -90.0, 200.0))

        # peak 100, trough -30 after the -90
        assert stats.max_drawdown == 130.0

    def test_order_uses_entry_date(self):
        trades = [
            make_trade(entry_date="2024-01-03T10:00:00", net_pnl=-10.0),
            make_trade(entry_date="2024-01-01T10:00:00", net_pnl=10.0),
            make_trade(entry_date="2024-01-02T10:00:00", net_pnl=10.0),
        ]

        stats = summarize(trades)

        assert stats.current_streak == -1
        assert stats.max_win_streak == 2
