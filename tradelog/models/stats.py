"""Aggregated statistics models."""

from typing import Optional
from pydantic import BaseModel, Field


class DailyStat(BaseModel):
    """Aggregate figures for one calendar date."""

    date: str = Field(..., description="ISO date (YYYY-MM-DD)")
    pnl: float = Field(..., description="Sum of realized P&L for the date")
    trades: int = Field(..., ge=0, description="Number of trade records on the date")
    win_rate: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        alias="winRate",
        description="Percent of symbols with positive P&L among symbols with nonzero P&L",
    )

    model_config = {"frozen": True, "populate_by_name": True}


class OverallStats(BaseModel):
    """All-time statistics over the full trade set."""

    total_trades: int = Field(default=0, ge=0, alias="totalTrades")
    win_count: int = Field(default=0, ge=0, alias="winCount")
    loss_count: int = Field(default=0, ge=0, alias="lossCount")
    breakeven_count: int = Field(default=0, ge=0, alias="breakevenCount")
    win_rate: float = Field(default=0.0, ge=0, le=100, alias="winRate")
    total_pnl: float = Field(default=0.0, alias="totalPnl")
    avg_pnl: float = Field(default=0.0, alias="avgPnl")
    avg_winner: float = Field(default=0.0, alias="avgWinner")
    avg_loser: float = Field(default=0.0, alias="avgLoser")
    gross_profit: float = Field(default=0.0, ge=0, alias="grossProfit")
    gross_loss: float = Field(default=0.0, ge=0, alias="grossLoss")
    profit_factor: Optional[float] = Field(
        default=0.0,
        alias="profitFactor",
        description="Gross profit / gross loss; None when there are wins but no losses",
    )
    best_trade: float = Field(default=0.0, alias="bestTrade")
    worst_trade: float = Field(default=0.0, alias="worstTrade")
    max_win_streak: int = Field(default=0, ge=0, alias="maxWinStreak")
    max_loss_streak: int = Field(default=0, ge=0, alias="maxLossStreak")
    current_streak: int = Field(
        default=0, alias="currentStreak", description="+n consecutive wins, -n losses"
    )
    max_drawdown: float = Field(default=0.0, ge=0, alias="maxDrawdown")

    model_config = {"frozen": True, "populate_by_name": True}


class SymbolStat(BaseModel):
    """Per-symbol performance."""

    symbol: str
    trades: int = Field(..., ge=0)
    pnl: float
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class BucketStat(BaseModel):
    """Trade count and P&L for a weekday or hour bucket."""

    trades: int = Field(default=0, ge=0)
    pnl: float = Field(default=0.0)

    model_config = {"frozen": True}


class AnalyticsOverview(BaseModel):
    """Headline numbers for the analytics view."""

    total_trades: int = Field(..., ge=0, alias="totalTrades")
    unique_days: int = Field(..., ge=0, alias="uniqueDays")
    total_pnl: float = Field(..., alias="totalPnl")
    win_rate: float = Field(..., ge=0, le=100, alias="winRate")
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    avg_trades_per_day: float = Field(..., ge=0, alias="avgTradesPerDay")

    model_config = {"frozen": True, "populate_by_name": True}


class TradeAnalytics(BaseModel):
    """Breakdown of trades by symbol, weekday and hour of day."""

    overview: AnalyticsOverview
    by_symbol: list[SymbolStat] = Field(default_factory=list, alias="bySymbol")
    by_weekday: dict[str, BucketStat] = Field(default_factory=dict, alias="byDayOfWeek")
    by_hour: dict[str, BucketStat] = Field(default_factory=dict, alias="byHour")

    model_config = {"frozen": True, "populate_by_name": True}
