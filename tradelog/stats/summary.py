"""All-time trade statistics."""

from typing import Iterable, Optional

from tradelog.models import OverallStats, TradeRecord


def _streaks(pnls: list[float]) -> tuple[int, int, int]:
    """Longest win run, longest loss run, and the current run.

    Breakeven trades neither extend nor reset the longest runs, but they
    end the current run.
    """
    max_win = max_loss = run_win = run_loss = 0
    for pnl in pnls:
        if pnl > 0:
            run_win += 1
            run_loss = 0
            max_win = max(max_win, run_win)
        elif pnl < 0:
            run_loss += 1
            run_win = 0
            max_loss = max(max_loss, run_loss)

    current = 0
    for pnl in reversed(pnls):
        if pnl > 0 and current >= 0:
            current += 1
        elif pnl < 0 and current <= 0:
            current -= 1
        else:
            break

    return max_win, max_loss, current


def _max_drawdown(pnls: list[float]) -> float:
    """Largest peak-to-trough drop of the cumulative P&L curve."""
    peak = running = drawdown = 0.0
    for pnl in pnls:
        running += pnl
        peak = max(peak, running)
        drawdown = max(drawdown, peak - running)
    return drawdown


def profit_factor(gross_profit: float, gross_loss: float, has_wins: bool) -> Optional[float]:
    """Gross profit over gross loss.

    Returns 0.0 when there are no wins and no losses, and None when
    there are wins but no losses (the ratio is unbounded).
    """
    if gross_loss > 0:
        return gross_profit / gross_loss
    return None if has_wins else 0.0


def summarize(records: Iterable[TradeRecord]) -> OverallStats:
    """Compute overall statistics for a trade set.

    A trade wins when its net P&L is positive and loses when negative;
    zero or missing P&L counts as neither. Streaks and drawdown follow
    entry-date order.

    Args:
        records: Trade records.

    Returns:
        OverallStats; all zeros for an empty set.
    """
    trades = sorted(records, key=lambda t: t.entry_date)
    if not trades:
        return OverallStats()

    pnls = [t.pnl for t in trades]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]

    total_trades = len(trades)
    total_pnl = sum(pnls)
    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))
    decided = len(wins) + len(losses)
    max_win_streak, max_loss_streak, current_streak = _streaks(pnls)

    return OverallStats(
        total_trades=total_trades,
        win_count=len(wins),
        loss_count=len(losses),
        breakeven_count=total_trades - decided,
        win_rate=(len(wins) / decided * 100) if decided else 0.0,
        total_pnl=total_pnl,
        avg_pnl=total_pnl / total_trades,
        avg_winner=(gross_profit / len(wins)) if wins else 0.0,
        avg_loser=(sum(losses) / len(losses)) if losses else 0.0,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        profit_factor=profit_factor(gross_profit, gross_loss, bool(wins)),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        max_win_streak=max_win_streak,
        max_loss_streak=max_loss_streak,
        current_streak=current_streak,
        max_drawdown=_max_drawdown(pnls),
    )
