"""Report commands for tradelog CLI.

Daily P&L, overall statistics, analytics breakdowns and export.
"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradelog.cli.common import console, format_pnl, get_trade_store, show_error
from tradelog.errors import TradelogError
from tradelog.models import OverallStats
from tradelog.stats.filters import PERIODS


def _format_profit_factor(value: Optional[float]) -> str:
    if value is None:
        return "∞"
    return f"{value:.2f}"


@click.command()
@click.option("--days", type=int, default=None, help="Only show the last N trading days.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
@click.pass_context
def daily(ctx: click.Context, days: Optional[int], as_json: bool) -> None:
    """Show daily P&L, trade count and win rate.

    \b
    Examples:
      tradelog daily
      tradelog daily --days 10
      tradelog daily --json
    """
    from tradelog.journal import compute_daily_stats

    store = get_trade_store(ctx.obj["config"])
    try:
        stats = compute_daily_stats(store)
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    if days is not None:
        stats = stats[-days:] if days > 0 else []

    if as_json:
        click.echo(json.dumps([s.model_dump(by_alias=True) for s in stats], indent=2))
        return

    if not stats:
        console.print(Panel(
            "[dim]No trades recorded yet[/dim]\n\n"
            "Import an export with [cyan]tradelog import FILE[/cyan]",
            title="[bold]Daily P&L[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Daily P&L",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Date", style="dim")
    table.add_column("Trades", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Win Rate", justify="right")

    for stat in stats:
        win_rate = f"{stat.win_rate}%" if stat.win_rate is not None else "-"
        table.add_row(stat.date, str(stat.trades), format_pnl(stat.pnl), win_rate)

    console.print(table)

    total_pnl = sum(s.pnl for s in stats)
    green_days = sum(1 for s in stats if s.pnl > 0)
    console.print(f"\n[bold]Days:[/bold] {len(stats)} ({green_days} green)")
    console.print(f"[bold]Total P&L:[/bold] {format_pnl(total_pnl)}")


def _stats_panel(stats: OverallStats, title: str) -> Panel:
    pnl_color = "green" if stats.total_pnl >= 0 else "red"
    streak = stats.current_streak
    streak_text = f"{streak} win(s)" if streak > 0 else f"{-streak} loss(es)" if streak < 0 else "-"

    return Panel(
        f"[bold]Trades[/bold]\n"
        f"  Total:         {stats.total_trades}\n"
        f"  Wins:          [green]{stats.win_count}[/green]\n"
        f"  Losses:        [red]{stats.loss_count}[/red]\n"
        f"  Breakeven:     {stats.breakeven_count}\n"
        f"  Win Rate:      {stats.win_rate:.1f}%\n\n"
        f"[bold]P&L[/bold]\n"
        f"  Total:         [{pnl_color}]${stats.total_pnl:,.2f}[/{pnl_color}]\n"
        f"  Average:       {format_pnl(stats.avg_pnl)}\n"
        f"  Avg Winner:    {format_pnl(stats.avg_winner)}\n"
        f"  Avg Loser:     {format_pnl(stats.avg_loser)}\n"
        f"  Best Trade:    {format_pnl(stats.best_trade)}\n"
        f"  Worst Trade:   {format_pnl(stats.worst_trade)}\n"
        f"  Profit Factor: {_format_profit_factor(stats.profit_factor)}\n\n"
        f"[bold]Risk[/bold]\n"
        f"  Max Drawdown:  [red]${stats.max_drawdown:,.2f}[/red]\n"
        f"  Win Streak:    {stats.max_win_streak}\n"
        f"  Loss Streak:   {stats.max_loss_streak}\n"
        f"  Current:       {streak_text}",
        title=f"[bold cyan]{title}[/bold cyan]",
        border_style="cyan",
    )


@click.command()
@click.option(
    "--period",
    type=click.Choice(PERIODS),
    default="all",
    show_default=True,
    help="Reporting period.",
)
@click.option("--symbol", type=str, default=None, help="Only include this symbol.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
@click.pass_context
def stats(ctx: click.Context, period: str, symbol: Optional[str], as_json: bool) -> None:
    """Show overall trading statistics.

    \b
    Examples:
      tradelog stats
      tradelog stats --period month
      tradelog stats --symbol AAPL --json
    """
    from tradelog.journal import compute_overall_stats
    from tradelog.stats.filters import filter_trades, period_start
    from tradelog.stats.summary import summarize

    store = get_trade_store(ctx.obj["config"])
    try:
        if period == "all" and not symbol:
            overall = compute_overall_stats(store)
        else:
            selected = filter_trades(
                store.get_all(),
                symbol=symbol,
                start=period_start(period),
            )
            overall = summarize(selected)
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    if as_json:
        click.echo(json.dumps(overall.model_dump(by_alias=True), indent=2))
        return

    title = "Trading Statistics"
    if symbol:
        title += f" - {symbol.upper()}"
    if period != "all":
        title += f" ({period})"

    console.print(_stats_panel(overall, title))


@click.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
@click.pass_context
def analytics(ctx: click.Context, as_json: bool) -> None:
    """Break performance down by symbol, weekday and hour.

    \b
    Examples:
      tradelog analytics
      tradelog analytics --json
    """
    from tradelog.journal import compute_analytics

    store = get_trade_store(ctx.obj["config"])
    try:
        result = compute_analytics(store)
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    if as_json:
        payload = result.model_dump(by_alias=True) if result is not None else None
        click.echo(json.dumps(payload, indent=2))
        return

    if result is None:
        console.print(Panel(
            "[dim]No trades recorded yet[/dim]",
            title="[bold]Analytics[/bold]",
            border_style="dim",
        ))
        return

    overview = result.overview
    console.print(Panel(
        f"Trades:        {overview.total_trades}\n"
        f"Trading Days:  {overview.unique_days}\n"
        f"Trades/Day:    {overview.avg_trades_per_day:.1f}\n"
        f"Win Rate:      {overview.win_rate:.1f}%\n"
        f"Total P&L:     {format_pnl(overview.total_pnl)}",
        title="[bold cyan]Overview[/bold cyan]",
        border_style="cyan",
    ))

    symbol_table = Table(title="By Symbol", show_header=True, header_style="bold cyan")
    symbol_table.add_column("Symbol", style="bold")
    symbol_table.add_column("Trades", justify="right")
    symbol_table.add_column("Wins", justify="right")
    symbol_table.add_column("Losses", justify="right")
    symbol_table.add_column("P&L", justify="right")
    for row in result.by_symbol:
        symbol_table.add_row(
            row.symbol, str(row.trades), str(row.wins), str(row.losses), format_pnl(row.pnl)
        )
    console.print(symbol_table)

    weekday_table = Table(title="By Weekday", show_header=True, header_style="bold cyan")
    weekday_table.add_column("Day")
    weekday_table.add_column("Trades", justify="right")
    weekday_table.add_column("P&L", justify="right")
    for day, bucket in result.by_weekday.items():
        weekday_table.add_row(day, str(bucket.trades), format_pnl(bucket.pnl))
    console.print(weekday_table)

    if result.by_hour:
        hour_table = Table(title="By Hour", show_header=True, header_style="bold cyan")
        hour_table.add_column("Hour")
        hour_table.add_column("Trades", justify="right")
        hour_table.add_column("P&L", justify="right")
        for hour in sorted(result.by_hour, key=lambda h: int(h.split(":")[0])):
            bucket = result.by_hour[hour]
            hour_table.add_row(hour, str(bucket.trades), format_pnl(bucket.pnl))
        console.print(hour_table)


@click.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "json"]),
    default="csv",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout.",
)
@click.pass_context
def export(ctx: click.Context, fmt: str, output: Optional[Path]) -> None:
    """Export stored trades as CSV or JSON.

    \b
    Examples:
      tradelog export > trades.csv
      tradelog export --format json -o trades.json
    """
    from tradelog.export import export_csv, export_json

    store = get_trade_store(ctx.obj["config"])
    try:
        trades = store.get_all()
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    trades.sort(key=lambda t: t.entry_date, reverse=True)
    content = export_csv(trades) if fmt == "csv" else export_json(trades)

    if output is None:
        click.echo(content, nl=not content.endswith("\n"))
        return

    output.write_text(content)
    console.print(f"[green]Exported {len(trades)} trades to {output}[/green]")
