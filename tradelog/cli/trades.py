"""Trade management commands for tradelog CLI.

Handles CSV import, listing, manual entry and deletion of trades.
"""

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradelog.cli.common import console, format_pnl, get_trade_store, show_error
from tradelog.errors import ManualTradeError, TradelogError
from tradelog.models import TradeRecord
from tradelog.parsers.csv_parser import MAPPERS, get_mapper


def _trades_table(trades: list[TradeRecord], title: str) -> Table:
    """Build a rich table of trades."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", style="dim")
    table.add_column("Date/Time", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Side", justify="center")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("P&L", justify="right")

    for trade in trades:
        side_color = "green" if trade.side == "BUY" else "red"
        table.add_row(
            (trade.id or "-")[:8],
            trade.entry_date.replace("T", " "),
            trade.symbol,
            f"[{side_color}]{trade.side}[/{side_color}]",
            str(trade.quantity),
            f"${trade.price:,.2f}",
            format_pnl(trade.net_pnl) if trade.net_pnl is not None else "-",
        )

    return table


@click.command(name="import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--no-match",
    is_flag=True,
    default=False,
    help="Do not match buys and sells into realized P&L.",
)
@click.option(
    "--mapper",
    type=click.Choice(sorted(MAPPERS)),
    default=None,
    help="Column layout: fixed positions or resolved from header labels.",
)
@click.pass_context
def import_trades(ctx: click.Context, file: Path, no_match: bool, mapper: Optional[str]) -> None:
    """Import trades from a broker CSV export.

    Rows that cannot be read are skipped. Spreadsheet files are
    rejected; export the statement as CSV first.

    \b
    Examples:
      tradelog import statement.csv
      tradelog import statement.csv --mapper header
      tradelog import statement.csv --no-match
    """
    from tradelog.journal import import_file

    config = ctx.obj["config"]
    import_config = config.get("import", {})
    store = get_trade_store(config)

    try:
        result = import_file(
            file,
            store,
            match_fills=import_config.get("match_fills", True) and not no_match,
            fee_per_trade=float(import_config.get("fee_per_trade", 0.0)),
            fee_per_share=float(import_config.get("fee_per_share", 0.0)),
            mapper=get_mapper(mapper or import_config.get("mapper", "fixed")),
        )
    except (TradelogError, ValueError) as e:
        show_error(str(e), title="Import Failed")
        raise SystemExit(1)
    finally:
        store.close()

    if result.saved_count == 0:
        console.print(Panel(
            f"[dim]No trades found in {file.name}[/dim]\n\n"
            "[dim]Make sure the export contains a header row with a Symbol column.[/dim]",
            title="[bold]Import[/bold]",
            border_style="dim",
        ))
        return

    console.print(Panel(
        f"[bold]Import Complete[/bold]\n\n"
        f"File:     {file.name}\n"
        f"Imported: [green]{result.saved_count}[/green] trades",
        title="[bold cyan]Trade Import[/bold cyan]",
        border_style="cyan",
    ))
    console.print(_trades_table(result.preview, title="Preview"))


@click.command()
@click.option("--symbol", type=str, default=None, help="Only show this symbol.")
@click.option(
    "--side",
    type=click.Choice(["BUY", "SELL", "LONG", "SHORT"], case_sensitive=False),
    default=None,
    help="Only show this side.",
)
@click.option("--days", type=int, default=None, help="Only show the last N days.")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum rows to show.")
@click.pass_context
def trades(
    ctx: click.Context,
    symbol: Optional[str],
    side: Optional[str],
    days: Optional[int],
    limit: int,
) -> None:
    """List stored trades, newest first.

    \b
    Examples:
      tradelog trades
      tradelog trades --symbol AAPL --days 7
    """
    from tradelog.stats.filters import filter_trades

    store = get_trade_store(ctx.obj["config"])
    try:
        all_trades = store.get_all()
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    start = date.today() - timedelta(days=days) if days is not None else None
    selected = filter_trades(all_trades, symbol=symbol, side=side, start=start)

    if not selected:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trades[/bold]",
            border_style="dim",
        ))
        return

    selected.sort(key=lambda t: t.entry_date, reverse=True)
    console.print(_trades_table(selected[:limit], title="Trades"))

    total_pnl = sum(t.pnl for t in selected)
    console.print(f"\n[bold]Total Trades:[/bold] {len(selected)}")
    console.print(f"[bold]Total P&L:[/bold] {format_pnl(total_pnl)}")


@click.command()
@click.option("--symbol", required=True, help="Ticker symbol.")
@click.option(
    "--side",
    type=click.Choice(["LONG", "SHORT"], case_sensitive=False),
    default="LONG",
    show_default=True,
)
@click.option("--entry-price", type=float, required=True, help="Entry price.")
@click.option("--shares", type=int, required=True, help="Number of shares.")
@click.option(
    "--entry-date",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="Entry date/time (defaults to now).",
)
@click.option("--exit-price", type=float, default=None, help="Exit price (closes the trade).")
@click.option(
    "--exit-date",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="Exit date/time (defaults to the entry date).",
)
@click.option("--notes", type=str, default=None, help="Journal notes.")
@click.option("--fees", type=float, default=None, help="Round-trip fees deducted from P&L.")
@click.pass_context
def add(
    ctx: click.Context,
    symbol: str,
    side: str,
    entry_price: float,
    shares: int,
    entry_date: Optional[datetime],
    exit_price: Optional[float],
    exit_date: Optional[datetime],
    notes: Optional[str],
    fees: Optional[float],
) -> None:
    """Add a trade by hand.

    \b
    Examples:
      tradelog add --symbol AAPL --entry-price 150 --shares 10
      tradelog add --symbol TSLA --side SHORT --entry-price 200 --shares 5 \\
                   --exit-price 190 --notes "Faded the open"
    """
    from tradelog.journal import build_manual_trade

    config = ctx.obj["config"]
    if fees is None:
        fees = float(config.get("import", {}).get("fee_per_trade", 0.0))

    try:
        trade = build_manual_trade(
            symbol=symbol,
            side=side,
            entry_price=entry_price,
            shares=shares,
            entry_date=entry_date or datetime.now().replace(microsecond=0),
            exit_price=exit_price,
            exit_date=exit_date,
            notes=notes,
            fees=fees,
        )
    except ManualTradeError as e:
        show_error(str(e), title="Invalid Trade")
        raise SystemExit(1)

    store = get_trade_store(config)
    try:
        trade = store.save(trade)
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    status = "Closed" if trade.exit_price is not None else "Open"
    pnl_line = f"\nNet P&L:  {format_pnl(trade.net_pnl)}" if trade.net_pnl is not None else ""
    console.print(Panel(
        f"[bold]{trade.symbol}[/bold] {trade.position_side} {trade.quantity} @ ${trade.price:,.2f}\n"
        f"Status:   {status}\n"
        f"ID:       {trade.id}"
        f"{pnl_line}",
        title="[bold cyan]Trade Added[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("trade_id")
@click.pass_context
def delete(ctx: click.Context, trade_id: str) -> None:
    """Delete a trade by ID.

    \b
    Examples:
      tradelog delete 3f2a9c1e5b7d4e0f8a6b2c4d1e3f5a7b
    """
    store = get_trade_store(ctx.obj["config"])
    try:
        removed = store.delete(trade_id)
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    if not removed:
        console.print(f"[yellow]No trade found with ID {trade_id}[/yellow]")
        raise SystemExit(1)

    console.print(f"[green]Deleted trade {trade_id}[/green]")


@click.command()
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Delete every stored trade.

    \b
    Examples:
      tradelog clear
      tradelog clear --yes
    """
    if not yes and not click.confirm("Delete all stored trades?", default=False):
        console.print("[dim]Cancelled[/dim]")
        return

    store = get_trade_store(ctx.obj["config"])
    try:
        store.clear_all()
    except TradelogError as e:
        show_error(str(e))
        raise SystemExit(1)
    finally:
        store.close()

    console.print("[green]All trade data cleared[/green]")
