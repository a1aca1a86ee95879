"""Shared helpers for tradelog CLI commands."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tradelog.config import load_config
from tradelog.db.store import TradeStore, open_key_value_store
from tradelog.errors import ConfigError, TradelogError

console = Console()


def show_error(message: str, title: str = "Error") -> None:
    """Print a red error panel."""
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def get_config() -> dict:
    """Load configuration, exiting with an error panel if it is malformed."""
    try:
        return load_config()
    except ConfigError as e:
        show_error(str(e), title="Configuration Error")
        raise SystemExit(1)


def get_trade_store(config: dict) -> TradeStore:
    """Open the trade store named in the config, exiting if it cannot be opened."""
    try:
        kv = open_key_value_store(config)
    except (TradelogError, ValueError) as e:
        show_error(str(e), title="Store Error")
        raise SystemExit(1)
    return TradeStore(kv, key=config["store"]["key"])


def format_pnl(value: float) -> str:
    """Color and sign a P&L amount for rich output."""
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else ""
    return f"[{color}]{sign}${value:,.2f}[/{color}]"
