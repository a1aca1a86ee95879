"""Main CLI entry point for tradelog.

This module provides the main click group and lazy loading
of command modules to keep startup fast.
"""

import importlib

import click
from rich.panel import Panel

from tradelog.cli.common import console, get_config
from tradelog.config import configure_logging, create_template_config, get_config_path


class LazyGroup(click.Group):
    """Click group whose subcommands are imported on first use.

    Each entry in ``lazy_subcommands`` maps a command name to a
    ``"package.module:attribute"`` spec.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lazy_specs = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_specs})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        spec = self.lazy_specs.get(cmd_name)
        if cmd_name in self.commands or spec is None:
            return super().get_command(ctx, cmd_name)

        module_name, _, attr_name = spec.partition(":")
        command = getattr(importlib.import_module(module_name), attr_name, None)
        if not isinstance(command, click.Command):
            raise click.ClickException(f"{spec} is not a click command")

        self.add_command(command, cmd_name)
        return command


LAZY_SUBCOMMANDS = {
    "import": "tradelog.cli.trades:import_trades",
    "trades": "tradelog.cli.trades:trades",
    "add": "tradelog.cli.trades:add",
    "delete": "tradelog.cli.trades:delete",
    "clear": "tradelog.cli.trades:clear",
    "daily": "tradelog.cli.reports:daily",
    "stats": "tradelog.cli.reports:stats",
    "analytics": "tradelog.cli.reports:analytics",
    "export": "tradelog.cli.reports:export",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradelog")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """tradelog - trade journal for broker CSV exports.

    Import fills from your broker's CSV export, then review daily
    and all-time performance.

    \b
    Quick Start:
      tradelog import trades.csv   # Import a broker export
      tradelog daily               # Daily P&L and win rate
      tradelog stats               # All-time statistics
    """
    ctx.ensure_object(dict)
    config = get_config()
    configure_logging(config, verbose=verbose)
    ctx.obj["config"] = config


@cli.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a template configuration file.

    \b
    Examples:
      tradelog init
      tradelog init --force
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists:[/yellow] {config_path}\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold yellow]Config Exists[/bold yellow]",
            border_style="yellow",
        ))
        return

    written = create_template_config(config_path)
    console.print(Panel(
        f"[green]Config written to[/green] {written}",
        title="[bold cyan]Init[/bold cyan]",
        border_style="cyan",
    ))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
