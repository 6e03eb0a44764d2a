"""Sedbot CLI — command line interface."""

import asyncio
import sys

import click
from rich.console import Console

from . import __version__
from .commands.replace import MATCH_TIMEOUT, parse_rule
from .config import SettingsError, load_settings
from .errors import ParseError

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="sedbot")
def cli():
    """Sedbot — sed-style message rewriting bot for Telegram"""
    pass


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def start(debug):
    """Start the Telegram bot."""
    from .main import run, setup_logging

    setup_logging(debug=debug)
    try:
        settings = load_settings()
    except SettingsError as e:
        console.print(f"[red]Environment error:[/red] {e}")
        sys.exit(1)

    console.print("[bold blue]Starting Sedbot...[/bold blue]")
    if not asyncio.run(run(settings)):
        console.print("[red]Too many failures, giving up.[/red]")
        sys.exit(1)


@cli.command()
@click.argument("rule")
@click.argument("text")
def apply(rule, text):
    """Apply a s/search/replacement/flags RULE to TEXT offline."""
    try:
        request = parse_rule(rule)
    except ParseError as e:
        console.print(str(e), style="red", markup=False, highlight=False)
        sys.exit(1)
    if request is None:
        console.print("[red]not a substitution rule (expected s/search/replacement/flags)[/red]")
        sys.exit(1)
    try:
        click.echo(request.apply(text, timeout=MATCH_TIMEOUT))
    except TimeoutError:
        console.print(f"[red]matching took longer than {MATCH_TIMEOUT}s, stopped[/red]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
