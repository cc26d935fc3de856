"""
spotics CLI - Main entry point using Typer.

This module configures the main Typer application, registers the commands and
defines global options like --version and --verbose.
"""

import typer
from rich.console import Console
from rich.traceback import install

from .commands import config, convert, fetch
from .core.logging_util import setup_logging

# Rich traceback handler for unexpected exceptions
install(show_locals=False)

console = Console(stderr=True)

app = typer.Typer(
    name="spotics",
    help="🎵 spotics - Embed Spotify's time-synced lyrics into your local audio files.",
    epilog="Use `spotics [COMMAND] --help` for more info on a specific command.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.command("fetch")(fetch.fetch)
app.command("convert")(convert.convert)
app.add_typer(
    config.app,
    name="config",
    help="🔐 Manage credentials, paths, and token caches.",
)


def _version_callback(value: bool):
    if value:
        from . import __version__

        console.print(f"spotics v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(None, "--verbose", help="Enable DEBUG-level logging."),
    quiet: bool = typer.Option(None, "--quiet", help="Reduce logging to warnings and errors."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines to stderr."),
):
    """
    spotics - time-synced lyrics for local audio files.
    """
    setup_logging(json_logs=json_logs, verbose=bool(verbose), quiet=bool(quiet))


def cli():
    """Entry point for the console script defined in pyproject.toml."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Operation cancelled by user.[/yellow]")
        raise SystemExit(130)


if __name__ == "__main__":
    cli()
