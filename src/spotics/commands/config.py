"""
Configuration commands for spotics (`spotics config`).

- Show the effective settings and the state of each token cache
- Set the credentials and cache locations
- Store long-lived credentials in the credentials file or the keyring
- Drop cached access tokens
"""

import json
from pathlib import Path
from typing import Optional

import keyring.errors
import typer
from rich.console import Console

from ..core.auth import credentials_store, store_credentials
from ..core.config import get_settings, save_settings
from ..core.errors import SpoticsError
from ..core.token_store import TokenStore
from ..core.tokens import CacheEntry, Credentials

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    help="Manage credentials, paths, and token caches.",
)


def _cache_status(path: Path) -> str:
    try:
        entry = TokenStore(path, CacheEntry).load_sync()
    except SpoticsError as e:
        return f"unreadable ({e})"
    if entry is None:
        return "absent"
    state = "expired" if entry.is_expired() else "valid"
    return f"{state} until {entry.expires_at.isoformat()}"


@app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Show the effective paths and cache state. Secrets are never printed."""
    settings = get_settings()
    try:
        creds = credentials_store(settings).load_sync() or Credentials()
    except SpoticsError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    report = {
        "paths": {
            "credentials": str(settings.token_path),
            "cache": str(settings.cache_dir),
        },
        "credentials_file": {k: bool(getattr(creds, k)) for k in ("client_id", "client_secret", "sp_dc")},
        "web_api": _cache_status(settings.catalog_cache_path),
        "web_player": _cache_status(settings.lyrics_cache_path),
    }
    if json_output:
        typer.echo(json.dumps(report, indent=2))
        return
    console.print("[bold]Paths[/bold]")
    console.print(f"  Credentials: [blue]{report['paths']['credentials']}[/blue]")
    console.print(f"  Cache:       [blue]{report['paths']['cache']}[/blue]")
    console.print("[bold]Credentials file[/bold]")
    for k, present in report["credentials_file"].items():
        console.print(f"  {k}: {'[green]set[/green]' if present else '[yellow]not set[/yellow]'}")
    console.print("[bold]Token caches[/bold]")
    console.print(f"  web_api:    {report['web_api']}", highlight=False)
    console.print(f"  web_player: {report['web_player']}", highlight=False)


@app.command("path")
def config_path(
    token: Optional[Path] = typer.Option(None, "--token", help="Credentials JSON file."),
    cache: Optional[Path] = typer.Option(None, "--cache", help="Directory for token caches."),
):
    """Set the credentials file and cache directory, or print them."""
    settings = get_settings()
    if token is None and cache is None:
        console.print("[bold]Current Paths:[/bold]")
        console.print(f"  Credentials: [blue]{settings.token_path}[/blue]")
        console.print(f"  Cache:       [blue]{settings.cache_dir}[/blue]")
        return
    if token is not None:
        settings.token_path = token.expanduser().resolve()
    if cache is not None:
        settings.cache_dir = cache.expanduser().resolve()
    target = save_settings(settings)
    console.print(f"[green]✅ Paths saved to[/green] {target}")


@app.command("credentials")
def config_credentials(
    client_id: Optional[str] = typer.Option(None, "--client-id", help="Web API client id."),
    client_secret: Optional[str] = typer.Option(None, "--client-secret", help="Web API client secret."),
    sp_dc: Optional[str] = typer.Option(None, "--sp-dc", help="Value of the sp_dc browser cookie."),
    use_keyring: bool = typer.Option(False, "--keyring", help="Store in the system keyring instead of the file."),
):
    """Store long-lived credentials used to refresh tokens."""
    given = {"client_id": client_id, "client_secret": client_secret, "sp_dc": sp_dc}
    given = {k: v for k, v in given.items() if v}
    if not given:
        console.print("[yellow]Nothing to store. Pass --client-id, --client-secret or --sp-dc.[/yellow]")
        raise typer.Exit(1)

    if use_keyring:
        try:
            for k, v in given.items():
                store_credentials(k, v)
        except keyring.errors.KeyringError as e:
            console.print(f"[red]❌ Could not store credentials in keyring:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[green]✅ Stored in keyring:[/green] {', '.join(given)}")
        return

    settings = get_settings()
    store = credentials_store(settings)
    try:
        current = store.load_sync() or Credentials()
    except SpoticsError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    store.save_sync(current.model_copy(update=given))
    console.print(f"[green]✅ Stored in {store.path}:[/green] {', '.join(given)}")


@app.command("clear-cache")
def config_clear_cache():
    """Delete cached access tokens; the next run re-authenticates."""
    settings = get_settings()
    for path in (settings.catalog_cache_path, settings.lyrics_cache_path):
        if path.exists():
            path.unlink()
            console.print(f"Removed {path}")
