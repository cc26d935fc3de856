"""
Fetch command (`spotics fetch`).

Reads the search tags from an audio file, acquires both provider sessions,
picks the matching catalog track, prints its time-synced lyrics and embeds
them into the file.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..core.auth import load_credentials
from ..core.cache import build_coordinator
from ..core.config import get_settings
from ..core.errors import SessionAcquisitionError, SpoticsError
from ..core.http import HttpClient
from ..core.lrc import LyricLine, format_lrc
from ..core.metadata import TrackTags, read_query_tags, write_lyrics
from ..plugins.web_api import SearchQuery, TrackInfo

console = Console(stderr=True)
logger = logging.getLogger(__name__)


class Mode(str, Enum):
    auto = "auto"
    manual = "manual"
    middle = "middle"


def report_error(e: SpoticsError) -> None:
    if isinstance(e, SessionAcquisitionError):
        for name, err in e.errors.items():
            console.print(f"[red]❌ {name}:[/red] {escape(str(err))}", highlight=False)
    else:
        console.print(f"[red]❌ Error:[/red] {escape(str(e))}", highlight=False)


def select_track_by_identity(tracks: List[TrackInfo], tags: TrackTags) -> Optional[TrackInfo]:
    for t in tracks:
        if (t.title, t.artist, t.album) == (tags.title, tags.artist, tags.album):
            return t
    return None


def select_track_by_user(tracks: List[TrackInfo], tags: TrackTags) -> Optional[TrackInfo]:
    if not tracks:
        return None
    table = Table(
        title=f"Title: '{tags.title}', Artist: '{tags.artist}', Album: '{tags.album}'",
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Artist")
    table.add_column("Album")
    for i, t in enumerate(tracks, start=1):
        table.add_row(str(i), t.title, t.artist, t.album)
    console.print(table)

    choices = [str(i) for i in range(1, len(tracks) + 1)] + ["q"]
    answer = Prompt.ask("Select one or quit with 'q'", choices=choices, console=console)
    if answer == "q":
        return None
    return tracks[int(answer) - 1]


def choose_track(tracks: List[TrackInfo], tags: TrackTags, mode: Mode) -> Optional[TrackInfo]:
    if mode == Mode.manual:
        return select_track_by_user(tracks, tags)
    track = select_track_by_identity(tracks, tags)
    if track is not None:
        console.print(f"Selected track: {track}", highlight=False)
        return track
    if mode == Mode.middle:
        return select_track_by_user(tracks, tags)
    return None


async def fetch_lyrics_for(tags: TrackTags, mode: Mode) -> Optional[List[LyricLine]]:
    settings = get_settings()
    credentials = await load_credentials(settings)
    async with HttpClient("web_api", timeout=settings.http_timeout) as catalog_http, HttpClient(
        "web_player", timeout=settings.http_timeout
    ) as lyrics_http:
        coordinator = build_coordinator(settings, catalog_http, lyrics_http)
        catalog, lyrics = await coordinator.acquire_sessions(credentials)

        query = SearchQuery(tags.title, tags.artist, tags.album)
        logger.debug("Query: %s", query)
        tracks = await catalog.search(query)

        track = choose_track(tracks, tags, mode)
        if track is None:
            return None
        logger.debug("Selected track id %s", track.id)
        return await lyrics.fetch_lyrics(track.id)


def emit_and_write(file: Path, lines: List[LyricLine], *, title: str, yes: bool, silent: bool) -> None:
    """Print the formatted lyrics, confirm, then embed them in `file`."""
    text = format_lrc(lines)
    if not silent:
        typer.echo(text, nl=False)
    if not yes and not Confirm.ask("Write above lyrics to specified file?", console=console):
        console.print("Aborted")
        return
    settings = get_settings()
    write_lyrics(file, text, description=title, lang=settings.lyrics_lang)
    console.print(f"[green]✅ Lyrics written to[/green] {file}", highlight=False)


def fetch(
    file: Path = typer.Argument(..., help="Audio file with title/artist/album tags."),
    mode: Mode = typer.Option(
        Mode.auto,
        "--mode",
        "-m",
        case_sensitive=False,
        help="auto: exact match only; manual: always ask; middle: ask when no exact match.",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation before writing."),
    silent: bool = typer.Option(False, "--silent", "-s", help="Do not print the lyrics."),
):
    """Find lyrics for FILE on Spotify and embed them as time-synced text."""
    try:
        tags = read_query_tags(file)
        lines = asyncio.run(fetch_lyrics_for(tags, mode))
        if lines is None:
            console.print("Track not found")
            return
        emit_and_write(file, lines, title=tags.title, yes=yes, silent=silent)
    except SpoticsError as e:
        report_error(e)
        raise typer.Exit(1)
