"""
Convert command (`spotics convert`).

Offline counterpart of `fetch`: takes a color-lyrics JSON document that was
saved earlier (file or stdin) and embeds it into an audio file.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..core.errors import SpoticsError
from ..core.lrc import parse_lyrics
from ..core.metadata import read_tags
from .fetch import emit_and_write, report_error

console = Console(stderr=True)


def _read_document(lyric_file: Optional[Path], stdin: bool):
    if stdin:
        raw = sys.stdin.read()
        source = "stdin"
    elif lyric_file is not None:
        try:
            raw = lyric_file.read_text(encoding="utf-8")
        except OSError as e:
            raise SpoticsError(f"Failed to read {lyric_file}: {e}") from e
        source = str(lyric_file)
    else:
        raise SpoticsError("Provide --lyric-file PATH or --stdin")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise SpoticsError(f"Invalid lyric JSON in {source}: {e}") from e


def convert(
    file: Path = typer.Argument(..., help="Audio file to embed the lyrics into."),
    lyric_file: Optional[Path] = typer.Option(
        None, "--lyric-file", "-f", help="Read lyric JSON from this file (ignored with --stdin)."
    ),
    stdin: bool = typer.Option(False, "--stdin", "-i", help="Read lyric JSON from standard input."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation before writing."),
    silent: bool = typer.Option(False, "--silent", "-s", help="Do not print the lyrics."),
):
    """Convert saved lyric JSON to time-synced text and embed it into FILE."""
    try:
        if not file.exists():
            raise SpoticsError(f"File not found: {file}")
        lines = parse_lyrics(_read_document(lyric_file, stdin), provider="file")
        title = read_tags(file).get("title") or ""
        emit_and_write(file, lines, title=title, yes=yes, silent=silent)
    except SpoticsError as e:
        report_error(e)
        raise typer.Exit(1)
