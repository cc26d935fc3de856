"""
Metadata tag access using Mutagen.

Reads the title/artist/album used to build a catalog search and embeds the
formatted lyrics back into the file. MP3 (ID3), FLAC and M4A are supported.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mutagen.flac import FLAC
from mutagen.id3 import ID3, USLT, ID3NoHeaderError
from mutagen.mp4 import MP4

from .errors import SpoticsError

SUPPORTED_EXTENSIONS = {".mp3", ".flac", ".m4a"}


@dataclass(frozen=True)
class TrackTags:
    title: str
    artist: str
    album: str


def _first(values) -> Optional[str]:
    if not values:
        return None
    v = values[0] if isinstance(values, list) else values
    return str(v) if v else None


def read_tags(file_path: Path) -> dict:
    """Return title/artist/album tag values (None where absent)."""
    ext = file_path.suffix.lower()
    if ext == ".mp3":
        try:
            id3 = ID3(file_path)
        except ID3NoHeaderError:
            return {}

        def _text(frame_id: str) -> Optional[str]:
            frame = id3.get(frame_id)
            return _first(frame.text) if frame is not None else None

        return {"title": _text("TIT2"), "artist": _text("TPE1"), "album": _text("TALB")}

    if ext == ".flac":
        audio = FLAC(file_path)
        return {
            "title": _first(audio.get("title")),
            "artist": _first(audio.get("artist")),
            "album": _first(audio.get("album")),
        }

    if ext == ".m4a":
        tags = MP4(file_path).tags or {}
        return {
            "title": _first(tags.get("\xa9nam")),
            "artist": _first(tags.get("\xa9ART")),
            "album": _first(tags.get("\xa9alb")),
        }

    raise SpoticsError(f"Unsupported file type: {file_path.suffix or file_path.name}")


def read_query_tags(file_path: Path) -> TrackTags:
    """Read title, artist and album; all three are required."""
    if not file_path.exists():
        raise SpoticsError(f"File not found: {file_path}")
    raw = read_tags(file_path)
    for key in ("title", "artist", "album"):
        if not raw.get(key):
            raise SpoticsError(f"Not found '{key}' tag in {file_path}")
    return TrackTags(title=raw["title"], artist=raw["artist"], album=raw["album"])


def write_lyrics(file_path: Path, text: str, *, description: str = "", lang: str = "jpn") -> None:
    """Embed lyrics text into the file's tags, replacing earlier lyrics."""
    ext = file_path.suffix.lower()
    if ext == ".mp3":
        try:
            id3 = ID3(file_path)
        except ID3NoHeaderError:
            id3 = ID3()
        # USLT frames are keyed by description and language
        id3.delall(f"USLT:{description}:{lang}")
        id3.add(USLT(encoding=3, lang=lang, desc=description, text=text))
        id3.save(file_path)
        return

    if ext == ".flac":
        audio = FLAC(file_path)
        audio["LYRICS"] = [text]
        audio.save()
        return

    if ext == ".m4a":
        audio = MP4(file_path)
        if audio.tags is None:
            audio.add_tags()
        audio.tags["\xa9lyr"] = [text]
        audio.save()
        return

    raise SpoticsError(f"Unsupported file type: {file_path.suffix or file_path.name}")
