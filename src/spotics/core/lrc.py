"""
Time-synced lyric lines and their LRC-style text rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List

from .errors import MalformedResponse


@dataclass(frozen=True)
class LyricLine:
    text: str
    offset_ms: int


def split_offset(offset_ms: int) -> tuple[int, int, int]:
    """Return (minutes, seconds, milliseconds) for a millisecond offset."""
    return offset_ms // 60000, offset_ms // 1000 % 60, offset_ms % 1000


def format_line(line: LyricLine) -> str:
    minutes, seconds, millis = split_offset(line.offset_ms)
    return f"[{minutes:02d}:{seconds:02d}.{millis:03d}] {line.text}"


def format_lrc(lines: Iterable[LyricLine]) -> str:
    """Render lines in input order, one `[MM:SS.mmm] text` entry per line."""
    return "".join(format_line(line) + "\n" for line in lines)


def parse_lyrics(payload: Any, *, provider: str = "web_player") -> List[LyricLine]:
    """Extract lines from a color-lyrics JSON document.

    Expects ``{"lyrics": {"lines": [{"words": str, "startTimeMs": str}, ...]}}``.
    """

    def _bad(reason: str) -> MalformedResponse:
        return MalformedResponse(provider, f"Unexpected lyrics document: {reason}")

    lyrics = payload.get("lyrics") if isinstance(payload, dict) else None
    raw_lines = lyrics.get("lines") if isinstance(lyrics, dict) else None
    if not isinstance(raw_lines, list):
        raise _bad("missing lyrics.lines")

    lines: List[LyricLine] = []
    for i, item in enumerate(raw_lines):
        if not isinstance(item, dict):
            raise _bad(f"line {i} is not an object")
        words = item.get("words")
        start = item.get("startTimeMs")
        if not isinstance(words, str):
            raise _bad(f"line {i} has no words")
        if not isinstance(start, str) or not (start.isascii() and start.isdigit()):
            raise _bad(f"line {i} has invalid startTimeMs {start!r}")
        lines.append(LyricLine(text=words, offset_ms=int(start)))
    return lines
