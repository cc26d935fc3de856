from pathlib import Path

import pytest
from mutagen.id3 import ID3, TALB, TIT2, TPE1, USLT

from spotics.core.errors import SpoticsError
from spotics.core.metadata import TrackTags, read_query_tags, write_lyrics


def _mp3(path: Path, title="Song", artist="Artist", album="Album") -> Path:
    id3 = ID3()
    if title:
        id3.add(TIT2(encoding=3, text=[title]))
    if artist:
        id3.add(TPE1(encoding=3, text=[artist]))
    if album:
        id3.add(TALB(encoding=3, text=[album]))
    id3.save(path)
    return path


def test_read_query_tags_mp3(tmp_path: Path):
    p = _mp3(tmp_path / "song.mp3")
    assert read_query_tags(p) == TrackTags("Song", "Artist", "Album")


def test_read_query_tags_requires_album(tmp_path: Path):
    p = _mp3(tmp_path / "song.mp3", album=None)
    with pytest.raises(SpoticsError, match="album"):
        read_query_tags(p)


def test_read_query_tags_unsupported_extension(tmp_path: Path):
    p = tmp_path / "song.wav"
    p.write_bytes(b"RIFF")
    with pytest.raises(SpoticsError, match="Unsupported"):
        read_query_tags(p)


def test_write_lyrics_mp3_replaces_previous_frame(tmp_path: Path):
    p = _mp3(tmp_path / "song.mp3")
    write_lyrics(p, "[00:01.000] old\n", description="Song", lang="jpn")
    write_lyrics(p, "[00:01.000] new\n", description="Song", lang="jpn")

    frames = ID3(p).getall("USLT")
    assert len(frames) == 1
    frame = frames[0]
    assert isinstance(frame, USLT)
    assert frame.text == "[00:01.000] new\n"
    assert frame.lang == "jpn"
    assert frame.desc == "Song"
    # Other tags survive
    assert ID3(p).get("TIT2").text[0] == "Song"
