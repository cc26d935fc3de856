import pytest

from spotics.core.errors import MalformedResponse
from spotics.core.lrc import LyricLine, format_line, format_lrc, parse_lyrics, split_offset


@pytest.mark.parametrize(
    "offset,expected",
    [
        (0, "[00:00.000]"),
        (125050, "[02:05.050]"),
        (59999, "[00:59.999]"),
        (3600000, "[60:00.000]"),
        (6000000, "[100:00.000]"),
        (61001, "[01:01.001]"),
    ],
)
def test_format_line_timestamp(offset, expected):
    assert format_line(LyricLine("la", offset)) == f"{expected} la"


def test_split_offset_matches_decomposition():
    for m in (0, 1, 999, 1000, 59999, 60000, 125050, 3599999, 10**12 + 7):
        minutes, seconds, millis = split_offset(m)
        assert (minutes, seconds, millis) == (m // 60000, (m // 1000) % 60, m % 1000)


def test_format_lrc_preserves_order_and_terminates_lines():
    lines = [LyricLine("second", 2000), LyricLine("first", 1000), LyricLine("", 3000)]
    assert format_lrc(lines) == "[00:02.000] second\n[00:01.000] first\n[00:03.000] \n"


def test_format_lrc_empty():
    assert format_lrc([]) == ""


def test_parse_lyrics_reads_words_and_offsets():
    doc = {
        "lyrics": {
            "syncType": "LINE_SYNCED",
            "lines": [
                {"startTimeMs": "1230", "words": "Hello", "syllables": []},
                {"startTimeMs": "4560", "words": "World", "syllables": []},
            ],
        },
        "colors": {},
    }
    assert parse_lyrics(doc) == [LyricLine("Hello", 1230), LyricLine("World", 4560)]


@pytest.mark.parametrize(
    "doc",
    [
        {},
        {"lyrics": {}},
        {"lyrics": {"lines": "nope"}},
        {"lyrics": {"lines": [{"words": "x"}]}},
        {"lyrics": {"lines": [{"words": "x", "startTimeMs": 12}]}},
        {"lyrics": {"lines": [{"words": "x", "startTimeMs": "-5"}]}},
        {"lyrics": {"lines": [{"startTimeMs": "5"}]}},
        [],
    ],
)
def test_parse_lyrics_rejects_unexpected_shapes(doc):
    with pytest.raises(MalformedResponse):
        parse_lyrics(doc)
