from bs4 import BeautifulSoup

from chordgrab.extractors.utils import (
    LineType,
    apply_directive,
    chord_positions,
    chord_tokens,
    classify_line,
    extract_section_label,
    first_text,
    is_chord_line,
    parse_capo,
    parse_columnar_text,
    parse_inline_chords,
    split_directive,
)
from chordgrab.models import Chord, Line

# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


def test_split_directive():
    assert split_directive("title:My Song") == ("title", "My Song")
    assert split_directive(" capo : 3 ") == ("capo", "3")


def test_split_directive_without_colon():
    assert split_directive("invalid") is None
    assert split_directive("start_of_chorus") is None


def test_split_directive_keeps_later_colons():
    assert split_directive("title:Re: Love") == ("title", "Re: Love")


def test_parse_capo():
    assert parse_capo("3") == 3
    assert parse_capo(" 0 ") == 0
    assert parse_capo("-1") is None
    assert parse_capo("three") is None


def test_apply_directive_aliases():
    metadata = {}
    apply_directive(metadata, "t", "曲名")
    apply_directive(metadata, "subtitle", "歌手")
    apply_directive(metadata, "Key", "G")
    apply_directive(metadata, "capo", "2")
    assert metadata == {"title": "曲名", "artist": "歌手", "key": "G", "capo": 2}


def test_apply_directive_ignores_unknown_and_bad_capo():
    metadata = {}
    apply_directive(metadata, "comment", "サビ")
    apply_directive(metadata, "capo", "x")
    assert metadata == {}


# ---------------------------------------------------------------------------
# parse_inline_chords
# ---------------------------------------------------------------------------


def test_inline_chords_basic():
    line = parse_inline_chords("[C]Hello [G]World")
    assert line == Line(lyrics="Hello World", chords=(Chord("C", 0), Chord("G", 6)))


def test_inline_chords_multibyte_positions():
    line = parse_inline_chords("夜の[Bb]空を[F/A]見上げ")
    assert line.lyrics == "夜の空を見上げ"
    assert line.chords == (Chord("Bb", 2), Chord("F/A", 4))


def test_inline_chords_invalid_token_stays_literal():
    line = parse_inline_chords("[C]la la [x2]")
    assert line.lyrics == "la la [x2]"
    assert line.chords == (Chord("C", 0),)


def test_inline_chords_trailing_chord():
    line = parse_inline_chords("end[G]")
    assert line.chords == (Chord("G", 3),)


def test_inline_chords_strip():
    line = parse_inline_chords("  [C]歌詞 ", strip=True)
    assert line == Line(lyrics="歌詞", chords=(Chord("C", 0),))


def test_chord_tokens_skips_invalid():
    assert [m.group(1) for m in chord_tokens("[Am]x[Intro][G7]")] == ["Am", "G7"]


# ---------------------------------------------------------------------------
# Columnar lines
# ---------------------------------------------------------------------------


def test_is_chord_line():
    assert is_chord_line("C  G  Am  F")
    assert not is_chord_line("今日も空は青い")
    assert not is_chord_line("")


def test_is_chord_line_ratio_is_strict():
    # 1 of 2 tokens is exactly 0.5
    assert not is_chord_line("C word")
    assert is_chord_line("C word", ratio=0.4)


def test_classify_line():
    assert classify_line("   ") == LineType.BLANK
    assert classify_line("[Intro]") == LineType.SECTION
    assert classify_line("サビ") == LineType.SECTION
    assert classify_line("C  G  Am  F") == LineType.CHORD
    assert classify_line("今日も空は青い") == LineType.LYRIC


def test_extract_section_label():
    assert extract_section_label("[Verse 1]") == "Verse 1"
    assert extract_section_label("サビ：") == "サビ"
    assert extract_section_label("  Aメロ: ") == "Aメロ"


def test_chord_positions_count_characters():
    assert chord_positions("あいう C えお G") == (Chord("C", 4), Chord("G", 9))


def test_chord_positions_skip_non_chords():
    assert chord_positions("C   x2   G") == (Chord("C", 0), Chord("G", 9))


# ---------------------------------------------------------------------------
# parse_columnar_text
# ---------------------------------------------------------------------------


def test_columnar_pairs_chords_with_lyrics():
    text = "C         G\n今日も空は青い\n"
    sections = parse_columnar_text(text)
    assert len(sections) == 1
    assert sections[0].name == "Main"
    assert sections[0].lines == (
        Line(lyrics="今日も空は青い", chords=(Chord("C", 0), Chord("G", 10))),
    )


def test_columnar_sections_and_chord_only_lines():
    text = "[イントロ]\nC  G  Am  F\n\nAメロ\nC\n歌詞\nもう一行\n"
    sections = parse_columnar_text(text)
    assert [s.name for s in sections] == ["イントロ", "Aメロ"]
    intro, verse = sections
    assert intro.lines[0].lyrics == ""
    assert [c.symbol for c in intro.lines[0].chords] == ["C", "G", "Am", "F"]
    assert verse.lines[0] == Line(lyrics="歌詞", chords=(Chord("C", 0),))
    assert verse.lines[1] == Line(lyrics="もう一行")


def test_columnar_lyric_does_not_pair_across_sections():
    sections = parse_columnar_text("C  G\nサビ\n歌詞")
    assert sections[0].lines == (Line(chords=(Chord("C", 0), Chord("G", 3))),)
    assert sections[1].lines == (Line(lyrics="歌詞"),)


def test_columnar_empty_text():
    sections = parse_columnar_text("")
    assert len(sections) == 1
    assert sections[0].lines == ()


def test_columnar_is_deterministic():
    text = "Aメロ\nC  G\n歌詞"
    assert parse_columnar_text(text) == parse_columnar_text(text)


# ---------------------------------------------------------------------------
# first_text
# ---------------------------------------------------------------------------


def test_first_text():
    soup = BeautifulSoup("<h1> 曲名 </h1><h1>other</h1><p></p>", "html.parser")
    assert first_text(soup, "h1") == "曲名"
    assert first_text(soup, "p") is None
    assert first_text(soup, "h2") is None
