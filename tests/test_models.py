import json
from dataclasses import FrozenInstanceError

import pytest

from chordgrab.models import Chord, ChordSheet, Line, Section


def _make_sheet(**kwargs) -> ChordSheet:
    defaults = dict(
        sections=(
            Section(
                name="サビ",
                lines=(Line(lyrics="Hello World", chords=(Chord("C", 0), Chord("G", 6))),),
            ),
        ),
        title="My Song",
        artist="Someone",
    )
    defaults.update(kwargs)
    return ChordSheet(**defaults)


def test_line_defaults():
    line = Line()
    assert line.lyrics == ""
    assert line.chords == ()
    assert not line.has_content


def test_line_chord_only_has_content():
    assert Line(chords=(Chord("C", 0),)).has_content


def test_line_sorts_chords_by_position():
    line = Line(lyrics="abcdef", chords=[Chord("G", 4), Chord("C", 0)])
    assert [c.symbol for c in line.chords] == ["C", "G"]
    assert isinstance(line.chords, tuple)


def test_line_sort_is_stable_for_equal_positions():
    line = Line(lyrics="ab", chords=(Chord("C", 1), Chord("G", 1), Chord("Am", 0)))
    assert [c.symbol for c in line.chords] == ["Am", "C", "G"]


def test_section_defaults():
    section = Section(name="Main")
    assert section.name == "Main"
    assert section.lines == ()


def test_chordsheet_defaults():
    sheet = ChordSheet(sections=(Section(name="Main"),))
    assert sheet.title is None
    assert sheet.artist is None
    assert sheet.key is None
    assert sheet.capo is None
    assert sheet.source_url == ""


def test_chordsheet_requires_a_section():
    with pytest.raises(ValueError):
        ChordSheet(sections=())


def test_chordsheet_rejects_negative_capo():
    with pytest.raises(ValueError):
        _make_sheet(capo=-1)


def test_chordsheet_is_frozen():
    sheet = _make_sheet()
    with pytest.raises(FrozenInstanceError):
        sheet.title = "Other"


def test_with_source_returns_tagged_copy():
    sheet = _make_sheet()
    tagged = sheet.with_source("https://ja.chordwiki.org/wiki/x")
    assert tagged.source_url == "https://ja.chordwiki.org/wiki/x"
    assert sheet.source_url == ""
    assert tagged.sections == sheet.sections


# ---------------------------------------------------------------------------
# Wire form
# ---------------------------------------------------------------------------


def test_to_dict_field_names():
    data = _make_sheet(key="G", capo=2).to_dict()
    assert set(data) == {"title", "artist", "key", "capo", "sections", "source_url"}
    assert data["sections"][0] == {
        "name": "サビ",
        "lines": [
            {
                "lyrics": "Hello World",
                "chords": [{"symbol": "C", "position": 0}, {"symbol": "G", "position": 6}],
            }
        ],
    }


def test_to_dict_absent_metadata_is_null():
    data = ChordSheet(sections=(Section(name="Main"),)).to_dict()
    assert data["title"] is None
    assert data["capo"] is None
    assert data["sections"] == [{"name": "Main", "lines": []}]


def test_to_dict_is_json_serializable():
    text = json.dumps(_make_sheet().to_dict(), ensure_ascii=False)
    assert '"name": "サビ"' in text


def test_from_dict_restores_sheet():
    sheet = _make_sheet(key="Am", capo=3, source_url="https://www.ufret.jp/song.php?data=1")
    assert ChordSheet.from_dict(json.loads(json.dumps(sheet.to_dict()))) == sheet
