"""Shared parsing utilities used by all site extractors.

Implements the text-level pieces every extractor builds on:

  1. split_directive() / apply_directive() - ``{title:...}`` metadata lines
  2. parse_inline_chords()                 - ``[C]Hello [G]World`` → Line
  3. classify_line()                       - BLANK / SECTION / CHORD / LYRIC
  4. chord_positions()                     - chords of a space-aligned line
  5. parse_columnar_text()                 - flattened text → sections

Two chord notations are covered:

  "bracketed" - ChordWiki, U-Fret:  [C]歌詞[G]歌詞
  "columnar"  - J-Total:            C     G      (chords above lyrics)
"""

import logging
import re
from enum import Enum, auto

from bs4 import BeautifulSoup, Tag

from ..chords import is_chord
from ..models import Chord, Line, Section
from ..positions import LineBuilder, char_offset
from ..segmenter import SectionSegmenter, bracket_header, is_section_keyword

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Any [token] group regardless of content
ANY_BRACKET_RE = re.compile(r"\[([^\[\]]+)\]")

# Whitespace-delimited token; \s covers the ideographic space U+3000
_TOKEN_RE = re.compile(r"\S+")

# Directive key aliases → ChordSheet field
_DIRECTIVE_FIELDS = {
    "title": "title",
    "t": "title",
    "artist": "artist",
    "a": "artist",
    "subtitle": "artist",
    "st": "artist",
    "key": "key",
    "k": "key",
    "capo": "capo",
}


# ---------------------------------------------------------------------------
# Metadata directives
# ---------------------------------------------------------------------------


def is_directive_line(line: str) -> bool:
    return line.startswith("{") and line.endswith("}")


def split_directive(directive: str) -> tuple[str, str] | None:
    """Split the body of a ``{key:value}`` directive.

    Returns ``None`` for bodies without a colon, e.g. ``"invalid"`` or
    ``"start_of_chorus"``.
    """
    key, sep, value = directive.partition(":")
    if not sep:
        return None
    return key.strip(), value.strip()


def parse_capo(value: str) -> int | None:
    """Return a non-negative capo fret from *value*, or None."""
    try:
        capo = int(value.strip())
    except ValueError:
        return None
    return capo if capo >= 0 else None


def apply_directive(metadata: dict, key: str, value: str) -> None:
    """Store a directive value into *metadata* under its ChordSheet field.

    Unknown keys and unparseable capo values are ignored.
    """
    field = _DIRECTIVE_FIELDS.get(key.lower())
    if field is None:
        logger.debug("Ignoring unknown directive %r", key)
        return
    if field == "capo":
        capo = parse_capo(value)
        if capo is None:
            logger.debug("Ignoring unparseable capo %r", value)
            return
        metadata["capo"] = capo
        return
    metadata[field] = value


# ---------------------------------------------------------------------------
# Inline bracket notation
# ---------------------------------------------------------------------------


def parse_inline_chords(line: str, strip: bool = False) -> Line:
    """Split an inline-bracket line into lyrics and positioned chords.

    Example::

        parse_inline_chords("[C]Hello [G]World")
        → Line(lyrics="Hello World", chords=(Chord("C", 0), Chord("G", 6)))

    Bracket tokens that are not valid chords (``[x2]``) stay in the lyrics
    as literal text.  With ``strip=True`` the lyrics are trimmed and chord
    positions shifted to match.
    """
    builder = LineBuilder()
    last_end = 0
    for m in ANY_BRACKET_RE.finditer(line):
        symbol = m.group(1).strip()
        if not is_chord(symbol):
            continue
        builder.add_text(line[last_end:m.start()])
        builder.add_chord(symbol)
        last_end = m.end()
    builder.add_text(line[last_end:])
    return builder.build(strip=strip)


def chord_tokens(line: str) -> list[re.Match]:
    """Return the bracket matches of *line* whose content is a valid chord."""
    return [m for m in ANY_BRACKET_RE.finditer(line) if is_chord(m.group(1).strip())]


# ---------------------------------------------------------------------------
# Columnar (space-aligned) text
# ---------------------------------------------------------------------------


class LineType(Enum):
    BLANK = auto()  # empty or whitespace only
    SECTION = auto()  # section header: [Intro], Aメロ, サビ
    CHORD = auto()  # chord line: C  G  Am  F
    LYRIC = auto()  # everything else


def is_chord_line(line: str, ratio: float = 0.5) -> bool:
    """Return True if more than *ratio* of the tokens in *line* are chords."""
    tokens = line.split()
    if not tokens:
        return False
    chord_count = sum(1 for t in tokens if is_chord(t))
    return chord_count / len(tokens) > ratio


def classify_line(line: str, ratio: float = 0.5) -> LineType:
    """Classify a single line of flattened chord-sheet text."""
    stripped = line.strip()
    if not stripped:
        return LineType.BLANK
    if bracket_header(stripped) is not None or is_section_keyword(stripped):
        return LineType.SECTION
    if is_chord_line(stripped, ratio):
        return LineType.CHORD
    return LineType.LYRIC


def extract_section_label(line: str) -> str:
    """Return the human-readable label from a SECTION line.

    Handles ``[Verse 1]``, ``サビ:`` and bare ``Aメロ`` formats.
    """
    stripped = line.strip()
    label = bracket_header(stripped)
    if label is not None:
        return label
    return stripped.rstrip(":：").strip()


def chord_positions(line: str) -> tuple[Chord, ...]:
    """Return the chords of a chord line at their character columns.

    Positions are measured against *line* itself, so leading indentation
    and multi-byte characters are both counted as single columns::

        chord_positions("あいう C えお G") → (Chord("C", 4), Chord("G", 9))
    """
    return tuple(
        Chord(symbol=m.group(), position=char_offset(line, m.start()))
        for m in _TOKEN_RE.finditer(line)
        if is_chord(m.group())
    )


def parse_columnar_text(text: str, ratio: float = 0.5) -> tuple[Section, ...]:
    """Parse space-aligned chord/lyric text into sections.

    Algorithm
    ---------
    1. Split *text* into lines, strip each and classify it.
    2. SECTION lines open a new section.
    3. CHORD lines become chord-only lines (empty lyrics).
    4. A LYRIC line fills the lyrics of the preceding chord-only line in the
       same section; otherwise it becomes a lyric-only line.
    5. BLANK lines are skipped.
    """
    segmenter = SectionSegmenter()

    for raw in text.splitlines():
        line = raw.strip()
        lt = classify_line(line, ratio)

        if lt == LineType.BLANK:
            continue

        if lt == LineType.SECTION:
            segmenter.on_boundary(extract_section_label(line))
            continue

        if lt == LineType.CHORD:
            segmenter.on_line(Line(lyrics="", chords=chord_positions(line)))
            continue

        last = segmenter.last_line
        if last is not None and not last.lyrics and last.chords:
            segmenter.replace_last(Line(lyrics=line, chords=last.chords))
        else:
            segmenter.on_line(Line(lyrics=line))

    return segmenter.finish()


# ---------------------------------------------------------------------------
# Soup helpers
# ---------------------------------------------------------------------------


def first_text(soup: BeautifulSoup | Tag, selector: str) -> str | None:
    """Return the stripped text of the first element matching *selector*."""
    element = soup.select_one(selector)
    if element is None:
        return None
    text = element.get_text().strip()
    return text or None
