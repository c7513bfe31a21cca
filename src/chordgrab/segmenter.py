"""Section segmentation shared by all extractors.

Every extractor feeds lines and section boundaries into a
:class:`SectionSegmenter`; only the way boundaries are *detected* differs
between sites:

  - bracket headers:      ``[Verse 1]``, ``[サビ]``
  - song-structure words: ``Aメロ``, ``間奏``, ``Chorus``
  - marker elements:      ChordWiki ``<p class="comment">``
"""

import re

from .chords import is_chord
from .models import Line, Section

DEFAULT_SECTION_NAME = "Main"

# Closed list of song-structure terms, matched by substring.
SECTION_KEYWORDS = (
    "Intro", "イントロ",
    "Verse", "Aメロ", "Bメロ", "Cメロ",
    "Chorus", "サビ",
    "Bridge", "ブリッジ", "間奏",
    "Outro", "アウトロ", "エンディング",
    "Solo", "ソロ", "ギターソロ",
)

# Terms that also occur inside lyrics ("ラストシーン"); whole line only.
WHOLE_LINE_KEYWORDS = ("Instrumental", "Interlude", "1番", "2番", "3番", "ラスト")

_BRACKET_LINE_RE = re.compile(r"^\[([^\[\]]+)\]$")


def bracket_header(line: str) -> str | None:
    """Return the label of a ``[Label]`` header line, or None.

    A line holding a single bracketed chord (``[Am]``) is not a header.
    """
    m = _BRACKET_LINE_RE.match(line.strip())
    if not m or is_chord(m.group(1).strip()):
        return None
    return m.group(1).strip()


def is_section_keyword(line: str) -> bool:
    """Return True if *line* names a song section from the keyword list."""
    stripped = line.strip()
    if not stripped:
        return False
    lowered = stripped.lower()
    if any(lowered == kw.lower() or kw in stripped for kw in SECTION_KEYWORDS):
        return True
    bare = lowered.rstrip(":：").strip()
    return any(bare == kw.lower() for kw in WHOLE_LINE_KEYWORDS)


class SectionSegmenter:
    """Two-state accumulator: one open section buffer, a list of sealed ones.

    Usage::

        seg = SectionSegmenter()
        seg.on_line(Line(lyrics="..."))
        seg.on_boundary("サビ")
        seg.on_line(...)
        sections = seg.finish()
    """

    def __init__(self, name: str = DEFAULT_SECTION_NAME):
        self._sections: list[Section] = []
        self._name = name
        self._lines: list[Line] = []

    @property
    def last_line(self) -> Line | None:
        """The most recent line of the open section, if any."""
        return self._lines[-1] if self._lines else None

    def replace_last(self, line: Line) -> None:
        self._lines[-1] = line

    def on_boundary(self, name: str) -> None:
        """Seal the open section (if it has lines) and open one named *name*."""
        self._seal()
        self._name = name

    def on_line(self, line: Line) -> None:
        """Append *line* to the open section; lines with no content are dropped."""
        if line.has_content:
            self._lines.append(line)

    def finish(self) -> tuple[Section, ...]:
        """Seal the open section and return all sections.

        Always returns at least one section: a document with no lines yields
        a single empty ``"Main"`` section.
        """
        self._seal()
        if not self._sections:
            return (Section(name=DEFAULT_SECTION_NAME),)
        return tuple(self._sections)

    def _seal(self) -> None:
        if self._lines:
            self._sections.append(Section(name=self._name, lines=tuple(self._lines)))
        self._lines = []
