"""Extractor for U-Fret (www.ufret.jp) chord pages.

U-Fret renders its chord chart client-side from a script variable::

    <script>
    var ufret_chord_datas = ["[E]\\u3000[B\\/D#]\\u3000[C#m]", "[E]涙が[B]溢れ", ...];
    </script>

Each array element is one line in bracket notation.  Escapes are decoded
with :func:`unescape_js_string` before parsing.

If the variable is missing (static mirrors, saved pages), the extractor
falls back through, in order:

1. ``CONTENT_SELECTORS``: the first element matching one of them becomes
   the chord container;
2. ``CONTAINER_STRATEGIES``: tried on that container until one yields
   lines: chord rows (``.chord-row`` / ``p.chord`` / ``rt`` / ``.col``),
   then ruby annotations;
3. :func:`parse_flat_text`: the columnar heuristic on the flattened text,
   which always produces a result.

No container at all raises StructuralElementMissingError.
"""

import logging
import re
from typing import Callable

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..chords import is_chord
from ..config import ExtractionConfig, SpacingPolicy
from ..exceptions import StructuralElementMissingError
from ..models import ChordSheet, Line, Section
from ..positions import LineBuilder
from ..segmenter import SectionSegmenter, is_section_keyword
from .base import Extractor
from .utils import chord_tokens, extract_section_label, first_text, parse_columnar_text, parse_inline_chords

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# var ufret_chord_datas = [ ... ];   string literals may themselves hold "]"
_CHORD_DATAS_RE = re.compile(
    r'var\s+ufret_chord_datas\s*=\s*\[((?:"(?:[^"\\]|\\.)*"|[^\]"])*)\]',
    re.DOTALL,
)

# Double-quoted JavaScript string literal
_JS_STRING_RE = re.compile(r'"((?:[^"\\]|\\.)*)"', re.DOTALL)

# One escape sequence: \uXXXX or backslash + any character
_JS_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}

_CAPO_RE = re.compile(r"[Cc]apo\s*(\d+)|カポ\s*(\d+)")
_DIGITS_RE = re.compile(r"\d+")

# Space characters counted when laying out chord-only lines
_SPACING_CHARS = (" ", "\u3000")

CONTENT_SELECTORS = (
    "#ufret-chord-data",
    "#chord_area",
    ".chord-area",
    "#contents",
    ".hiragana",
)


class UfretExtractor(Extractor):
    """Extractor for U-Fret chord pages (script array with DOM fallbacks)."""

    name = "ufret"
    hosts = ("ufret.jp",)

    def extract(self, html: str) -> ChordSheet:
        soup = BeautifulSoup(html, "html.parser")

        lines = extract_chord_datas(soup)
        if lines is not None:
            logger.debug("ufret: parsing %d script line(s)", len(lines))
            sections = parse_script_lines(lines, self.config.spacing)
        else:
            logger.debug("ufret: ufret_chord_datas not found, trying DOM fallbacks")
            sections = self._extract_from_dom(soup)

        return ChordSheet(sections=sections, **_extract_metadata(soup))

    def _extract_from_dom(self, soup: BeautifulSoup) -> tuple[Section, ...]:
        for selector in CONTENT_SELECTORS:
            container = soup.select_one(selector)
            if container is not None:
                break
        else:
            raise StructuralElementMissingError(
                self.name,
                "ufret_chord_datas or chord container (" + ", ".join(CONTENT_SELECTORS) + ")",
            )

        for strategy in CONTAINER_STRATEGIES:
            sections = strategy(container, self.config)
            if sections is not None:
                logger.debug("ufret: %s matched %s", strategy.__name__, selector)
                return sections
        logger.debug("ufret: columnar text fallback on %s", selector)
        return parse_flat_text(container, self.config)


# ---------------------------------------------------------------------------
# Script array
# ---------------------------------------------------------------------------


def unescape_js_string(literal: str) -> str:
    """Decode the escapes of a JavaScript string literal body.

    Handles ``\\n \\r \\t \\\\ \\" \\/ \\'`` and ``\\uXXXX`` (surrogate
    pairs included).  Any other escaped character stands for itself.
    """

    def _replace(m: re.Match) -> str:
        escape = m.group(1)
        if len(escape) == 5:
            return chr(int(escape[1:], 16))
        return _SIMPLE_ESCAPES.get(escape, escape)

    text = _JS_ESCAPE_RE.sub(_replace, literal)
    # Two \uXXXX escapes may encode one astral character
    return text.encode("utf-16", "surrogatepass").decode("utf-16", errors="replace")


def extract_chord_datas(soup: BeautifulSoup) -> list[str] | None:
    """Return the decoded lines of ``ufret_chord_datas``, or None if absent."""
    for script in soup.find_all("script"):
        m = _CHORD_DATAS_RE.search(script.get_text())
        if m is None:
            continue
        lines: list[str] = []
        for literal in _JS_STRING_RE.finditer(m.group(1)):
            lines.extend(unescape_js_string(literal.group(1)).splitlines())
        if lines:
            return lines
    return None


def parse_script_lines(lines: list[str], spacing: SpacingPolicy) -> tuple[Section, ...]:
    """Parse decoded ``ufret_chord_datas`` lines into sections.

    Lines without chords that contain a song-structure keyword (``Aメロ``,
    ``サビ``, ``Intro``...) start a new section.
    """
    segmenter = SectionSegmenter()
    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        tokens = chord_tokens(line)
        if not tokens and is_section_keyword(line):
            segmenter.on_boundary(extract_section_label(line))
            continue

        if _is_chord_only(line, tokens):
            segmenter.on_line(_chord_only_line(line, tokens, spacing))
        else:
            cleaned = line.replace("\u3000", " ").replace("\r", "")
            segmenter.on_line(parse_inline_chords(cleaned, strip=True))

    return segmenter.finish()


def _is_chord_only(line: str, tokens: list[re.Match]) -> bool:
    if not tokens:
        return False
    remainder = []
    last_end = 0
    for m in tokens:
        remainder.append(line[last_end:m.start()])
        last_end = m.end()
    remainder.append(line[last_end:])
    return not "".join("".join(remainder).split())


def _chord_only_line(line: str, tokens: list[re.Match], spacing: SpacingPolicy) -> Line:
    """Lay out a line of chords with no lyrics.

    Spaces before each chord are widened by ``spacing.space_multiplier`` and
    each chord reserves ``max(len(symbol), spacing.min_chord_width)`` columns.
    With the default policy ``"[C]　[G]"`` puts C at 0 and G at 4.  The
    padding is kept in the lyrics since it carries the alignment.
    """
    builder = LineBuilder()
    last_end = 0
    for m in tokens:
        gap = line[last_end:m.start()]
        spaces = sum(1 for ch in gap if ch in _SPACING_CHARS)
        builder.add_text(" " * (spaces * spacing.space_multiplier))
        symbol = m.group(1).strip()
        builder.add_chord(symbol)
        builder.add_text(" " * max(len(symbol), spacing.min_chord_width))
        last_end = m.end()
    return builder.build()


# ---------------------------------------------------------------------------
# DOM fallbacks
# ---------------------------------------------------------------------------


def parse_chord_rows(container: Tag, config: ExtractionConfig) -> tuple[Section, ...] | None:
    """Rows of ``p.chord`` units: chord in ``rt``, lyrics in ``.col`` spans."""
    rows = container.select(".chord-row, .row")
    if not rows:
        return None

    segmenter = SectionSegmenter()
    for row in rows:
        builder = LineBuilder()
        for unit in row.select("p.chord, .chord"):
            rt = unit.find("rt")
            if rt is not None:
                symbol = rt.get_text().strip()
                if is_chord(symbol):
                    builder.add_chord(symbol)
            for col in unit.select(".col"):
                builder.add_text(col.get_text())
        segmenter.on_line(builder.build(strip=True))

    sections = segmenter.finish()
    return sections if sections[0].lines else None


def parse_ruby_text(container: Tag, config: ExtractionConfig) -> tuple[Section, ...] | None:
    """Ruby-annotated lyrics: ``<ruby>歌<rt>Am</rt></ruby>詞<br>``.

    Each ``rt`` chord is pinned where its ruby base starts on the current
    line; ``<br>`` and newlines end a line.
    """
    if container.find("rt") is None:
        return None

    segmenter = SectionSegmenter()
    builder = LineBuilder()
    ruby_start = 0

    for node in container.descendants:
        if isinstance(node, Tag):
            if node.name == "br":
                segmenter.on_line(builder.build(strip=True))
                builder = LineBuilder()
            elif node.name == "ruby":
                ruby_start = builder.position
            continue
        if isinstance(node, Comment) or not isinstance(node, NavigableString):
            continue

        if node.find_parent("rt") is not None:
            symbol = str(node).strip()
            if is_chord(symbol):
                if node.find_parent("ruby") is not None:
                    builder.add_chord_at(symbol, ruby_start)
                else:
                    builder.add_chord(symbol)
            continue
        if node.find_parent(["rp", "script", "style"]) is not None:
            continue

        for i, piece in enumerate(str(node).split("\n")):
            if i:
                segmenter.on_line(builder.build(strip=True))
                builder = LineBuilder()
            builder.add_text(piece.replace("\u00a0", " "))

    segmenter.on_line(builder.build(strip=True))
    sections = segmenter.finish()
    return sections if sections[0].lines else None


def parse_flat_text(container: Tag, config: ExtractionConfig) -> tuple[Section, ...]:
    """Last resort: columnar heuristic over the container's text."""
    return parse_columnar_text(container.get_text(), config.chord_line_ratio)


# Structured layouts; each returns None when the container does not use it
CONTAINER_STRATEGIES: tuple[Callable[[Tag, ExtractionConfig], tuple[Section, ...] | None], ...] = (
    parse_chord_rows,
    parse_ruby_text,
)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def _extract_metadata(soup: BeautifulSoup) -> dict:
    title = first_text(soup, "h1, .song_title, title")
    if title:
        # "曲名 / アーティスト ギターコード" → "曲名"
        title = title.split("/")[0].strip() or None

    return {
        "title": title,
        "artist": first_text(soup, "h2 a, .artist a, a[href*='/artist/']"),
        "key": first_text(
            soup, ".key-info, .original-key, select[name='keyselect'] option[selected]"
        ),
        "capo": _extract_capo(soup),
    }


def _extract_capo(soup: BeautifulSoup) -> int | None:
    """Read the selected capo option, e.g. ``<option value="-4" selected>-4（Capo 4）``.

    A negative ``value`` is the capo fret; otherwise the option text is
    searched for "Capo N" / "カポN", then for any number.
    """
    option = soup.select_one("select[name='key_capo'] option[selected]")
    if option is None:
        return None

    try:
        value = int(option.get("value", ""))
    except ValueError:
        value = None
    if value is not None and value < 0:
        return -value

    text = option.get_text()
    m = _CAPO_RE.search(text)
    if m:
        return int(m.group(1) or m.group(2))
    m = _DIGITS_RE.search(text)
    return int(m.group()) if m else None
