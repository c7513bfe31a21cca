"""Extractor for ChordWiki (ja.chordwiki.org) pages.

Two page shapes are supported.

Rendered wiki page (current)::

    <h1 class="title">曲名</h1>
    <h2 class="subtitle">アーティスト</h2>
    <p class="key">Original Key: G / Capo: 2 / Play: F</p>
    <p class="comment"><b>Aメロ</b></p>          ← section boundary
    <p class="line">
        <span class="chord">C</span><span class="word">歌詞</span>
        <span class="chord">|G</span><span class="wordtop">続き</span>
    </p>

Raw ChordPro source (edit view, saved pages)::

    <pre>
    {title:曲名}
    {subtitle:アーティスト}
    [Intro]
    [C]歌詞[G]歌詞
    </pre>

Chord notation: inline brackets in the source, ``span.chord`` nodes in the
rendered page.  Bar lines (``|``) and accent marks (``>``, ``^``) decorate
chord spans and are removed before the chord grammar check.
"""

import logging
import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..chords import is_chord
from ..exceptions import StructuralElementMissingError
from ..models import ChordSheet, Line, Section
from ..positions import LineBuilder
from ..segmenter import SectionSegmenter, bracket_header
from .base import Extractor
from .utils import (
    apply_directive,
    first_text,
    is_directive_line,
    parse_capo,
    parse_inline_chords,
    split_directive,
)

logger = logging.getLogger(__name__)

_TITLE_SELECTOR = "h1.title, .song-title h1, h1"
_ARTIST_SELECTOR = "h2.subtitle, .song-artist, .artist"
_CONTENT_SELECTOR = ".chord-lyrics, pre, .wikibody"
_LINE_NODE_SELECTOR = "p.line, p.comment"

# Bar lines and accent marks that decorate chord spans
_CHORD_DECORATION_RE = re.compile(r"[|｜>＞^＾'’]")

_KEY_RE = re.compile(r"Key:\s*([A-G][#b♯♭]?m?)")
_CAPO_RE = re.compile(r"Capo:\s*(-?\d+)")


class ChordWikiExtractor(Extractor):
    """Extractor for ChordWiki chord pages (bracket notation)."""

    name = "chordwiki"
    hosts = ("chordwiki.org",)

    def extract(self, html: str) -> ChordSheet:
        soup = BeautifulSoup(html, "html.parser")
        metadata = {
            "title": first_text(soup, _TITLE_SELECTOR),
            "artist": first_text(soup, _ARTIST_SELECTOR),
        }

        if soup.select_one(_LINE_NODE_SELECTOR) is not None:
            logger.debug("chordwiki: walking rendered line nodes")
            metadata.update(_extract_key_block(soup))
            sections = parse_line_nodes(soup)
        else:
            content = soup.select_one(_CONTENT_SELECTOR)
            if content is None:
                raise StructuralElementMissingError(
                    self.name, f"chord content ({_CONTENT_SELECTOR})"
                )
            logger.debug("chordwiki: parsing bracket source from <%s>", content.name)
            sections, directives = parse_bracket_text(content.get_text())
            metadata.update(directives)

        return ChordSheet(sections=sections, **metadata)


# ---------------------------------------------------------------------------
# Bracket source
# ---------------------------------------------------------------------------


def parse_bracket_text(text: str) -> tuple[tuple[Section, ...], dict]:
    """Parse ChordPro-style bracket text.

    Returns ``(sections, metadata)`` where *metadata* holds whichever of
    ``title``, ``artist``, ``key`` and ``capo`` the directives set.

    Per line (after trimming):

    1. ``{key:value}`` → metadata; directives without a colon are ignored.
    2. ``[Label]`` with a non-chord label → section boundary.
    3. Anything else → lyrics with inline ``[Chord]`` tokens.

    Empty lines are skipped and never end a section.
    """
    segmenter = SectionSegmenter()
    metadata: dict = {}

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        if is_directive_line(line):
            directive = split_directive(line[1:-1])
            if directive is None:
                logger.debug("Ignoring malformed directive %r", line)
            else:
                apply_directive(metadata, *directive)
            continue

        label = bracket_header(line)
        if label is not None:
            segmenter.on_boundary(label)
            continue

        segmenter.on_line(parse_inline_chords(line))

    return segmenter.finish(), metadata


# ---------------------------------------------------------------------------
# Rendered page
# ---------------------------------------------------------------------------


def parse_line_nodes(root: BeautifulSoup | Tag) -> tuple[Section, ...]:
    """Walk ``p.line`` / ``p.comment`` nodes of a rendered page in order."""
    segmenter = SectionSegmenter()
    for node in root.select(_LINE_NODE_SELECTOR):
        if "comment" in (node.get("class") or []):
            label = comment_label(node)
            if label:
                segmenter.on_boundary(label)
            continue
        segmenter.on_line(line_from_node(node))
    return segmenter.finish()


def comment_label(node: Tag) -> str:
    """Return a section label: the emphasized text if present, else all text."""
    emphasis = node.find(["b", "strong", "em"])
    source = emphasis if emphasis is not None else node
    return " ".join(source.stripped_strings)


def line_from_node(node: Tag) -> Line:
    """Build a Line from the children of one ``p.line`` node.

    ``span.chord`` children pin a chord at the current lyric length; every
    other child contributes its text to the lyrics.
    """
    builder = LineBuilder()
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            text = str(child)
            # Formatting whitespace between spans, not lyric content
            if "\n" in text and not text.strip():
                continue
            builder.add_text(text.replace("\u00a0", " "))
            continue
        if not isinstance(child, Tag):
            continue

        if "chord" in (child.get("class") or []):
            symbol = _CHORD_DECORATION_RE.sub("", child.get_text()).strip()
            if is_chord(symbol):
                builder.add_chord(symbol)
                continue
            # Not a chord (N.C., x2...): keep it as lyric text
            if symbol:
                logger.debug("chordwiki: non-chord span %r kept as text", symbol)

        builder.add_text(child.get_text().replace("\u00a0", " "))

    return builder.build(strip=True)


def _extract_key_block(soup: BeautifulSoup) -> dict:
    """Read key and capo from ``p.key`` ("Original Key: G / Capo: 2 / ...")."""
    block = soup.select_one("p.key")
    if block is None:
        return {}
    text = block.get_text(" ", strip=True)
    found = {}
    key_match = _KEY_RE.search(text)
    if key_match:
        found["key"] = key_match.group(1)
    capo_match = _CAPO_RE.search(text)
    if capo_match:
        capo = parse_capo(capo_match.group(1))
        if capo is not None:
            found["capo"] = capo
    return found
