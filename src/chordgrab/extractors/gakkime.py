"""Extractor for 楽器.me (gakufu.gakki.me) chord pages.

Page structure::

    <h2 class="tit"><span>「タイトル」</span><small>アーティスト</small></h2>
    <div id="chord_area">
        <div class="cd_1line">                          ← one chord+lyric unit
            <div class="cd_pic cd_font">
                <span class="cd_fontpos">C<br /><img ...></span>
            </div>
            <div class="cd_pic blue">
                <div class="cd_txt">歌</div><div class="cd_txt">詞</div>
            </div>
        </div>
        ...
        <div style='clear: both;'></div>            ← paragraph separator
    </div>

Consecutive ``cd_1line`` units are concatenated into one line; only the
``clear: both`` separators break lines.  There are no section markers, so
every sheet has a single "Main" section.  Chord names are taken verbatim
(the site writes slash chords as ``GonB``).
"""

import logging

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..exceptions import StructuralElementMissingError
from ..models import ChordSheet, Section
from ..positions import LineBuilder
from ..segmenter import SectionSegmenter
from .base import Extractor
from .utils import first_text

logger = logging.getLogger(__name__)

# Placeholder glyphs drawn in the chord row between real chords
_PLACEHOLDER_CHORDS = {"", "/", "／"}


class GakkiMeExtractor(Extractor):
    """Extractor for 楽器.me chord pages (paired DOM units)."""

    name = "gakkime"
    hosts = ("gakufu.gakki.me", "gakki.me")

    def extract(self, html: str) -> ChordSheet:
        soup = BeautifulSoup(html, "html.parser")

        chord_area = soup.find(id="chord_area")
        if not isinstance(chord_area, Tag):
            raise StructuralElementMissingError(self.name, "#chord_area")

        logger.debug("gakkime: %d child node(s) in #chord_area", len(chord_area.contents))

        title = first_text(soup, "h2.tit > span")
        if title:
            title = title.strip("「」")

        return ChordSheet(
            sections=parse_chord_area(chord_area),
            title=title or None,
            artist=first_text(soup, "h2.tit > small"),
        )


def parse_chord_area(chord_area: Tag) -> tuple[Section, ...]:
    """Concatenate ``cd_1line`` units into lines split at ``clear`` separators."""
    segmenter = SectionSegmenter()
    builder = LineBuilder()

    for child in chord_area.children:
        if not isinstance(child, Tag):
            continue

        if "clear" in (child.get("style") or ""):
            segmenter.on_line(builder.build(strip=True))
            builder = LineBuilder()
            continue

        if "cd_1line" not in (child.get("class") or []):
            continue

        chord_span = child.select_one(".cd_fontpos")
        if chord_span is not None:
            symbol = extract_chord_name(chord_span)
            if symbol not in _PLACEHOLDER_CHORDS:
                builder.add_chord(symbol)

        for txt in child.select(".cd_txt"):
            builder.add_text(txt.get_text().replace("\u00a0", " "))

    # Trailing line with no separator after it
    segmenter.on_line(builder.build(strip=True))
    return segmenter.finish()


def extract_chord_name(span: Tag) -> str:
    """Return the chord written in a ``cd_fontpos`` span.

    The span holds ``C<br /><img ...>``; only the text before ``<br>`` is
    the chord name.  HTML comments are never chord text.
    """
    for child in span.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            text = str(child).strip()
            if text:
                return text
        elif isinstance(child, Tag) and child.name == "br":
            break

    # Chord wrapped in an inline tag: first non-empty string anywhere
    for node in span.find_all(string=True):
        if isinstance(node, Comment):
            continue
        text = str(node).strip()
        if text:
            return text
    return ""
