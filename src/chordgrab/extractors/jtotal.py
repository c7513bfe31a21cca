"""Extractor for J-Total Music (music.j-total.net) chord pages.

Page structure::

    <h2 class="title">曲名</h2>
    <h3 class="artist">アーティスト</h3>
    <pre>
    [イントロ]
    C    G    Am   F

    Aメロ
    C         G
    今日も空は青い
    </pre>

Chord notation: unbracketed, space-aligned above the lyric line it belongs
to.  The page has no structure beyond the ``<pre>`` block, so lines are told
apart by :func:`~chordgrab.extractors.utils.classify_line`.
"""

from bs4 import BeautifulSoup

from ..exceptions import StructuralElementMissingError
from ..models import ChordSheet
from .base import Extractor
from .utils import first_text, parse_columnar_text

_TITLE_SELECTOR = ".title, h2, .song-title"
_ARTIST_SELECTOR = ".artist, h3, .singer"
_CONTENT_SELECTOR = "pre, .chord-content, .chord-text"


class JTotalExtractor(Extractor):
    """Extractor for J-Total chord pages (columnar heuristic)."""

    name = "jtotal"
    hosts = ("j-total.net",)

    def extract(self, html: str) -> ChordSheet:
        soup = BeautifulSoup(html, "html.parser")

        content = soup.select_one(_CONTENT_SELECTOR)
        if content is None:
            raise StructuralElementMissingError(self.name, f"chord content ({_CONTENT_SELECTOR})")

        return ChordSheet(
            sections=parse_columnar_text(content.get_text(), self.config.chord_line_ratio),
            title=first_text(soup, _TITLE_SELECTOR),
            artist=first_text(soup, _ARTIST_SELECTOR),
        )
