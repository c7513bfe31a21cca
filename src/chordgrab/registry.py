import logging
from dataclasses import dataclass
from enum import Enum

from .config import ExtractionConfig
from .exceptions import UnsupportedSourceError
from .extractors.base import Extractor
from .extractors.chordwiki import ChordWikiExtractor
from .extractors.gakkime import GakkiMeExtractor
from .extractors.jtotal import JTotalExtractor
from .extractors.ufret import UfretExtractor
from .models import ChordSheet

logger = logging.getLogger(__name__)


class SourceKind(str, Enum):
    """Closed set of supported sources, one extractor each."""

    UFRET = "ufret"
    JTOTAL = "jtotal"
    GAKKIME = "gakkime"
    CHORDWIKI = "chordwiki"


_EXTRACTORS: dict[SourceKind, type[Extractor]] = {
    SourceKind.UFRET: UfretExtractor,
    SourceKind.JTOTAL: JTotalExtractor,
    SourceKind.GAKKIME: GakkiMeExtractor,
    SourceKind.CHORDWIKI: ChordWikiExtractor,
}


@dataclass(frozen=True)
class SupportedSite:
    name: str
    domain: str
    example_url: str
    kind: SourceKind


SUPPORTED_SITES = (
    SupportedSite("U-Fret", "ufret.jp", "https://www.ufret.jp/song.php?data=12345", SourceKind.UFRET),
    SupportedSite("ChordWiki", "chordwiki.org", "https://ja.chordwiki.org/wiki/曲名", SourceKind.CHORDWIKI),
    SupportedSite("J-Total", "j-total.net", "https://music.j-total.net/data/xxx/yyy.html", SourceKind.JTOTAL),
    SupportedSite("楽器.me", "gakufu.gakki.me", "https://gakufu.gakki.me/m/data/xxx.html", SourceKind.GAKKIME),
)


def _kind_for_tag(source_tag: "SourceKind | str") -> SourceKind:
    if isinstance(source_tag, SourceKind):
        return source_tag
    tag = str(source_tag).strip().lower()
    try:
        return SourceKind(tag)
    except ValueError:
        pass
    # Normalized host names: "ufret.jp", "www.ufret.jp", "ja.chordwiki.org"
    for kind, cls in _EXTRACTORS.items():
        if any(tag == host or tag.endswith("." + host) for host in cls.hosts):
            return kind
    raise UnsupportedSourceError(str(source_tag))


def select_extractor(source_tag: "SourceKind | str", config: ExtractionConfig | None = None) -> Extractor:
    """Return an instantiated extractor for *source_tag*.

    *source_tag* is a :class:`SourceKind`, its value (``"ufret"``) or a
    normalized host name (``"www.ufret.jp"``).  Document content is never
    consulted.

    Raises UnsupportedSourceError if no extractor matches.
    """
    return _EXTRACTORS[_kind_for_tag(source_tag)](config)


def classify_url(url: str) -> SourceKind:
    """Return the SourceKind whose extractor handles *url*.

    Raises UnsupportedSourceError if no extractor matches.
    """
    for kind, cls in _EXTRACTORS.items():
        if cls.can_handle(url):
            return kind
    raise UnsupportedSourceError(url)


def extract(document_text: str, source_tag: "SourceKind | str", config: ExtractionConfig | None = None) -> ChordSheet:
    """Extract a ChordSheet from *document_text* using the extractor for *source_tag*.

    Raises UnsupportedSourceError or StructuralElementMissingError.
    """
    extractor = select_extractor(source_tag, config)
    sheet = extractor.extract(document_text)
    logger.info(
        "%s: extracted %d section(s), %d line(s)",
        extractor.name,
        len(sheet.sections),
        sum(len(s.lines) for s in sheet.sections),
    )
    return sheet


def supported_sites() -> tuple[SupportedSite, ...]:
    """Return the supported sites in the order URLs are matched against them."""
    return SUPPORTED_SITES
