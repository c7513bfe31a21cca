from abc import ABC, abstractmethod
from typing import ClassVar

from ..config import DEFAULT_EXTRACTION_CONFIG, DEFAULT_FETCH_CONFIG, ExtractionConfig, FetchConfig
from ..fetch import fetch_page
from ..models import ChordSheet


class Extractor(ABC):
    """Abstract base class for all site-specific extractors.

    Subclasses declare the site they handle through ``name`` and ``hosts``
    and implement :meth:`extract`.
    """

    name: ClassVar[str]
    hosts: ClassVar[tuple[str, ...]]

    def __init__(self, config: ExtractionConfig | None = None):
        self.config = config or DEFAULT_EXTRACTION_CONFIG

    @classmethod
    def can_handle(cls, url: str) -> bool:
        """Return True if *url* belongs to one of this extractor's hosts."""
        return any(host in url for host in cls.hosts)

    @abstractmethod
    def extract(self, html: str) -> ChordSheet:
        """Parse *html* and return a new ChordSheet.

        The returned sheet has an empty ``source_url``; callers attach one
        with :meth:`ChordSheet.with_source`.

        Raises StructuralElementMissingError if no chord content can be
        located after every fallback has been tried.
        """

    def scrape(self, url: str, fetch_config: FetchConfig | None = None) -> ChordSheet:
        """Convenience method: fetch + extract + tag with *url*."""
        html = fetch_page(url, fetch_config or DEFAULT_FETCH_CONFIG)
        return self.extract(html).with_source(url)
