from enum import Enum


class ChordGrabError(Exception):
    """Base exception for chordgrab."""


class ExtractError(ChordGrabError):
    """Base class for failures while turning a page into a ChordSheet."""


class UnsupportedSourceError(ExtractError):
    """Raised when no extractor matches the given source tag or URL."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"No extractor found for source: {source}")


class StructuralElementMissingError(ExtractError):
    """Raised when a mandatory anchor element is absent from a page.

    Only raised once every fallback for the source has been tried.
    """

    def __init__(self, source: str, element: str):
        self.source = source
        self.element = element
        super().__init__(f"{source}: could not find {element}")


class FetchErrorKind(Enum):
    NETWORK = "network"
    STATUS = "status"
    TIMEOUT = "timeout"


class FetchError(ChordGrabError):
    """Raised when an HTTP request fails."""

    def __init__(self, url: str, status_code: int, kind: FetchErrorKind = FetchErrorKind.STATUS):
        self.url = url
        self.status_code = status_code
        self.kind = kind
        if kind is FetchErrorKind.TIMEOUT:
            message = f"Timed out fetching {url}"
        elif kind is FetchErrorKind.NETWORK:
            message = f"Network error fetching {url}"
        else:
            message = f"HTTP {status_code} fetching {url}"
        super().__init__(message)
