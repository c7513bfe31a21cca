"""
Configuration for chordgrab extraction and fetching.

All options have sensible defaults; build a config only to change them.
Config objects are frozen and can be shared between concurrent calls.

Example:
    >>> config = ExtractionConfig(spacing=SpacingPolicy(space_multiplier=1))
    >>> sheet = extract(html, "ufret", config)
"""

from dataclasses import dataclass, field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class SpacingPolicy:
    """
    Lyric padding used to lay out chord-only lines from U-Fret script data.

    Chord-only lines have no real lyric to pin chords to, so each run of
    spaces before a chord becomes ``space_multiplier`` spaces per source
    space, and every chord reserves at least ``min_chord_width`` characters.
    """

    space_multiplier: int = 2
    min_chord_width: int = 2

    def __post_init__(self):
        if self.space_multiplier < 0:
            raise ValueError(f"space_multiplier must be >= 0, got {self.space_multiplier}")
        if self.min_chord_width < 0:
            raise ValueError(f"min_chord_width must be >= 0, got {self.min_chord_width}")


@dataclass(frozen=True)
class ExtractionConfig:
    """Options shared by every extractor."""

    # A plain-text line is a chord line when more than this share of its
    # tokens are valid chords.
    chord_line_ratio: float = 0.5
    spacing: SpacingPolicy = field(default_factory=SpacingPolicy)

    def __post_init__(self):
        if not 0.0 <= self.chord_line_ratio < 1.0:
            raise ValueError(
                f"chord_line_ratio must be in [0.0, 1.0), got {self.chord_line_ratio}"
            )


@dataclass(frozen=True)
class FetchConfig:
    """HTTP options for :func:`chordgrab.fetch.fetch_page`."""

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "ja,en-US;q=0.9,en;q=0.8"

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


DEFAULT_EXTRACTION_CONFIG = ExtractionConfig()
DEFAULT_FETCH_CONFIG = FetchConfig()
