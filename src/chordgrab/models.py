from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Chord:
    """A chord symbol pinned to a character offset in its line's lyrics.

    ``position`` counts Unicode characters, not bytes: in ``"あいう C"`` the
    chord sits at position 4.
    """

    symbol: str
    position: int

    def to_dict(self) -> dict:
        return {"symbol": self.symbol, "position": self.position}


@dataclass(frozen=True)
class Line:
    """One lyric line with its chords.

    Chord-only lines (intros, instrumental passages) have empty lyrics.
    """

    lyrics: str = ""
    chords: tuple[Chord, ...] = ()

    def __post_init__(self):
        # Stable sort: chords sharing a position keep their source order.
        object.__setattr__(
            self, "chords", tuple(sorted(self.chords, key=lambda c: c.position))
        )

    @property
    def has_content(self) -> bool:
        return bool(self.lyrics) or bool(self.chords)

    def to_dict(self) -> dict:
        return {"lyrics": self.lyrics, "chords": [c.to_dict() for c in self.chords]}


@dataclass(frozen=True)
class Section:
    """A named section of a song (Aメロ, サビ, Verse, ...)."""

    name: str
    lines: tuple[Line, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    def to_dict(self) -> dict:
        return {"name": self.name, "lines": [line.to_dict() for line in self.lines]}


@dataclass(frozen=True)
class ChordSheet:
    """Canonical representation of a chord sheet, site-agnostic."""

    sections: tuple[Section, ...]
    title: str | None = None
    artist: str | None = None
    key: str | None = None
    capo: int | None = None  # semitones, never negative
    source_url: str = ""

    def __post_init__(self):
        object.__setattr__(self, "sections", tuple(self.sections))
        if not self.sections:
            raise ValueError("ChordSheet requires at least one section")
        if self.capo is not None and self.capo < 0:
            raise ValueError(f"capo must be non-negative, got {self.capo}")

    def with_source(self, source_url: str) -> "ChordSheet":
        """Return a copy tagged with the caller's source identifier."""
        return replace(self, source_url=source_url)

    def to_dict(self) -> dict:
        """Return the JSON-ready wire form of this sheet."""
        return {
            "title": self.title,
            "artist": self.artist,
            "key": self.key,
            "capo": self.capo,
            "sections": [s.to_dict() for s in self.sections],
            "source_url": self.source_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChordSheet":
        sections = tuple(
            Section(
                name=s["name"],
                lines=tuple(
                    Line(
                        lyrics=ln.get("lyrics", ""),
                        chords=tuple(
                            Chord(symbol=c["symbol"], position=c["position"])
                            for c in ln.get("chords", [])
                        ),
                    )
                    for ln in s.get("lines", [])
                ),
            )
            for s in data["sections"]
        )
        return cls(
            sections=sections,
            title=data.get("title"),
            artist=data.get("artist"),
            key=data.get("key"),
            capo=data.get("capo"),
            source_url=data.get("source_url", ""),
        )
