"""Character-offset bookkeeping for chord positions.

Every chord position in chordgrab is a count of Unicode characters, so
``"夜の[Bb]空"`` pins ``Bb`` at 2, not at the UTF-8 byte offset 6.
"""

from .models import Chord, Line


def char_offset(text: str | bytes, offset: int) -> int:
    """Return the number of characters in *text* before *offset*.

    For ``bytes`` the offset is a byte offset into UTF-8 data; a split
    multi-byte sequence does not count as a character.  For ``str`` the
    offset is already an index into the string.  Offsets outside the text
    are clamped.
    """
    offset = max(offset, 0)
    if isinstance(text, bytes):
        return len(text[:offset].decode("utf-8", errors="ignore"))
    return len(text[:offset])


class LineBuilder:
    """Accumulate lyric fragments and chords into a :class:`Line`.

    Chords added with :meth:`add_chord` are pinned at the number of lyric
    characters accumulated so far.
    """

    def __init__(self):
        self._parts: list[str] = []
        self._length = 0
        self._chords: list[Chord] = []

    @property
    def position(self) -> int:
        return self._length

    @property
    def has_content(self) -> bool:
        return self._length > 0 or bool(self._chords)

    def add_text(self, text: str) -> None:
        if text:
            self._parts.append(text)
            self._length += char_offset(text, len(text))

    def add_chord(self, symbol: str) -> None:
        self._chords.append(Chord(symbol=symbol, position=self._length))

    def add_chord_at(self, symbol: str, position: int) -> None:
        self._chords.append(Chord(symbol=symbol, position=position))

    def build(self, strip: bool = False) -> Line:
        """Return the accumulated :class:`Line`.

        With ``strip=True`` surrounding whitespace is removed from the lyrics
        and chord positions move left by the number of leading characters
        dropped, clamped to the stripped lyric length.  A line holding only
        whitespace and chords becomes a chord-only line (empty lyrics) and
        keeps its chord positions unchanged.
        """
        lyrics = "".join(self._parts)
        if not strip:
            return Line(lyrics=lyrics, chords=tuple(self._chords))

        stripped = lyrics.strip()
        if not stripped:
            return Line(lyrics="", chords=tuple(self._chords))

        shift = len(lyrics) - len(lyrics.lstrip())
        chords = tuple(
            Chord(symbol=c.symbol, position=min(max(c.position - shift, 0), len(stripped)))
            for c in self._chords
        )
        return Line(lyrics=stripped, chords=chords)
