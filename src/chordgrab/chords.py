"""Chord symbol grammar shared by every extractor.

Accepted shapes::

    C  Am  F#m7  Bbmaj7  E♭dim  Dsus4  E7sus4  Cadd9  G7(b9)  Am7-5  C#m/G#  Am7/G

The check is syntactic only: ``Cmaj13(#11)`` passes without any attempt to
decide whether the extension is musically sensible.
"""

import re

_ROOT = r"[A-G][#b♯♭]?"
_QUALITY = r"(?:maj|min|m|M|dim|aug|sus[24]?|add\d+)"
_ALTERATION = r"[#b♯♭+\-]?\d+"
_TENSION = rf"(?:\({_ALTERATION}(?:,{_ALTERATION})*\)|[#b♯♭+\-]\d+)"

CHORD_NAME_RE = re.compile(rf"{_ROOT}(?:{_QUALITY}|\d+)*{_TENSION}*(?:/{_ROOT})?")


def is_chord(token: str) -> bool:
    """Return True if *token* is a syntactically valid chord symbol."""
    if not isinstance(token, str) or not token:
        return False
    return CHORD_NAME_RE.fullmatch(token) is not None
