import pytest

from chordgrab.config import (
    DEFAULT_EXTRACTION_CONFIG,
    ExtractionConfig,
    FetchConfig,
    SpacingPolicy,
)


def test_defaults():
    assert DEFAULT_EXTRACTION_CONFIG.chord_line_ratio == 0.5
    assert DEFAULT_EXTRACTION_CONFIG.spacing == SpacingPolicy(space_multiplier=2, min_chord_width=2)
    assert FetchConfig().timeout == 30.0


def test_ratio_out_of_range():
    with pytest.raises(ValueError):
        ExtractionConfig(chord_line_ratio=1.0)
    with pytest.raises(ValueError):
        ExtractionConfig(chord_line_ratio=-0.1)


def test_negative_spacing_rejected():
    with pytest.raises(ValueError):
        SpacingPolicy(space_multiplier=-1)
    with pytest.raises(ValueError):
        SpacingPolicy(min_chord_width=-1)


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        FetchConfig(timeout=0)
