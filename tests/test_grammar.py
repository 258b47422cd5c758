"""
Tests for the beat character and alignment grammars.

Both are total functions: every input maps to a value, unknown inputs map
to a documented default.
"""

import pytest

from huespack.core import constants
from huespack.core.models import Align, AudioResource, Beat, ImageResource


class TestBeatGrammar:
    @pytest.mark.parametrize(
        "char, expected",
        [
            ("x", Beat.VERTICAL_BLUR),
            ("o", Beat.HORIZONTAL_BLUR),
            ("-", Beat.NO_BLUR),
            ("+", Beat.BLACKOUT),
            ("|", Beat.SHORT_BLACKOUT),
            (":", Beat.COLOR_ONLY),
            ("*", Beat.IMAGE_ONLY),
            (".", Beat.NO_TRANSITION),
        ],
    )
    def test_defined_characters(self, char: str, expected: Beat) -> None:
        assert AudioResource.parse_beat_character(char) is expected

    @pytest.mark.parametrize("char", ["q", " ", "\0", "X", "O", "~", "é"])
    def test_unknown_characters_default_to_no_transition(self, char: str) -> None:
        assert AudioResource.parse_beat_character(char) is Beat.NO_TRANSITION

    def test_table_covers_every_beat(self) -> None:
        assert {Beat[name] for name in constants.BEAT_CHARACTERS.values()} == set(Beat)

    def test_enum_values_are_the_characters(self) -> None:
        for char, name in constants.BEAT_CHARACTERS.items():
            assert Beat[name].value == char


class TestAlignmentGrammar:
    @pytest.mark.parametrize(
        "text, expected",
        [("left", Align.LEFT), ("center", Align.CENTER), ("right", Align.RIGHT)],
    )
    def test_defined_strings(self, text: str, expected: Align) -> None:
        assert ImageResource.parse_alignment_string(text) is expected

    @pytest.mark.parametrize("text", ["LEFT", "", "middle", " left", "Right"])
    def test_unknown_strings_default_to_center(self, text: str) -> None:
        assert ImageResource.parse_alignment_string(text) is Align.CENTER


class TestConstants:
    def test_bpm_to_usec_per_beat(self) -> None:
        assert constants.bpm_to_usec_per_beat(120.0) == 500_000.0
        assert constants.bpm_to_usec_per_beat(60.0) == 1_000_000.0

    def test_bpm_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            constants.bpm_to_usec_per_beat(0)

    @pytest.mark.parametrize("bpm", [float("nan"), float("inf")])
    def test_bpm_must_be_finite(self, bpm: float) -> None:
        with pytest.raises(ValueError, match="finite"):
            constants.bpm_to_usec_per_beat(bpm)
