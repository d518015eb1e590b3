#!/usr/bin/env python3
"""
Tests for the dash phase of the container border.
"""

import pytest
from hypothesis import given, strategies as st

from snapcase.dashes import dash_segments, pattern_position, phase_for_dashed_pattern, pixel_round

DASH = 2.0
SKIP = 5.0
SCALE = 2.0


class TestPixelRound:

    @pytest.mark.parametrize("value, expected", [
        (1.2, 1.0),
        (1.25, 1.5),
        (1.3, 1.5),
        (-1.25, -1.5),
        (-1.2, -1.0),
        (0.0, 0.0),
    ])
    def test_half_away_from_zero(self, value, expected):
        assert pixel_round(value, SCALE) == expected

    def test_scale_one(self):
        assert pixel_round(2.5, 1.0) == 3.0
        assert pixel_round(-2.5, 1.0) == -3.0


class TestPhase:
    """Phases for known line lengths."""

    def test_centered_dash(self):
        # A dash in the middle, gaps on both ends: shorter gap wins.
        assert phase_for_dashed_pattern(100, DASH, SKIP, SCALE) == 0.0

    def test_cut_on_dash(self):
        assert phase_for_dashed_pattern(50, DASH, SKIP, SCALE) == -6.5

    def test_phase_is_never_positive(self):
        for length in range(1, 200):
            assert phase_for_dashed_pattern(length, DASH, SKIP, SCALE) <= 0.0

    def test_phase_is_pixel_aligned(self):
        for length in (13.3, 41, 77.7, 120.25):
            phase = phase_for_dashed_pattern(length, DASH, SKIP, SCALE)
            assert phase * SCALE == int(phase * SCALE)

    def test_pattern_position(self):
        assert pattern_position(0, DASH, SKIP, -6.5) == pytest.approx(0.5)
        assert pattern_position(50, DASH, SKIP, -6.5) == pytest.approx(1.5)


class TestSegments:

    def test_line_of_100(self):
        segments = dash_segments(100, DASH, SKIP, 0.0)
        assert segments[0] == (0.0, 2.0)
        assert segments[-1] == (98.0, 100.0)
        assert len(segments) == 15

    def test_line_of_50(self):
        segments = dash_segments(50, DASH, SKIP, -6.5)
        assert segments[0] == (0.0, 1.5)
        assert segments[-1] == (48.5, 50.0)

    def test_empty_line(self):
        assert dash_segments(0, DASH, SKIP, 0.0) == []

    @given(length=st.floats(min_value=1, max_value=2000, allow_nan=False, allow_infinity=False))
    def test_segments_are_clipped_and_ordered(self, length):
        phase = phase_for_dashed_pattern(length, DASH, SKIP, SCALE)
        segments = dash_segments(length, DASH, SKIP, phase)
        previous_end = 0.0
        for start, end in segments:
            assert 0.0 <= start < end <= length
            assert start >= previous_end
            assert end - start <= DASH + 1e-9
            previous_end = end


class TestSymmetry:
    """Both ends of a line cut the pattern at mirrored positions."""

    @given(
        length=st.floats(min_value=1, max_value=2000, allow_nan=False, allow_infinity=False),
        scale=st.sampled_from([1.0, 2.0, 3.0]),
    )
    def test_ends_mirror_each_other(self, length, scale):
        period = DASH + SKIP
        phase = phase_for_dashed_pattern(length, DASH, SKIP, scale)

        # Distance into the dash at the start equals distance to its end at the other side.
        mirrored_start = (DASH - pattern_position(0, DASH, SKIP, phase)) % period
        end = pattern_position(length, DASH, SKIP, phase) % period

        distance = abs(mirrored_start - end)
        distance = min(distance, period - distance)
        assert distance <= 1.0 / scale + 1e-9
