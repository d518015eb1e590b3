"""
Dash pattern helpers for the snapshot container border.

A dashed line drawn along an edge should look the same at both ends, so
the phase of the pattern is picked to center either a dash or a gap on
the middle of the line.
"""

import math
from typing import List, Tuple

__all__ = [
    'pixel_round',
    'phase_for_dashed_pattern',
    'pattern_position',
    'dash_segments',
]


def pixel_round(value: float, scale: float) -> float:
    """Round a point value to the nearest device pixel (half away from zero)."""
    scaled = value * scale
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / scale


def phase_for_dashed_pattern(
    line_length: float,
    dash_length: float,
    skip_length: float,
    scale: float = 2.0
) -> float:
    """
    Phase making a dashed line of the given length symmetric.

    Two phases are calculated: one placing the center of a dash at the
    center of the line and one placing the center of a gap there. The one
    cutting the ends of the line on a dash is preferred; when both cut on a
    gap, the shorter gap wins. The result is rounded to device pixels so the
    cuts never land in the middle of a pixel.

    Args:
        line_length: Length of the line
        dash_length: Length of the drawn part of the pattern
        skip_length: Length of the gap between dashes
        scale: Device pixels per point

    Returns:
        Phase (zero or negative) for the pattern, see pattern_position()
    """
    pattern_width = dash_length + skip_length

    # Half of the line before the dash in the center.
    dw = (line_length - dash_length) / 2 + pattern_width
    phase_dash = -pixel_round(dw - math.floor(dw / pattern_width) * pattern_width, scale)

    # Half of the line before the end of the gap in the center.
    sw = (line_length + skip_length) / 2 + pattern_width
    phase_skip = -pixel_round(sw - math.floor(sw / pattern_width) * pattern_width, scale)

    if phase_dash >= -skip_length and phase_skip >= -skip_length:
        # Both cut on a gap; make it smaller at least.
        return max(phase_dash, phase_skip)
    # Maximize the dashed part.
    return min(phase_dash, phase_skip)


def pattern_position(distance: float, dash_length: float, skip_length: float, phase: float) -> float:
    """Position within the pattern at the given distance along the line; < dash_length is drawn."""
    return (distance + phase) % (dash_length + skip_length)


def dash_segments(
    line_length: float,
    dash_length: float,
    skip_length: float,
    phase: float
) -> List[Tuple[float, float]]:
    """
    Visible dashes along a line of the given length.

    Returns:
        (start, end) distances of each dash, clipped to [0, line_length]
    """
    pattern_width = dash_length + skip_length
    if line_length <= 0 or pattern_width <= 0:
        return []

    segments = []
    # The dash containing or following the start of the line.
    start = -pattern_position(0.0, dash_length, skip_length, phase)
    while start < line_length:
        end = start + dash_length
        clipped = (max(start, 0.0), min(end, line_length))
        if clipped[1] > clipped[0]:
            segments.append(clipped)
        start += pattern_width
    return segments
