#!/usr/bin/env python3
"""
Offscreen rendering of view trees with Pillow.

The renderer walks a view tree and lets every view draw itself into a
Canvas translated to the view's origin. Coordinates are in points and
are converted to device pixels using the scale of the renderer.
"""

import math
from contextlib import contextmanager
from typing import Iterator, Tuple

from PIL import Image, ImageColor, ImageDraw

from snapcase.config import SnapshotConfig
from snapcase.geometry import Rect
from snapcase.views import Color

__all__ = [
    'Canvas',
    'Renderer',
    'to_rgba',
]


def to_rgba(color: Color) -> Tuple[int, int, int, int]:
    """Normalize a color name, RGB or RGBA tuple to RGBA."""
    if isinstance(color, str):
        color = ImageColor.getrgb(color)
    if len(color) == 3:
        return (color[0], color[1], color[2], 255)
    if len(color) == 4:
        return tuple(color)
    raise ValueError(f"Unsupported color: {color!r}")


def _to_pixel(value: float, scale: float) -> int:
    return int(math.floor(value * scale + 0.5))


class Canvas:
    """Drawing surface in points on top of a Pillow image."""

    def __init__(self, image: Image.Image, scale: float):
        self.image = image
        self.scale = scale
        self._draw = ImageDraw.Draw(image, 'RGBA')
        self._origin = (0.0, 0.0)

    @contextmanager
    def translated(self, dx: float, dy: float) -> Iterator['Canvas']:
        saved = self._origin
        self._origin = (saved[0] + dx, saved[1] + dy)
        try:
            yield self
        finally:
            self._origin = saved

    def pixel_box(self, rect: Rect) -> Tuple[int, int, int, int]:
        """Device pixel box (left, top, right, bottom), right/bottom exclusive."""
        ox, oy = self._origin
        return (
            _to_pixel(ox + rect.min_x, self.scale),
            _to_pixel(oy + rect.min_y, self.scale),
            _to_pixel(ox + rect.max_x, self.scale),
            _to_pixel(oy + rect.max_y, self.scale),
        )

    def fill_rect(self, rect: Rect, color: Color) -> None:
        left, top, right, bottom = self.pixel_box(rect)
        if right <= left or bottom <= top:
            return
        self._draw.rectangle([left, top, right - 1, bottom - 1], fill=to_rgba(color))


class Renderer:
    """
    Captures views into images.

    Usage:
        renderer = Renderer(scale=2)
        image = renderer.capture(view)
    """

    def __init__(self, scale: float = None, mode: str = 'RGB'):
        """
        Initialize renderer.

        Args:
            scale: Device pixels per point (uses config default if None)
            mode: Pillow mode of the captured images
        """
        self.scale = scale or SnapshotConfig.SCREEN_SCALE
        self.mode = mode

    def image_size(self, view) -> Tuple[int, int]:
        size = view.bounds.size
        return (
            int(math.ceil(size.width * self.scale)),
            int(math.ceil(size.height * self.scale)),
        )

    def capture(self, view) -> Image.Image:
        """Render the view and its subviews into a new image of the view's size."""
        image = Image.new(self.mode, self.image_size(view), (0, 0, 0))
        canvas = Canvas(image, self.scale)
        self._render(view, canvas)
        return image

    def _render(self, view, canvas: Canvas) -> None:
        view.draw(canvas)
        for subview in view.subviews:
            with canvas.translated(subview.frame.x, subview.frame.y):
                self._render(subview, canvas)
        view.draw_overlay(canvas)
