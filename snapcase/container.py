#!/usr/bin/env python3
"""
The decorated container a view is placed in before it is captured.

A gray "safety" border is added around the view so parts sticking out of
its frame are visible in the snapshot, guidelines mark the view's
alignment rectangle and a dashed line traces the view's bounds.
"""

from typing import Optional

from snapcase.config import SnapshotColors, SnapshotConfig
from snapcase.dashes import dash_segments, phase_for_dashed_pattern
from snapcase.errors import UsageError
from snapcase.geometry import EdgeInsets, Rect, Size
from snapcase.views import Color, RowCell, View

__all__ = [
    'SnapshotContainer',
    'Composition',
    'compose',
]

HALF_LINE_WIDTH = 0.5


class SnapshotContainer(View):
    """Hosts a single child view inside a padded, decorated frame."""

    def __init__(self, background_color: Optional[Color] = None, scale: float = None):
        super().__init__(background_color=background_color or SnapshotColors.WHITE)
        self.scale = scale or SnapshotConfig.SCREEN_SCALE
        self.safety_insets = EdgeInsets.uniform(SnapshotConfig.SAFETY_INSET)
        self.dash_length = SnapshotConfig.DASH_LENGTH
        self.skip_length = SnapshotConfig.SKIP_LENGTH
        self.child_view: Optional[View] = None
        self.child_size = Size(0, 0)

    def set_child_view(self, child: View, size: Size) -> None:
        if self.child_view is not None:
            raise UsageError("SnapshotContainer can host only one view")

        self.child_size = Size(*size)
        self.child_view = child
        self.add_subview(child)
        child.frame = Rect(0, 0, self.child_size.width, self.child_size.height)
        child.layout_if_needed()

    @property
    def safety_bounds(self) -> Rect:
        return self.bounds.inset(self.safety_insets)

    def size_that_fits(self, size: Size) -> Size:
        return self.child_size.grow_by(self.safety_insets)

    def layout_subviews(self) -> None:
        if self.child_view is not None:
            self.child_view.frame = self.safety_bounds

    def alignment_rect(self) -> Rect:
        if self.child_view is None:
            return self.safety_bounds
        return self.child_view.alignment_rect_for_frame(self.safety_bounds)

    def draw(self, canvas) -> None:
        b = self.bounds
        h = HALF_LINE_WIDTH

        # Safety area background.
        canvas.fill_rect(b, SnapshotColors.SAFETY_AREA)

        # The actual background.
        canvas.fill_rect(self.safety_bounds, self.background_color)

        # Guidelines corresponding to the alignment rectangle.
        r = self.alignment_rect()
        canvas.fill_rect(Rect(r.min_x - 2 * h, b.min_y, 2 * h, b.height), SnapshotColors.ALIGNMENT_RECT)
        canvas.fill_rect(Rect(r.max_x, b.min_y, 2 * h, b.height), SnapshotColors.ALIGNMENT_RECT)
        canvas.fill_rect(Rect(b.min_x, r.min_y - 2 * h, b.width, 2 * h), SnapshotColors.ALIGNMENT_RECT)
        canvas.fill_rect(Rect(b.min_x, r.max_y, b.width, 2 * h), SnapshotColors.ALIGNMENT_RECT)

        # Safety area border.
        border = self.safety_bounds.inset(EdgeInsets.uniform(-h))
        self._draw_dashed_edge(canvas, border.min_x, border.min_y, border.width, horizontal=True)
        self._draw_dashed_edge(canvas, border.max_x, border.min_y, border.height, horizontal=False)
        self._draw_dashed_edge(canvas, border.min_x, border.max_y, border.width, horizontal=True)
        self._draw_dashed_edge(canvas, border.min_x, border.min_y, border.height, horizontal=False)

    def _draw_dashed_edge(self, canvas, x: float, y: float, length: float, horizontal: bool) -> None:
        """Dashed 1pt line with square caps starting at (x, y), centered on the given line."""
        h = HALF_LINE_WIDTH
        phase = phase_for_dashed_pattern(length, self.dash_length, self.skip_length, self.scale)
        for start, end in dash_segments(length, self.dash_length, self.skip_length, phase):
            # Square caps extend each dash by half of the line width.
            start -= h
            end += h
            if horizontal:
                rect = Rect(x + start, y - h, end - start, 2 * h)
            else:
                rect = Rect(x - h, y + start, 2 * h, end - start)
            canvas.fill_rect(rect, SnapshotColors.SAFETY_BORDER)


class Composition:
    """
    A view temporarily moved into a SnapshotContainer.

    restore() (or leaving the `with` block) puts the view back where it was.
    """

    def __init__(self, view: View, container: SnapshotContainer):
        self.view = view
        self.container = container
        self.original_superview = view.superview
        self.original_index = view.index_in_superview()
        self.original_frame = view.frame
        self.restored = False

    @property
    def natural_size(self) -> Size:
        return self.container.size_that_fits(Size(0, 0))

    def restore(self) -> None:
        if self.restored:
            return
        self.restored = True
        self.view.frame = self.original_frame
        if self.original_superview is not None:
            self.original_superview.insert_subview(self.view, self.original_index)
        else:
            self.view.remove_from_superview()

    def __enter__(self) -> 'Composition':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()


def compose(
    view: View,
    size: Size,
    background_color: Optional[Color] = None,
    scale: float = None
) -> Composition:
    """
    Place a view into a new snapshot container.

    Args:
        view: View to snapshot
        size: Size of the view inside the container
        background_color: Background right behind the view (white if None)
        scale: Device pixels per point for the border dash phases

    Returns:
        Composition holding the laid out container; restore() it when done
    """
    if isinstance(view, RowCell):
        raise UsageError("RowCell should be wrapped into RowCellWrapper for correct snapshots")

    container = SnapshotContainer(background_color=background_color, scale=scale)
    composition = Composition(view, container)

    try:
        container.set_child_view(view, size)
        container_size = container.size_that_fits(Size(0, 0))
        container.frame = Rect(0, 0, container_size.width, container_size.height)

        # The first call gives the container its final size before its children are laid out.
        container.layout_subviews()
        container.layout_if_needed()
    except BaseException:
        composition.restore()
        raise

    return composition
