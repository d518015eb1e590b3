"""
A minimal retained view tree to snapshot.

Views have a frame in their superview's coordinates, an ordered list of
subviews, a way to tell the size they want within given bounds and a
layout pass. Drawing goes through a Canvas (see snapcase.render) that is
already translated to the view's origin.
"""

from typing import List, Optional, Tuple, Union

from snapcase.geometry import EdgeInsets, Rect, Size
from snapcase.runloop import RunLoop

__all__ = [
    'Color',
    'View',
    'ColorView',
    'StackView',
    'ViewController',
    'RowCell',
    'RowCellWrapper',
]

Color = Union[str, Tuple[int, ...]]


class View:
    """Base view: a rectangle with optional background and subviews."""

    def __init__(self, frame: Optional[Rect] = None, background_color: Optional[Color] = None):
        self._frame = Rect(*frame) if frame else Rect()
        self.background_color = background_color
        self.superview: Optional['View'] = None
        self.subviews: List['View'] = []
        # Distance from the frame to the layout-relevant part of the view.
        self.alignment_insets = EdgeInsets()
        self._needs_layout = True

    def __repr__(self) -> str:
        f = self._frame
        return f"{type(self).__name__}(frame=({f.x:g}, {f.y:g}, {f.width:g}, {f.height:g}))"

    # Geometry

    @property
    def frame(self) -> Rect:
        return self._frame

    @frame.setter
    def frame(self, value: Rect) -> None:
        value = Rect(*value)
        if value.size != self._frame.size:
            self._needs_layout = True
        self._frame = value

    @property
    def bounds(self) -> Rect:
        return Rect.from_size(self._frame.size)

    def alignment_rect_for_frame(self, frame: Rect) -> Rect:
        return frame.inset(self.alignment_insets)

    def frame_for_alignment_rect(self, rect: Rect) -> Rect:
        return rect.inset(-self.alignment_insets)

    def intrinsic_size(self) -> Size:
        return Size(0, 0)

    def size_that_fits(self, size: Size) -> Size:
        """Size the view wants within the given bounds (zero components are unconstrained)."""
        return self.intrinsic_size()

    # Hierarchy

    def add_subview(self, view: 'View') -> None:
        self.insert_subview(view, len(self.subviews))

    def insert_subview(self, view: 'View', index: int) -> None:
        if view.superview is not None:
            view.remove_from_superview()
        index = max(0, min(index, len(self.subviews)))
        self.subviews.insert(index, view)
        view.superview = self
        self.set_needs_layout()

    def remove_from_superview(self) -> None:
        parent = self.superview
        if parent is None:
            return
        parent.subviews = [v for v in parent.subviews if v is not self]
        self.superview = None
        parent.set_needs_layout()

    def index_in_superview(self) -> Optional[int]:
        if self.superview is None:
            return None
        for i, view in enumerate(self.superview.subviews):
            if view is self:
                return i
        return None

    # Layout

    def set_needs_layout(self) -> None:
        self._needs_layout = True

    @property
    def needs_layout(self) -> bool:
        return self._needs_layout

    def layout_subviews(self) -> None:
        """Position subviews; the default implementation leaves them where they are."""

    def layout_if_needed(self) -> None:
        """Run a synchronous layout pass on this view and its subtree."""
        if self._needs_layout:
            self._needs_layout = False
            self.layout_subviews()
        for view in self.subviews:
            view.layout_if_needed()

    # Drawing

    def draw(self, canvas) -> None:
        if self.background_color is not None:
            canvas.fill_rect(self.bounds, self.background_color)

    def draw_overlay(self, canvas) -> None:
        """Drawn after the subviews, on top of them."""


class ColorView(View):
    """A solid block of color with an intrinsic size."""

    def __init__(self, color: Color, size: Size = Size(0, 0), frame: Optional[Rect] = None):
        super().__init__(frame=frame, background_color=color)
        self.size = Size(*size)

    def intrinsic_size(self) -> Size:
        return self.size


class StackView(View):
    """Stacks its arranged subviews vertically, each one as wide as the stack."""

    def __init__(
        self,
        views: Optional[List[View]] = None,
        spacing: float = 0.0,
        insets: EdgeInsets = EdgeInsets(),
        background_color: Optional[Color] = None
    ):
        super().__init__(background_color=background_color)
        self.spacing = spacing
        self.insets = insets
        for view in views or []:
            self.add_subview(view)

    def size_that_fits(self, size: Size) -> Size:
        inner_width = max(size.width - self.insets.left - self.insets.right, 0.0) if size.width > 0 else 0.0
        width = 0.0
        height = 0.0
        for i, view in enumerate(self.subviews):
            s = view.size_that_fits(Size(inner_width, 0))
            width = max(width, s.width)
            height += s.height + (self.spacing if i > 0 else 0.0)
        return Size(width, height).grow_by(self.insets)

    def layout_subviews(self) -> None:
        content = self.bounds.inset(self.insets)
        y = content.y
        for view in self.subviews:
            s = view.size_that_fits(Size(content.width, 0))
            view.frame = Rect(content.x, y, content.width, s.height)
            y += s.height + self.spacing


class ViewController:
    """Owns a view that is created lazily on first access."""

    def __init__(self):
        self._view: Optional[View] = None

    def load_view(self) -> View:
        return View()

    def view_did_load(self) -> None:
        pass

    @property
    def is_view_loaded(self) -> bool:
        return self._view is not None

    @property
    def view(self) -> View:
        if self._view is None:
            self._view = self.load_view()
            self.view_did_load()
        return self._view


class RowCell(View):
    """
    A row of a table.

    Cells cannot be snapshotted standalone, they have to be hosted in a
    RowCellWrapper first.
    """

    SELECTED_TINT = (0, 0, 0, 40)

    def __init__(self, content: Optional[View] = None, background_color: Optional[Color] = 'white'):
        super().__init__(background_color=background_color)
        self.selected = False
        self.highlighted = False
        self.content: Optional[View] = None
        if content is not None:
            self.set_content(content)

    def set_content(self, content: View) -> None:
        if self.content is not None:
            self.content.remove_from_superview()
        self.content = content
        self.add_subview(content)

    def size_that_fits(self, size: Size) -> Size:
        if self.content is None:
            return Size(size.width, 0)
        return self.content.size_that_fits(size)

    def layout_subviews(self) -> None:
        if self.content is not None:
            self.content.frame = self.bounds

    def draw_overlay(self, canvas) -> None:
        if self.selected or self.highlighted:
            canvas.fill_rect(self.bounds, self.SELECTED_TINT)


class RowCellWrapper(View):
    """
    Hosts a RowCell so it can be snapshotted.

    Create it once per cell and reuse it for every verification, so the
    selected/highlighted state set on the cell is not reset.
    """

    def __init__(self, cell: RowCell):
        super().__init__()
        self.cell = cell
        self.add_subview(cell)
        self.layout_if_needed()

    def size_that_fits(self, size: Size) -> Size:
        measured = self.cell.size_that_fits(size)
        return Size(
            size.width if size.width > 0 else measured.width,
            size.height if size.height > 0 else measured.height,
        )

    def layout_subviews(self) -> None:
        self.cell.frame = self.bounds

    def reload(self, run_loop=None) -> None:
        """Re-layout the hosted cell and let the work it scheduled run."""
        self.cell.set_needs_layout()
        self.set_needs_layout()
        self.layout_if_needed()
        (run_loop or RunLoop.main()).drain_pending()
