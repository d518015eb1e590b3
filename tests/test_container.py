#!/usr/bin/env python3
"""
Tests for the snapshot container: composition, restoration and decorations.
"""

import pytest

from snapcase.config import SnapshotColors
from snapcase.container import SnapshotContainer, compose
from snapcase.errors import UsageError
from snapcase.geometry import EdgeInsets, Rect, Size
from snapcase.render import Renderer
from snapcase.views import ColorView, RowCell, RowCellWrapper, View


class TestComposition:
    """Placing a view into a container and putting it back."""

    def test_natural_size_adds_safety_insets(self):
        view = ColorView('red', Size(40, 20))
        with compose(view, Size(40, 20)) as composition:
            assert composition.natural_size == Size(60, 40)
            assert composition.container.frame == Rect(0, 0, 60, 40)

    def test_child_fills_safety_bounds(self):
        view = ColorView('red', Size(40, 20))
        with compose(view, Size(100, 20)) as composition:
            assert view.superview is composition.container
            assert view.frame == Rect(10, 10, 100, 20)
            assert composition.container.safety_bounds == Rect(10, 10, 100, 20)

    def test_restores_superview_and_index(self):
        parent = View()
        siblings = [View(), ColorView('red', Size(40, 20)), View()]
        for sibling in siblings:
            parent.add_subview(sibling)
        view = siblings[1]
        original_frame = Rect(5, 6, 40, 20)
        view.frame = original_frame

        with compose(view, Size(40, 20)):
            assert view not in parent.subviews

        assert view.superview is parent
        assert parent.subviews == siblings
        assert view.frame == original_frame

    def test_restores_orphan(self):
        view = ColorView('red', Size(40, 20))
        with compose(view, Size(40, 20)) as composition:
            pass
        assert view.superview is None
        assert composition.container.subviews == []

    def test_restore_is_idempotent(self):
        parent = View()
        view = View()
        parent.add_subview(view)
        composition = compose(view, Size(10, 10))
        composition.restore()
        composition.restore()
        assert parent.subviews == [view]

    def test_restores_after_exception(self):
        parent = View()
        view = View()
        parent.add_subview(view)
        with pytest.raises(RuntimeError):
            with compose(view, Size(10, 10)):
                raise RuntimeError("capture failed")
        assert view.superview is parent

    def test_restores_when_layout_raises_while_composing(self):
        class FailingLayoutView(ColorView):
            def layout_subviews(self):
                if isinstance(self.superview, SnapshotContainer):
                    raise RuntimeError("layout went wrong")

        parent = View()
        siblings = [View(), FailingLayoutView('red', Size(40, 20)), View()]
        for sibling in siblings:
            parent.add_subview(sibling)
        original_frame = Rect(5, 6, 40, 20)
        siblings[1].frame = original_frame

        with pytest.raises(RuntimeError, match="layout went wrong"):
            compose(siblings[1], Size(100, 20))

        assert parent.subviews == siblings
        assert siblings[1].superview is parent
        assert siblings[1].frame == original_frame

    def test_orphan_is_detached_when_layout_raises(self):
        class FailingLayoutView(ColorView):
            def layout_subviews(self):
                raise RuntimeError("layout went wrong")

        view = FailingLayoutView('red', Size(40, 20))

        with pytest.raises(RuntimeError):
            compose(view, Size(100, 20))

        assert view.superview is None

    def test_row_cell_needs_a_wrapper(self):
        with pytest.raises(UsageError, match="RowCellWrapper"):
            compose(RowCell(ColorView('red', Size(40, 20))), Size(40, 20))

    def test_wrapped_row_cell(self, run_loop):
        wrapper = RowCellWrapper(RowCell(ColorView('red', Size(40, 20))))
        wrapper.reload(run_loop)
        with compose(wrapper, Size(375, 20)) as composition:
            assert wrapper.cell.frame == Rect(0, 0, 375, 20)
            assert composition.natural_size == Size(395, 40)

    def test_single_child_only(self):
        container = SnapshotContainer()
        container.set_child_view(View(), Size(10, 10))
        with pytest.raises(UsageError):
            container.set_child_view(View(), Size(10, 10))

    def test_alignment_rect_follows_child_insets(self):
        view = ColorView('red', Size(40, 20))
        view.alignment_insets = EdgeInsets(2, 3, 4, 5)
        with compose(view, Size(40, 20)) as composition:
            assert composition.container.alignment_rect() == Rect(13, 12, 32, 14)


@pytest.mark.render
class TestDecorations:
    """
    Pixels of a captured container.

    A 40x20 red view at 2x: the container is 60x40 points, 120x80 pixels,
    with the view at pixels [20, 100) x [20, 60).
    """

    @pytest.fixture
    def image(self):
        view = ColorView('red', Size(40, 20))
        with compose(view, Size(40, 20), scale=2) as composition:
            return Renderer(scale=2).capture(composition.container)

    def test_image_size(self, image):
        assert image.size == (120, 80)

    def test_view_content(self, image):
        assert image.getpixel((60, 40)) == (255, 0, 0)
        assert image.getpixel((20, 20)) == (255, 0, 0)
        assert image.getpixel((99, 59)) == (255, 0, 0)

    def test_safety_area(self, image):
        assert image.getpixel((0, 0)) == SnapshotColors.SAFETY_AREA
        assert image.getpixel((5, 30)) == SnapshotColors.SAFETY_AREA
        assert image.getpixel((119, 79)) == SnapshotColors.SAFETY_AREA

    def test_alignment_guidelines(self, image):
        # Left guideline, above the border.
        r, g, b = image.getpixel((19, 5))
        assert g > r + 50
        assert b > r + 50
        # Guidelines span the whole container.
        r, g, b = image.getpixel((5, 61))
        assert g > r + 50
        assert b > r + 50

    def test_dashed_border(self, image):
        # The top edge starts on a dash (including its square cap)...
        assert image.getpixel((20, 18)) == SnapshotColors.SAFETY_BORDER
        # ...followed by a gap.
        assert image.getpixel((24, 18)) != SnapshotColors.SAFETY_BORDER

    def test_background_color(self):
        view = View()
        with compose(view, Size(40, 20), background_color='blue', scale=2) as composition:
            image = Renderer(scale=2).capture(composition.container)
        assert image.getpixel((60, 40)) == (0, 0, 255)


@pytest.mark.render
class TestRowCellTint:
    """Selection and highlight darken the whole cell, content included."""

    def capture(self, run_loop, **state):
        cell = RowCell(ColorView('red', Size(40, 20)))
        for name, value in state.items():
            setattr(cell, name, value)
        wrapper = RowCellWrapper(cell)
        wrapper.frame = Rect(0, 0, 40, 20)
        wrapper.reload(run_loop)
        return Renderer(scale=1).capture(wrapper)

    def test_plain_cell_shows_content(self, run_loop):
        assert self.capture(run_loop).getpixel((20, 10)) == (255, 0, 0)

    @pytest.mark.parametrize("state", ['selected', 'highlighted'])
    def test_tint_covers_content(self, run_loop, state):
        r, g, b = self.capture(run_loop, **{state: True}).getpixel((20, 10))
        assert 180 < r < 255
        assert (g, b) == (0, 0)
