"""
Things that can be snapshotted.

A subject turns into a concrete view and its size for a given size
constraint. Plain views and view controllers are measured directly,
declarative values go through a host that builds a view for them.
"""

from typing import Any, Optional, Tuple

from snapcase.errors import UsageError
from snapcase.geometry import Rect, Size
from snapcase.sizing import fitting_size
from snapcase.views import View, ViewController

__all__ = [
    'Subject',
    'ViewSubject',
    'ControllerSubject',
    'DeclarativeSubject',
    'DeclarativeHost',
    'HostingView',
    'subject_for',
]


class Subject:
    """Something that materializes into a view for a given size constraint."""

    def materialize(self, fit_size: Size) -> Tuple[View, Size]:
        raise NotImplementedError


class ViewSubject(Subject):

    def __init__(self, view: View):
        self.view = view

    def materialize(self, fit_size: Size) -> Tuple[View, Size]:
        return self.view, fitting_size(self.view, fit_size)


class ControllerSubject(Subject):

    def __init__(self, controller: ViewController):
        self.controller = controller

    def materialize(self, fit_size: Size) -> Tuple[View, Size]:
        view = self.controller.view
        return view, fitting_size(view, fit_size)


class HostingView(View):
    """Wraps the view built for a declarative value."""

    def __init__(self, root: View):
        super().__init__()
        self.root = root
        self.add_subview(root)

    def size_that_fits(self, size: Size) -> Size:
        return self.root.size_that_fits(size)

    def layout_subviews(self) -> None:
        self.root.frame = self.bounds


class DeclarativeHost:
    """
    Builds native views for declarative values.

    A declarative value is either a callable returning a View or an object
    with a `body()` method returning one.
    """

    def build(self, value: Any) -> View:
        if hasattr(value, 'body'):
            view = value.body()
        elif callable(value):
            view = value()
        else:
            raise UsageError(f"Cannot build a view for {type(value).__name__}")
        if not isinstance(view, View):
            raise UsageError(f"Declarative value produced {type(view).__name__} instead of a View")
        return view

    def hosted_native_view(self, value: Any, size: Size) -> Tuple[View, Size]:
        hosting = HostingView(self.build(value))
        reported = fitting_size(hosting, size)
        hosting.frame = Rect.from_size(reported)
        hosting.layout_if_needed()
        return hosting, reported


class DeclarativeSubject(Subject):

    def __init__(self, value: Any, host: Optional[DeclarativeHost] = None):
        self.value = value
        self.host = host or DeclarativeHost()

    def materialize(self, fit_size: Size) -> Tuple[View, Size]:
        return self.host.hosted_native_view(self.value, fit_size)


def subject_for(value: Any, host: Optional[DeclarativeHost] = None) -> Subject:
    """Subject for a view, a view controller, a declarative value or an existing subject."""
    if isinstance(value, Subject):
        return value
    if isinstance(value, View):
        return ViewSubject(value)
    if isinstance(value, ViewController):
        return ControllerSubject(value)
    if hasattr(value, 'body') or callable(value):
        return DeclarativeSubject(value, host)
    raise UsageError(f"Unsupported subject: {type(value).__name__}")
