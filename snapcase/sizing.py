"""
Sizing policy for snapshot containers.

Maps a symbolic fit request and the device metrics to a concrete size
constraint, and measures views under such a constraint.
"""

from enum import Enum
from typing import Sequence, Tuple, Union

from snapcase.geometry import DeviceMetrics, Size

__all__ = [
    'Fit',
    'FitRequest',
    'resolve_fit',
    'resolve_fits',
    'fit_size_for_preset',
    'fitting_size',
]


class Fit(Enum):
    """Presets for some common size constraints used with snapshot testing."""

    #: The natural width and height of the view.
    NATURAL = 'natural'

    #: The width of the screen (in portrait), the natural height of the view.
    SCREEN_WIDTH = 'screen_width'

    #: The width of the screen and its height without status and navigation bars.
    SCREEN_WIDTH_MINUS_CHROME = 'screen_width_minus_chrome'


FitRequest = Union[Fit, Size, Tuple[float, float]]


def fit_size_for_preset(fit: Fit, metrics: DeviceMetrics) -> Size:
    """
    Size constraint corresponding to a fit preset.

    The short edge of the screen is always treated as its width, i.e. the
    device is assumed to be in portrait orientation.
    """
    if fit is Fit.NATURAL:
        return Size(0, 0)
    if fit is Fit.SCREEN_WIDTH:
        return Size(metrics.short_edge, 0)
    if fit is Fit.SCREEN_WIDTH_MINUS_CHROME:
        return Size(metrics.short_edge, metrics.long_edge - metrics.chrome_height)
    raise TypeError(f"Unsupported fit preset: {fit!r}")


def resolve_fit(fit: FitRequest, metrics: DeviceMetrics) -> Size:
    """
    Concrete size for a fit request.

    Args:
        fit: A Fit preset or an explicit (width, height) pair
        metrics: Metrics of the device the snapshot is taken for

    Returns:
        Size where zero components mean "natural" in that dimension
    """
    if isinstance(fit, Fit):
        return fit_size_for_preset(fit, metrics)
    if isinstance(fit, tuple) and len(fit) == 2:
        return Size(float(fit[0]), float(fit[1]))
    raise TypeError(f"Unsupported fit request: {fit!r} ({type(fit).__name__})")


def resolve_fits(fits: Sequence[FitRequest], metrics: DeviceMetrics) -> Tuple[Size, ...]:
    return tuple(resolve_fit(fit, metrics) for fit in fits)


def fitting_size(view, fit_size: Size) -> Size:
    """
    Size of a view within the given constraint.

    A positive component of `fit_size` is required, i.e. the resulting size
    has exactly that value; a zero (or negative) component lets the view
    pick its natural value for that dimension.
    """
    constraint = Size(max(fit_size.width, 0.0), max(fit_size.height, 0.0))
    measured = view.size_that_fits(constraint)
    return Size(
        constraint.width if constraint.width > 0 else measured.width,
        constraint.height if constraint.height > 0 else measured.height,
    )
