"""
Geometry values shared by the sizing, layout and rendering code.

All values are in points; the renderer multiplies by the device scale.
"""

from typing import NamedTuple

__all__ = [
    'Size',
    'Rect',
    'EdgeInsets',
    'DeviceMetrics',
]


class Size(NamedTuple):
    """Width and height; a zero component means "unconstrained" for fit sizes."""
    width: float = 0.0
    height: float = 0.0

    def grow_by(self, insets: 'EdgeInsets') -> 'Size':
        return Size(
            insets.left + self.width + insets.right,
            insets.top + self.height + insets.bottom,
        )


class EdgeInsets(NamedTuple):
    top: float = 0.0
    left: float = 0.0
    bottom: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> 'EdgeInsets':
        return cls(value, value, value, value)

    def __neg__(self) -> 'EdgeInsets':
        return EdgeInsets(-self.top, -self.left, -self.bottom, -self.right)


class Rect(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_size(cls, size: Size) -> 'Rect':
        return cls(0.0, 0.0, size.width, size.height)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def inset(self, insets: EdgeInsets) -> 'Rect':
        return Rect(
            self.x + insets.left,
            self.y + insets.top,
            self.width - insets.left - insets.right,
            self.height - insets.top - insets.bottom,
        )


class DeviceMetrics(NamedTuple):
    """Usable area of the rendering surface and the height of the reserved chrome."""
    width: float
    height: float
    chrome_height: float = 64.0
    scale: float = 2.0

    @property
    def short_edge(self) -> float:
        return min(self.width, self.height)

    @property
    def long_edge(self) -> float:
        return max(self.width, self.height)
