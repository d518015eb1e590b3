"""
Reference image directory selection.

Reference images live in directories named after the base reference
directory plus a suffix identifying a class of devices by screen width.
The suffix of the current device goes first, the rest serve as fallbacks,
so a view looking the same on all devices needs a single reference image.
"""

from pathlib import Path
from typing import Optional, Sequence, Tuple

from snapcase.config import OneTimeGate, SnapshotConfig
from snapcase.geometry import DeviceMetrics

__all__ = [
    'DEFAULT_SUFFIXES',
    'suffix_for_width',
    'ordered_suffixes',
    'SuffixCache',
    'reference_directory',
    'resolve_directory',
]

DEFAULT_SUFFIXES: Tuple[str, ...] = ('5', '6', '6Plus', 'Pad')

# (max short edge width, suffix), narrowest first
WIDTH_CLASSES: Tuple[Tuple[float, str], ...] = (
    (320, '5'),
    (375, '6'),
    (414, '6Plus'),
)
WIDEST_SUFFIX = 'Pad'


def suffix_for_width(width: float) -> str:
    """Device class suffix for the short edge width of a screen."""
    for max_width, suffix in WIDTH_CLASSES:
        if width <= max_width:
            return suffix
    return WIDEST_SUFFIX


def ordered_suffixes(width: float, suffixes: Sequence[str] = DEFAULT_SUFFIXES) -> Tuple[str, ...]:
    """Suffixes with the one matching the device first, others in their original order."""
    first = suffix_for_width(width)
    return (first,) + tuple(s for s in suffixes if s != first)


class SuffixCache:
    """
    Suffix order for a device profile, computed once.

    Device characteristics do not change during a run, so the default
    instance is shared by the whole process.
    """

    _default_gate: OneTimeGate = None

    def __init__(self, metrics: DeviceMetrics, suffixes: Sequence[str] = DEFAULT_SUFFIXES):
        self.metrics = metrics
        self._gate = OneTimeGate(lambda: ordered_suffixes(metrics.short_edge, suffixes))

    def get(self) -> Tuple[str, ...]:
        return self._gate.get()

    @classmethod
    def default(cls) -> 'SuffixCache':
        return cls._default_gate.get()


SuffixCache._default_gate = OneTimeGate(lambda: SuffixCache(SnapshotConfig.device_metrics()))


def reference_directory(base_dir, suffix: str) -> Path:
    """Directory for the suffix; the suffix is appended to the base name, not joined as a child."""
    return Path(str(base_dir) + suffix)


def resolve_directory(base_dir, suffixes: Sequence[str], identifier: str, store) -> Optional[Path]:
    """
    First suffixed directory holding a reference image for the identifier.

    Args:
        base_dir: Base reference directory
        suffixes: Suffixes in order of preference
        identifier: Snapshot identifier
        store: Reference store used to check for existing images

    Returns:
        The directory or None if no suffix has a reference image
    """
    for suffix in suffixes:
        directory = reference_directory(base_dir, suffix)
        if store.reference_exists(directory, identifier):
            return directory
    return None
