"""
snapcase - snapshot (visual regression) testing of views.

Renders a view into an offscreen image under controlled sizing, frames it
in a decorated container and compares it against a recorded reference
image, or records a new reference in record mode.
"""

from snapcase.config import RecordModeOverride, SnapshotConfig
from snapcase.errors import (
    ComparisonMismatch,
    ConfigurationError,
    NoReferenceFound,
    RecordedNewReference,
    SnapshotAssertionError,
    SnapshotError,
    UsageError,
)
from snapcase.geometry import DeviceMetrics, EdgeInsets, Rect, Size
from snapcase.matrix import iter_combinations, perform_in_order, perform_in_random_order, vary_parameters
from snapcase.sizing import Fit, resolve_fit
from snapcase.verifier import Outcome, SnapshotVerifier, VerificationOutcome
from snapcase.views import ColorView, RowCell, RowCellWrapper, StackView, View, ViewController

__all__ = [
    'ComparisonMismatch',
    'ColorView',
    'ConfigurationError',
    'DeviceMetrics',
    'EdgeInsets',
    'Fit',
    'NoReferenceFound',
    'Outcome',
    'Rect',
    'RecordModeOverride',
    'RecordedNewReference',
    'RowCell',
    'RowCellWrapper',
    'Size',
    'SnapshotAssertionError',
    'SnapshotConfig',
    'SnapshotError',
    'SnapshotVerifier',
    'StackView',
    'UsageError',
    'VerificationOutcome',
    'View',
    'ViewController',
    'iter_combinations',
    'perform_in_order',
    'perform_in_random_order',
    'resolve_fit',
    'vary_parameters',
]

__version__ = "1.0.0"
