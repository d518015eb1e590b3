"""
A base for class-style snapshot tests, to share the utility methods.

Usage:
    class TestProfileCell(SnapshotTestCase):

        def test_cell(self):
            self.verify_view(make_cell(), Fit.SCREEN_WIDTH, "default")

Set `record_mode = True` on a class to re-record its references, or
override `override_record_mode()` to force record mode for every test of
the class and its descendants.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import pytest

from snapcase.config import RecordModeOverride
from snapcase.geometry import Size
from snapcase.matrix import perform_in_order, perform_in_random_order, vary_parameters
from snapcase.sizing import Fit, FitRequest, fit_size_for_preset
from snapcase.verifier import SnapshotVerifier, VerificationOutcome
from snapcase.views import Color

__all__ = [
    'SnapshotTestCase',
]


class SnapshotTestCase:
    """Snapshot test helpers for pytest test classes (requires the snapcase.plugin)."""

    record_mode: bool = False

    verifier: SnapshotVerifier

    @classmethod
    def override_record_mode(cls) -> bool:
        """
        If this returns True, record mode is forced for all the tests of the class.

        Handy to re-record all the references without touching `record_mode`
        of each class. Follows SNAPSHOT_RECORD_MODE by default.
        """
        return RecordModeOverride.from_environment().enabled

    @pytest.fixture(autouse=True)
    def _bind_snapshot_verifier(self, snapshot):
        self.verifier = snapshot

    def verify_view(
        self,
        subject: Any,
        fit: FitRequest = Fit.NATURAL,
        identifier: str = "",
        background_color: Optional[Color] = None,
        tolerance: Optional[float] = None
    ) -> VerificationOutcome:
        """Verifies the subject against its reference image or records one; fails the test otherwise."""
        return self.verifier.check(subject, fit, identifier, background_color, tolerance)

    def verify_view_fits(
        self,
        subject: Any,
        fits: Sequence[FitRequest],
        identifier: str = "",
        background_color: Optional[Color] = None
    ) -> List[VerificationOutcome]:
        return self.verifier.check_fits(subject, fits, identifier, background_color)

    def fit_size_for_preset(self, fit: Fit) -> Size:
        return fit_size_for_preset(fit, self.verifier.metrics)

    def reference_folder_suffixes(self) -> Sequence[str]:
        return self.verifier.reference_suffixes()

    def vary_parameters(
        self,
        parameters: Mapping[str, Mapping[str, Any]],
        block: Callable[[str, Dict[str, Any]], Any]
    ) -> int:
        return vary_parameters(parameters, block)

    def perform_in_random_order(self, blocks: Sequence[Callable[[], Any]]) -> None:
        perform_in_random_order(blocks)

    def perform_in_order(self, blocks: Sequence[Callable[[], Any]]) -> None:
        perform_in_order(blocks)
