#!/usr/bin/env python3
"""
Snapshot verification.

Puts a view into a decorated container of a deterministic size and either
records it as a reference image or compares it against the reference
image recorded earlier.
"""

from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Sequence

from snapcase.compare import ComparisonResult, ImageComparator
from snapcase.config import RecordModeOverride, SnapshotConfig
from snapcase.container import compose
from snapcase.errors import (
    ComparisonMismatch,
    ConfigurationError,
    NoReferenceFound,
    RecordedNewReference,
)
from snapcase.geometry import DeviceMetrics, Size
from snapcase.references import SuffixCache, reference_directory, resolve_directory
from snapcase.render import Renderer
from snapcase.runloop import RunLoop
from snapcase.sizing import Fit, FitRequest, resolve_fit
from snapcase.store import ReferenceStore
from snapcase.subjects import DeclarativeHost, subject_for
from snapcase.views import Color

__all__ = [
    'Outcome',
    'VerificationOutcome',
    'SnapshotVerifier',
    'snapshot_identifier',
    'raise_for_outcome',
]

RECORDED_MESSAGE = (
    "Test ran in record mode. Reference image is now saved. "
    "Disable record mode to perform an actual snapshot comparison!"
)


class Outcome(Enum):
    RECORDED = 'recorded'
    PASSED = 'passed'
    FAILED = 'failed'
    NO_REFERENCE_FOUND = 'no_reference_found'
    CONFIGURATION_ERROR = 'configuration_error'


class VerificationOutcome:
    """Result of a single verification; truthy only when the snapshot matched."""

    def __init__(
        self,
        kind: Outcome,
        identifier: str,
        message: str = "",
        reference_path: Optional[Path] = None,
        comparison: Optional[ComparisonResult] = None
    ):
        self.kind = kind
        self.identifier = identifier
        self.message = message
        self.reference_path = reference_path
        self.comparison = comparison

    @property
    def passed(self) -> bool:
        return self.kind is Outcome.PASSED

    def __bool__(self) -> bool:
        return self.passed

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VerificationOutcome):
            return NotImplemented
        return (self.kind, self.identifier, self.reference_path) == \
            (other.kind, other.identifier, other.reference_path)

    def __hash__(self) -> int:
        return hash((self.kind, self.identifier, self.reference_path))

    def __repr__(self) -> str:
        return f"VerificationOutcome({self.kind.name}, {self.identifier!r})"


def snapshot_identifier(identifier: str, fit_size: Size) -> str:
    """Identifier with width/height parts for the constrained dimensions, e.g. `cell_w375`."""
    parts = [identifier]
    if fit_size.width > 0:
        parts.append(f"w{fit_size.width:.0f}")
    if fit_size.height > 0:
        parts.append(f"h{fit_size.height:.0f}")
    return "_".join(parts)


def raise_for_outcome(outcome: VerificationOutcome) -> None:
    """Raise the error matching a non-passing outcome."""
    if outcome.kind is Outcome.PASSED:
        return
    if outcome.kind is Outcome.CONFIGURATION_ERROR:
        raise ConfigurationError(outcome.message)
    if outcome.kind is Outcome.RECORDED:
        raise RecordedNewReference(outcome.message, outcome)
    if outcome.kind is Outcome.NO_REFERENCE_FOUND:
        raise NoReferenceFound(outcome.message, outcome)
    raise ComparisonMismatch(outcome.message, outcome)


class SnapshotVerifier:
    """
    Verifies views against reference images.

    Usage:
        verifier = SnapshotVerifier(reference_dir="tests/ReferenceImages_")
        outcome = verifier.verify(view, Fit.SCREEN_WIDTH, "cell")
        assert outcome, outcome.message
    """

    def __init__(
        self,
        reference_dir: Optional[str] = None,
        record_mode: bool = False,
        record_mode_override: Optional[RecordModeOverride] = None,
        test_name: str = "",
        metrics: Optional[DeviceMetrics] = None,
        diff_dir: Optional[Path] = None,
        renderer: Optional[Renderer] = None,
        comparator: Optional[ImageComparator] = None,
        store: Optional[ReferenceStore] = None,
        run_loop: Optional[RunLoop] = None,
        suffix_cache: Optional[SuffixCache] = None,
        declarative_host: Optional[DeclarativeHost] = None,
        drain_budget: Optional[float] = None,
        tolerance: Optional[float] = None
    ):
        """
        Initialize verifier.

        Args:
            reference_dir: Base of the reference directories, suffixes are appended to it
                (uses config default if None)
            record_mode: Record reference images instead of comparing
            record_mode_override: Process-wide override forcing record mode
                (read from the environment if None)
            test_name: Prefix of the reference file names, keeps identifiers of different tests apart
            metrics: Device metrics used for fit presets (uses config default if None)
            diff_dir: Where to save actual/diff images of failed comparisons (uses config default if None)
            renderer: Captures views into images
            comparator: Compares captured images with references
            store: Reads and writes reference images
            run_loop: Run loop drained before measuring and before capturing
            suffix_cache: Ordered reference directory suffixes
            declarative_host: Builds views for declarative subjects
            drain_budget: Time allowed for each drain (uses config default if None)
            tolerance: Default fraction of pixels allowed to differ (uses config default if None)
        """
        self.reference_dir = reference_dir if reference_dir is not None else SnapshotConfig.REFERENCE_DIR
        if record_mode_override is None:
            record_mode_override = RecordModeOverride.from_environment()
        self.record_mode_override = record_mode_override
        self._record_mode = False
        self.record_mode = record_mode
        self.test_name = test_name
        self.metrics = metrics or SnapshotConfig.device_metrics()
        self.diff_dir = diff_dir if diff_dir is not None else SnapshotConfig.DIFF_DIR
        self.renderer = renderer or Renderer(scale=self.metrics.scale)
        self.comparator = comparator or ImageComparator()
        self.store = store or ReferenceStore(scale=self.renderer.scale)
        self.run_loop = run_loop or RunLoop.main()
        if suffix_cache is None:
            suffix_cache = SuffixCache(self.metrics) if metrics is not None else SuffixCache.default()
        self.suffix_cache = suffix_cache
        self.declarative_host = declarative_host
        self.drain_budget = drain_budget
        self.default_tolerance = SnapshotConfig.TOLERANCE if tolerance is None else tolerance
        # Reference images saved by this verifier; the tests using them have to run again.
        self.recorded: List[Path] = []

    @property
    def record_mode(self) -> bool:
        return self.record_mode_override.enabled or self._record_mode

    @record_mode.setter
    def record_mode(self, value: bool) -> None:
        self._record_mode = True if self.record_mode_override.enabled else bool(value)

    def reference_suffixes(self) -> Sequence[str]:
        return self.suffix_cache.get()

    def drain_pending(self) -> bool:
        """Let the work scheduled so far run before measuring or capturing anything."""
        return self.run_loop.drain_pending(self.drain_budget)

    def reference_key(self, identifier: str) -> str:
        if self.test_name:
            return f"{self.test_name}_{identifier}"
        return identifier

    def verify(
        self,
        subject: Any,
        fit: FitRequest = Fit.NATURAL,
        identifier: str = "",
        background_color: Optional[Color] = None,
        tolerance: Optional[float] = None
    ) -> VerificationOutcome:
        """
        Verify a view against its reference image or record one.

        The view is laid out in a container with the given background color
        and size before the snapshot is taken. Zero components of the fit
        size are treated as the view's natural size in that dimension.

        Args:
            subject: View, view controller or declarative value
            fit: Fit preset or explicit (width, height)
            identifier: Identifier of the snapshot within the test
            background_color: Background right behind the view (white if None)
            tolerance: Fraction of pixels allowed to differ (uses the verifier default if None)

        Returns:
            VerificationOutcome, truthy only when the snapshot matched
        """
        tolerance = self.default_tolerance if tolerance is None else tolerance
        subject = subject_for(subject, self.declarative_host)
        fit_size = resolve_fit(fit, self.metrics)

        if not self.reference_dir:
            return self._configuration_error(snapshot_identifier(identifier, fit_size))

        # Small updates scheduled just before the call are processed before measuring things.
        self.drain_pending()

        view, size = subject.materialize(fit_size)

        with compose(view, size, background_color, scale=self.renderer.scale) as composition:
            # Again, for the work scheduled by the resize we've just made.
            self.drain_pending()
            composition.container.layout_if_needed()

            return self.verify_view_with_suffixes(
                composition.container,
                snapshot_identifier(identifier, fit_size),
                self.reference_suffixes(),
                tolerance
            )

    def verify_fits(
        self,
        subject: Any,
        fits: Sequence[FitRequest],
        identifier: str = "",
        background_color: Optional[Color] = None,
        tolerance: Optional[float] = None
    ) -> List[VerificationOutcome]:
        """Calls verify() for each of the fits."""
        return [
            self.verify(subject, fit, identifier, background_color, tolerance)
            for fit in fits
        ]

    def check(
        self,
        subject: Any,
        fit: FitRequest = Fit.NATURAL,
        identifier: str = "",
        background_color: Optional[Color] = None,
        tolerance: Optional[float] = None
    ) -> VerificationOutcome:
        """Like verify(), but raises for every outcome other than a match."""
        outcome = self.verify(subject, fit, identifier, background_color, tolerance)
        raise_for_outcome(outcome)
        return outcome

    def check_fits(
        self,
        subject: Any,
        fits: Sequence[FitRequest],
        identifier: str = "",
        background_color: Optional[Color] = None,
        tolerance: Optional[float] = None
    ) -> List[VerificationOutcome]:
        return [
            self.check(subject, fit, identifier, background_color, tolerance)
            for fit in fits
        ]

    def _configuration_error(self, identifier: str) -> VerificationOutcome:
        return VerificationOutcome(
            Outcome.CONFIGURATION_ERROR,
            identifier,
            "Set SNAPSHOT_REFERENCE_DIR environment variable (or --snapshot-reference-dir) "
            "to the base of the reference image directories"
        )

    def verify_view_with_suffixes(
        self,
        view,
        identifier: str,
        suffixes: Sequence[str],
        tolerance: float
    ) -> VerificationOutcome:
        """
        Record or compare an already laid out view.

        In record mode the image goes into the directory of the first suffix.
        Otherwise the first directory having a reference for the identifier
        is used for the comparison.
        """
        if not self.reference_dir:
            return self._configuration_error(identifier)

        key = self.reference_key(identifier)

        if self.record_mode:
            directory = reference_directory(self.reference_dir, suffixes[0])
            image = self.renderer.capture(view)
            try:
                path = self.store.save_reference(directory, key, image)
            except OSError as e:
                return VerificationOutcome(
                    Outcome.FAILED,
                    identifier,
                    f"Could not save a reference image: {e}"
                )
            self.recorded.append(path)
            return VerificationOutcome(Outcome.RECORDED, identifier, f"{RECORDED_MESSAGE}\n  Reference: {path}", path)

        directory = resolve_directory(self.reference_dir, suffixes, key, self.store)
        if directory is None:
            tried = ", ".join(str(reference_directory(self.reference_dir, s)) for s in suffixes)
            return VerificationOutcome(
                Outcome.NO_REFERENCE_FOUND,
                identifier,
                f"Could not find any snapshots for '{key}' (looked in: {tried})"
            )

        path = self.store.reference_path(directory, key)
        actual = self.renderer.capture(view)
        reference = self.store.load_reference(directory, key)
        result = self.comparator.compare(reference, actual, tolerance)

        if result.passed:
            return VerificationOutcome(Outcome.PASSED, identifier, result.message, path, result)

        message = f"Snapshot comparison failed: {result.message}\n  Reference: {path}"
        if self.diff_dir is not None:
            result.actual_path, result.diff_path = self.store.save_failure_artifacts(
                self.diff_dir, key, actual, result.diff_image
            )
            message += f"\n  Actual: {result.actual_path}"
            if result.diff_path is not None:
                message += f"\n  Diff: {result.diff_path}"
        return VerificationOutcome(Outcome.FAILED, identifier, message, path, result)
