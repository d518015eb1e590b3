"""Exceptions raised by snapcase."""

__all__ = [
    'SnapshotError',
    'ConfigurationError',
    'UsageError',
    'SnapshotAssertionError',
    'NoReferenceFound',
    'ComparisonMismatch',
    'RecordedNewReference',
]


class SnapshotError(Exception):
    """Base class for all snapcase errors."""


class ConfigurationError(SnapshotError):
    """Required environment setup is missing, e.g. the reference image directory."""


class UsageError(SnapshotError):
    """The harness was called with something it cannot snapshot."""


class SnapshotAssertionError(SnapshotError, AssertionError):
    """
    A verification did not pass.

    Derives from AssertionError so test runners report it as a failure
    rather than an error.
    """

    def __init__(self, message: str, outcome=None):
        super().__init__(message)
        self.outcome = outcome


class NoReferenceFound(SnapshotAssertionError):
    """None of the reference directories holds an image for the identifier."""


class ComparisonMismatch(SnapshotAssertionError):
    """The captured image differs from the reference beyond the tolerance."""

    @property
    def comparison(self):
        return self.outcome.comparison if self.outcome is not None else None


class RecordedNewReference(SnapshotAssertionError):
    """A reference image was recorded; the test has to run again to be validated."""
