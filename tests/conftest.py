"""
Pytest configuration and fixtures for the snapcase test suite.

This module provides:
- Custom markers for test categorization
- Device metrics and run loop fixtures isolated from the environment
- Verifier fixtures writing reference images into a temporary directory
- Small view factories shared by the tests
"""

from pathlib import Path
from typing import Callable

import pytest

from snapcase.config import RecordModeOverride
from snapcase.geometry import DeviceMetrics, Size
from snapcase.runloop import RunLoop
from snapcase.verifier import SnapshotVerifier
from snapcase.views import ColorView, StackView

__all__ = [
    'metrics',
    'run_loop',
    'reference_dir',
    'diff_dir',
    'make_verifier',
    'verifier',
    'recording_verifier',
    'make_stack',
]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "sizing: marks tests of fit presets and view measurement"
    )
    config.addinivalue_line(
        "markers", "render: marks tests that inspect rendered pixels"
    )
    config.addinivalue_line(
        "markers", "matrix: marks tests of parameter combinations"
    )


# ============================================================================
# Environment
# ============================================================================

@pytest.fixture
def metrics() -> DeviceMetrics:
    """A 375x667@2x portrait screen with 64pt of chrome."""
    return DeviceMetrics(width=375, height=667, chrome_height=64, scale=2)


@pytest.fixture
def run_loop() -> RunLoop:
    """A private run loop so tests never share pending work."""
    return RunLoop()


@pytest.fixture
def reference_dir(tmp_path) -> str:
    """Base of the reference directories; suffixes get appended to it."""
    return str(tmp_path / "ReferenceImages_")


@pytest.fixture
def diff_dir(tmp_path) -> Path:
    return tmp_path / "diffs"


# ============================================================================
# Verifiers
# ============================================================================

@pytest.fixture
def make_verifier(reference_dir, metrics, run_loop) -> Callable[..., SnapshotVerifier]:
    """
    Factory of verifiers that ignore SNAPSHOT_RECORD_MODE.

    Usage:
        def test_something(make_verifier):
            verifier = make_verifier(record_mode=True)
    """
    def factory(**kwargs) -> SnapshotVerifier:
        kwargs.setdefault('reference_dir', reference_dir)
        kwargs.setdefault('metrics', metrics)
        kwargs.setdefault('run_loop', run_loop)
        kwargs.setdefault('record_mode_override', RecordModeOverride(False))
        kwargs.setdefault('diff_dir', None)
        kwargs.setdefault('tolerance', 0.0)
        return SnapshotVerifier(**kwargs)

    return factory


@pytest.fixture
def verifier(make_verifier) -> SnapshotVerifier:
    """Verifier comparing against the references in the temporary directory."""
    return make_verifier()


@pytest.fixture
def recording_verifier(make_verifier) -> SnapshotVerifier:
    """Verifier recording references into the temporary directory."""
    return make_verifier(record_mode=True)


# ============================================================================
# Views
# ============================================================================

@pytest.fixture
def make_stack() -> Callable[..., StackView]:
    """Factory of a small two-row stack: a red row above a blue one."""
    def factory(top: str = 'red', bottom: str = 'blue') -> StackView:
        return StackView(
            [ColorView(top, Size(40, 20)), ColorView(bottom, Size(60, 10))],
            spacing=4,
        )

    return factory
