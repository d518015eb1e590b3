"""
Pytest plugin for snapshot tests.

Enable it with `-p snapcase.plugin` (e.g. in `addopts`) or
`pytest_plugins = ["snapcase.plugin"]` in the top-level conftest.py.

This module provides:
- Command-line options for record mode and reference/diff directories
- The `snapshot` fixture, a SnapshotVerifier bound to the current test
- A terminal summary listing reference images recorded during the run
- parametrize_matrix() to turn a parameter matrix into test ids
"""

import re
from pathlib import Path
from typing import Any, Generator, List, Mapping

import pytest

from snapcase.config import RecordModeOverride
from snapcase.matrix import iter_combinations
from snapcase.verifier import SnapshotVerifier

__all__ = [
    'snapshot',
    'parametrize_matrix',
    'snapshot_name_for_node',
]

recorded_key = pytest.StashKey[List[Path]]()


def pytest_addoption(parser):
    """Add custom command-line options."""
    group = parser.getgroup("snapcase", "snapshot testing")
    group.addoption(
        "--snapshot-record",
        action="store_true",
        default=False,
        help="Record reference images instead of comparing against them"
    )
    group.addoption(
        "--snapshot-reference-dir",
        action="store",
        default=None,
        help="Base of the reference image directories (default: $SNAPSHOT_REFERENCE_DIR)"
    )
    group.addoption(
        "--snapshot-diff-dir",
        action="store",
        default=None,
        help="Directory for actual/diff images of failed comparisons (default: $SNAPSHOT_DIFF_DIR)"
    )
    group.addoption(
        "--snapshot-tolerance",
        action="store",
        type=float,
        default=None,
        help="Fraction of pixels allowed to differ (default: 0.05)"
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "snapshot: marks snapshot (visual regression) tests"
    )
    config.stash[recorded_key] = []


def snapshot_name_for_node(node) -> str:
    """File-name friendly name of a test, including its class if any."""
    name = node.name
    cls = getattr(node, "cls", None)
    if cls is not None:
        name = f"{cls.__name__}_{name}"
    return re.sub(r"[^\w.-]+", "_", name).strip("_")


def _record_mode_override(request) -> RecordModeOverride:
    cls = request.cls
    if cls is not None and hasattr(cls, "override_record_mode"):
        return RecordModeOverride(cls.override_record_mode())
    return RecordModeOverride.from_environment()


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def snapshot(request) -> Generator[SnapshotVerifier, None, None]:
    """
    Snapshot verifier bound to the current test.

    Usage:
        def test_cell(snapshot):
            snapshot.check(make_cell(), Fit.SCREEN_WIDTH, "default")

    Record mode is on when --snapshot-record is given, when the test class
    sets `record_mode = True` or when SNAPSHOT_RECORD_MODE is set.
    """
    config = request.config
    reference_dir = config.getoption("--snapshot-reference-dir")
    diff_dir = config.getoption("--snapshot-diff-dir")
    tolerance = config.getoption("--snapshot-tolerance")
    record_mode = config.getoption("--snapshot-record") or bool(getattr(request.cls, "record_mode", False))

    verifier = SnapshotVerifier(
        reference_dir=reference_dir,
        record_mode=record_mode,
        record_mode_override=_record_mode_override(request),
        test_name=snapshot_name_for_node(request.node),
        diff_dir=Path(diff_dir) if diff_dir else None,
        tolerance=tolerance,
    )

    yield verifier

    config.stash[recorded_key].extend(verifier.recorded)


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """List the reference images recorded during the run."""
    recorded = config.stash.get(recorded_key, [])
    if not recorded:
        return
    terminalreporter.section("snapshot references recorded")
    for path in recorded:
        terminalreporter.write_line(f"  {path}")
    terminalreporter.write_line(
        f"{len(recorded)} reference image(s) saved, disable record mode and run the tests again to validate them"
    )


# ============================================================================
# Parameter Matrix
# ============================================================================

def parametrize_matrix(
    parameters: Mapping[str, Mapping[str, Any]],
    argnames: str = "combination, values"
):
    """
    A `pytest.mark.parametrize` decorator running the test for every combination.

    Usage:
        @parametrize_matrix({'title': {'short': "A", 'long': "A long title"}})
        def test_title(snapshot, combination, values):
            snapshot.check(make_label(values['title']), Fit.NATURAL, combination)
    """
    combinations = list(iter_combinations(parameters))
    return pytest.mark.parametrize(
        argnames,
        combinations,
        ids=[identifier for identifier, _ in combinations]
    )
