#!/usr/bin/env python3
"""
Tests for the `snapshot` fixture and the SnapshotTestCase base class.
"""

from pathlib import Path

import pytest

from snapcase.errors import NoReferenceFound, RecordedNewReference
from snapcase.geometry import Size
from snapcase.plugin import snapshot_name_for_node
from snapcase.sizing import Fit
from snapcase.testcase import SnapshotTestCase
from snapcase.verifier import Outcome
from snapcase.views import ColorView


@pytest.fixture
def isolated_snapshot(snapshot, tmp_path):
    """The plugin's verifier pointed at a temporary reference directory."""
    snapshot.reference_dir = str(tmp_path / "ReferenceImages_")
    return snapshot


@pytest.mark.snapshot
class TestSnapshotFixture:

    @classmethod
    def override_record_mode(cls) -> bool:
        return False

    def test_verifier_is_bound_to_the_test(self, snapshot):
        assert snapshot.test_name == "TestSnapshotFixture_test_verifier_is_bound_to_the_test"
        assert not snapshot.record_mode

    def test_record_then_check(self, isolated_snapshot):
        view = ColorView('red', Size(40, 20))
        isolated_snapshot.record_mode = True
        with pytest.raises(RecordedNewReference):
            isolated_snapshot.check(view, Fit.SCREEN_WIDTH, "block")

        isolated_snapshot.record_mode = False
        assert isolated_snapshot.check(view, Fit.SCREEN_WIDTH, "block").kind is Outcome.PASSED

    def test_reference_name_carries_test_name(self, isolated_snapshot):
        isolated_snapshot.record_mode = True
        outcome = isolated_snapshot.verify(ColorView('red', Size(40, 20)), Fit.NATURAL, "block")
        assert outcome.reference_path.name == "TestSnapshotFixture_test_reference_name_carries_test_name_block@2x.png"

    @pytest.mark.parametrize("variant", ["a b", "c/d"])
    def test_parametrized_names_are_file_friendly(self, request, variant):
        name = snapshot_name_for_node(request.node)
        assert name.startswith("TestSnapshotFixture_test_parametrized_names_are_file_friendly")
        assert " " not in name
        assert "/" not in name
        assert "[" not in name


class TestForcedRecordMode:

    @classmethod
    def override_record_mode(cls) -> bool:
        return True

    def test_override_wins(self, snapshot):
        assert snapshot.record_mode
        snapshot.record_mode = False
        assert snapshot.record_mode


class TestProfileBlock(SnapshotTestCase):
    """A test case written the way snapshot tests use the base class."""

    @classmethod
    def override_record_mode(cls) -> bool:
        return False

    @pytest.fixture(autouse=True)
    def _references(self, snapshot, tmp_path):
        snapshot.reference_dir = str(tmp_path / "ReferenceImages_")

    def test_verify_view(self):
        view = ColorView('blue', Size(30, 10))
        self.verifier.record_mode = True
        with pytest.raises(RecordedNewReference):
            self.verify_view(view, Fit.SCREEN_WIDTH, "default")

        self.verifier.record_mode = False
        assert self.verify_view(view, Fit.SCREEN_WIDTH, "default")

    def test_missing_reference_fails(self):
        with pytest.raises(NoReferenceFound):
            self.verify_view(ColorView('blue', Size(30, 10)), Fit.NATURAL, "never_recorded")

    def test_verify_view_fits(self):
        self.verifier.record_mode = True
        with pytest.raises(RecordedNewReference) as excinfo:
            self.verify_view_fits(ColorView('blue', Size(30, 10)), [Fit.SCREEN_WIDTH_MINUS_CHROME])
        metrics = self.verifier.metrics
        expected = f"_w{metrics.short_edge:.0f}_h{metrics.long_edge - metrics.chrome_height:.0f}"
        assert excinfo.value.outcome.identifier == expected
        assert Path(excinfo.value.outcome.reference_path).exists()

    def test_fit_size_for_preset(self):
        assert self.fit_size_for_preset(Fit.SCREEN_WIDTH) == Size(self.verifier.metrics.short_edge, 0)

    def test_reference_folder_suffixes(self):
        suffixes = self.reference_folder_suffixes()
        assert sorted(suffixes) == ['5', '6', '6Plus', 'Pad']

    def test_vary_parameters(self):
        seen = []
        count = self.vary_parameters(
            {'color': {'red': 'red', 'blue': 'blue'}},
            lambda combination, values: seen.append(combination)
        )
        assert count == 2
        assert seen == ["000__blue", "001__red"]

    def test_perform_in_order(self):
        calls = []
        self.perform_in_order([lambda: calls.append(1), lambda: calls.append(2)])
        assert calls == [1, 2]

    def test_perform_in_random_order(self):
        calls = []
        self.perform_in_random_order([lambda: calls.append(1), lambda: calls.append(2)])
        assert sorted(calls) == [1, 2]
