"""
Unit tests for pdr_core/activity/smoother.py (majority vote + hysteresis).

Tests cover:
    - Majority label over the last N raw labels
    - Emission gate: new label, or confidence change above hysteresis
    - Tie-break policies
    - Missing classifications leave the state unchanged

Run with: pytest tests/pdr_core/activity/test_smoother.py -v
"""

import unittest

import numpy as np
import pytest

from pdr_core.activity.smoother import MotionSmoother
from pdr_core.activity.types import MotionType, RawClassification

W = MotionType.WALKING
S = MotionType.STATIONARY


def raw(label: MotionType, confidence: float = 0.9, **others: float) -> RawClassification:
    probabilities = {label: confidence}
    probabilities.update({MotionType[name]: p for name, p in others.items()})
    return RawClassification(label, confidence, probabilities)


class TestMajorityVote(unittest.TestCase):
    """Test the majority label."""

    def test_single_outlier_absorbed(self) -> None:
        smoother = MotionSmoother(window_size=3)
        current_labels = []
        for label in (W, W, S, W, W):
            smoother.update(raw(label, 0.9, WALKING=0.1) if label is S else raw(label))
            current_labels.append(smoother.current.label)

        assert current_labels == [W, W, W, W, W]

    def test_label_switches_after_majority_changes(self) -> None:
        smoother = MotionSmoother(window_size=3)
        for label in (W, W, W, S, S):
            smoother.update(raw(label))

        assert smoother.current.label is S

    def test_empty_history_is_unknown(self) -> None:
        assert MotionSmoother().majority_label() is MotionType.UNKNOWN

    def test_tie_break_first(self) -> None:
        smoother = MotionSmoother(window_size=4, tie_break='first')
        for label in (W, S, W, S):
            smoother.update(raw(label))

        assert smoother.majority_label() is W

    def test_tie_break_latest(self) -> None:
        smoother = MotionSmoother(window_size=4, tie_break='latest')
        for label in (W, S, W, S):
            smoother.update(raw(label))

        assert smoother.majority_label() is S

    def test_confidence_is_latest_probability_of_majority(self) -> None:
        smoother = MotionSmoother(window_size=3, hysteresis_confidence=0.0)
        smoother.update(raw(W, 0.9))
        smoother.update(raw(W, 0.9))
        emitted = smoother.update(raw(S, 0.6, WALKING=0.3))

        assert emitted.label is W
        assert np.isclose(emitted.confidence, 0.3)

    def test_unknown_majority_has_zero_confidence(self) -> None:
        smoother = MotionSmoother(window_size=1)
        emitted = smoother.update(RawClassification(MotionType.UNKNOWN, 0.8, {}))

        assert emitted.label is MotionType.UNKNOWN
        assert emitted.confidence == 0.0


class TestEmissionGate(unittest.TestCase):
    """Test hysteresis on label and confidence."""

    def test_first_update_always_emitted(self) -> None:
        assert MotionSmoother().update(raw(W, 0.5)) is not None

    def test_small_confidence_change_suppressed(self) -> None:
        smoother = MotionSmoother(hysteresis_confidence=0.15)
        smoother.update(raw(W, 0.9))

        assert smoother.update(raw(W, 0.95)) is None
        assert smoother.current.confidence == 0.9

    def test_change_equal_to_hysteresis_suppressed(self) -> None:
        smoother = MotionSmoother(hysteresis_confidence=0.25)
        smoother.update(raw(W, 0.5))

        assert smoother.update(raw(W, 0.75)) is None

    def test_large_confidence_change_emitted(self) -> None:
        smoother = MotionSmoother(hysteresis_confidence=0.15)
        smoother.update(raw(W, 0.9))
        emitted = smoother.update(raw(W, 0.6))

        assert emitted is not None
        assert np.isclose(emitted.confidence, 0.6)

    def test_gate_compares_with_last_emitted_value(self) -> None:
        smoother = MotionSmoother(hysteresis_confidence=0.15)
        smoother.update(raw(W, 0.9))
        smoother.update(raw(W, 0.8))   # suppressed, 0.1 from 0.9
        emitted = smoother.update(raw(W, 0.7))

        assert emitted is not None

    def test_timestamp_carried(self) -> None:
        emitted = MotionSmoother().update(raw(W), timestamp_ms=2000)
        assert emitted.timestamp_ms == 2000


class TestMissingClassification(unittest.TestCase):
    """A None input is a skipped cycle."""

    def test_none_leaves_state_unchanged(self) -> None:
        smoother = MotionSmoother(window_size=3)
        smoother.update(raw(W))
        before = smoother.current

        assert smoother.update(None) is None
        assert smoother.current == before
        assert smoother.majority_label() is W


class TestConfiguration(unittest.TestCase):
    """Test construction, resize and reset."""

    def test_invalid_window_raises(self) -> None:
        with pytest.raises(ValueError):
            MotionSmoother(window_size=0)

    def test_invalid_tie_break_raises(self) -> None:
        with pytest.raises(ValueError):
            MotionSmoother(tie_break='random')

    def test_resize_keeps_most_recent(self) -> None:
        smoother = MotionSmoother(window_size=5)
        for label in (S, S, S, W, W):
            smoother.update(raw(label))
        smoother.resize(2)

        assert smoother.window_size == 2
        assert smoother.majority_label() is W

    def test_reset(self) -> None:
        smoother = MotionSmoother()
        smoother.update(raw(W))
        smoother.reset()

        assert smoother.current is None
        assert smoother.majority_label() is MotionType.UNKNOWN


if __name__ == "__main__":
    unittest.main()
