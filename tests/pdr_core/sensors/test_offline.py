"""
Unit tests for pdr_core/sensors/offline.py (batch peak detector).

Run with: pytest tests/pdr_core/sensors/test_offline.py -v
"""

import unittest

import numpy as np
import pytest

from pdr_core.sensors.offline import detect_steps_offline, match_steps, step_times_ms
from pdr_core.sim import WalkLeg, simulate_walk


class TestDetectStepsOffline(unittest.TestCase):
    """Test peak detection on simulated walks."""

    def test_one_peak_per_simulated_step(self) -> None:
        recording = simulate_walk([WalkLeg(8, 0.0)])
        indices, filtered = detect_steps_offline(recording.accel, 1.0 / recording.sample_rate_hz,
                                                 min_peak_height=2.0)

        assert len(indices) == 8
        assert filtered.shape == (len(recording.timestamps_ms),)

    def test_peaks_near_step_onsets(self) -> None:
        recording = simulate_walk([WalkLeg(6, 0.0)])
        indices, _ = detect_steps_offline(recording.accel, 0.02, min_peak_height=2.0)
        times = step_times_ms(indices, recording.timestamps_ms)

        matched, missed, extra = match_steps(recording.step_onsets_ms, times, tolerance_ms=200)
        assert (matched, missed, extra) == (6, 0, 0)

    def test_standing_still_has_no_peaks(self) -> None:
        accel = np.tile([0.0, 0.0, 9.81], (200, 1))
        indices, _ = detect_steps_offline(accel, 0.02)

        assert len(indices) == 0

    def test_filter_disabled(self) -> None:
        recording = simulate_walk([WalkLeg(4, 0.0)])
        _, raw = detect_steps_offline(recording.accel, 0.02, lowpass_cutoff=None)

        assert np.allclose(raw, np.linalg.norm(recording.accel, axis=1) - 9.81)

    def test_invalid_shape_raises(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            detect_steps_offline(np.zeros((10, 2)), 0.02)

    def test_invalid_dt_raises(self) -> None:
        with pytest.raises(ValueError, match="dt"):
            detect_steps_offline(np.zeros((10, 3)), 0.0)


class TestMatchSteps(unittest.TestCase):
    """Test greedy one-to-one matching."""

    def test_perfect_match(self) -> None:
        assert match_steps(np.array([100, 600]), np.array([120, 590])) == (2, 0, 0)

    def test_missed_and_extra(self) -> None:
        assert match_steps(np.array([500, 1000]), np.array([520, 1400])) == (1, 1, 1)

    def test_detection_used_once(self) -> None:
        assert match_steps(np.array([500, 520]), np.array([510]), tolerance_ms=50) == (1, 1, 0)

    def test_empty_inputs(self) -> None:
        assert match_steps(np.array([]), np.array([300])) == (0, 0, 1)


if __name__ == "__main__":
    unittest.main()
