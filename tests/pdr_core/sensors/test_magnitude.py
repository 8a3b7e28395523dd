"""
Unit tests for pdr_core/sensors/magnitude.py.

Run with: pytest tests/pdr_core/sensors/test_magnitude.py -v
"""

import unittest

import numpy as np
import pytest

from pdr_core.sensors.magnitude import MagnitudeSmoother, accel_magnitude
from pdr_core.sensors.types import SensorSample


class TestAccelMagnitude(unittest.TestCase):
    """Test the acceleration norm."""

    def test_pythagorean_triple(self) -> None:
        assert accel_magnitude(np.array([3.0, 4.0, 0.0])) == 5.0

    def test_stationary_gravity(self) -> None:
        assert np.isclose(accel_magnitude(np.array([0.0, 0.0, 9.81])), 9.81)

    def test_orientation_independent(self) -> None:
        flat = accel_magnitude(np.array([0.0, 0.0, 9.81]))
        tilted = accel_magnitude(np.array([9.81 / np.sqrt(2), 0.0, 9.81 / np.sqrt(2)]))
        assert np.isclose(flat, tilted)

    def test_accepts_sensor_sample(self) -> None:
        assert accel_magnitude(SensorSample(0.0, -3.0, 4.0, 0)) == 5.0

    def test_wrong_shape_raises(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            accel_magnitude(np.array([1.0, 2.0]))


class TestMagnitudeSmoother(unittest.TestCase):
    """Test the sliding-window mean."""

    def test_partial_window_uses_available_samples(self) -> None:
        smoother = MagnitudeSmoother(window_size=4)
        assert smoother.push(8.0) == 8.0
        assert smoother.push(10.0) == 9.0

    def test_oldest_value_evicted(self) -> None:
        smoother = MagnitudeSmoother(window_size=2)
        smoother.push(2.0)
        smoother.push(4.0)
        assert smoother.push(6.0) == 5.0
        assert len(smoother) == 2

    def test_window_of_one_is_passthrough(self) -> None:
        smoother = MagnitudeSmoother(window_size=1)
        for m in (9.0, 15.0, 3.0):
            assert smoother.push(m) == m

    def test_empty_mean_is_zero(self) -> None:
        assert MagnitudeSmoother().mean == 0.0

    def test_push_sample(self) -> None:
        smoother = MagnitudeSmoother(window_size=3)
        assert smoother.push_sample(SensorSample(3.0, 4.0, 0.0, 0)) == 5.0

    def test_resize_keeps_newest(self) -> None:
        smoother = MagnitudeSmoother(window_size=4)
        for m in (1.0, 2.0, 3.0, 4.0):
            smoother.push(m)
        smoother.resize(2)

        assert smoother.window_size == 2
        assert smoother.mean == 3.5

    def test_reset(self) -> None:
        smoother = MagnitudeSmoother(window_size=3)
        smoother.push(12.0)
        smoother.reset()

        assert len(smoother) == 0
        assert smoother.push(9.0) == 9.0


if __name__ == "__main__":
    unittest.main()
