"""
Accelerometer magnitude and sliding-window smoothing.

The step detector works on the norm of the acceleration vector, which is
independent of how the phone is held, and smooths it with a short moving
average to suppress sensor jitter:

    a_mag = ||a|| = √(ax² + ay² + az²)
    m_k   = mean(a_mag[k-N+1 .. k])

where N is the configured window size. Until N samples have been seen the
mean is taken over the samples available.
"""

from collections import deque
from typing import Union

import numpy as np

from pdr_core.sensors.types import SensorSample


def accel_magnitude(accel: Union[np.ndarray, SensorSample]) -> float:
    """
    Compute total acceleration magnitude from a 3-axis reading.

    Args:
        accel: Accelerometer reading, either a SensorSample or an array of
               shape (3,). Units: m/s². Raw measurement (includes gravity).

    Returns:
        Acceleration magnitude. Units: m/s². Always non-negative.

    Notes:
        - Stationary device: a_mag ≈ g = 9.81 m/s².
        - Walking: a_mag oscillates around g with peaks of roughly 11-14 m/s²
          at heel strike, which is what the default threshold of 12 targets.

    Example:
        >>> accel_magnitude(np.array([3.0, 4.0, 0.0]))
        5.0
    """
    if isinstance(accel, SensorSample):
        accel = accel.as_array()
    accel = np.asarray(accel, dtype=np.float64)
    if accel.shape != (3,):
        raise ValueError(f"accel must have shape (3,), got {accel.shape}")

    return float(np.linalg.norm(accel))


class MagnitudeSmoother:
    """
    Fixed-size sliding-window average of accelerometer magnitude.

    Holds the last ``window_size`` magnitudes (FIFO, oldest evicted on
    overflow) and returns their arithmetic mean after every push.

    Args:
        window_size: Number of magnitudes to average. Must be >= 1; this is
                     guaranteed by PdrConfig validation and not re-checked.

    Example:
        >>> smoother = MagnitudeSmoother(window_size=3)
        >>> smoother.push(9.0)
        9.0
        >>> smoother.push(12.0)
        10.5
    """

    def __init__(self, window_size: int = 6):
        self.window_size = window_size
        self._window = deque(maxlen=window_size)

    def push(self, magnitude: float) -> float:
        """Add one magnitude and return the current window mean."""
        self._window.append(float(magnitude))
        return self.mean

    def push_sample(self, sample: SensorSample) -> float:
        """Add the magnitude of a raw sample and return the window mean."""
        return self.push(accel_magnitude(sample))

    @property
    def mean(self) -> float:
        """Mean of the current window (0.0 when empty)."""
        if not self._window:
            return 0.0
        return float(np.mean(self._window))

    def __len__(self) -> int:
        return len(self._window)

    def resize(self, window_size: int) -> None:
        """Change the window length, keeping the most recent magnitudes."""
        self.window_size = window_size
        self._window = deque(self._window, maxlen=window_size)

    def reset(self) -> None:
        """Forget all buffered magnitudes."""
        self._window.clear()
