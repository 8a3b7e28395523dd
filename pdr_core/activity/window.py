"""
Sliding inference window for the activity classifier.

Raw samples are turned into feature rows and buffered. Whenever the
buffer holds ``window_size`` rows a full window is handed out for
inference and the oldest ``step_size`` rows are dropped, so consecutive
windows overlap by ``window_size - step_size`` rows.

Feature layouts:
    4 features: [ax, ay, az, |a|]        (accelerometer only)
    6 features: [ax, ay, az, gx, gy, gz] (accelerometer + gyroscope)
"""

from collections import deque
from typing import Optional, Sequence, Union

import numpy as np

from pdr_core.activity.types import ClassifierMeta
from pdr_core.sensors.types import SensorSample

ArrayLike3 = Union[SensorSample, Sequence[float], np.ndarray]


def _as_vector(reading: ArrayLike3, name: str) -> np.ndarray:
    if isinstance(reading, SensorSample):
        return reading.as_array()
    v = np.asarray(reading, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {v.shape}")
    return v


def feature_row(
    accel: ArrayLike3,
    gyro: Optional[ArrayLike3] = None,
    n_features: int = 4,
) -> np.ndarray:
    """
    Build one classifier feature row.

    Args:
        accel: Accelerometer reading. Units: m/s².
        gyro: Gyroscope reading (required for 6 features). Units: rad/s.
        n_features: 4 or 6.

    Returns:
        Feature row. Shape: (n_features,).

    Example:
        >>> feature_row([3.0, 4.0, 0.0])
        array([3., 4., 0., 5.])
    """
    a = _as_vector(accel, 'accel')
    if n_features == 4:
        return np.append(a, np.linalg.norm(a))
    if n_features == 6:
        if gyro is None:
            raise ValueError("gyro is required for 6-feature rows")
        return np.concatenate([a, _as_vector(gyro, 'gyro')])
    raise ValueError(f"n_features must be 4 or 6, got {n_features}")


class InferenceWindow:
    """
    Buffer of feature rows that yields full windows with overlap.

    Args:
        window_size: Rows per inference window.
        step_size: Rows dropped after each full window (1..window_size).

    Example:
        >>> win = InferenceWindow(window_size=4, step_size=2)
        >>> [win.push([i, 0, 0, i]) is not None for i in range(6)]
        [False, False, False, True, False, True]
    """

    def __init__(self, window_size: int, step_size: int):
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        if not 1 <= step_size <= window_size:
            raise ValueError(
                f"step_size must be in [1, {window_size}], got {step_size}"
            )
        self.window_size = window_size
        self.step_size = step_size
        self._rows = deque()

    @classmethod
    def from_meta(cls, meta: ClassifierMeta) -> "InferenceWindow":
        """Window sized from classifier metadata."""
        return cls(meta.window_size, meta.step_size)

    def push(self, row: Union[Sequence[float], np.ndarray]) -> Optional[np.ndarray]:
        """
        Append a feature row.

        Returns:
            A (window_size, n_features) copy of the buffer when it became
            full with this row (the buffer then slides by step_size),
            None otherwise.
        """
        self._rows.append(np.asarray(row, dtype=np.float64))
        if len(self._rows) < self.window_size:
            return None

        window = np.vstack(self._rows)
        for _ in range(self.step_size):
            self._rows.popleft()
        return window

    def __len__(self) -> int:
        return len(self._rows)

    def reset(self) -> None:
        """Drop all buffered rows."""
        self._rows.clear()
