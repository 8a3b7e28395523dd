"""
Rolling cadence average over the last N steps.
"""

from collections import deque

import numpy as np


class CadenceTracker:
    """
    Bounded FIFO of recent step frequencies and their arithmetic mean.

    Args:
        average_size: Number of recent cadence values to average (>= 1,
                      validated by PdrConfig). Default: 5.

    Example:
        >>> tracker = CadenceTracker(average_size=2)
        >>> tracker.add(2.0)
        2.0
        >>> tracker.add(1.0)
        1.5
        >>> tracker.add(1.0)  # the 2.0 is evicted
        1.0
    """

    def __init__(self, average_size: int = 5):
        self.average_size = average_size
        self._recent = deque(maxlen=average_size)

    def add(self, cadence_hz: float) -> float:
        """Append one cadence value and return the updated mean."""
        self._recent.append(float(cadence_hz))
        return self.average

    @property
    def average(self) -> float:
        """Mean of the window, 0.0 when empty."""
        if not self._recent:
            return 0.0
        return float(np.mean(self._recent))

    def __len__(self) -> int:
        return len(self._recent)

    def resize(self, average_size: int) -> None:
        """Change the window length, keeping the most recent values."""
        self.average_size = average_size
        self._recent = deque(self._recent, maxlen=average_size)

    def reset(self) -> None:
        """Clear the window; the mean drops back to 0."""
        self._recent.clear()
