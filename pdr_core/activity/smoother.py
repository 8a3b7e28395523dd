"""
Majority-vote smoothing of activity classifications.

A single misclassified window (one second of "idle" in the middle of a
walk) should not reach the display. MotionSmoother keeps the last N raw
labels and publishes their majority, gated by a hysteresis on label and
confidence:

    history    = last N raw labels (FIFO)
    label      = most frequent label in history
    confidence = p_latest(label), clamped to [0, 1]  (0 if absent/UNKNOWN)
    emit if label != last_label or |confidence - last_confidence| > h

Ties in the vote go to the tied label that entered the history first
(tie_break='first') or to the most recent of the tied labels
(tie_break='latest').
"""

import logging
from collections import Counter, deque
from typing import Literal, Optional

from pdr_core.activity.types import MotionType, RawClassification, SmoothedClassification

logger = logging.getLogger(__name__)


class MotionSmoother:
    """
    Majority vote over recent raw classifications with emit hysteresis.

    Args:
        window_size: Number of raw labels in the vote. Default: 3.
        hysteresis_confidence: Confidence change that re-emits an unchanged
                               label. Default: 0.15.
        tie_break: 'first' or 'latest'. Default: 'first'.

    Example:
        >>> smoother = MotionSmoother()
        >>> walk = RawClassification(MotionType.WALKING, 0.9, {MotionType.WALKING: 0.9})
        >>> smoother.update(walk).label
        <MotionType.WALKING: 'walking'>
        >>> smoother.update(walk) is None  # unchanged, suppressed
        True
    """

    def __init__(
        self,
        window_size: int = 3,
        hysteresis_confidence: float = 0.15,
        tie_break: Literal['first', 'latest'] = 'first',
    ):
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        if tie_break not in ('first', 'latest'):
            raise ValueError(f"tie_break must be 'first' or 'latest', got '{tie_break}'")
        self.hysteresis_confidence = hysteresis_confidence
        self.tie_break = tie_break
        self._history = deque(maxlen=window_size)
        self._current: Optional[SmoothedClassification] = None

    @property
    def window_size(self) -> int:
        return self._history.maxlen

    def majority_label(self) -> MotionType:
        """Majority label of the current history (UNKNOWN when empty)."""
        if not self._history:
            return MotionType.UNKNOWN

        # Counter keeps first-encountered order among equal counts
        counts = Counter(self._history).most_common()
        top = counts[0][1]
        tied = [label for label, n in counts if n == top]
        if len(tied) == 1 or self.tie_break == 'first':
            return tied[0]
        for label in reversed(self._history):
            if label in tied:
                return label
        return tied[0]

    def update(
        self,
        raw: Optional[RawClassification],
        timestamp_ms: Optional[int] = None,
    ) -> Optional[SmoothedClassification]:
        """
        Add one raw classification.

        Args:
            raw: Classifier output, or None when no classification was
                 available this cycle (state is left unchanged).
            timestamp_ms: Time of the classified window, if known.

        Returns:
            The newly emitted SmoothedClassification, or None when nothing
            was emitted.
        """
        if raw is None:
            return None

        self._history.append(raw.label)
        label = self.majority_label()
        confidence = 0.0 if label is MotionType.UNKNOWN else raw.probability_of(label)

        last = self._current
        if last is not None and label == last.label and \
                abs(confidence - last.confidence) <= self.hysteresis_confidence:
            return None

        self._current = SmoothedClassification(label, confidence, timestamp_ms)
        logger.debug("Activity %s (confidence %.2f)", label.name, confidence)
        return self._current

    @property
    def current(self) -> Optional[SmoothedClassification]:
        """Last emitted classification, None before the first update."""
        return self._current

    def resize(self, window_size: int) -> None:
        """Change the vote length, keeping the most recent labels."""
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self._history = deque(self._history, maxlen=window_size)

    def reset(self) -> None:
        """Forget the label history and the last emitted value."""
        self._history.clear()
        self._current = None
