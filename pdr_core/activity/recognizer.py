"""
Activity recognition off the sensor thread.

ActivityRecognizer buffers feature rows from the sensor callback and, for
every full window, submits one inference job to a single-worker executor:

    sensor thread:  sample -> feature row -> InferenceWindow
                    full window -> normalize -> executor.submit
    worker thread:  classifier(window) -> RawClassification
                    -> MotionSmoother -> LatestValue

One worker keeps smoother updates in submission order. The sensor thread
never waits for inference. A classifier that raises or returns an empty
vector only costs that cycle: the error is logged and nothing is
published.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Sequence

import numpy as np

from pdr_core.activity.smoother import MotionSmoother
from pdr_core.activity.types import ClassifierMeta, RawClassification, SmoothedClassification
from pdr_core.activity.window import ArrayLike3, InferenceWindow, feature_row
from pdr_core.channels import LatestValue
from pdr_core.config import PdrConfig

logger = logging.getLogger(__name__)

Classifier = Callable[[np.ndarray], Sequence[float]]


class ActivityRecognizer:
    """
    Windowing, asynchronous inference and smoothing for one classifier.

    Args:
        classifier: Callable taking a normalized (window_size, n_features)
                    float32 array and returning one probability per class.
        meta: Window/normalization parameters of the classifier.
        config: Supplies smoothing_window_size, hysteresis_confidence and
                tie_break. Default: PdrConfig().

    Attributes:
        latest: LatestValue holding the last emitted SmoothedClassification.
        smoother: The MotionSmoother fed by the worker thread.
    """

    def __init__(
        self,
        classifier: Classifier,
        meta: ClassifierMeta,
        config: Optional[PdrConfig] = None,
    ):
        if meta.n_features not in (4, 6):
            raise ValueError(f"classifier must use 4 or 6 features, got {meta.n_features}")
        config = config if config is not None else PdrConfig()
        self.classifier = classifier
        self.meta = meta
        self.window = InferenceWindow.from_meta(meta)
        self.smoother = MotionSmoother(
            window_size=config.smoothing_window_size,
            hysteresis_confidence=config.hysteresis_confidence,
            tie_break=config.tie_break,
        )
        self.latest: LatestValue[SmoothedClassification] = LatestValue()
        self._gyro = np.zeros(3)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='activity')
        self._closed = False

    def on_gyroscope(self, gyro: ArrayLike3) -> None:
        """Remember the latest gyroscope reading for 6-feature rows."""
        self._gyro = feature_row(np.zeros(3), gyro, n_features=6)[3:]

    def on_sample(self, accel: ArrayLike3, timestamp_ms: Optional[int] = None) -> Optional[Future]:
        """
        Add one accelerometer sample.

        Returns:
            The Future of the submitted inference job when this sample
            completed a window, None otherwise.
        """
        if self._closed:
            return None
        if timestamp_ms is None:
            timestamp_ms = getattr(accel, 'timestamp_ms', None)

        row = feature_row(accel, self._gyro, n_features=self.meta.n_features)
        window = self.window.push(row)
        if window is None:
            return None
        return self._executor.submit(self.classify_window, self.meta.normalize(window), timestamp_ms)

    def classify_window(
        self,
        window: np.ndarray,
        timestamp_ms: Optional[int] = None,
    ) -> Optional[SmoothedClassification]:
        """
        Classify one normalized window and feed the smoother.

        Runs on the worker thread when called through on_sample(); may also
        be called directly for replay.

        Returns:
            The newly emitted classification, or None.
        """
        try:
            probabilities = self.classifier(window)
            raw = RawClassification.from_probabilities(probabilities, self.meta.classes)
        except Exception:
            logger.exception("Activity classifier failed; skipping this window")
            return None

        if raw is None:
            logger.warning("Activity classifier returned no probabilities; skipping this window")
            return None

        smoothed = self.smoother.update(raw, timestamp_ms)
        if smoothed is not None:
            self.latest.set(smoothed)
        return smoothed

    def reset(self) -> Optional[Future]:
        """
        Drop buffered rows, smoothing history and the published label.

        The window is cleared on the calling (sensor) thread. The smoother
        and ``latest`` are cleared on the worker, after any inference jobs
        already queued, so those jobs cannot refill the history.

        Returns:
            Future completing when the worker has reset, or None if the
            recognizer is closed (the reset then runs synchronously).
        """
        self.window.reset()
        if self._closed:
            self._reset_smoothing()
            return None
        return self._executor.submit(self._reset_smoothing)

    def _reset_smoothing(self) -> None:
        self.smoother.reset()
        self.latest.set(None)

    def close(self, wait: bool = True) -> None:
        """Stop accepting samples and shut the worker down."""
        self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ActivityRecognizer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
