"""
Data structures for activity (motion type) classification.

The classifier itself is external: it receives a normalized window of
feature rows and returns one probability per class. These types carry its
output through the majority-vote smoother:

    probability vector + class names -> RawClassification
    RawClassification history        -> SmoothedClassification
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np


class MotionType(Enum):
    """Activity classes understood by the PDR core."""

    WALKING = "walking"
    STATIONARY = "stationary"
    STAIR_ASCENT = "stair_ascent"
    STAIR_DESCENT = "stair_descent"
    UNKNOWN = "unknown"


# Class names used by the deployed classifier's model_meta.json.
CLASS_NAME_TO_MOTION: Dict[str, MotionType] = {
    'walking': MotionType.WALKING,
    'upstairs': MotionType.STAIR_ASCENT,
    'downstairs': MotionType.STAIR_DESCENT,
    'idle': MotionType.STATIONARY,
}


def motion_type_from_name(name: str) -> MotionType:
    """
    Map a classifier class name to a MotionType.

    Matching is case-insensitive. Both the classifier vocabulary
    ('walking', 'upstairs', 'downstairs', 'idle') and the enum's own names
    and values are accepted; anything else is UNKNOWN.

    Example:
        >>> motion_type_from_name('Upstairs')
        <MotionType.STAIR_ASCENT: 'stair_ascent'>
    """
    key = str(name).strip().lower()
    if key in CLASS_NAME_TO_MOTION:
        return CLASS_NAME_TO_MOTION[key]
    for motion in MotionType:
        if key in (motion.value, motion.name.lower()):
            return motion
    return MotionType.UNKNOWN


@dataclass(frozen=True)
class RawClassification:
    """
    One classifier output, reduced to its arg-max label.

    Attributes:
        label: MotionType of the most probable class.
        confidence: Probability of that class, clamped to [0, 1].
        probabilities: Probability per MotionType. When two class names map
                       to the same MotionType the first one wins. UNKNOWN is
                       never present.
    """

    label: MotionType
    confidence: float
    probabilities: Mapping[MotionType, float] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.label, MotionType):
            raise ValueError(f"label must be a MotionType, got {self.label!r}")
        object.__setattr__(self, 'confidence', min(max(float(self.confidence), 0.0), 1.0))

    def probability_of(self, motion: MotionType) -> float:
        """Probability of ``motion`` clamped to [0, 1]; 0 when absent."""
        if motion not in self.probabilities:
            return 0.0
        return min(max(float(self.probabilities[motion]), 0.0), 1.0)

    @classmethod
    def from_probabilities(
        cls,
        probabilities: Sequence[float],
        class_names: Sequence[str],
    ) -> Optional["RawClassification"]:
        """
        Build a classification from a probability vector.

        Args:
            probabilities: One value per class, in class_names order.
            class_names: Classifier class names.

        Returns:
            RawClassification, or None when the vector is empty (no
            classification this cycle).

        Raises:
            ValueError: If the vector is longer than the class list.
        """
        probs = np.asarray(probabilities, dtype=np.float64).ravel()
        if probs.size == 0:
            return None
        if probs.size > len(class_names):
            raise ValueError(
                f"Got {probs.size} probabilities for {len(class_names)} classes"
            )

        per_motion: Dict[MotionType, float] = {}
        for name, p in zip(class_names, probs):
            motion = motion_type_from_name(name)
            if motion is not MotionType.UNKNOWN and motion not in per_motion:
                per_motion[motion] = float(p)

        best = int(np.argmax(probs))
        return cls(
            label=motion_type_from_name(class_names[best]),
            confidence=float(probs[best]),
            probabilities=per_motion,
        )


@dataclass(frozen=True)
class SmoothedClassification:
    """
    Majority-voted activity published to readers.

    Attributes:
        label: Majority label of the recent raw classifications.
        confidence: Latest probability of that label, in [0, 1].
        timestamp_ms: Time of the update that produced it, if known.
    """

    label: MotionType
    confidence: float
    timestamp_ms: Optional[int] = None


@dataclass(frozen=True)
class ClassifierMeta:
    """
    Window and normalization parameters of an activity classifier.

    Mirrors the classifier's model_meta.json:

        {"mean": [...], "std": [...], "classes": [...],
         "window_size": 100, "step_size": 50}

    Attributes:
        mean: Per-feature mean used for normalization.
        std: Per-feature standard deviation (all > 0).
        classes: Class names in output order.
        window_size: Number of feature rows per inference window.
        step_size: Rows removed from the front of the window after each
                   inference (window overlap = window_size - step_size).
    """

    mean: Tuple[float, ...]
    std: Tuple[float, ...]
    classes: Tuple[str, ...]
    window_size: int
    step_size: int

    def __post_init__(self):
        object.__setattr__(self, 'mean', tuple(float(v) for v in self.mean))
        object.__setattr__(self, 'std', tuple(float(v) for v in self.std))
        object.__setattr__(self, 'classes', tuple(str(c) for c in self.classes))

        if len(self.mean) != len(self.std):
            raise ValueError(
                f"mean and std must have the same length, got {len(self.mean)} and {len(self.std)}"
            )
        if len(self.mean) == 0:
            raise ValueError("mean and std must not be empty")
        if any(not math.isfinite(s) or s <= 0 for s in self.std):
            raise ValueError(f"std values must be positive and finite, got {self.std}")
        if not self.classes:
            raise ValueError("classes must not be empty")
        if self.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {self.window_size}")
        if not 1 <= self.step_size <= self.window_size:
            raise ValueError(
                f"step_size must be in [1, window_size={self.window_size}], got {self.step_size}"
            )

    @property
    def n_features(self) -> int:
        """Number of features per row."""
        return len(self.mean)

    def normalize(self, window: np.ndarray) -> np.ndarray:
        """
        Normalize a window as (v - mean) / std, per feature column.

        Args:
            window: Feature rows. Shape: (window_size, n_features).

        Returns:
            Normalized float32 array of the same shape.
        """
        window = np.asarray(window, dtype=np.float64)
        if window.ndim != 2 or window.shape[1] != self.n_features:
            raise ValueError(
                f"window must have shape (N, {self.n_features}), got {window.shape}"
            )
        return ((window - np.asarray(self.mean)) / np.asarray(self.std)).astype(np.float32)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassifierMeta":
        """Build from the parsed model_meta.json dictionary."""
        missing = {'mean', 'std', 'classes', 'window_size', 'step_size'} - set(data)
        if missing:
            raise ValueError(f"model metadata is missing keys: {sorted(missing)}")
        return cls(
            mean=data['mean'],
            std=data['std'],
            classes=data['classes'],
            window_size=int(data['window_size']),
            step_size=int(data['step_size']),
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ClassifierMeta":
        """Load model_meta.json."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the model_meta.json layout."""
        return {
            'mean': list(self.mean),
            'std': list(self.std),
            'classes': list(self.classes),
            'window_size': self.window_size,
            'step_size': self.step_size,
        }
