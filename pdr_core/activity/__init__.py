"""Activity classification support.

The classifier is external; this package windows its input, reduces its
output to motion labels and smooths them:
- types: MotionType, raw/smoothed classifications, classifier metadata
- window: feature rows and the overlapping inference window
- smoother: majority vote with hysteresis
- recognizer: asynchronous inference loop publishing the latest activity
"""

from pdr_core.activity.recognizer import ActivityRecognizer
from pdr_core.activity.smoother import MotionSmoother
from pdr_core.activity.types import (
    ClassifierMeta,
    MotionType,
    RawClassification,
    SmoothedClassification,
    motion_type_from_name,
)
from pdr_core.activity.window import InferenceWindow, feature_row

__all__ = [
    "ActivityRecognizer",
    "ClassifierMeta",
    "InferenceWindow",
    "MotionSmoother",
    "MotionType",
    "RawClassification",
    "SmoothedClassification",
    "feature_row",
    "motion_type_from_name",
]
