"""
Unit tests for pdr_core/activity/types.py.

Run with: pytest tests/pdr_core/activity/test_activity_types.py -v
"""

import json
import tempfile
import unittest
from pathlib import Path

import numpy as np
import pytest

from pdr_core.activity.types import (
    ClassifierMeta,
    MotionType,
    RawClassification,
    motion_type_from_name,
)

CLASSES = ('walking', 'upstairs', 'downstairs', 'idle')


class TestMotionTypeFromName(unittest.TestCase):
    """Test class-name mapping."""

    def test_classifier_vocabulary(self) -> None:
        assert motion_type_from_name('walking') is MotionType.WALKING
        assert motion_type_from_name('upstairs') is MotionType.STAIR_ASCENT
        assert motion_type_from_name('downstairs') is MotionType.STAIR_DESCENT
        assert motion_type_from_name('idle') is MotionType.STATIONARY

    def test_case_and_whitespace_insensitive(self) -> None:
        assert motion_type_from_name('  UpStairs ') is MotionType.STAIR_ASCENT

    def test_enum_names_and_values(self) -> None:
        assert motion_type_from_name('stair_descent') is MotionType.STAIR_DESCENT
        assert motion_type_from_name('STATIONARY') is MotionType.STATIONARY

    def test_unknown_name(self) -> None:
        assert motion_type_from_name('jumping') is MotionType.UNKNOWN


class TestRawClassification(unittest.TestCase):
    """Test arg-max reduction of probability vectors."""

    def test_argmax_label_and_confidence(self) -> None:
        raw = RawClassification.from_probabilities([0.1, 0.7, 0.1, 0.1], CLASSES)

        assert raw.label is MotionType.STAIR_ASCENT
        assert np.isclose(raw.confidence, 0.7)
        assert np.isclose(raw.probability_of(MotionType.STATIONARY), 0.1)

    def test_empty_vector_is_no_classification(self) -> None:
        assert RawClassification.from_probabilities([], CLASSES) is None

    def test_more_probabilities_than_classes_raises(self) -> None:
        with pytest.raises(ValueError):
            RawClassification.from_probabilities([0.2] * 5, CLASSES)

    def test_shorter_vector_uses_leading_classes(self) -> None:
        raw = RawClassification.from_probabilities([0.4, 0.6], CLASSES)

        assert raw.label is MotionType.STAIR_ASCENT
        assert raw.probability_of(MotionType.STATIONARY) == 0.0

    def test_duplicate_class_names_first_wins(self) -> None:
        raw = RawClassification.from_probabilities([0.2, 0.5, 0.3], ('walking', 'Walking', 'idle'))

        assert raw.label is MotionType.WALKING
        assert np.isclose(raw.confidence, 0.5)
        assert np.isclose(raw.probability_of(MotionType.WALKING), 0.2)

    def test_unknown_class_excluded_from_probabilities(self) -> None:
        raw = RawClassification.from_probabilities([0.2, 0.8], ('walking', 'jumping'))

        assert raw.label is MotionType.UNKNOWN
        assert MotionType.UNKNOWN not in raw.probabilities

    def test_confidence_clamped(self) -> None:
        raw = RawClassification(MotionType.WALKING, 1.7, {MotionType.WALKING: -0.2})

        assert raw.confidence == 1.0
        assert raw.probability_of(MotionType.WALKING) == 0.0

    def test_label_must_be_motion_type(self) -> None:
        with pytest.raises(ValueError):
            RawClassification('walking', 0.5)


class TestClassifierMeta(unittest.TestCase):
    """Test classifier metadata validation and normalization."""

    def make_meta(self, **overrides) -> ClassifierMeta:
        params = dict(mean=[0.0, 0.0, 9.8, 9.8], std=[1.0, 2.0, 3.0, 4.0],
                      classes=CLASSES, window_size=100, step_size=50)
        params.update(overrides)
        return ClassifierMeta(**params)

    def test_normalize(self) -> None:
        meta = self.make_meta()
        window = np.tile([1.0, 2.0, 12.8, 9.8], (3, 1))
        normalized = meta.normalize(window)

        assert normalized.dtype == np.float32
        assert np.allclose(normalized, np.tile([1.0, 1.0, 1.0, 0.0], (3, 1)))

    def test_normalize_wrong_width_raises(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            self.make_meta().normalize(np.zeros((100, 6)))

    def test_zero_std_rejected(self) -> None:
        with pytest.raises(ValueError, match="std"):
            self.make_meta(std=[1.0, 0.0, 1.0, 1.0])

    def test_length_mismatch_rejected(self) -> None:
        with pytest.raises(ValueError):
            self.make_meta(mean=[0.0, 0.0, 0.0])

    def test_step_larger_than_window_rejected(self) -> None:
        with pytest.raises(ValueError, match="step_size"):
            self.make_meta(window_size=10, step_size=20)

    def test_missing_key_rejected(self) -> None:
        data = self.make_meta().to_dict()
        del data['classes']
        with pytest.raises(ValueError, match="classes"):
            ClassifierMeta.from_dict(data)

    def test_json_round_trip(self) -> None:
        meta = self.make_meta()
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'model_meta.json'
            with open(path, 'w') as f:
                json.dump(meta.to_dict(), f)
            loaded = ClassifierMeta.from_json(path)

        assert loaded == meta
        assert loaded.n_features == 4


if __name__ == "__main__":
    unittest.main()
