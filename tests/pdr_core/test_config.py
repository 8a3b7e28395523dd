"""
Unit tests for pdr_core/config.py.

Tests cover:
    - Hard validation errors (ValueError)
    - Soft range warnings (UserWarning)
    - JSON/dict round trip and presets

Run with: pytest tests/pdr_core/test_config.py -v
"""

import dataclasses
import tempfile
import unittest
import warnings
from pathlib import Path

import pytest

from pdr_core.config import PRESETS, PdrConfig, StrideModel


class TestPdrConfigValidation(unittest.TestCase):
    """Test __post_init__ checks."""

    def test_defaults(self) -> None:
        cfg = PdrConfig()

        assert cfg.threshold == 12.0
        assert cfg.window_size == 6
        assert cfg.debounce_ms == 300
        assert cfg.cadence_average_size == 5
        assert cfg.stride_model is StrideModel.FREQUENCY_LINEAR
        assert cfg.height_cm == 170.0
        assert cfg.pixels_per_cm == 0.5
        assert cfg.smoothing_window_size == 3
        assert cfg.tie_break == 'first'

    def test_window_sizes_must_be_positive(self) -> None:
        for name in ('window_size', 'cadence_average_size', 'smoothing_window_size', 'event_buffer_size'):
            with pytest.raises(ValueError, match=name):
                PdrConfig(**{name: 0})

    def test_window_size_must_be_integer(self) -> None:
        with pytest.raises(ValueError, match="integer"):
            PdrConfig(window_size=2.5)
        with pytest.raises(ValueError, match="integer"):
            PdrConfig(window_size=True)

    def test_non_positive_height_rejected(self) -> None:
        with pytest.raises(ValueError, match="height_cm"):
            PdrConfig(height_cm=0.0)

    def test_negative_debounce_rejected(self) -> None:
        with pytest.raises(ValueError, match="debounce_ms"):
            PdrConfig(debounce_ms=-1)

    def test_non_finite_threshold_rejected(self) -> None:
        with pytest.raises(ValueError, match="threshold"):
            PdrConfig(threshold=float('nan'))

    def test_hysteresis_range(self) -> None:
        with pytest.raises(ValueError, match="hysteresis"):
            PdrConfig(hysteresis_confidence=1.5)

    def test_tie_break_values(self) -> None:
        with pytest.raises(ValueError, match="tie_break"):
            PdrConfig(tie_break='random')

    def test_stride_model_from_string(self) -> None:
        assert PdrConfig(stride_model='amplitude').stride_model is StrideModel.AMPLITUDE

    def test_unknown_stride_model_rejected(self) -> None:
        with pytest.raises(ValueError, match="stride_model"):
            PdrConfig(stride_model='pendulum')

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            PdrConfig().threshold = 10.0

    def test_replace_validates(self) -> None:
        cfg = PdrConfig()
        assert cfg.replace(threshold=11.0).threshold == 11.0
        with pytest.raises(ValueError):
            cfg.replace(window_size=0)


class TestPdrConfigWarnings(unittest.TestCase):
    """Values outside the usual tuning ranges are accepted with a warning."""

    def test_height_in_metres_warns(self) -> None:
        with pytest.warns(UserWarning, match="height_cm"):
            cfg = PdrConfig(height_cm=1.75)
        assert cfg.height_cm == 1.75

    def test_large_threshold_warns(self) -> None:
        with pytest.warns(UserWarning, match="threshold"):
            PdrConfig(threshold=25.0)

    def test_defaults_do_not_warn(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            PdrConfig()


class TestPdrConfigSerialization(unittest.TestCase):
    """Test dict/JSON round trip and presets."""

    def test_to_dict_uses_enum_value(self) -> None:
        d = PdrConfig(stride_model=StrideModel.AMPLITUDE).to_dict()
        assert d['stride_model'] == 'amplitude'

    def test_dict_round_trip(self) -> None:
        cfg = PdrConfig(threshold=11.5, window_size=4, tie_break='latest')
        assert PdrConfig.from_dict(cfg.to_dict()) == cfg

    def test_json_round_trip(self) -> None:
        cfg = PdrConfig(height_cm=182.0, stride_model='amplitude', k_amp=0.5)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'config.json'
            cfg.to_json(path)
            loaded = PdrConfig.from_json(path)

        assert loaded == cfg

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="treshold"):
            PdrConfig.from_dict({'treshold': 12.0})

    def test_description_ignored(self) -> None:
        cfg = PdrConfig.from_dict({'description': 'walk test', 'threshold': 13.0})
        assert cfg.threshold == 13.0

    def test_all_presets_build(self) -> None:
        for name in PRESETS:
            assert isinstance(PdrConfig.from_preset(name), PdrConfig)

    def test_preset_with_override(self) -> None:
        cfg = PdrConfig.from_preset('handheld_sensitive', height_cm=160.0)

        assert cfg.threshold == 11.0
        assert cfg.debounce_ms == 250
        assert cfg.height_cm == 160.0

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError, match="preset"):
            PdrConfig.from_preset('sprint')


if __name__ == "__main__":
    unittest.main()
