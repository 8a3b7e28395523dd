"""
Runtime configuration for the PDR pipeline.

All tunables of the pipeline live in one frozen dataclass, PdrConfig.
Validation happens in __post_init__, so a bad value is rejected at the
moment a configuration is built or changed (PdrConfig.replace, from_dict,
from_json) and never reaches the components as a division by zero.

Two kinds of checks are applied:
    - Hard errors (ValueError): values that would break the arithmetic,
      e.g. window_size < 1 or height_cm <= 0.
    - Soft warnings (UserWarning): values outside the ranges the tuning
      screen of the mobile app offered. They are accepted, but are
      usually a typo (e.g. height given in metres instead of centimetres).

Presets follow the PRESETS convention of the dataset scripts: a dict of
named parameter sets with a 'description' entry.

Example:
    >>> from pdr_core.config import PdrConfig, StrideModel
    >>> cfg = PdrConfig(height_cm=182.0)
    >>> cfg = cfg.replace(stride_model=StrideModel.AMPLITUDE)
    >>> cfg.to_dict()['stride_model']
    'amplitude'
"""

import json
import math
import warnings
import dataclasses
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Literal, Union


class StrideModel(Enum):
    """Available stride-length models.

    Attributes:
        FREQUENCY_LINEAR: stride = height * (K * f + C), K switched to 0.5
            above 2 steps/s.
        AMPLITUDE: Weinberg-style fourth root of the peak-to-valley
            acceleration swing, scaled by height and cadence.
    """

    FREQUENCY_LINEAR = "frequency_linear"
    AMPLITUDE = "amplitude"


# Tuning ranges exposed by the app settings screen. Values outside are
# accepted with a warning.
TUNING_RANGES: Dict[str, tuple] = {
    'threshold': (5.0, 20.0),
    'window_size': (1, 20),
    'debounce_ms': (100, 600),
    'cadence_average_size': (1, 20),
    'k': (0.1, 1.0),
    'c': (0.05, 0.5),
    'height_cm': (100.0, 250.0),
}


@dataclass(frozen=True)
class PdrConfig:
    """
    Configuration surface of the PDR core.

    Attributes:
        threshold: Smoothed accelerometer magnitude that starts and completes
                   a step cycle. Units: m/s². Default: 12.0.
        window_size: Number of magnitude samples averaged by the
                     MagnitudeSmoother. Default: 6.
        debounce_ms: Minimum time between two accepted steps. Units: ms.
                     Default: 300.
        cadence_average_size: Number of recent cadence values averaged by
                              the CadenceTracker. Default: 5.
        stride_model: Stride-length model. Default: FREQUENCY_LINEAR.
        k: Frequency coefficient K of the linear model. Default: 0.37.
        c: Intercept C of the linear model. Default: 0.15.
        k_amp: Scale constant of the amplitude model. Default: 0.45.
        height_cm: User height. Units: cm. Default: 170.0.
        pixels_per_cm: Scale from real-world stride to path units.
                       Default: 0.5.
        smoothing_window_size: Number of raw activity labels in the
                               majority vote. Default: 3.
        hysteresis_confidence: Minimum confidence change that re-emits an
                               unchanged activity label. Default: 0.15.
        tie_break: Majority-vote tie policy, 'first' (first encountered in
                   the history) or 'latest' (most
                   recent of the tied labels). Default: 'first'.
        event_buffer_size: Capacity of the step/path event streams before
                           the oldest undelivered events are dropped.
                           Default: 1024.
    """

    threshold: float = 12.0
    window_size: int = 6
    debounce_ms: int = 300
    cadence_average_size: int = 5
    stride_model: StrideModel = StrideModel.FREQUENCY_LINEAR
    k: float = 0.37
    c: float = 0.15
    k_amp: float = 0.45
    height_cm: float = 170.0
    pixels_per_cm: float = 0.5
    smoothing_window_size: int = 3
    hysteresis_confidence: float = 0.15
    tie_break: Literal['first', 'latest'] = 'first'
    event_buffer_size: int = 1024

    def __post_init__(self) -> None:
        """Validate parameters and coerce the stride model name."""
        if isinstance(self.stride_model, str):
            try:
                object.__setattr__(self, 'stride_model', StrideModel(self.stride_model))
            except ValueError:
                raise ValueError(
                    f"stride_model must be one of "
                    f"{[m.value for m in StrideModel]}, got '{self.stride_model}'"
                ) from None
        elif not isinstance(self.stride_model, StrideModel):
            raise ValueError(f"stride_model must be a StrideModel, got {self.stride_model!r}")

        for name in ('window_size', 'cadence_average_size',
                     'smoothing_window_size', 'event_buffer_size'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")

        if isinstance(self.debounce_ms, bool) or not isinstance(self.debounce_ms, int):
            raise ValueError(f"debounce_ms must be an integer, got {self.debounce_ms!r}")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be non-negative, got {self.debounce_ms}")

        for name in ('threshold', 'height_cm', 'pixels_per_cm', 'k', 'c', 'k_amp'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
        for name in ('height_cm', 'pixels_per_cm', 'k', 'c', 'k_amp'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        if not 0.0 <= self.hysteresis_confidence <= 1.0:
            raise ValueError(
                f"hysteresis_confidence must be in [0, 1], got {self.hysteresis_confidence}"
            )
        if self.tie_break not in ('first', 'latest'):
            raise ValueError(f"tie_break must be 'first' or 'latest', got '{self.tie_break}'")

        for name, (lo, hi) in TUNING_RANGES.items():
            value = getattr(self, name)
            if not lo <= value <= hi:
                warnings.warn(
                    f"{name}={value} is outside the usual tuning range "
                    f"[{lo}, {hi}]",
                    UserWarning,
                )

    def replace(self, **changes: Any) -> "PdrConfig":
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        d = asdict(self)
        d['stride_model'] = self.stride_model.value
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PdrConfig":
        """
        Build a configuration from a dictionary.

        A 'description' entry (as found in presets) is ignored. Any other
        unknown key raises, so that misspelled parameters are not silently
        dropped.
        """
        known = {f.name for f in fields(cls)}
        params = {k: v for k, v in data.items() if k != 'description'}
        unknown = set(params) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**params)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "PdrConfig":
        """Load a configuration from a config.json file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_json(self, path: Union[str, Path]) -> None:
        """Save the configuration as an indented config.json file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "PdrConfig":
        """Build a configuration from a named preset plus overrides."""
        if name not in PRESETS:
            raise ValueError(f"Unknown preset '{name}', available: {list(PRESETS)}")
        params = dict(PRESETS[name])
        params.update(overrides)
        return cls.from_dict(params)


PRESETS: Dict[str, Dict[str, Any]] = {
    'baseline': {
        'description': 'Default tuning: linear stride model, 170 cm user',
    },
    'handheld_sensitive': {
        'description': 'Lower threshold and shorter debounce for light, fast steps',
        'threshold': 11.0,
        'window_size': 4,
        'debounce_ms': 250,
    },
    'amplitude': {
        'description': 'Weinberg-style amplitude stride model',
        'stride_model': 'amplitude',
        'k_amp': 0.45,
    },
    'stable_activity': {
        'description': 'Longer majority vote for a calmer activity display',
        'smoothing_window_size': 5,
        'hysteresis_confidence': 0.25,
    },
}
