"""
Stride-length models.

Two interchangeable models turn the data of one detected step (time since
the previous step, peak and valley of the smoothed magnitude) plus the
user's height into a stride length in centimetres:

    - Frequency-linear model:
        f      = 1 / Δt
        K'     = 0.5 if f > 2.0 else K
        L      = h * (K' * f + C),   clamped to [0.2 h, 1.2 h]

    - Amplitude model (Weinberg-style):
        L = K_amp * (a_peak - a_valley)^(1/4) * (h / 170) * c_f * 100,
        clamped to [30, 150] cm, with the cadence factor
        c_f = 1 + (0.5 - Δt) for Δt < 0.5 s, else 1.

Both models share the same elapsed-time sanitation: a non-finite, negative
or shorter-than-0.2 s interval is replaced by the 0.2 s floor, so neither
model can divide by zero or produce a frequency above 5 Hz.

The frequency model switches to a steeper coefficient above 2 steps/s
because running gait lengthens the stride faster than walking gait.

References:
    Weinberg, H. (2002). Using the ADXL202 in pedometer and personal
    navigation applications. Analog Devices AN-602.
"""

import math
from abc import ABC, abstractmethod
from typing import NamedTuple

from pdr_core.config import PdrConfig, StrideModel

MIN_STEP_INTERVAL_S = 0.2
RUNNING_FREQUENCY_HZ = 2.0
RUNNING_K = 0.5
REFERENCE_HEIGHT_CM = 170.0
AMPLITUDE_MIN_STRIDE_CM = 30.0
AMPLITUDE_MAX_STRIDE_CM = 150.0
FAST_STEP_INTERVAL_S = 0.5


class StrideResult(NamedTuple):
    """Stride estimate of one step.

    Attributes:
        stride_length_cm: Clamped stride length. Units: cm.
        cadence_hz: Instantaneous step frequency used for the estimate.
    """

    stride_length_cm: float
    cadence_hz: float


def sanitize_interval(elapsed_s: float) -> float:
    """
    Replace an unusable inter-step interval by the 0.2 s floor.

    Args:
        elapsed_s: Time since the previous accepted step. Units: seconds.

    Returns:
        max(elapsed_s, 0.2) for finite non-negative input, 0.2 otherwise.
    """
    if not math.isfinite(elapsed_s) or elapsed_s < MIN_STEP_INTERVAL_S:
        return MIN_STEP_INTERVAL_S
    return float(elapsed_s)


def step_frequency(elapsed_s: float) -> float:
    """
    Compute step frequency from the inter-step interval.

        f_step = 1 / max(Δt, 0.2)

    Example:
        >>> step_frequency(0.5)
        2.0
        >>> step_frequency(0.0)  # degenerate interval hits the floor
        5.0
    """
    return 1.0 / sanitize_interval(elapsed_s)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return min(max(value, lo), hi)


class StrideEstimator(ABC):
    """Abstract base class for stride-length models."""

    def __init__(self, height_cm: float):
        """
        Initialize stride model.

        Args:
            height_cm: User height in centimetres (validated by PdrConfig).
        """
        self.height_cm = float(height_cm)

    @abstractmethod
    def estimate(self, elapsed_s: float, peak: float, valley: float) -> StrideResult:
        """
        Estimate the stride of one completed step.

        Args:
            elapsed_s: Time since the previous accepted step. Units: s.
            peak: Peak smoothed magnitude of the step cycle. Units: m/s².
            valley: Valley smoothed magnitude of the step cycle. Units: m/s².

        Returns:
            StrideResult with clamped stride and instantaneous cadence.
        """
        pass

    @property
    @abstractmethod
    def stride_range_cm(self) -> tuple:
        """Plausible (min, max) stride in centimetres."""
        pass


class FrequencyLinearStrideModel(StrideEstimator):
    """
    Linear stride model driven by step frequency.

        L = h * (K' * f + C),  K' = 0.5 if f > 2 Hz else K

    Args:
        height_cm: User height. Units: cm.
        k: Frequency coefficient used at walking pace. Default: 0.37.
        c: Intercept. Default: 0.15.

    Example:
        >>> model = FrequencyLinearStrideModel(height_cm=170.0)
        >>> result = model.estimate(elapsed_s=0.6, peak=13.0, valley=9.0)
        >>> round(result.stride_length_cm, 1)
        130.3
    """

    def __init__(self, height_cm: float, k: float = 0.37, c: float = 0.15):
        super().__init__(height_cm)
        self.k = k
        self.c = c

    @property
    def stride_range_cm(self) -> tuple:
        return (0.2 * self.height_cm, 1.2 * self.height_cm)

    def estimate(self, elapsed_s: float, peak: float = 0.0, valley: float = 0.0) -> StrideResult:
        f_step = step_frequency(elapsed_s)
        dynamic_k = RUNNING_K if f_step > RUNNING_FREQUENCY_HZ else self.k
        stride = self.height_cm * (dynamic_k * f_step + self.c)
        lo, hi = self.stride_range_cm
        return StrideResult(clamp(stride, lo, hi), f_step)


class AmplitudeStrideModel(StrideEstimator):
    """
    Weinberg-style stride model driven by the acceleration swing.

        L = K_amp * (peak - valley)^(1/4) * (h / 170) * c_f * 100

    The cadence factor c_f lengthens strides taken less than 0.5 s after
    the previous one (1.0 at 0.5 s, up to 1.3 at the 0.2 s floor).

    Args:
        height_cm: User height. Units: cm.
        k_amp: Weinberg constant, metres per (m/s²)^(1/4). Default: 0.45.
    """

    def __init__(self, height_cm: float, k_amp: float = 0.45):
        super().__init__(height_cm)
        self.k_amp = k_amp

    @property
    def stride_range_cm(self) -> tuple:
        return (AMPLITUDE_MIN_STRIDE_CM, AMPLITUDE_MAX_STRIDE_CM)

    def estimate(self, elapsed_s: float, peak: float, valley: float) -> StrideResult:
        interval = sanitize_interval(elapsed_s)
        f_step = 1.0 / interval

        swing = peak - valley
        if not math.isfinite(swing) or swing < 0.0:
            swing = 0.0
        height_factor = self.height_cm / REFERENCE_HEIGHT_CM
        if interval < FAST_STEP_INTERVAL_S:
            cadence_factor = 1.0 + (FAST_STEP_INTERVAL_S - interval)
        else:
            cadence_factor = 1.0

        stride = self.k_amp * swing ** 0.25 * height_factor * cadence_factor * 100.0
        lo, hi = self.stride_range_cm
        return StrideResult(clamp(stride, lo, hi), f_step)


def make_stride_model(config: PdrConfig) -> StrideEstimator:
    """Build the stride model selected by the configuration."""
    if config.stride_model is StrideModel.AMPLITUDE:
        return AmplitudeStrideModel(config.height_cm, k_amp=config.k_amp)
    return FrequencyLinearStrideModel(config.height_cm, k=config.k, c=config.c)
