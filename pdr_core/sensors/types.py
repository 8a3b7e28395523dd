"""
Data structures for the PDR sensor pipeline.

This module defines the records that flow one way through the pipeline:

    SensorSample -> MagnitudeSmoother -> StepStateMachine -> StepEvent
    RotationVectorSample -> HeadingProvider -> HeadingSample
    StepEvent + heading -> PathIntegrator -> PathPoint

All records are frozen dataclasses: once produced they are handed to
consumers and never mutated. The step state machine state is a closed
tagged variant (Idle | Rising | Falling) with its peak/valley payload
carried only by the states that need it.

Time Base Convention:
    All timestamps are integer milliseconds on a monotonic sensor clock.

Coordinate Convention:
    PathPoint uses screen coordinates: x grows to the right (East for a
    North-up map) and y grows downwards, so walking North decreases y.
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class SensorSample:
    """
    One 3-axis accelerometer reading.

    Attributes:
        x, y, z: Acceleration along the device axes. Units: m/s².
                 Raw measurement (includes gravity).
        timestamp_ms: Sensor timestamp in milliseconds.
    """

    x: float
    y: float
    z: float
    timestamp_ms: int

    def as_array(self) -> np.ndarray:
        """Return the reading as a (3,) array."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class RotationVectorSample:
    """
    One rotation-vector (orientation sensor) reading.

    Attributes:
        x, y, z: Vector part of the device orientation quaternion.
        w: Scalar part, or None when the sensor only reports three
           components (it is then recovered from the unit norm).
        timestamp_ms: Sensor timestamp in milliseconds.
    """

    x: float
    y: float
    z: float
    w: Optional[float] = None
    timestamp_ms: int = 0

    def as_array(self) -> np.ndarray:
        """Return the reading as a (3,) or (4,) array."""
        if self.w is None:
            return np.array([self.x, self.y, self.z], dtype=np.float64)
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)


@dataclass(frozen=True)
class HeadingSample:
    """
    Latest device heading.

    Attributes:
        azimuth_rad: Azimuth in radians, in (-π, π]. 0 = device y-axis
                     towards North, positive towards East.
        timestamp_ms: Timestamp of the rotation reading, if known.
    """

    azimuth_rad: float
    timestamp_ms: Optional[int] = None


@dataclass(frozen=True)
class Idle:
    """Waiting for the smoothed magnitude to cross the threshold."""


@dataclass(frozen=True)
class Rising:
    """Magnitude is climbing towards the step peak.

    Attributes:
        peak: Highest smoothed magnitude seen in this cycle so far.
        valley: Lowest smoothed magnitude seen in this cycle so far.
    """

    peak: float
    valley: float


@dataclass(frozen=True)
class Falling:
    """Magnitude has passed the peak and is descending towards the valley.

    Attributes:
        peak: Highest smoothed magnitude of this cycle.
        valley: Lowest smoothed magnitude seen in this cycle so far.
    """

    peak: float
    valley: float


StepMachineState = Union[Idle, Rising, Falling]

IDLE = Idle()


@dataclass(frozen=True)
class StepEvent:
    """
    One completed and accepted step cycle.

    Attributes:
        stride_length_cm: Estimated stride length, already clamped to the
                          stride model's plausible range. Units: cm.
        cadence_hz: Instantaneous step frequency of this step. Units: Hz.
        timestamp_ms: Timestamp of the sample that completed the cycle.
        peak: Peak smoothed magnitude of the cycle. Units: m/s².
        valley: Valley smoothed magnitude of the cycle. Units: m/s².
    """

    stride_length_cm: float
    cadence_hz: float
    timestamp_ms: int
    peak: float = 0.0
    valley: float = 0.0


@dataclass(frozen=True)
class CadenceState:
    """
    Rolling cadence summary published after each step.

    Attributes:
        average_cadence_hz: Mean of the recent cadence window. Units: Hz.
        last_stride_length_cm: Stride of the most recent step. Units: cm.
    """

    average_cadence_hz: float = 0.0
    last_stride_length_cm: float = 0.0


@dataclass(frozen=True)
class PathPoint:
    """
    One point of the walked path, in path (screen) units.

    Attributes:
        x: Horizontal coordinate, growing to the right.
        y: Vertical coordinate, growing downwards.
    """

    x: float
    y: float

    def as_tuple(self) -> tuple:
        """Return (x, y)."""
        return (self.x, self.y)
