"""
Synthetic walk generator.

Produces timestamped accelerometer and rotation-vector streams for a
scripted walk, for tests, demos and the dataset script. A walk is a list
of legs, each a number of steps at a fixed heading:

    legs = [WalkLeg(steps=10, heading_rad=0.0),         # 10 steps North
            WalkLeg(steps=5, heading_rad=np.pi / 2)]    # 5 steps East

Signal model (device held flat, gravity on the z-axis):

    stand still  ||a|| = g                    for lead_in_s / lead_out_s
    each step    ||a|| = peak_ms2             for pulse_samples samples
                 ||a|| = swing_floor_ms2      for the rest of the period

The heel-strike pulse is short and sharp, so after the default 6-sample
moving average each step produces one peak that is well separated from
the next, and the default step detector accepts exactly one step per
pulse. Optional Gaussian noise is added to the magnitude.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from pdr_core.activity.types import MotionType
from pdr_core.coords.rotations import azimuth_to_rotation_vector
from pdr_core.sensors.types import RotationVectorSample, SensorSample

GRAVITY = 9.81


@dataclass(frozen=True)
class WalkLeg:
    """
    Straight segment of a scripted walk.

    Attributes:
        steps: Number of steps.
        heading_rad: Azimuth while walking this leg (0 = North, π/2 = East).
        motion: Activity label of the leg. Default: WALKING.
    """

    steps: int
    heading_rad: float = 0.0
    motion: MotionType = MotionType.WALKING

    def __post_init__(self):
        if self.steps < 0:
            raise ValueError(f"steps must be non-negative, got {self.steps}")


@dataclass
class WalkRecording:
    """
    Simulated sensor streams and their ground truth.

    Attributes:
        timestamps_ms: Sample timestamps. Shape: (N,).
        accel: Accelerometer samples. Shape: (N, 3). Units: m/s².
        rotation_vectors: Rotation vectors [x, y, z, w]. Shape: (N, 4).
        labels: Activity label per sample. Length N.
        step_onsets_ms: Start time of every heel-strike pulse.
        step_headings: Heading of every step. Units: radians.
        sample_rate_hz: Sampling rate.
    """

    timestamps_ms: np.ndarray
    accel: np.ndarray
    rotation_vectors: np.ndarray
    labels: List[MotionType] = field(default_factory=list)
    step_onsets_ms: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    step_headings: np.ndarray = field(default_factory=lambda: np.zeros(0))
    sample_rate_hz: float = 50.0

    @property
    def n_steps(self) -> int:
        return len(self.step_onsets_ms)

    @property
    def duration_s(self) -> float:
        if len(self.timestamps_ms) == 0:
            return 0.0
        return (self.timestamps_ms[-1] - self.timestamps_ms[0]) / 1000.0

    def accel_samples(self) -> Iterator[SensorSample]:
        """Accelerometer stream as SensorSamples."""
        for t, (x, y, z) in zip(self.timestamps_ms, self.accel):
            yield SensorSample(float(x), float(y), float(z), int(t))

    def rotation_samples(self) -> Iterator[RotationVectorSample]:
        """Rotation-vector stream as RotationVectorSamples."""
        for t, (x, y, z, w) in zip(self.timestamps_ms, self.rotation_vectors):
            yield RotationVectorSample(float(x), float(y), float(z), float(w), int(t))

    def events(self) -> Iterator[Tuple[str, Union[SensorSample, RotationVectorSample]]]:
        """
        Interleaved sensor events in delivery order.

        At every timestamp the rotation vector is delivered before the
        accelerometer sample, so a step always sees the heading of its own
        sample time.
        """
        for rv, acc in zip(self.rotation_samples(), self.accel_samples()):
            yield 'rotation_vector', rv
            yield 'accelerometer', acc


def simulate_walk(
    legs: Sequence[WalkLeg],
    sample_rate_hz: float = 50.0,
    step_frequency_hz: float = 1.8,
    peak_ms2: float = 18.3,
    swing_floor_ms2: float = 9.3,
    pulse_samples: int = 6,
    lead_in_s: float = 1.0,
    lead_out_s: float = 1.0,
    noise_std: float = 0.0,
    start_ms: int = 0,
    rng: Optional[np.random.Generator] = None,
) -> WalkRecording:
    """
    Generate sensor streams for a scripted walk.

    Args:
        legs: Walk legs, in order.
        sample_rate_hz: Sampling rate. Default: 50 Hz.
        step_frequency_hz: Steps per second. Default: 1.8.
        peak_ms2: Magnitude during the heel-strike pulse. Units: m/s².
        swing_floor_ms2: Magnitude between pulses. Units: m/s².
        pulse_samples: Width of the heel-strike pulse in samples.
        lead_in_s: Standing time before the first step. Units: s.
        lead_out_s: Standing time after the last step. Units: s.
        noise_std: Std of Gaussian noise on the magnitude. Units: m/s².
        start_ms: Timestamp of the first sample.
        rng: Random generator for the noise. Default: np.random.default_rng().

    Returns:
        WalkRecording with the streams and per-step ground truth.

    Raises:
        ValueError: If the step period does not fit the pulse.
    """
    if sample_rate_hz <= 0 or step_frequency_hz <= 0:
        raise ValueError("sample_rate_hz and step_frequency_hz must be positive")
    period = int(round(sample_rate_hz / step_frequency_hz))
    if pulse_samples < 1 or period <= pulse_samples:
        raise ValueError(
            f"step period of {period} samples must exceed pulse of {pulse_samples} samples"
        )

    magnitudes: List[float] = []
    headings: List[float] = []
    labels: List[MotionType] = []
    onsets: List[int] = []
    step_headings: List[float] = []

    first_heading = legs[0].heading_rad if legs else 0.0
    n_lead_in = int(round(lead_in_s * sample_rate_hz))
    magnitudes += [GRAVITY] * n_lead_in
    headings += [first_heading] * n_lead_in
    labels += [MotionType.STATIONARY] * n_lead_in

    for leg in legs:
        for _ in range(leg.steps):
            onsets.append(len(magnitudes))
            step_headings.append(leg.heading_rad)
            magnitudes += [peak_ms2] * pulse_samples
            magnitudes += [swing_floor_ms2] * (period - pulse_samples)
            headings += [leg.heading_rad] * period
            labels += [leg.motion] * period

    last_heading = legs[-1].heading_rad if legs else 0.0
    n_lead_out = int(round(lead_out_s * sample_rate_hz))
    magnitudes += [GRAVITY] * n_lead_out
    headings += [last_heading] * n_lead_out
    labels += [MotionType.STATIONARY] * n_lead_out

    n = len(magnitudes)
    dt_ms = 1000.0 / sample_rate_hz
    timestamps = start_ms + np.round(np.arange(n) * dt_ms).astype(np.int64)

    mag = np.asarray(magnitudes, dtype=np.float64)
    if noise_std > 0:
        rng = rng if rng is not None else np.random.default_rng()
        mag = mag + rng.normal(0.0, noise_std, size=n)
    accel = np.zeros((n, 3))
    accel[:, 2] = mag

    rotation_vectors = np.array([azimuth_to_rotation_vector(h) for h in headings]).reshape(n, 4)

    return WalkRecording(
        timestamps_ms=timestamps,
        accel=accel,
        rotation_vectors=rotation_vectors,
        labels=labels,
        step_onsets_ms=timestamps[np.asarray(onsets, dtype=int)] if onsets else np.zeros(0, dtype=np.int64),
        step_headings=np.asarray(step_headings, dtype=np.float64),
        sample_rate_hz=sample_rate_hz,
    )


def square_walk(steps_per_side: int = 8, **kwargs) -> WalkRecording:
    """Walk a square: North, East, South, West."""
    legs = [WalkLeg(steps_per_side, h) for h in (0.0, np.pi / 2, np.pi, -np.pi / 2)]
    return simulate_walk(legs, **kwargs)
