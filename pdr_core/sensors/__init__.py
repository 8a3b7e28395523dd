"""Sensor-side PDR processing.

Turns raw accelerometer and rotation-vector samples into step events,
heading and 2-D path points:
- magnitude: accelerometer norm and moving-average smoothing
- step_detector: rise-then-fall step state machine
- stride: frequency-linear and amplitude stride-length models
- cadence: rolling cadence average
- heading: azimuth from rotation-vector readings
- path: step-and-heading path integration
- offline: batch peak detector for recorded sessions
"""

from pdr_core.sensors.cadence import CadenceTracker
from pdr_core.sensors.heading import HeadingProvider, azimuth_from_rotation_vector
from pdr_core.sensors.magnitude import MagnitudeSmoother, accel_magnitude
from pdr_core.sensors.offline import detect_steps_offline, match_steps, step_times_ms
from pdr_core.sensors.path import PathIntegrator, integrate_path, project_step
from pdr_core.sensors.step_detector import StepDetector, StepStateMachine
from pdr_core.sensors.stride import (
    AmplitudeStrideModel,
    FrequencyLinearStrideModel,
    StrideEstimator,
    StrideResult,
    make_stride_model,
)
from pdr_core.sensors.types import (
    IDLE,
    CadenceState,
    Falling,
    HeadingSample,
    Idle,
    PathPoint,
    Rising,
    RotationVectorSample,
    SensorSample,
    StepEvent,
    StepMachineState,
)

__all__ = [
    "AmplitudeStrideModel",
    "CadenceState",
    "CadenceTracker",
    "Falling",
    "FrequencyLinearStrideModel",
    "HeadingProvider",
    "HeadingSample",
    "IDLE",
    "Idle",
    "MagnitudeSmoother",
    "PathIntegrator",
    "PathPoint",
    "Rising",
    "RotationVectorSample",
    "SensorSample",
    "StepDetector",
    "StepEvent",
    "StepMachineState",
    "StepStateMachine",
    "StrideEstimator",
    "StrideResult",
    "accel_magnitude",
    "azimuth_from_rotation_vector",
    "detect_steps_offline",
    "integrate_path",
    "make_stride_model",
    "match_steps",
    "project_step",
    "step_times_ms",
]
