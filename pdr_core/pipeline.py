"""
End-to-end PDR pipeline.

PdrPipeline is the single object a host wires its sensor callbacks into:

    on_accelerometer(sample)   -> StepDetector -> PathIntegrator
                                  publishes StepEvent, PathPoint, CadenceState
    on_rotation_vector(sample) -> HeadingProvider (latest heading only)

All sensor-side state is mutated synchronously inside these two calls, so
they must be driven from one thread. Results leave the pipeline only
through its channels (EventStream / LatestValue), which are safe to read
from any thread.

Example:
    >>> from pdr_core.pipeline import PdrPipeline
    >>> from pdr_core.sensors.types import SensorSample
    >>> pipeline = PdrPipeline()
    >>> pipeline.on_accelerometer(SensorSample(0.0, 0.0, 9.81, 0)) is None
    True
    >>> pipeline.path_points.drain()
    []
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from pdr_core.channels import EventStream, LatestValue
from pdr_core.config import PdrConfig
from pdr_core.sensors.heading import HeadingProvider
from pdr_core.sensors.path import PathIntegrator
from pdr_core.sensors.step_detector import StepDetector
from pdr_core.sensors.types import (
    CadenceState,
    HeadingSample,
    PathPoint,
    RotationVectorSample,
    SensorSample,
    StepEvent,
)

logger = logging.getLogger(__name__)


class PdrPipeline:
    """
    Step detection, heading and path integration behind two callbacks.

    Args:
        config: Pipeline configuration. Default: PdrConfig().
        origin: Optional start position; when given it is published as the
                first path point.

    Attributes:
        step_events: EventStream of accepted StepEvents.
        path_points: EventStream of PathPoints.
        cadence: LatestValue of the rolling CadenceState.
        heading: LatestValue of the latest HeadingSample.
    """

    def __init__(
        self,
        config: Optional[PdrConfig] = None,
        origin: Optional[Tuple[float, float]] = None,
    ):
        self.config = config if config is not None else PdrConfig()
        self.detector = StepDetector(self.config)
        self.heading_provider = HeadingProvider()
        self.integrator = PathIntegrator(
            pixels_per_cm=self.config.pixels_per_cm,
            cadence_average_size=self.config.cadence_average_size,
        )

        self.step_events: EventStream[StepEvent] = EventStream(self.config.event_buffer_size)
        self.path_points: EventStream[PathPoint] = EventStream(self.config.event_buffer_size)
        self.cadence: LatestValue[CadenceState] = LatestValue(CadenceState())
        self.heading: LatestValue[HeadingSample] = LatestValue(self.heading_provider.latest)

        if origin is not None:
            self.set_origin(origin)

    def on_accelerometer(self, sample: SensorSample) -> Optional[PathPoint]:
        """
        Process one accelerometer sample.

        Returns:
            The PathPoint produced by this sample, or None when it did not
            complete an accepted step.
        """
        event = self.detector.on_sample(sample)
        if event is None:
            return None

        point = self.integrator.process_step(event, self.heading_provider.heading)
        self.step_events.publish(event)
        self.path_points.publish(point)
        self.cadence.set(self.integrator.cadence_state)
        return point

    def on_rotation_vector(
        self,
        sample: Union[RotationVectorSample, np.ndarray, Sequence[float]],
    ) -> HeadingSample:
        """Update the heading from one rotation-vector reading."""
        latest = self.heading_provider.update(sample)
        self.heading.set(latest)
        return latest

    def set_heading(self, azimuth_rad: float, timestamp_ms: Optional[int] = None) -> HeadingSample:
        """Override the heading (e.g. from an external compass filter)."""
        latest = self.heading_provider.set_heading(azimuth_rad, timestamp_ms)
        self.heading.set(latest)
        return latest

    def set_origin(self, origin: Tuple[float, float]) -> PathPoint:
        """
        Start a new path at ``origin``.

        The origin is published as the first point of the new path and the
        cadence history is cleared. The step detector keeps its state, so a
        step already in progress still counts.
        """
        point = self.integrator.reset(origin)
        self.path_points.publish(point)
        self.cadence.set(self.integrator.cadence_state)
        logger.info("Path origin set to (%.1f, %.1f)", point.x, point.y)
        return point

    def reset(self) -> None:
        """
        Clear the path.

        Position goes back to (0, 0) and the next accepted step anchors the
        new path there; cadence history and the step detector are reset.
        Undelivered events are discarded.
        """
        self.integrator.reset()
        self.detector.reset()
        self.step_events.drain()
        self.path_points.drain()
        self.cadence.set(self.integrator.cadence_state)
        logger.info("Path cleared")

    def configure(self, config: PdrConfig) -> None:
        """
        Apply a new configuration at runtime.

        Detection parameters take effect on the next sample. The current
        position is kept; a new pixels_per_cm applies to subsequent steps.
        """
        self.config = config
        self.detector.configure(config)
        self.integrator.pixels_per_cm = config.pixels_per_cm
        self.integrator.cadence.resize(config.cadence_average_size)
        self.step_events.resize(config.event_buffer_size)
        self.path_points.resize(config.event_buffer_size)
        logger.debug("Pipeline reconfigured: %s", config)

    @property
    def position(self) -> PathPoint:
        """Current path position."""
        return self.integrator.position
