"""
Streaming step detection.

StepStateMachine turns the smoothed accelerometer magnitude into discrete
step events with a three-state rise-then-fall detector:

    Idle    --m > threshold-->                 Rising(peak=m, valley=m)
    Rising  --m > peak-->                      Rising(peak=m)
    Rising  --m < peak-->                      Falling
    Falling --m < valley-->                    Falling(valley=m)
    Falling --m > threshold (step complete)--> Idle

Peak and valley are "best so far" values, so plateaus and small jitter do
not split or restart a cycle. On completion a step is emitted only if more
than ``debounce_ms`` have passed since the previous accepted step;
otherwise the cycle is discarded as noise. Either way the machine returns
to Idle. The machine never terminates.

StepDetector composes MagnitudeSmoother, StepStateMachine and the
configured stride model into a single per-sample callback.
"""

import logging
from typing import Optional

from pdr_core.config import PdrConfig
from pdr_core.sensors.magnitude import MagnitudeSmoother
from pdr_core.sensors.stride import StrideEstimator, make_stride_model
from pdr_core.sensors.types import (
    IDLE,
    Falling,
    Idle,
    Rising,
    SensorSample,
    StepEvent,
    StepMachineState,
)

logger = logging.getLogger(__name__)


class StepStateMachine:
    """
    Rise-then-fall step detector on a smoothed magnitude stream.

    Args:
        stride_model: Model that converts a completed cycle into a stride.
        threshold: Magnitude that opens and closes a step cycle. Units: m/s².
        debounce_ms: Minimum time between accepted steps. Units: ms.

    Attributes:
        state: Current StepMachineState (Idle, Rising or Falling).
        last_step_ms: Timestamp of the last accepted step, None until the
                      first one. The first step always passes the debounce
                      gate; its interval is measured from the first sample.
    """

    def __init__(
        self,
        stride_model: StrideEstimator,
        threshold: float = 12.0,
        debounce_ms: int = 300,
    ):
        self.stride_model = stride_model
        self.threshold = threshold
        self.debounce_ms = debounce_ms
        self.state: StepMachineState = IDLE
        self.last_step_ms: Optional[int] = None
        self._start_ms: Optional[int] = None

    def update(self, magnitude: float, timestamp_ms: int) -> Optional[StepEvent]:
        """
        Advance the machine by one smoothed magnitude sample.

        Args:
            magnitude: Smoothed accelerometer magnitude. Units: m/s².
            timestamp_ms: Sample timestamp. Units: ms.

        Returns:
            A StepEvent when this sample completes an accepted step cycle,
            None otherwise.
        """
        if self._start_ms is None:
            self._start_ms = timestamp_ms

        state = self.state
        m = magnitude

        if isinstance(state, Idle):
            if m > self.threshold:
                self.state = Rising(peak=m, valley=m)
            return None

        if isinstance(state, Rising):
            if m > state.peak:
                self.state = Rising(peak=m, valley=state.valley)
            elif m < state.peak:
                self.state = Falling(peak=state.peak, valley=min(state.valley, m))
            return None

        # Falling
        if m < state.valley:
            self.state = Falling(peak=state.peak, valley=m)
            return None
        if m > self.threshold:
            self.state = IDLE
            return self._complete_cycle(state, timestamp_ms)
        return None

    def _complete_cycle(self, cycle: Falling, timestamp_ms: int) -> Optional[StepEvent]:
        if self.last_step_ms is None:
            elapsed_ms = timestamp_ms - self._start_ms
        else:
            elapsed_ms = timestamp_ms - self.last_step_ms
            if elapsed_ms <= self.debounce_ms:
                logger.debug(
                    "Step cycle at %d ms discarded: %d ms since last step (debounce %d ms)",
                    timestamp_ms, elapsed_ms, self.debounce_ms,
                )
                return None

        result = self.stride_model.estimate(elapsed_ms / 1000.0, cycle.peak, cycle.valley)
        self.last_step_ms = timestamp_ms
        return StepEvent(
            stride_length_cm=result.stride_length_cm,
            cadence_hz=result.cadence_hz,
            timestamp_ms=timestamp_ms,
            peak=cycle.peak,
            valley=cycle.valley,
        )

    def reset(self) -> None:
        """Return to Idle and forget the last step time."""
        self.state = IDLE
        self.last_step_ms = None
        self._start_ms = None


class StepDetector:
    """
    Per-sample step detection: magnitude smoothing + state machine + stride.

    Args:
        config: Pipeline configuration (threshold, window size, debounce and
                stride model parameters).

    Example:
        >>> detector = StepDetector(PdrConfig())
        >>> event = detector.on_sample(SensorSample(0.0, 0.0, 9.81, 0))
        >>> event is None
        True
    """

    def __init__(self, config: Optional[PdrConfig] = None):
        config = config if config is not None else PdrConfig()
        self.config = config
        self.smoother = MagnitudeSmoother(config.window_size)
        self.machine = StepStateMachine(
            make_stride_model(config),
            threshold=config.threshold,
            debounce_ms=config.debounce_ms,
        )
        self.last_smoothed_magnitude = 0.0

    def on_sample(self, sample: SensorSample) -> Optional[StepEvent]:
        """Feed one raw accelerometer sample; return a StepEvent if a step completed."""
        self.last_smoothed_magnitude = self.smoother.push_sample(sample)
        event = self.machine.update(self.last_smoothed_magnitude, sample.timestamp_ms)
        if event is not None:
            logger.debug(
                "Step at %d ms: stride %.1f cm, cadence %.2f Hz",
                event.timestamp_ms, event.stride_length_cm, event.cadence_hz,
            )
        return event

    def configure(self, config: PdrConfig) -> None:
        """
        Apply a new configuration without losing the current step cycle.

        Threshold, debounce and stride parameters take effect on the next
        sample; a new window size keeps the most recent magnitudes.
        """
        self.config = config
        self.smoother.resize(config.window_size)
        self.machine.threshold = config.threshold
        self.machine.debounce_ms = config.debounce_ms
        self.machine.stride_model = make_stride_model(config)

    @property
    def state(self) -> StepMachineState:
        """Current state of the step state machine."""
        return self.machine.state

    def reset(self) -> None:
        """Clear the smoothing window and return the machine to Idle."""
        self.smoother.reset()
        self.machine.reset()
