"""
Incremental 2-D path integration (step-and-heading).

Each accepted step moves the current position by the stride length along
the heading, in screen coordinates (y grows downwards):

    s   = L_cm * pixels_per_cm
    x_k = x_{k-1} + s * sin(ψ)
    y_k = y_{k-1} - s * cos(ψ)

with ψ the azimuth (0 = North = up on screen, π/2 = East = right). The
y sign is part of the output contract: consumers draw the points as-is.

The first step after a reset does not move: it anchors the path at the
current position. Position is therefore a pure fold over the ordered
(stride, heading) pairs since the last reset.
"""

import math
from typing import Iterable, List, Optional, Tuple

from pdr_core.sensors.cadence import CadenceTracker
from pdr_core.sensors.types import CadenceState, PathPoint, StepEvent


def project_step(
    x: float,
    y: float,
    stride_length_cm: float,
    heading_rad: float,
    pixels_per_cm: float,
) -> Tuple[float, float]:
    """
    Move (x, y) by one stride along a heading in screen coordinates.

    Args:
        x, y: Previous position in path units.
        stride_length_cm: Stride length. Units: cm.
        heading_rad: Azimuth. Units: radians (0 = up, π/2 = right).
        pixels_per_cm: Path units per centimetre.

    Returns:
        New (x, y).

    Example:
        >>> project_step(0.0, 0.0, 100.0, 0.0, 0.5)  # one stride North
        (0.0, -50.0)
    """
    stride_px = stride_length_cm * pixels_per_cm
    return (x + stride_px * math.sin(heading_rad),
            y - stride_px * math.cos(heading_rad))


class PathIntegrator:
    """
    Keeps the current position and turns step events into path points.

    Args:
        pixels_per_cm: Path units per centimetre of stride. Default: 0.5.
        cadence_average_size: Window of the owned CadenceTracker. Default: 5.

    Attributes:
        cadence: CadenceTracker fed with the cadence of every processed step
                 and cleared on reset.
    """

    def __init__(self, pixels_per_cm: float = 0.5, cadence_average_size: int = 5):
        self.pixels_per_cm = pixels_per_cm
        self.cadence = CadenceTracker(cadence_average_size)
        self._x = 0.0
        self._y = 0.0
        self._anchored = False
        self._last_stride_cm = 0.0

    def process_step(self, event: StepEvent, heading_rad: float) -> PathPoint:
        """
        Integrate one accepted step.

        Args:
            event: The accepted step.
            heading_rad: Heading at the time of the step. Units: radians.

        Returns:
            The new PathPoint (the unchanged position for the first step
            after a reset).
        """
        self.cadence.add(event.cadence_hz)
        self._last_stride_cm = event.stride_length_cm

        if not self._anchored:
            self._anchored = True
            return PathPoint(self._x, self._y)

        self._x, self._y = project_step(
            self._x, self._y, event.stride_length_cm, heading_rad, self.pixels_per_cm
        )
        return PathPoint(self._x, self._y)

    def reset(self, origin: Optional[Tuple[float, float]] = None) -> Optional[PathPoint]:
        """
        Move the current position and clear cadence history.

        Args:
            origin: New (x, y). None resets to (0, 0) without emitting a
                    point; the next step then anchors the path there.

        Returns:
            The origin as the first PathPoint of the new path when an
            explicit origin was given, None otherwise.
        """
        self.cadence.reset()
        self._last_stride_cm = 0.0
        if origin is None:
            self._x, self._y = 0.0, 0.0
            self._anchored = False
            return None

        self._x, self._y = float(origin[0]), float(origin[1])
        self._anchored = True
        return PathPoint(self._x, self._y)

    @property
    def position(self) -> PathPoint:
        """Current position."""
        return PathPoint(self._x, self._y)

    @property
    def cadence_state(self) -> CadenceState:
        """Average cadence and the most recent stride."""
        return CadenceState(
            average_cadence_hz=self.cadence.average,
            last_stride_length_cm=self._last_stride_cm,
        )


def integrate_path(
    steps: Iterable[Tuple[float, float]],
    pixels_per_cm: float = 0.5,
    origin: Optional[Tuple[float, float]] = None,
) -> List[PathPoint]:
    """
    Fold a sequence of (stride_cm, heading_rad) pairs into a path.

    Starts from a fresh PathIntegrator reset to ``origin``; with an explicit
    origin the result begins with that origin, otherwise the first step
    anchors the path at (0, 0).

    Example:
        >>> pts = integrate_path([(100.0, 0.0)], origin=(0.0, 0.0))
        >>> [p.as_tuple() for p in pts]
        [(0.0, 0.0), (0.0, -50.0)]
    """
    integrator = PathIntegrator(pixels_per_cm=pixels_per_cm)
    points: List[PathPoint] = []
    first = integrator.reset(origin)
    if first is not None:
        points.append(first)
    for timestamp_ms, (stride_cm, heading) in enumerate(steps):
        event = StepEvent(stride_length_cm=stride_cm, cadence_hz=0.0, timestamp_ms=timestamp_ms)
        points.append(integrator.process_step(event, heading))
    return points
