"""
Heading from the device orientation sensor.

The rotation-vector sensor reports the device orientation as the vector
part of a unit quaternion. The heading is the azimuth of the standard
rotation-matrix-to-orientation decomposition:

    q = [w, x, y, z]            (w recovered from the unit norm if absent)
    R = C(q)                    (device -> world, x=East, y=North, z=Up)
    azimuth = atan2(R[0,1], R[1,1])

wrapped to (-π, π]. 0 means the device y-axis points North; the angle
grows clockwise seen from above (towards East).

HeadingProvider keeps only the latest value. It does no smoothing and has
no history; a caller that wants a filtered heading does that itself.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from pdr_core.coords.rotations import (
    quat_to_rotation_matrix,
    rotation_matrix_to_orientation,
    rotation_vector_to_quat,
)
from pdr_core.sensors.types import HeadingSample, RotationVectorSample
from pdr_core.utils.angles import wrap_angle

logger = logging.getLogger(__name__)


def azimuth_from_rotation_vector(
    rotation_vector: Union[np.ndarray, Sequence[float], RotationVectorSample],
) -> float:
    """
    Convert a rotation-vector reading into an azimuth.

    Args:
        rotation_vector: RotationVectorSample or 3/4/5 components
                         [x, y, z, (w), (accuracy)].

    Returns:
        Azimuth in radians, in (-π, π].

    Raises:
        ValueError: If the reading has the wrong length or non-finite values.

    Example:
        >>> azimuth_from_rotation_vector([0.0, 0.0, 0.0, 1.0])  # identity
        0.0
    """
    if isinstance(rotation_vector, RotationVectorSample):
        rotation_vector = rotation_vector.as_array()
    q = rotation_vector_to_quat(np.asarray(rotation_vector, dtype=np.float64))
    R = quat_to_rotation_matrix(q)
    azimuth = rotation_matrix_to_orientation(R)[0]
    return wrap_angle(float(azimuth))


class HeadingProvider:
    """
    Holds the latest heading derived from rotation-vector readings.

    Args:
        initial_heading: Heading reported before the first reading.
                         Units: radians. Default: 0.0 (North).
    """

    def __init__(self, initial_heading: float = 0.0):
        self._latest = HeadingSample(azimuth_rad=wrap_angle(initial_heading))

    def update(self, sample: Union[RotationVectorSample, np.ndarray, Sequence[float]]) -> HeadingSample:
        """
        Replace the heading with the one derived from a new reading.

        A malformed reading is logged and ignored; the previous heading is
        kept so that a single bad sample cannot derail path integration.

        Returns:
            The latest HeadingSample (new or unchanged).
        """
        timestamp_ms: Optional[int] = getattr(sample, 'timestamp_ms', None)
        try:
            azimuth = azimuth_from_rotation_vector(sample)
        except ValueError as e:
            logger.warning("Ignoring malformed rotation vector: %s", e)
            return self._latest

        self._latest = HeadingSample(azimuth_rad=azimuth, timestamp_ms=timestamp_ms)
        return self._latest

    def set_heading(self, azimuth_rad: float, timestamp_ms: Optional[int] = None) -> HeadingSample:
        """Set the heading directly (e.g. from an external compass filter)."""
        self._latest = HeadingSample(azimuth_rad=wrap_angle(azimuth_rad), timestamp_ms=timestamp_ms)
        return self._latest

    @property
    def heading(self) -> float:
        """Latest azimuth in radians."""
        return self._latest.azimuth_rad

    @property
    def latest(self) -> HeadingSample:
        """Latest HeadingSample."""
        return self._latest
