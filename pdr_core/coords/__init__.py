"""Rotation conversions for device orientation readings.

Converts rotation-vector sensor readings into quaternions, rotation
matrices and the azimuth/pitch/roll angles used for heading.
"""

from pdr_core.coords.rotations import (
    azimuth_to_rotation_vector,
    euler_to_quat,
    quat_to_rotation_matrix,
    rotation_matrix_to_orientation,
    rotation_vector_to_quat,
)

__all__ = [
    "azimuth_to_rotation_vector",
    "euler_to_quat",
    "quat_to_rotation_matrix",
    "rotation_matrix_to_orientation",
    "rotation_vector_to_quat",
]
