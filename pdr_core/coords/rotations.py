"""Rotation representations and conversions for device orientation.

This module converts the rotation-vector readings delivered by a phone's
orientation sensor into the angles the PDR pipeline needs:
- Rotation vectors ([x, y, z] or [x, y, z, w], the vector part of a unit
  quaternion, optionally followed by the scalar part)
- Quaternions (unit quaternions, q = [qw, qx, qy, qz])
- Rotation matrices (3x3 orthogonal matrices, SO(3))
- Orientation angles [azimuth, pitch, roll]

Conventions:
- Quaternions: [qw, qx, qy, qz] where qw is the scalar part
- Rotation matrices map device coordinates to world coordinates
  (x=East, y=North, z=Up), v_world = R @ v_device
- Orientation angles follow the Android sensor convention:
  - Azimuth: rotation about -z, 0 when the device y-axis points North,
    positive towards East (clockwise seen from above)
  - Pitch: rotation about x-axis
  - Roll: rotation about y-axis
"""

import math

import numpy as np
from numpy.typing import NDArray


def euler_to_quat(
    roll: float,
    pitch: float,
    yaw: float,
) -> NDArray[np.float64]:
    """Convert Euler angles to quaternion.

    Converts roll-pitch-yaw Euler angles (ZYX convention) to a unit
    quaternion representation.

    Args:
        roll: Roll angle φ in radians (rotation about x-axis).
        pitch: Pitch angle θ in radians (rotation about y-axis).
        yaw: Yaw angle ψ in radians (rotation about z-axis).

    Returns:
        Unit quaternion as numpy array [qw, qx, qy, qz].

    Example:
        >>> q = euler_to_quat(0.0, 0.0, np.pi/2)  # 90° yaw
        >>> print(f"Norm (should be 1.0): {np.linalg.norm(q):.6f}")
    """
    cr = np.cos(roll / 2.0)
    sr = np.sin(roll / 2.0)
    cp = np.cos(pitch / 2.0)
    sp = np.sin(pitch / 2.0)
    cy = np.cos(yaw / 2.0)
    sy = np.sin(yaw / 2.0)

    qw = cr * cp * cy + sr * sp * sy
    qx = sr * cp * cy - cr * sp * sy
    qy = cr * sp * cy + sr * cp * sy
    qz = cr * cp * sy - sr * sp * cy

    return np.array([qw, qx, qy, qz], dtype=np.float64)


def rotation_vector_to_quat(rotation_vector: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert a sensor rotation vector to a unit quaternion.

    The rotation vector carries the vector part of the device orientation
    quaternion, [x, y, z], optionally followed by the scalar part w and an
    accuracy estimate. When w is missing it is recovered from the unit norm
    constraint, w = sqrt(max(0, 1 - x² - y² - z²)).

    Args:
        rotation_vector: Array of 3, 4 or 5 components [x, y, z, (w), (acc)].

    Returns:
        Unit quaternion as numpy array [qw, qx, qy, qz].

    Raises:
        ValueError: If the vector has the wrong length or non-finite values.

    Example:
        >>> q = rotation_vector_to_quat(np.array([0.0, 0.0, 0.0]))
        >>> print(q)  # [1, 0, 0, 0]
    """
    v = np.asarray(rotation_vector, dtype=np.float64).ravel()
    if v.shape[0] not in (3, 4, 5):
        raise ValueError(
            f"rotation_vector must have 3, 4 or 5 components, got {v.shape[0]}"
        )
    if not np.all(np.isfinite(v[:4])):
        raise ValueError(f"rotation_vector must be finite, got {v}")

    qx, qy, qz = v[0], v[1], v[2]
    if v.shape[0] >= 4:
        qw = v[3]
    else:
        qw = math.sqrt(max(0.0, 1.0 - qx * qx - qy * qy - qz * qz))

    q = np.array([qw, qx, qy, qz], dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm == 0.0:
        raise ValueError("rotation_vector describes a zero quaternion")

    return q / norm


def quat_to_rotation_matrix(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert quaternion to rotation matrix.

    Converts a unit quaternion to a 3x3 rotation matrix. For a rotation
    vector this is the same matrix the platform's
    getRotationMatrixFromVector produces.

    Args:
        q: Unit quaternion as numpy array [qw, qx, qy, qz].

    Returns:
        3x3 rotation matrix R such that v_world = R @ v_device.

    Raises:
        ValueError: If q is not a 4-element array.

    Example:
        >>> q = np.array([1.0, 0.0, 0.0, 0.0])  # Identity rotation
        >>> R = quat_to_rotation_matrix(q)
    """
    if q.shape != (4,):
        raise ValueError(f"Expected 4-element quaternion, got shape {q.shape}")

    qw, qx, qy, qz = q

    R = np.array(
        [
            [
                1.0 - 2.0 * (qy * qy + qz * qz),
                2.0 * (qx * qy - qw * qz),
                2.0 * (qx * qz + qw * qy),
            ],
            [
                2.0 * (qx * qy + qw * qz),
                1.0 - 2.0 * (qx * qx + qz * qz),
                2.0 * (qy * qz - qw * qx),
            ],
            [
                2.0 * (qx * qz - qw * qy),
                2.0 * (qy * qz + qw * qx),
                1.0 - 2.0 * (qx * qx + qy * qy),
            ],
        ],
        dtype=np.float64,
    )

    return R


def rotation_matrix_to_orientation(R: NDArray[np.float64]) -> NDArray[np.float64]:
    """Extract orientation angles from a device rotation matrix.

    Uses the same decomposition as the platform's getOrientation call:
        azimuth = atan2(R[0,1], R[1,1])
        pitch   = asin(-R[2,1])
        roll    = atan2(-R[2,0], R[2,2])

    Args:
        R: 3x3 rotation matrix (device to world).

    Returns:
        Orientation angles as numpy array [azimuth, pitch, roll] in radians.
        Azimuth and roll lie in [-π, π], pitch in [-π/2, π/2].

    Raises:
        ValueError: If R is not a 3x3 matrix.

    Example:
        >>> euler = rotation_matrix_to_orientation(np.eye(3))
        >>> print(euler)  # [0, 0, 0]
    """
    if R.shape != (3, 3):
        raise ValueError(f"Expected 3x3 matrix, got shape {R.shape}")

    azimuth = np.arctan2(R[0, 1], R[1, 1])
    # Clamp to avoid numerical issues with arcsin
    pitch = np.arcsin(np.clip(-R[2, 1], -1.0, 1.0))
    roll = np.arctan2(-R[2, 0], R[2, 2])

    return np.array([azimuth, pitch, roll], dtype=np.float64)


def azimuth_to_rotation_vector(azimuth: float) -> NDArray[np.float64]:
    """Build the rotation vector of a flat device facing a given azimuth.

    Inverse of the azimuth extraction for a device lying flat: the device is
    yawed by -azimuth about the world z-axis.

    Args:
        azimuth: Heading in radians (0 = North, positive towards East).

    Returns:
        Rotation vector [x, y, z, w].
    """
    qw, qx, qy, qz = euler_to_quat(0.0, 0.0, -azimuth)
    return np.array([qx, qy, qz, qw], dtype=np.float64)
