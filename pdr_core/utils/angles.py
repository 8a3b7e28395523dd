"""
Angle wrapping.

Keeps headings within the (-π, π] interval used by the heading provider
and the path integrator.
"""

import math

import numpy as np


def wrap_angle(angle: float) -> float:
    """
    Wrap angle to the half-open (-π, π] range.

    The atan2 trick maps any finite angle into [-π, π]; the lower bound is
    then folded onto +π so that a heading has exactly one representation.

    Args:
        angle: Angle in radians (can be any finite value)

    Returns:
        Wrapped angle in range (-π, π]

    Example:
        >>> wrap_angle(3.5 * np.pi)  # 630° -> -90°
        -1.5707963267948966
        >>> wrap_angle(-np.pi)
        3.141592653589793
    """
    wrapped = float(np.arctan2(np.sin(angle), np.cos(angle)))
    if wrapped <= -math.pi:
        wrapped += 2.0 * math.pi
    return wrapped
