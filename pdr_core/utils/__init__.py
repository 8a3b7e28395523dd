"""
Utility functions shared by the PDR modules.
"""

from .angles import wrap_angle

__all__ = ['wrap_angle']
