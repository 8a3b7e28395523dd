"""Synthetic sensor data for tests, demos and dataset generation."""

from pdr_core.sim.walk import GRAVITY, WalkLeg, WalkRecording, simulate_walk, square_walk

__all__ = [
    "GRAVITY",
    "WalkLeg",
    "WalkRecording",
    "simulate_walk",
    "square_walk",
]
