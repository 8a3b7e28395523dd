"""Core modules for indoor pedestrian dead reckoning (PDR).

This package contains the pure computational core that turns raw motion
sensor samples into path positions and smoothed activity events:
- config: Runtime-tunable pipeline configuration (validated dataclass)
- sensors: Magnitude smoothing, step detection, stride models, cadence,
  heading and 2-D path integration
- activity: Classifier windowing and majority-vote motion smoothing
- floorplan: Wall/stair/entrance records and stairwell polygon tracing
- coords, utils: Rotation and angle helpers
- sim: Synthetic walk generator for tests and demos
"""

__version__ = "0.1.0"
