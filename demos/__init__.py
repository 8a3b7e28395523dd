"""
Demos for the PDR core.

Runnable examples that stream simulated sensor data through the library
and save their figures to demos/figs/:
    - example_pdr_walk.py: streaming step detection and path integration,
      cross-checked against the offline peak detector
    - example_stairwells.py: stairwell polygons traced from unordered
      floor-plan segments
    - example_activity_smoothing.py: background activity classification
      with majority-vote smoothing
"""
