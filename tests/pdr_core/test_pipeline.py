"""
Unit tests for pdr_core/pipeline.py (end-to-end streaming PDR).

Tests cover:
    - Straight and square simulated walks through both sensor callbacks
    - Origin handling and reset anchoring
    - Runtime reconfiguration
    - Channel outputs (step events, path points, cadence, heading)

Run with: pytest tests/pdr_core/test_pipeline.py -v
"""

import unittest
from typing import List

import numpy as np

from pdr_core.config import PdrConfig
from pdr_core.pipeline import PdrPipeline
from pdr_core.sensors.types import CadenceState, PathPoint
from pdr_core.sim import WalkLeg, WalkRecording, simulate_walk, square_walk


def replay(pipeline: PdrPipeline, recording: WalkRecording) -> List[PathPoint]:
    """Feed a recording and return the points produced by steps."""
    points = []
    for kind, sample in recording.events():
        if kind == 'rotation_vector':
            pipeline.on_rotation_vector(sample)
        else:
            point = pipeline.on_accelerometer(sample)
            if point is not None:
                points.append(point)
    return points


class TestStraightWalk(unittest.TestCase):
    """Walking North from an explicit origin."""

    def setUp(self) -> None:
        self.pipeline = PdrPipeline(origin=(0.0, 0.0))
        replay(self.pipeline, simulate_walk([WalkLeg(6, 0.0)]))
        self.points = self.pipeline.path_points.drain()

    def test_origin_plus_one_point_per_step(self) -> None:
        assert len(self.points) == 7
        assert self.points[0] == PathPoint(0.0, 0.0)
        assert len(self.pipeline.step_events.drain()) == 6

    def test_moves_up_the_screen(self) -> None:
        xs = np.array([p.x for p in self.points])
        ys = np.array([p.y for p in self.points])

        assert np.allclose(xs, 0.0, atol=1e-9)
        assert np.all(np.diff(ys) < 0)

    def test_step_length_matches_stride(self) -> None:
        pipeline = PdrPipeline(origin=(0.0, 0.0))
        replay(pipeline, simulate_walk([WalkLeg(4, 0.0)]))
        events = pipeline.step_events.drain()
        points = pipeline.path_points.drain()

        for event, a, b in zip(events, points, points[1:]):
            assert np.isclose(a.y - b.y, event.stride_length_cm * 0.5)

    def test_position_is_last_point(self) -> None:
        assert self.pipeline.position == self.points[-1]


class TestSquareWalk(unittest.TestCase):
    """Heading changes turn the path."""

    def test_leg_directions(self) -> None:
        pipeline = PdrPipeline(origin=(0.0, 0.0))
        replay(pipeline, square_walk(steps_per_side=6))
        points = pipeline.path_points.drain()

        assert len(points) == 25
        deltas = np.diff(np.array([p.as_tuple() for p in points]), axis=0)
        north, east, south, west = deltas[0:6], deltas[6:12], deltas[12:18], deltas[18:24]

        assert np.allclose(north[:, 0], 0.0, atol=1e-6) and np.all(north[:, 1] < 0)
        assert np.all(east[:, 0] > 0) and np.allclose(east[:, 1], 0.0, atol=1e-6)
        assert np.allclose(south[:, 0], 0.0, atol=1e-6) and np.all(south[:, 1] > 0)
        assert np.all(west[:, 0] < 0) and np.allclose(west[:, 1], 0.0, atol=1e-6)

    def test_cadence_published(self) -> None:
        pipeline = PdrPipeline()
        replay(pipeline, square_walk(steps_per_side=3))
        cadence = pipeline.cadence.get()

        # last five steps are all 28 samples apart at 50 Hz
        assert np.isclose(cadence.average_cadence_hz, 1.0 / 0.56)
        assert cadence.last_stride_length_cm > 0.0

    def test_heading_channel_follows_rotation_vector(self) -> None:
        pipeline = PdrPipeline()
        replay(pipeline, simulate_walk([WalkLeg(2, np.pi / 2)]))

        assert np.isclose(pipeline.heading.get().azimuth_rad, np.pi / 2)


class TestOriginAndReset(unittest.TestCase):
    """Test path restarts."""

    def test_without_origin_first_step_anchors(self) -> None:
        pipeline = PdrPipeline()
        replay(pipeline, simulate_walk([WalkLeg(3, 0.0)]))
        points = pipeline.path_points.drain()

        assert len(points) == 3
        assert points[0] == PathPoint(0.0, 0.0)

    def test_set_origin_publishes_point(self) -> None:
        pipeline = PdrPipeline()
        point = pipeline.set_origin((120.0, 300.0))

        assert point == PathPoint(120.0, 300.0)
        assert pipeline.path_points.drain() == [point]
        assert pipeline.cadence.get() == CadenceState()

    def test_reset_clears_and_reanchors(self) -> None:
        pipeline = PdrPipeline(origin=(50.0, 50.0))
        replay(pipeline, simulate_walk([WalkLeg(4, 0.0)]))
        pipeline.reset()

        assert pipeline.path_points.drain() == []
        assert pipeline.step_events.drain() == []
        assert pipeline.position == PathPoint(0.0, 0.0)

        replay(pipeline, simulate_walk([WalkLeg(2, np.pi / 2)], start_ms=60_000))
        points = pipeline.path_points.drain()
        assert points[0] == PathPoint(0.0, 0.0)
        assert points[1].x > 0.0

    def test_subscriber_sees_points(self) -> None:
        pipeline = PdrPipeline()
        seen = []
        pipeline.path_points.subscribe(seen.append)
        replay(pipeline, simulate_walk([WalkLeg(3, 0.0)]))

        assert seen == pipeline.path_points.drain()


class TestConfigure(unittest.TestCase):
    """Runtime reconfiguration."""

    def test_threshold_above_signal_stops_steps(self) -> None:
        pipeline = PdrPipeline()
        pipeline.configure(PdrConfig(threshold=19.0))
        replay(pipeline, simulate_walk([WalkLeg(5, 0.0)]))

        assert pipeline.step_events.drain() == []

    def test_scale_change_applies_to_next_steps(self) -> None:
        pipeline = PdrPipeline(origin=(0.0, 0.0))
        pipeline.configure(PdrConfig(pixels_per_cm=1.0))
        replay(pipeline, simulate_walk([WalkLeg(2, 0.0)]))
        events = pipeline.step_events.drain()
        points = pipeline.path_points.drain()

        assert np.isclose(points[0].y - points[1].y, events[0].stride_length_cm)

    def test_buffer_resized(self) -> None:
        pipeline = PdrPipeline()
        pipeline.configure(PdrConfig(event_buffer_size=2))
        replay(pipeline, simulate_walk([WalkLeg(5, 0.0)]))

        assert len(pipeline.step_events.drain()) == 2
        assert pipeline.step_events.dropped == 3

    def test_malformed_rotation_vector_keeps_heading(self) -> None:
        pipeline = PdrPipeline()
        pipeline.set_heading(1.0)
        with self.assertLogs('pdr_core.sensors.heading', level='WARNING'):
            latest = pipeline.on_rotation_vector([np.nan, 0.0, 0.0, 1.0])

        assert np.isclose(latest.azimuth_rad, 1.0)


if __name__ == "__main__":
    unittest.main()
