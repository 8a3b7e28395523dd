"""
Integration test: dataset generation script -> files -> replay demo.

Run with: pytest tests/pdr_core/test_walk_dataset.py -v
"""

import tempfile
import unittest
from pathlib import Path

import numpy as np

from demos.example_pdr_walk import load_walk_dataset, run
from pdr_core.activity.types import MotionType
from pdr_core.config import PdrConfig
from scripts.generate_pdr_walk_dataset import PRESETS, generate_dataset, rectangle_legs


class TestWalkDataset(unittest.TestCase):
    """Generate, reload and replay a small dataset."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.output = Path(self._tmp.name) / 'walk'
        self.recording = generate_dataset(str(self.output), legs=2, steps_per_leg=5)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_files_written(self) -> None:
        for name in ('time_ms.txt', 'accel.txt', 'rotation_vector.txt', 'labels.txt',
                     'step_onsets_ms.txt', 'step_headings.txt', 'config.json'):
            assert (self.output / name).exists()

    def test_reload_matches(self) -> None:
        data = load_walk_dataset(str(self.output))
        loaded = data['recording']

        assert np.array_equal(loaded.timestamps_ms, self.recording.timestamps_ms)
        assert np.allclose(loaded.accel, self.recording.accel, atol=1e-6)
        assert np.allclose(loaded.rotation_vectors, self.recording.rotation_vectors, atol=1e-8)
        assert np.array_equal(loaded.step_onsets_ms, self.recording.step_onsets_ms)
        assert loaded.labels[0] is MotionType.STATIONARY
        assert data['config']['dataset']['steps_per_leg'] == 5

    def test_replay_detects_every_step(self) -> None:
        data = load_walk_dataset(str(self.output))
        config = PdrConfig.from_dict(data['config']['pdr'])
        result = run(data['recording'], config, plot=False)

        assert len(result['steps']) == 10
        assert len(result['path']) == 11

    def test_rectangle_legs_turn_clockwise(self) -> None:
        legs = rectangle_legs(5, 3)

        assert [leg.steps for leg in legs] == [3] * 5
        assert np.allclose([leg.heading_rad for leg in legs],
                           [0.0, np.pi / 2, np.pi, 3 * np.pi / 2, 0.0])

    def test_presets_reference_known_pdr_presets(self) -> None:
        for params in PRESETS.values():
            PdrConfig.from_preset(params['pdr_preset'])


if __name__ == "__main__":
    unittest.main()
