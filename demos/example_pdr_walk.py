"""
Example: Streaming Pedestrian Dead Reckoning on a simulated walk

Replays accelerometer and rotation-vector samples through PdrPipeline,
sample by sample, exactly as a phone's sensor callbacks would, and plots
the resulting path. The streaming step detector is cross-checked against
the offline SciPy peak detector.

Can run with:
    - Inline data (default): python -m demos.example_pdr_walk
    - Pre-generated dataset: python -m demos.example_pdr_walk --data data/sim/pdr_walk
      (see scripts/generate_pdr_walk_dataset.py)
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from pdr_core.activity.types import MotionType
from pdr_core.config import PRESETS, PdrConfig
from pdr_core.pipeline import PdrPipeline
from pdr_core.sensors.offline import detect_steps_offline, match_steps, step_times_ms
from pdr_core.sim import WalkRecording, square_walk


def load_walk_dataset(data_dir: str) -> Dict:
    """Load a dataset written by scripts/generate_pdr_walk_dataset.py."""
    path = Path(data_dir)
    with open(path / 'labels.txt') as f:
        labels = [MotionType(line.strip()) for line in f if line.strip()]
    recording = WalkRecording(
        timestamps_ms=np.loadtxt(path / 'time_ms.txt', dtype=np.int64),
        accel=np.loadtxt(path / 'accel.txt'),
        rotation_vectors=np.loadtxt(path / 'rotation_vector.txt'),
        labels=labels,
        step_onsets_ms=np.atleast_1d(np.loadtxt(path / 'step_onsets_ms.txt', dtype=np.int64)),
        step_headings=np.atleast_1d(np.loadtxt(path / 'step_headings.txt')),
    )
    data = {'recording': recording}
    config_path = path / 'config.json'
    if config_path.exists():
        with open(config_path) as f:
            data['config'] = json.load(f)
    return data


def replay(recording: WalkRecording, config: PdrConfig) -> Dict:
    """Feed a recording through a fresh pipeline and collect its outputs."""
    pipeline = PdrPipeline(config, origin=(0.0, 0.0))
    n_events = 2 * len(recording.timestamps_ms)
    for kind, sample in tqdm(recording.events(), total=n_events, desc="Replaying sensors", unit="evt"):
        if kind == 'rotation_vector':
            pipeline.on_rotation_vector(sample)
        else:
            pipeline.on_accelerometer(sample)

    steps = pipeline.step_events.drain()
    points = pipeline.path_points.drain()
    return {
        'steps': steps,
        'path': np.array([p.as_tuple() for p in points]),
        'cadence': pipeline.cadence.get(),
    }


def plot_results(recording: WalkRecording, result: Dict, offline_idx: np.ndarray, figs_dir: Path):
    """Path and step timing figures."""
    t_s = (recording.timestamps_ms - recording.timestamps_ms[0]) / 1000.0
    mag = np.linalg.norm(recording.accel, axis=1)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    path = result['path']
    ax1.plot(path[:, 0], path[:, 1], 'b.-', label='PDR path')
    ax1.plot(path[0, 0], path[0, 1], 'go', markersize=10, label='Origin')
    ax1.set_xlabel('x (path units)')
    ax1.set_ylabel('y (path units, down)')
    ax1.invert_yaxis()
    ax1.set_aspect('equal')
    ax1.grid(True, alpha=0.3)
    ax1.legend()
    ax1.set_title('Integrated path (screen coordinates)')

    ax2.plot(t_s, mag, 'k-', linewidth=0.8, label='|a|')
    step_t = [(e.timestamp_ms - recording.timestamps_ms[0]) / 1000.0 for e in result['steps']]
    ax2.plot(step_t, np.full(len(step_t), mag.max() + 0.5), 'rv', label='Streaming steps')
    ax2.plot(t_s[offline_idx], mag[offline_idx], 'g^', label='Offline peaks')
    ax2.set_xlabel('Time (s)')
    ax2.set_ylabel('Acceleration magnitude (m/s²)')
    ax2.grid(True, alpha=0.3)
    ax2.legend()
    ax2.set_title('Step detection')

    plt.tight_layout()
    output_file = figs_dir / 'pdr_walk.svg'
    fig.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"  [OK] Saved: {output_file}")
    plt.close('all')


def run(recording: WalkRecording, config: PdrConfig, plot: bool = True) -> Dict:
    """Replay, cross-check and report."""
    print(f"  Samples:        {len(recording.timestamps_ms)}")
    print(f"  Scripted steps: {recording.n_steps}")
    print(f"  Stride model:   {config.stride_model.value}")

    result = replay(recording, config)
    steps = result['steps']
    print(f"\n  Streaming steps detected: {len(steps)}")
    if steps:
        strides = np.array([e.stride_length_cm for e in steps])
        print(f"  Stride: mean {strides.mean():.1f} cm, min {strides.min():.1f}, max {strides.max():.1f}")
    if result['cadence'] is not None:
        print(f"  Average cadence (last {config.cadence_average_size}): "
              f"{result['cadence'].average_cadence_hz:.2f} Hz")

    dt = 1.0 / recording.sample_rate_hz
    offline_idx, _ = detect_steps_offline(recording.accel, dt, min_peak_height=2.0)
    matched, missed, extra = match_steps(
        step_times_ms(offline_idx, recording.timestamps_ms),
        np.array([e.timestamp_ms for e in steps]),
        tolerance_ms=200,
    )
    print(f"\n  Offline peaks: {len(offline_idx)}")
    print(f"  Streaming vs offline: {matched} matched, {missed} missed, {extra} extra")

    if plot and len(result['path']):
        figs_dir = Path(__file__).parent / 'figs'
        figs_dir.mkdir(exist_ok=True)
        plot_results(recording, result, offline_idx, figs_dir)
    return result


def main():
    """Main execution with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Streaming PDR on a simulated walk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Available presets: " + ", ".join(PRESETS.keys()),
    )
    parser.add_argument("--data", type=str, default=None, help="Dataset directory")
    parser.add_argument("--preset", type=str, default=None, choices=PRESETS.keys(),
                        help="PdrConfig preset (default: dataset config or 'baseline')")
    parser.add_argument("--config", type=str, default=None, help="PdrConfig JSON file")
    parser.add_argument("--height", type=float, default=None, help="User height in cm")
    parser.add_argument("--steps-per-side", type=int, default=10,
                        help="Steps per side of the inline square walk (default: 10)")
    parser.add_argument("--noise", type=float, default=0.2,
                        help="Inline walk magnitude noise in m/s^2 (default: 0.2)")
    parser.add_argument("--seed", type=int, default=7, help="Random seed (default: 7)")
    parser.add_argument("--no-plot", action="store_true", help="Skip figures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    print("\n" + "=" * 70)
    print("Streaming Pedestrian Dead Reckoning")
    print("=" * 70)

    config: Optional[PdrConfig] = None
    if args.data:
        data = load_walk_dataset(args.data)
        recording = data['recording']
        if 'config' in data and args.preset is None and args.config is None:
            config = PdrConfig.from_dict(data['config']['pdr'])
        print(f"Dataset: {args.data}")
    else:
        recording = square_walk(
            args.steps_per_side,
            noise_std=args.noise,
            rng=np.random.default_rng(args.seed),
        )
        print("Inline square walk")

    if args.config:
        config = PdrConfig.from_json(args.config)
    elif config is None:
        config = PdrConfig.from_preset(args.preset or 'baseline')
    if args.height is not None:
        config = config.replace(height_cm=args.height)

    run(recording, config, plot=not args.no_plot)
    print("=" * 70)


if __name__ == "__main__":
    main()
