"""
Example: Stairwell polygons from unordered stair lines

Builds a small floor document (walls, two stairwells whose outline edges
are shuffled and randomly reversed, entrances), loads it with the
floor-plan loader and draws the traced polygons.

Also shows the effect of endpoint matching precision: one stairwell has
endpoints that differ by float noise, which only closes when endpoints are
matched on rounded coordinates.

Usage:
    python -m demos.example_stairwells
    python -m demos.example_stairwells --floor path/to/floor.json --precision 3
"""

import argparse
import json
import logging
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from pdr_core.floorplan import FloorPlan, build_polygons, load_floor_plan


def _outline(points, polygon_id: int, floors, rng: np.random.Generator, jitter: float = 0.0) -> List[Dict]:
    """Stair-line records for a closed outline, shuffled and randomly reversed."""
    records = []
    n = len(points)
    for i in range(n):
        (x1, y1), (x2, y2) = points[i], points[(i + 1) % n]
        if jitter:
            x2, y2 = x2 + jitter, y2 - jitter
        if rng.random() < 0.5:
            x1, y1, x2, y2 = x2, y2, x1, y1
        records.append({
            'x1': x1, 'y1': y1, 'x2': x2, 'y2': y2,
            'type': 'stairs',
            'stair_polygon_id': polygon_id,
            'floors_connected': floors,
        })
    order = rng.permutation(len(records))
    return [records[i] for i in order]


def example_floor_document(seed: int = 3) -> Dict:
    """A 400 x 300 floor with two stairwells and a few entrances."""
    rng = np.random.default_rng(seed)
    walls = [
        {'x1': 0, 'y1': 0, 'x2': 400, 'y2': 0},
        {'x1': 400, 'y1': 0, 'x2': 400, 'y2': 300},
        {'x1': 400, 'y1': 300, 'x2': 0, 'y2': 300},
        {'x1': 0, 'y1': 300, 'x2': 0, 'y2': 0},
        {'x1': 200, 'y1': 0, 'x2': 200, 'y2': 120},
    ]
    stair_a = [(20.0, 20.0), (90.0, 20.0), (90.0, 60.0), (60.0, 90.0), (20.0, 90.0)]
    stair_b = [(300.0, 200.0), (380.0, 200.0), (380.0, 280.0), (300.0, 280.0)]
    stairs = _outline(stair_a, 1, [1, 2], rng) + _outline(stair_b, 2, [1, 2, 3], rng, jitter=1e-7)
    entrances = [
        {'id': 1, 'x': 90.0, 'y': 40.0, 'stairs': True},
        {'id': 2, 'x': 300.0, 'y': 240.0, 'stairs': True},
        {'id': 3, 'x': 200.0, 'y': 200.0, 'stairs': False},
        {'id': 4, 'x': 'n/a', 'y': 10.0},  # malformed, skipped by the loader
    ]
    return {'walls': walls, 'stairs': stairs, 'entrances': entrances}


def plot_floor(plan: FloorPlan, figs_dir: Path, name: str = 'stairwells.svg') -> None:
    fig, ax = plt.subplots(figsize=(10, 8))
    for w in plan.walls:
        ax.plot([w.x1, w.x2], [w.y1, w.y2], 'k-', linewidth=2)
    for poly in plan.stairwells:
        pts = np.array(poly.points)
        if len(pts) == 0:
            continue
        style = dict(alpha=0.4) if poly.closed else dict(alpha=0.1, hatch='//')
        ax.fill(pts[:, 0], pts[:, 1], **style,
                label=f"stairwell {poly.group_id} ({'closed' if poly.closed else 'open'})")
    for e in plan.entrances:
        ax.plot(e.x, e.y, 'rs' if e.is_stair_link else 'bo')
        ax.annotate(str(e.id), (e.x, e.y), textcoords='offset points', xytext=(5, 5))
    ax.invert_yaxis()
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    ax.legend()
    ax.set_title('Floor plan')
    output_file = figs_dir / name
    fig.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"  [OK] Saved: {output_file}")
    plt.close('all')


def main():
    """Main execution with CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Stairwell polygon tracing")
    parser.add_argument("--floor", type=str, default=None, help="Floor document JSON")
    parser.add_argument("--precision", type=int, default=None,
                        help="Decimal digits for endpoint matching (default: exact)")
    parser.add_argument("--seed", type=int, default=3, help="Shuffle seed (default: 3)")
    parser.add_argument("--no-plot", action="store_true", help="Skip figures")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("\n" + "=" * 70)
    print("Stairwell polygons from unordered segments")
    print("=" * 70)

    floor_path: Optional[Path] = Path(args.floor) if args.floor else None
    if floor_path is None:
        tmp_dir = Path(tempfile.mkdtemp())
        floor_path = tmp_dir / 'floor.json'
        with open(floor_path, 'w') as f:
            json.dump(example_floor_document(args.seed), f, indent=2)
        print(f"Example floor written to {floor_path}")

    plan = load_floor_plan(floor_path, precision=args.precision)
    print(f"\n  Walls:      {len(plan.walls)}")
    print(f"  Entrances:  {len(plan.entrances)}")
    for poly in plan.stairwells:
        print(f"  Stairwell {poly.group_id}: {len(poly)} points, "
              f"{'closed' if poly.closed else 'OPEN'}, floors {list(poly.connected_floors)}")

    if args.precision is None:
        rounded = build_polygons(plan.stair_lines, precision=3)
        print("\n  With precision=3:")
        for poly in rounded:
            print(f"  Stairwell {poly.group_id}: {len(poly)} points, "
                  f"{'closed' if poly.closed else 'OPEN'}")

    if not args.no_plot:
        figs_dir = Path(__file__).parent / 'figs'
        figs_dir.mkdir(exist_ok=True)
        plot_floor(plan, figs_dir)
    print("=" * 70)


if __name__ == "__main__":
    main()
