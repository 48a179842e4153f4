#!/usr/bin/env python3
"""
Demo: Slime Pile

Drops a handful of slimes onto a small board and lets them settle:

1. Each slime falls, stretching as it speeds up
2. Landing squashes it and sends an impulse through the pile
3. Neighbours start jiggling, attenuated at every hop
4. Everything fades out and settles

Output: output/demo_drop/frames.png
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from slimesim.core import BoardConfig, PhysicsScheduler, SchedulerConfig, SlimeBoard, load_properties
from slimesim.viz import plot_board


def main():
    print("=" * 60)
    print("  SLIME PILE DEMONSTRATION")
    print("=" * 60)

    rng = np.random.default_rng(seed=7)
    board = SlimeBoard(BoardConfig(width=6, height=6, falloff=0.6, lateral_falloff=0.4))
    physprop = load_properties(Path(__file__).resolve().parent.parent / "configs" / "slime.yaml")

    print("\n1. Building the pile...")
    for x in range(board.config.width):
        for _ in range(int(rng.integers(0, 3))):
            board.place_settled(x)
    for _ in range(8):
        x = int(rng.integers(0, board.config.width))
        if len(board.columns[x]) < board.config.height:
            board.drop(x, height_above=float(rng.uniform(1.0, 4.0)))
    print(f"   Cells: {board.state_counts()}")

    scheduler = PhysicsScheduler(board=board, physprop=physprop, config=SchedulerConfig(dt=1 / 60))

    print("\n2. Simulating...")
    snapshot_ticks = [0, 15, 30, 60]
    fig, axes = plt.subplots(1, len(snapshot_ticks) + 1, figsize=(18, 5))
    plot_board(board, title="tick 0", ax=axes[0], y_max=12.0)

    for ax, target in zip(axes[1:-1], snapshot_ticks[1:]):
        scheduler.run(target - scheduler.current_tick)
        plot_board(board, title=f"tick {target}", ax=ax, y_max=12.0)
        print(f"   tick {target:4d}: {board.state_counts()}")

    result = scheduler.run_until_settled(max_ticks=2000)
    plot_board(board, title=f"settled (tick {scheduler.current_tick})", ax=axes[-1], y_max=12.0)
    print(f"   Settled: {result['settled']} at tick {result['settled_at']}")

    fig.suptitle("Slime Pile", fontsize=14, fontweight="bold")
    fig.tight_layout()

    output_dir = Path("output/demo_drop")
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "frames.png"
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\n   Saved: {output_path}")


if __name__ == "__main__":
    main()
