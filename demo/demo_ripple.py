#!/usr/bin/env python3
"""
Demo: Jiggle Ripple and Decay

Strikes the middle of a settled pile and records how the struck cell
rings down. The envelope fit gives the effective decay rate for the
current jiggle_stiff / jiggle_damp, which is what you tune for feel.

Output: output/demo_ripple/trace.png
"""

from pathlib import Path

import matplotlib.pyplot as plt

from slimesim.analysis import count_oscillations, fit_decay_envelope, record_jiggle_trace
from slimesim.core import (
    BoardConfig,
    JigglePropagation,
    PhysicsProperties,
    PhysicsScheduler,
    SlimeBoard,
    SquareDirection,
)
from slimesim.viz import plot_board, plot_jiggle_trace


def main():
    print("=" * 60)
    print("  JIGGLE RIPPLE DEMONSTRATION")
    print("=" * 60)

    board = SlimeBoard(BoardConfig(width=7, height=4, falloff=0.6, lateral_falloff=0.6))
    for x in range(board.config.width):
        for _ in range(3):
            board.place_settled(x)

    physprop = PhysicsProperties(jiggle_damp=0.97)
    center = (3, 2)

    print("\n1. Striking the top of the middle column...")
    board.propagate_jiggle(
        JigglePropagation(at=center, impulse=3.0, came_from=SquareDirection.UP),
        physprop,
    )
    print(f"   Cells set jiggling: {board.state_counts()['jiggling']}")

    scheduler = PhysicsScheduler(board=board, physprop=physprop)

    print("\n2. Recording the struck cell...")
    trace = record_jiggle_trace(scheduler, center, n_ticks=90)
    print(f"   Squash peaks: {count_oscillations(trace.offsets)}")
    try:
        fit = fit_decay_envelope(trace.times, trace.offsets)
        print(f"   Decay rate: {fit.decay_rate:.2f} /s (R² = {fit.r_squared:.3f}, {fit.n_peaks} peaks)")
    except ValueError as err:
        print(f"   No envelope fit: {err}")

    fig, (ax_board, ax_trace) = plt.subplots(1, 2, figsize=(14, 5))
    plot_board(board, title=f"tick {scheduler.current_tick}", ax=ax_board, y_max=5.0)
    plot_jiggle_trace(trace, title=f"Cell {center}", ax=ax_trace)
    fig.tight_layout()

    output_dir = Path("output/demo_ripple")
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "trace.png"
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\n   Saved: {output_path}")


if __name__ == "__main__":
    main()
