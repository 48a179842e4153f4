"""
Visualization utilities.

- Board snapshots with squash/stretch
- Jiggle traces over time
"""

from slimesim.viz.board import (
    plot_board,
    plot_jiggle_trace,
    save_figure,
)

__all__ = [
    "plot_board",
    "plot_jiggle_trace",
    "save_figure",
]
