"""
Board and jiggle-trace plots.

Cells are drawn as ellipses sized by their squash/stretch scales:
a falling cell is tall and thin, a squashed cell short and wide.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Ellipse

from slimesim.core.state import Falling, Jiggling

if TYPE_CHECKING:
    from slimesim.analysis.oscillation import JiggleTrace
    from slimesim.core.board import SlimeBoard


STATE_COLORS = {
    "settled": (0.206, 0.718, 0.472),   # Green-teal
    "falling": (0.192, 0.407, 0.556),   # Blue
    "jiggling": (0.969, 0.588, 0.275),  # Orange
}

CELL_WIDTH = 0.9


def _state_name(state) -> str:
    if isinstance(state, Falling):
        return "falling"
    if isinstance(state, Jiggling):
        return "jiggling"
    return "settled"


def plot_board(
    board: "SlimeBoard",
    title: str = "Slime Board",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (6, 8),
    y_max: float | None = None,
) -> tuple[Figure, Axes]:
    """
    Draw every cell of a board at its current height and scale.

    Args:
        board: Board to draw
        title: Plot title
        ax: Existing axes (creates new if None)
        figsize: Figure size when creating new axes
        y_max: Upper y limit (defaults to the highest cell top + 1)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    top = 0.0
    for x, column in enumerate(board.columns):
        for cell in column:
            height = cell.y_scale
            width = CELL_WIDTH * cell.x_scale
            ax.add_patch(
                Ellipse(
                    (x + 0.5, cell.y_bottom + height / 2),
                    width=width,
                    height=height,
                    facecolor=STATE_COLORS[_state_name(cell.state)],
                    edgecolor="black",
                    linewidth=0.8,
                )
            )
            top = max(top, cell.y_bottom + height)

    ax.set_xlim(0, board.config.width)
    ax.set_ylim(0, y_max if y_max is not None else top + 1.0)
    ax.set_aspect("equal")
    ax.set_xlabel("column")
    ax.set_ylabel("height")
    ax.set_title(title)

    return fig, ax


def plot_jiggle_trace(
    trace: "JiggleTrace",
    title: str = "Jiggle Trace",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (10, 4),
    show_life: bool = True,
) -> tuple[Figure, Axes]:
    """
    Plot offset (and optionally life) of a recorded cell over time.

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.plot(trace.times, trace.offsets, color=STATE_COLORS["jiggling"], label="offset")
    ax.axhline(0.0, color="gray", linewidth=0.5)
    if show_life:
        ax.plot(trace.times, trace.lives, color=STATE_COLORS["falling"], linestyle="--", label="life")

    ax.set_xlabel("time")
    ax.set_ylabel("offset")
    ax.set_title(title)
    ax.legend()

    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
