"""Smoke tests for plotting."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from slimesim.analysis.oscillation import JiggleTrace
from slimesim.core.board import BoardConfig, SlimeBoard
from slimesim.viz.board import plot_board, plot_jiggle_trace, save_figure


def test_plot_board_draws_every_cell(tmp_path):
    board = SlimeBoard(BoardConfig(width=3, height=4))
    board.place_settled(0)
    board.place_settled(0)
    board.drop(2, height_above=3.0)

    fig, ax = plot_board(board)

    assert len(ax.patches) == 3
    assert ax.get_xlim() == (0.0, 3.0)

    path = tmp_path / "board.png"
    save_figure(fig, path)
    assert path.exists()
    plt.close(fig)


def test_plot_jiggle_trace():
    times = np.linspace(0.0, 1.0, 10)
    trace = JiggleTrace(
        times=times,
        offsets=np.sin(times),
        momenta=np.cos(times),
        lives=1.0 - times,
        y_scales=1.0 - np.sin(times),
        states=["jiggling"] * 10,
    )

    fig, ax = plot_jiggle_trace(trace)

    assert len(ax.lines) == 3  # offset, zero line, life
    plt.close(fig)
