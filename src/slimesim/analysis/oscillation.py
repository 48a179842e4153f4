"""
Jiggle analysis: record a cell's oscillation and characterise its decay.

IMPORTANT: This is NOT seen by the kernel. One-way derivation only.

A landed cell rings like a damped spring, then fades out linearly once
its life drops below the threshold. Recording offset over time and
fitting the peak envelope gives the effective decay rate, which is the
quickest way to tune jiggle_stiff / jiggle_damp against a target feel.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy import signal, stats

from slimesim.core.state import Falling, Jiggling

if TYPE_CHECKING:
    from slimesim.core.board import Location, SlimeBoard
    from slimesim.core.scheduler import PhysicsScheduler


@dataclass
class JiggleTrace:
    """Time series of one cell's jiggle variables."""

    times: np.ndarray
    offsets: np.ndarray
    momenta: np.ndarray
    lives: np.ndarray
    y_scales: np.ndarray
    states: list[str]

    def __len__(self) -> int:
        return len(self.times)


@dataclass
class EnvelopeFit:
    """Exponential fit |offset| ≈ amplitude · exp(-decay_rate · t) over peaks."""

    decay_rate: float
    amplitude: float
    r_squared: float
    n_peaks: int


def record_jiggle_trace(
    scheduler: "PhysicsScheduler",
    loc: "Location",
    n_ticks: int,
) -> JiggleTrace:
    """
    Step the scheduler n_ticks times, sampling one cell after each tick.

    Args:
        scheduler: Scheduler driving a SlimeBoard
        loc: Cell to sample
        n_ticks: Number of ticks to run

    Returns:
        JiggleTrace with one sample per tick. Offset, momentum and life are
        zero while the cell is not jiggling.
    """
    board: "SlimeBoard" = scheduler.board
    times, offsets, momenta, lives, y_scales = [], [], [], [], []
    states: list[str] = []

    for _ in range(n_ticks):
        scheduler.tick()
        cell = board.cell(loc)
        state = cell.state
        times.append(scheduler.time)
        y_scales.append(cell.y_scale)
        if isinstance(state, Jiggling):
            offsets.append(state.offset)
            momenta.append(state.momentum)
            lives.append(state.life)
            states.append("jiggling")
        else:
            offsets.append(0.0)
            momenta.append(0.0)
            lives.append(0.0)
            states.append("falling" if isinstance(state, Falling) else "settled")

    return JiggleTrace(
        times=np.asarray(times, dtype=np.float64),
        offsets=np.asarray(offsets, dtype=np.float64),
        momenta=np.asarray(momenta, dtype=np.float64),
        lives=np.asarray(lives, dtype=np.float64),
        y_scales=np.asarray(y_scales, dtype=np.float64),
        states=states,
    )


def count_oscillations(offsets: np.ndarray, min_height: float = 0.0) -> int:
    """Number of squash peaks (positive offset maxima) above min_height."""
    peaks, _ = signal.find_peaks(np.asarray(offsets, dtype=np.float64), height=min_height)
    return len(peaks)


def fit_decay_envelope(
    times: np.ndarray,
    offsets: np.ndarray,
    min_peaks: int = 3,
) -> EnvelopeFit:
    """
    Fit an exponential envelope to the peaks of |offset|.

    Linear regression of log(peak amplitude) on time.

    Raises:
        ValueError: if fewer than min_peaks peaks are found
    """
    times = np.asarray(times, dtype=np.float64)
    amplitude = np.abs(np.asarray(offsets, dtype=np.float64))

    peaks, _ = signal.find_peaks(amplitude)
    peaks = peaks[amplitude[peaks] > 0]
    if len(peaks) < min_peaks:
        raise ValueError(f"Need at least {min_peaks} peaks to fit, found {len(peaks)}")

    slope, intercept, r_value, _, _ = stats.linregress(times[peaks], np.log(amplitude[peaks]))

    return EnvelopeFit(
        decay_rate=float(-slope),
        amplitude=float(np.exp(intercept)),
        r_squared=float(r_value ** 2),
        n_peaks=len(peaks),
    )
