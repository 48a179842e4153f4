"""
Slime cell state and the views exchanged with a board.

A cell is always in exactly one of three states:
- Settled: resting on the stack, no motion
- Falling: free fall under gravity
- Jiggling: damped spring oscillation after an impact, with a life
  that counts down from 1 to 0

States are immutable values. Every update produces a new one, so the
board only ever has to store a single object per cell.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

Loc = TypeVar("Loc")
Dir = TypeVar("Dir")


@dataclass(frozen=True)
class Settled:
    """Cell at rest on the stack."""


@dataclass(frozen=True)
class Falling:
    """Cell in free fall, not yet landed."""

    velocity: float


@dataclass(frozen=True)
class Jiggling:
    """Cell oscillating around its rest height after an impact."""

    momentum: float
    offset: float
    life: float


SlimeState = Union[Settled, Falling, Jiggling]

SETTLED = Settled()


@dataclass(frozen=True)
class SlimePropsIn:
    """Read view of a cell handed to the per-cell update."""

    state: SlimeState
    y_bottom: float


@dataclass(frozen=True)
class SlimePropsOut:
    """
    Write-back produced by the per-cell update.

    ``y_scale`` and ``x_scale`` are render-only squash/stretch factors and
    never feed back into physics. ``impact`` holds the impulse emitted when
    a falling cell lands this update, and is None otherwise.
    """

    state: SlimeState
    y_bottom: float
    y_scale: float = 1.0
    x_scale: float = 1.0
    impact: float | None = None

    @property
    def stack_height(self) -> float:
        """Vertical space this cell takes up in its column's stack."""
        if isinstance(self.state, Falling):
            return 0.0  # Floats above the stack
        if isinstance(self.state, Jiggling):
            return self.y_scale
        return 1.0


@dataclass(frozen=True)
class JigglePropagation(Generic[Loc, Dir]):
    """An impulse arriving at a location, and the direction it came from."""

    at: Loc
    impulse: float
    came_from: Dir
