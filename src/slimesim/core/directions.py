"""
Directions: the topology half of the board capability.

The kernel only needs three things from a direction type:
- enumerate every direction other than a given one
- the opposite of a direction
- a distinguished UP value, the synthetic origin of an impact

SquareDirection is the reference set for a square grid of columns.
Hex or other topologies provide their own type with the same surface.
"""

from __future__ import annotations
from enum import Enum
from typing import ClassVar, Iterator, Protocol


class Direction(Protocol):
    """Protocol for direction types usable by the kernel."""

    UP: ClassVar["Direction"]

    def other_directions(self) -> Iterator["Direction"]:
        """Every direction except this one."""
        ...

    def opposite(self) -> "Direction":
        """The direction pointing back the way this one came."""
        ...


class SquareDirection(Enum):
    """Four-neighbour directions on a square board (y grows upward)."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """(dx, dy) step for this direction."""
        return DIRECTION_DELTAS[self]

    def opposite(self) -> SquareDirection:
        return OPPOSITE_DIRECTION[self]

    def other_directions(self) -> Iterator[SquareDirection]:
        for direction in SquareDirection:
            if direction is not self:
                yield direction


DIRECTION_DELTAS = {
    SquareDirection.UP: (0, 1),
    SquareDirection.DOWN: (0, -1),
    SquareDirection.LEFT: (-1, 0),
    SquareDirection.RIGHT: (1, 0),
}

OPPOSITE_DIRECTION = {
    SquareDirection.UP: SquareDirection.DOWN,
    SquareDirection.DOWN: SquareDirection.UP,
    SquareDirection.LEFT: SquareDirection.RIGHT,
    SquareDirection.RIGHT: SquareDirection.LEFT,
}
