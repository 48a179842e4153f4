"""
SlimeBoard: a reference square board for the kernel.

The kernel treats the board as an opaque collaborator. This implementation
exists so the kernel can be driven end to end by tests, demos and the
scheduler. It stores:
- One list of cells per column, bottom to top
- Per cell: state, base height and the render-only scales

Location is (x, i): column index and position within that column's stack.
Propagation moves to the cell at the neighbouring (x, i), attenuated by a
per-axis falloff. Missing cells and cells still in the air block it.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Literal

import numpy as np

from slimesim.core.directions import SquareDirection
from slimesim.core.kernel import JigglyBoard
from slimesim.core.state import (
    SETTLED,
    Falling,
    Jiggling,
    Settled,
    SlimePropsIn,
    SlimePropsOut,
    SlimeState,
)

logger = logging.getLogger(__name__)

Location = tuple[int, int]


@dataclass
class BoardConfig:
    """Configuration for a square slime board."""

    width: int  # Number of columns
    height: int  # Max cells per column
    falloff: float = 0.5  # Impulse kept per vertical hop
    lateral_falloff: float | None = None  # Impulse kept per horizontal hop (defaults to falloff)
    boundary: Literal["absorbing", "periodic"] = "absorbing"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Board dimensions must be positive")
        if self.lateral_falloff is None:
            self.lateral_falloff = self.falloff
        if self.falloff < 0 or self.lateral_falloff < 0:
            raise ValueError("Falloff must be non-negative")
        if self.boundary not in ("absorbing", "periodic"):
            raise ValueError(f"Unknown boundary: {self.boundary!r}")
        if self.falloff >= 1 or self.lateral_falloff >= 1:
            # Propagation only terminates on its own when every hop loses energy
            logger.warning(
                "Board falloff %.3f/%.3f does not attenuate; set max_propagation_depth",
                self.falloff,
                self.lateral_falloff,
            )


@dataclass
class SlimeCell:
    """Storage for one cell."""

    state: SlimeState
    y_bottom: float
    y_scale: float = 1.0
    x_scale: float = 1.0


class SlimeBoard(JigglyBoard[Location, SquareDirection]):
    """Columns of slime cells on a square grid."""

    direction_type = SquareDirection

    def __init__(self, config: BoardConfig):
        self.config = config
        self.columns: list[list[SlimeCell]] = [[] for _ in range(config.width)]

    @property
    def shape(self) -> tuple[int, int]:
        """Return (height, width) board dimensions."""
        return self.config.height, self.config.width

    # ═══════════════════════════════════════════════════════════════
    # POPULATING
    # ═══════════════════════════════════════════════════════════════

    def _column_for_push(self, x: int) -> list[SlimeCell]:
        if not 0 <= x < self.config.width:
            raise ValueError(f"Column {x} out of range for width {self.config.width}")
        column = self.columns[x]
        if len(column) >= self.config.height:
            raise ValueError(f"Column {x} is full ({self.config.height} cells)")
        return column

    def column_top(self, x: int) -> float:
        """Height of the top edge of the highest cell in column x."""
        return max((cell.y_bottom + 1.0 for cell in self.columns[x]), default=0.0)

    def drop(
        self,
        x: int,
        height_above: float = 2.0,
        velocity: float = 0.0,
    ) -> Location:
        """
        Spawn a falling cell above column x.

        Args:
            x: Column index
            height_above: Gap between the column top and the new cell
            velocity: Initial fall velocity

        Returns:
            Location of the new cell
        """
        column = self._column_for_push(x)
        y_bottom = self.column_top(x) + height_above
        column.append(SlimeCell(state=Falling(velocity=velocity), y_bottom=y_bottom))
        return x, len(column) - 1

    def place_settled(self, x: int) -> Location:
        """Put a settled cell directly on top of column x."""
        column = self._column_for_push(x)
        column.append(SlimeCell(state=SETTLED, y_bottom=float(len(column))))
        return x, len(column) - 1

    def cell(self, loc: Location) -> SlimeCell:
        x, i = loc
        return self.columns[x][i]

    def iter_locations(self) -> Iterator[Location]:
        """Iterate over all (x, i) cell locations."""
        for x, column in enumerate(self.columns):
            for i in range(len(column)):
                yield x, i

    # ═══════════════════════════════════════════════════════════════
    # KERNEL CAPABILITIES
    # ═══════════════════════════════════════════════════════════════

    def cols(self) -> Iterator[list[Location]]:
        for x, column in enumerate(self.columns):
            yield [(x, i) for i in range(len(column))]

    def mut_slime_with(
        self,
        loc: Location,
        transform: Callable[[SlimePropsIn], SlimePropsOut],
    ) -> SlimePropsOut:
        cell = self.cell(loc)
        out = transform(SlimePropsIn(state=cell.state, y_bottom=cell.y_bottom))
        cell.state = out.state
        cell.y_bottom = out.y_bottom
        cell.y_scale = out.y_scale
        cell.x_scale = out.x_scale
        return out

    def impulse_jiggle_with(
        self,
        loc: Location,
        transform: Callable[[SlimeState], SlimeState],
    ) -> None:
        cell = self.cell(loc)
        cell.state = transform(cell.state)

    def apply_dir_to_loc(
        self,
        direction: SquareDirection,
        loc: Location,
        impulse: float,
    ) -> tuple[Location, float] | None:
        x, i = loc
        dx, di = direction.delta
        new_x = x + dx
        new_i = i + di

        if self.config.boundary == "periodic":
            new_x %= self.config.width
        elif not 0 <= new_x < self.config.width:
            return None

        column = self.columns[new_x]
        if not 0 <= new_i < len(column):
            return None
        if isinstance(column[new_i].state, Falling):
            return None

        factor = self.config.falloff if dx == 0 else self.config.lateral_falloff
        return (new_x, new_i), impulse * factor

    # ═══════════════════════════════════════════════════════════════
    # DIAGNOSTICS
    # ═══════════════════════════════════════════════════════════════

    def state_counts(self) -> dict[str, int]:
        """Number of cells in each state."""
        counts = {"settled": 0, "falling": 0, "jiggling": 0}
        for column in self.columns:
            for cell in column:
                if isinstance(cell.state, Falling):
                    counts["falling"] += 1
                elif isinstance(cell.state, Jiggling):
                    counts["jiggling"] += 1
                else:
                    counts["settled"] += 1
        return counts

    def is_settled(self) -> bool:
        """True if every cell is Settled."""
        return all(
            isinstance(cell.state, Settled)
            for column in self.columns
            for cell in column
        )

    def _field(self, attr: str) -> np.ndarray:
        ny, nx = self.shape
        field = np.full((ny, nx), np.nan, dtype=np.float64)
        for x, column in enumerate(self.columns):
            for i, cell in enumerate(column):
                field[i, x] = getattr(cell, attr)
        return field

    def y_bottom_field(self) -> np.ndarray:
        """[height, width] base heights, NaN where there is no cell."""
        return self._field("y_bottom")

    def scale_fields(self) -> tuple[np.ndarray, np.ndarray]:
        """([height, width] y_scale, [height, width] x_scale), NaN where there is no cell."""
        return self._field("y_scale"), self._field("x_scale")
