"""Unit tests for JigglyBoard.propagate_jiggle."""

import pytest

from slimesim.core.board import BoardConfig, SlimeBoard, SlimeCell
from slimesim.core.directions import SquareDirection
from slimesim.core.kernel import JigglyBoard
from slimesim.core.properties import PhysicsProperties
from slimesim.core.state import SETTLED, Falling, JigglePropagation, Jiggling, Settled

UP = SquareDirection.UP


def settled_board(width: int, cells_per_column: int, **kwargs) -> SlimeBoard:
    board = SlimeBoard(BoardConfig(width=width, height=max(cells_per_column, 1), **kwargs))
    for x in range(width):
        for _ in range(cells_per_column):
            board.place_settled(x)
    return board


class RecordingBoard(JigglyBoard):
    """A one-dimensional line of cells that records every capability call."""

    direction_type = SquareDirection

    def __init__(self, n: int, falloff: float):
        self.states = [SETTLED] * n
        self.falloff = falloff
        self.impulsed: list[int] = []

    def cols(self):
        return [[i] for i in range(len(self.states))]

    def mut_slime_with(self, loc, transform):
        raise AssertionError("propagation must not run the full update")

    def impulse_jiggle_with(self, loc, transform):
        self.impulsed.append(loc)
        self.states[loc] = transform(self.states[loc])

    def apply_dir_to_loc(self, direction, loc, impulse):
        step = {SquareDirection.LEFT: -1, SquareDirection.RIGHT: 1}.get(direction)
        if step is None or not 0 <= loc + step < len(self.states):
            return None
        return loc + step, impulse * self.falloff


class TestFloor:
    """The min_impactable floor ends propagation."""

    def test_below_floor_is_noop(self, physprop):
        board = settled_board(width=3, cells_per_column=3)
        impulse = physprop.min_impactable - 1e-9

        board.propagate_jiggle(JigglePropagation(at=(1, 2), impulse=impulse, came_from=UP), physprop)

        assert all(board.cell(loc).state is SETTLED for loc in board.iter_locations())

    def test_at_floor_applies(self, physprop):
        board = settled_board(width=1, cells_per_column=1)
        impulse = physprop.min_impactable

        board.propagate_jiggle(JigglePropagation(at=(0, 0), impulse=impulse, came_from=UP), physprop)

        assert board.cell((0, 0)).state == Jiggling(momentum=impulse, offset=0.0, life=1.0)

    def test_chain_stops_at_floor(self):
        physprop = PhysicsProperties(min_impactable=0.125)
        board = settled_board(width=1, cells_per_column=5, falloff=0.5)

        board.propagate_jiggle(JigglePropagation(at=(0, 4), impulse=1.0, came_from=UP), physprop)

        momenta = [board.cell((0, i)).state for i in range(5)]
        assert momenta[0] is SETTLED
        assert [s.momentum for s in momenta[1:]] == [0.125, 0.25, 0.5, 1.0]


class TestFanOut:
    """Impulses fan out to every direction but the one they came from."""

    def test_spreads_sideways(self, physprop):
        board = settled_board(width=3, cells_per_column=1, falloff=0.5)

        board.propagate_jiggle(JigglePropagation(at=(1, 0), impulse=1.0, came_from=UP), physprop)

        assert board.cell((1, 0)).state == Jiggling(momentum=1.0, offset=0.0, life=1.0)
        assert board.cell((0, 0)).state == Jiggling(momentum=0.5, offset=0.0, life=1.0)
        assert board.cell((2, 0)).state == Jiggling(momentum=0.5, offset=0.0, life=1.0)

    def test_does_not_go_back_the_way_it_came(self, physprop):
        board = settled_board(width=1, cells_per_column=3, falloff=0.5)

        # Arriving from below: only the cell and those above it are hit
        board.propagate_jiggle(
            JigglePropagation(at=(0, 1), impulse=1.0, came_from=SquareDirection.DOWN),
            physprop,
        )

        assert board.cell((0, 0)).state is SETTLED
        assert board.cell((0, 1)).state.momentum == 1.0
        assert board.cell((0, 2)).state.momentum == 0.5

    def test_merges_into_existing_jiggle(self, physprop):
        board = settled_board(width=1, cells_per_column=1)
        board.columns[0][0] = SlimeCell(Jiggling(momentum=0.5, offset=0.3, life=0.2), 0.0)

        board.propagate_jiggle(JigglePropagation(at=(0, 0), impulse=0.25, came_from=UP), physprop)

        assert board.cell((0, 0)).state == Jiggling(momentum=0.75, offset=0.3, life=1.0)

    def test_falling_neighbour_blocks(self, physprop):
        board = settled_board(width=2, cells_per_column=1, falloff=0.5)
        board.columns[1][0] = SlimeCell(Falling(velocity=1.0), 5.0)

        board.propagate_jiggle(JigglePropagation(at=(0, 0), impulse=1.0, came_from=UP), physprop)

        assert board.cell((1, 0)).state == Falling(velocity=1.0)

    def test_depth_first_order(self, physprop):
        board = RecordingBoard(n=5, falloff=0.5)

        board.propagate_jiggle(JigglePropagation(at=2, impulse=1.0, came_from=UP), physprop)

        # LEFT branch is exhausted before the RIGHT branch starts
        assert board.impulsed == [2, 1, 0, 3, 4]
        assert [s.momentum for s in board.states] == [0.25, 0.5, 1.0, 0.5, 0.25]

    def test_deep_chain_does_not_recurse(self):
        physprop = PhysicsProperties(min_impactable=1e-6)
        board = RecordingBoard(n=5000, falloff=0.999)

        board.propagate_jiggle(
            JigglePropagation(at=0, impulse=1.0, came_from=SquareDirection.LEFT),
            physprop,
        )

        assert len(board.impulsed) == 5000
        assert isinstance(board.states[-1], Jiggling)
        assert board.states[-1].momentum == pytest.approx(0.999 ** 4999)


class TestDepthCap:
    """max_propagation_depth bounds non-attenuating boards."""

    def test_periodic_lossless_ring_terminates(self):
        physprop = PhysicsProperties(max_propagation_depth=3)
        board = settled_board(
            width=4,
            cells_per_column=1,
            falloff=0.5,
            lateral_falloff=1.0,
            boundary="periodic",
        )

        board.propagate_jiggle(JigglePropagation(at=(0, 0), impulse=1.0, came_from=UP), physprop)

        momenta = {x: board.cell((x, 0)).state.momentum for x in range(4)}
        assert momenta == {0: 1.0, 1: 2.0, 2: 2.0, 3: 2.0}

    def test_zero_depth_only_hits_origin(self):
        physprop = PhysicsProperties(max_propagation_depth=0)
        board = settled_board(width=3, cells_per_column=1, falloff=0.5)

        board.propagate_jiggle(JigglePropagation(at=(1, 0), impulse=1.0, came_from=UP), physprop)

        assert isinstance(board.cell((1, 0)).state, Jiggling)
        assert isinstance(board.cell((0, 0)).state, Settled)
        assert isinstance(board.cell((2, 0)).state, Settled)
