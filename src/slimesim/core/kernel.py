"""
The slime physics kernel.

Two pure per-cell rules and one board base class:
- update_slime: advance one cell by dt (falling -> impact -> jiggle -> settle)
- impulse_slime: merge an incoming impulse into a cell's state
- JigglyBoard: run_physics / propagate_jiggle on top of four board capabilities

The kernel stores no cell data. Every read and write goes through the
board, which calls the transform it is given with the cell's current value
and stores whatever comes back.

A tick is two passes:
1. Update every cell, column by column, bottom to top, queueing impacts
2. Propagate each queued impact through the board

Keeping the passes separate means a propagation can never touch a cell the
update pass has not reached yet, so results do not depend on column order.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, ClassVar, Generic, Iterable, TypeVar

from slimesim.core.properties import PhysicsProperties
from slimesim.core.state import (
    SETTLED,
    Falling,
    JigglePropagation,
    Jiggling,
    Settled,
    SlimePropsIn,
    SlimePropsOut,
    SlimeState,
)

logger = logging.getLogger(__name__)

Loc = TypeVar("Loc")
Dir = TypeVar("Dir")

# Velocity at which a falling cell is stretched to twice its height
STRETCH_VELOCITY = 9.0


def update_slime(
    props_in: SlimePropsIn,
    dt: float,
    physprop: PhysicsProperties,
    jiggle_offset: float,
) -> SlimePropsOut:
    """
    Advance a single cell by dt.

    Args:
        props_in: The cell's current state and base height
        dt: Time step
        physprop: Physics constants
        jiggle_offset: Height of the column's stack below this cell

    Returns:
        New state, base height and squash/stretch scales. ``impact`` is set
        when a falling cell lands on the stack during this update.
    """
    state = props_in.state

    if isinstance(state, Falling):
        velocity = state.velocity + dt * physprop.gravity
        y_bottom = props_in.y_bottom - velocity * dt

        # Never pass through the stack, even if we started the tick inside it
        if y_bottom <= jiggle_offset or props_in.y_bottom <= jiggle_offset:
            return SlimePropsOut(
                state=Jiggling(momentum=0.0, offset=0.0, life=1.0),
                y_bottom=jiggle_offset,
                impact=physprop.velocity_to_impact * velocity,
            )

        stretch = min(max(1.0 + velocity / STRETCH_VELOCITY, 1.0), 2.0)
        return SlimePropsOut(
            state=Falling(velocity=velocity),
            y_bottom=y_bottom,
            y_scale=stretch,
            x_scale=1.0 / stretch,
        )

    if isinstance(state, Jiggling):
        return _update_jiggling(state, dt, physprop, jiggle_offset)

    return SlimePropsOut(state=state, y_bottom=jiggle_offset)


def _update_jiggling(
    state: Jiggling,
    dt: float,
    physprop: PhysicsProperties,
    jiggle_offset: float,
) -> SlimePropsOut:
    life = state.life
    momentum = (state.momentum - physprop.jiggle_stiff * state.offset * dt) * physprop.jiggle_damp
    offset = state.offset + momentum * dt

    if life < physprop.jiggle_life_threshold:
        fade = life * physprop.jiggle_life_threshold_inverse
        offset *= fade
        momentum *= fade

    if life <= 0.0 or (
        abs(offset) < physprop.jiggle_offset_epsilon
        and abs(momentum) < physprop.jiggle_momentum_epsilon
    ):
        return SlimePropsOut(state=SETTLED, y_bottom=jiggle_offset)

    y_scale = max(1.0 - offset, 0.0)
    return SlimePropsOut(
        state=Jiggling(
            momentum=momentum,
            offset=offset,
            life=life - physprop.jiggle_life_decrease_rate * dt,
        ),
        y_bottom=jiggle_offset,
        y_scale=y_scale,
        x_scale=1.0 / max(y_scale, 0.5),
    )


def impulse_slime(
    state: SlimeState,
    impulse: float,
    physprop: PhysicsProperties,
) -> SlimeState:
    """
    Merge an impulse into a cell's state.

    Settled cells start a fresh jiggle, jiggling cells gain momentum and a
    full life. A falling cell should not normally be hit, but if it is, its
    own fall velocity is folded into the new jiggle.
    """
    if isinstance(state, Jiggling):
        return Jiggling(momentum=state.momentum + impulse, offset=state.offset, life=1.0)
    if isinstance(state, Falling):
        return Jiggling(
            momentum=impulse + state.velocity * physprop.velocity_to_impact,
            offset=0.0,
            life=1.0,
        )
    return Jiggling(momentum=impulse, offset=0.0, life=1.0)


class JigglyBoard(ABC, Generic[Loc, Dir]):
    """
    Base class for boards the kernel can drive.

    Subclasses own all cell storage and topology. They provide:
    - direction_type: a Direction type exposing UP, opposite(), other_directions()
    - cols(): columns of locations, each ordered bottom to top
    - mut_slime_with(): full read-modify-write of one cell
    - impulse_jiggle_with(): state-only read-modify-write of one cell
    - apply_dir_to_loc(): adjacency, falloff and blocking in one call

    and inherit run_physics() and propagate_jiggle().
    """

    direction_type: ClassVar[type]

    @abstractmethod
    def cols(self) -> Iterable[Iterable[Loc]]:
        """Columns of locations, each ordered bottom to top."""
        ...

    @abstractmethod
    def mut_slime_with(
        self,
        loc: Loc,
        transform: Callable[[SlimePropsIn], SlimePropsOut],
    ) -> SlimePropsOut:
        """Call transform with the cell's current view, store and return the result."""
        ...

    @abstractmethod
    def impulse_jiggle_with(
        self,
        loc: Loc,
        transform: Callable[[SlimeState], SlimeState],
    ) -> None:
        """Call transform with the cell's current state and store the result."""
        ...

    @abstractmethod
    def apply_dir_to_loc(
        self,
        direction: Dir,
        loc: Loc,
        impulse: float,
    ) -> tuple[Loc, float] | None:
        """
        Move an impulse one step in a direction.

        Returns None if propagation is blocked (edge, gap, or any board
        rule), otherwise the destination and the attenuated impulse.
        """
        ...

    def run_physics(self, dt: float, physprop: PhysicsProperties) -> bool:
        """
        Advance every cell by dt and propagate the impacts that happened.

        Returns:
            True if every cell ended the tick Settled
        """
        propagations: list[JigglePropagation[Loc, Dir]] = []
        settled = True
        up = self.direction_type.UP

        columns = [list(col) for col in self.cols()]
        for col in columns:
            jiggle_offset = 0.0
            for loc in col:
                out = self.mut_slime_with(
                    loc,
                    partial(update_slime, dt=dt, physprop=physprop, jiggle_offset=jiggle_offset),
                )
                if out.impact is not None:
                    propagations.append(
                        JigglePropagation(at=loc, impulse=out.impact, came_from=up)
                    )
                if not isinstance(out.state, Settled):
                    settled = False
                jiggle_offset += out.stack_height

        if propagations:
            logger.debug("Propagating %d impacts", len(propagations))
        for propagation in propagations:
            self.propagate_jiggle(propagation, physprop)

        return settled

    def propagate_jiggle(
        self,
        propagation: JigglePropagation[Loc, Dir],
        physprop: PhysicsProperties,
    ) -> None:
        """
        Apply an impulse at a location and fan it out through the board.

        Each hop goes to every direction except the one the impulse arrived
        from, with the board deciding destination and falloff. An impulse
        below ``min_impactable`` does nothing, which is what ends the fan-out.

        The recursion is unrolled onto an explicit stack of direction
        iterators, so cells are visited in the same depth-first order without
        growing the Python call stack.
        """
        max_depth = physprop.max_propagation_depth
        stack: list[tuple[Loc, float, int, Iterable[Dir]]] = []

        def enter(at: Loc, impulse: float, came_from: Dir, depth: int) -> None:
            if impulse < physprop.min_impactable:
                return
            self.impulse_jiggle_with(
                at, partial(impulse_slime, impulse=impulse, physprop=physprop)
            )
            stack.append((at, impulse, depth, iter(came_from.other_directions())))

        enter(propagation.at, propagation.impulse, propagation.came_from, 0)

        while stack:
            at, impulse, depth, directions = stack[-1]
            direction = next(directions, None)
            if direction is None:
                stack.pop()
                continue

            hop = self.apply_dir_to_loc(direction, at, impulse)
            if hop is None:
                continue
            if max_depth is not None and depth >= max_depth:
                logger.debug("Dropping propagation past depth %d at %r", max_depth, at)
                continue

            destination, attenuated = hop
            enter(destination, attenuated, direction.opposite(), depth + 1)
