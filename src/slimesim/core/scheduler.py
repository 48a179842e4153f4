"""
PhysicsScheduler: a minimal host loop around JigglyBoard.run_physics.

The kernel itself has no notion of time beyond a single dt. The scheduler
owns the tick counter, a fixed time step, and the settle history that
tests, demos and the analysis layer read back.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, TYPE_CHECKING

from slimesim.core.properties import PhysicsProperties

if TYPE_CHECKING:
    from slimesim.core.kernel import JigglyBoard

logger = logging.getLogger(__name__)

TickObserver = Callable[[int, "JigglyBoard"], None]


@dataclass
class SchedulerConfig:
    """Configuration for the physics host loop."""

    dt: float = 1.0 / 60.0  # Fixed time step per tick
    max_ticks: int = 10_000  # Safety cap for run_until_settled

    def __post_init__(self):
        if self.dt <= 0:
            raise ValueError("dt must be positive")
        if self.max_ticks <= 0:
            raise ValueError("max_ticks must be positive")


@dataclass
class PhysicsScheduler:
    """Drives a board one fixed step at a time and records whether it settled."""

    board: "JigglyBoard"
    physprop: PhysicsProperties = field(default_factory=PhysicsProperties)
    config: SchedulerConfig = field(default_factory=SchedulerConfig)

    current_tick: int = field(default=0, init=False)
    settled_history: list[bool] = field(default_factory=list, init=False)
    observers: list[TickObserver] = field(default_factory=list, init=False)

    def add_observer(self, observer: TickObserver) -> None:
        """Register a callback run after every tick with (tick, board)."""
        self.observers.append(observer)

    def tick(self) -> bool:
        """Advance the board by one step. Returns the settled flag."""
        self.current_tick += 1
        settled = self.board.run_physics(self.config.dt, self.physprop)
        self.settled_history.append(settled)
        for observer in self.observers:
            observer(self.current_tick, self.board)
        return settled

    @property
    def time(self) -> float:
        """Simulated time elapsed."""
        return self.current_tick * self.config.dt

    @property
    def settled_at(self) -> int | None:
        """
        First tick of the current settled run, or None if the last tick
        left the board in motion.
        """
        if not self.settled_history or not self.settled_history[-1]:
            return None
        tick = len(self.settled_history)
        while tick > 1 and self.settled_history[tick - 2]:
            tick -= 1
        return tick

    def _summary(self, n_ticks: int) -> dict:
        settled = bool(self.settled_history) and self.settled_history[-1]
        return {
            "n_ticks": n_ticks,
            "current_tick": self.current_tick,
            "time": self.time,
            "settled": settled,
            "settled_at": self.settled_at,
        }

    def run(self, n_ticks: int) -> dict:
        """Run exactly n_ticks steps."""
        for _ in range(n_ticks):
            self.tick()
        logger.debug("Ran %d ticks, now at tick %d", n_ticks, self.current_tick)
        return self._summary(n_ticks)

    def run_until_settled(self, max_ticks: int | None = None) -> dict:
        """
        Run until a tick reports the board settled, or the cap is reached.

        Args:
            max_ticks: Cap on ticks for this call (config.max_ticks if None)

        Returns:
            Summary dict; ``settled`` is False if the cap was hit first
        """
        if max_ticks is None:
            max_ticks = self.config.max_ticks

        n_ticks = 0
        while n_ticks < max_ticks:
            n_ticks += 1
            if self.tick():
                logger.info("Board settled at tick %d", self.current_tick)
                break
        else:
            logger.info("Board still moving after %d ticks", n_ticks)

        return self._summary(n_ticks)
