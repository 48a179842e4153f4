"""
Core kernel primitives.

The kernel knows NOTHING about grids, rendering or frame timing.
It only knows:
- Per-cell slime state (Settled, Falling, Jiggling)
- The per-cell update rule and the impulse merge rule
- How to drive a board through its capabilities, one tick at a time

SlimeBoard and SquareDirection are a reference board for running it.
"""

from slimesim.core.properties import PhysicsProperties, load_properties
from slimesim.core.state import (
    SETTLED,
    Settled,
    Falling,
    Jiggling,
    SlimeState,
    SlimePropsIn,
    SlimePropsOut,
    JigglePropagation,
)
from slimesim.core.directions import Direction, SquareDirection
from slimesim.core.kernel import JigglyBoard, update_slime, impulse_slime
from slimesim.core.board import BoardConfig, SlimeBoard, SlimeCell
from slimesim.core.scheduler import PhysicsScheduler, SchedulerConfig

__all__ = [
    "PhysicsProperties",
    "load_properties",
    "SETTLED",
    "Settled",
    "Falling",
    "Jiggling",
    "SlimeState",
    "SlimePropsIn",
    "SlimePropsOut",
    "JigglePropagation",
    "Direction",
    "SquareDirection",
    "JigglyBoard",
    "update_slime",
    "impulse_slime",
    "BoardConfig",
    "SlimeBoard",
    "SlimeCell",
    "PhysicsScheduler",
    "SchedulerConfig",
]
