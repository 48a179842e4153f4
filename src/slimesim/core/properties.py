"""
PhysicsProperties: the tunable constants for one simulation.

The kernel reads these once per tick and never mutates them. A single
instance is typically shared by every board in a process, but nothing
stops a host from giving each board its own.

Sign convention: positions grow upward and ``y_bottom -= velocity * dt``,
so a positive ``gravity`` makes cells fall toward the stack.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml


@dataclass(frozen=True)
class PhysicsProperties:
    """Constants for falling, impact and jiggle dynamics."""

    gravity: float = 40.0  # Cells per tick^2 added to velocity
    velocity_to_impact: float = 0.1  # Landing velocity -> propagated impulse
    min_impactable: float = 0.05  # Propagation floor

    # Damped spring used while jiggling
    jiggle_stiff: float = 250.0
    jiggle_damp: float = 0.92  # Per-update momentum multiplier
    jiggle_life_decrease_rate: float = 1.0  # Life lost per unit time
    jiggle_life_threshold: float = 0.25  # Start of the end-of-life fade

    # Settle thresholds
    jiggle_offset_epsilon: float = 0.005
    jiggle_momentum_epsilon: float = 0.05

    # Optional hop cap for boards whose falloff does not attenuate
    max_propagation_depth: int | None = None

    def __post_init__(self):
        if self.jiggle_life_threshold <= 0:
            raise ValueError("jiggle_life_threshold must be positive")
        if not 0.0 <= self.jiggle_damp <= 1.0:
            raise ValueError("jiggle_damp must be in [0, 1]")
        if self.min_impactable < 0:
            raise ValueError("min_impactable must be non-negative")
        if self.jiggle_offset_epsilon < 0 or self.jiggle_momentum_epsilon < 0:
            raise ValueError("settle epsilons must be non-negative")
        if self.jiggle_life_decrease_rate < 0:
            raise ValueError("jiggle_life_decrease_rate must be non-negative")
        if self.max_propagation_depth is not None and self.max_propagation_depth < 0:
            raise ValueError("max_propagation_depth must be non-negative or None")

    @property
    def jiggle_life_threshold_inverse(self) -> float:
        """Reciprocal of ``jiggle_life_threshold``, used to taper near end of life."""
        return 1.0 / self.jiggle_life_threshold

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PhysicsProperties:
        """
        Build properties from a plain mapping.

        Missing keys fall back to the defaults; unknown keys are rejected so
        that a typo in a config file is not silently ignored.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown physics properties: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key == "max_propagation_depth":
                kwargs[key] = None if value is None else int(value)
            else:
                kwargs[key] = float(value)
        return cls(**kwargs)

    def with_overrides(self, **changes: Any) -> PhysicsProperties:
        """Return a copy with some fields replaced."""
        return replace(self, **changes)


def load_properties(path: str | Path) -> PhysicsProperties:
    """
    Load PhysicsProperties from a YAML file.

    The file may either hold the fields at the top level or nest them under
    a ``physics:`` key (so one file can also carry board settings).
    An empty file gives the defaults.
    """
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return PhysicsProperties()
    if not isinstance(data, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the top level")

    if "physics" in data:
        section = data["physics"] or {}
        if not isinstance(section, dict):
            raise ValueError(f"'physics' section in {path} must be a mapping")
        return PhysicsProperties.from_mapping(section)
    return PhysicsProperties.from_mapping(data)
