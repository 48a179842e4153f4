"""
Analysis layer: derived quantities for tuning and visualization.

IMPORTANT: This is NOT seen by the kernel. One-way derivation only.

- record_jiggle_trace: sample one cell's jiggle variables every tick
- count_oscillations: number of squash peaks in a trace
- fit_decay_envelope: exponential decay rate of the oscillation
"""

from slimesim.analysis.oscillation import (
    JiggleTrace,
    EnvelopeFit,
    record_jiggle_trace,
    count_oscillations,
    fit_decay_envelope,
)

__all__ = [
    "JiggleTrace",
    "EnvelopeFit",
    "record_jiggle_trace",
    "count_oscillations",
    "fit_decay_envelope",
]
