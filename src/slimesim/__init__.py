"""
slimesim: squash-and-stretch slime stack physics

A per-tick kernel for columns of falling, jiggling slime cells.

Core concepts:
- Cells fall under gravity until they land on their column's stack
- Landing turns fall velocity into an impulse
- Impulses spread through the board, attenuated at every hop
- Jiggling cells oscillate on a damped spring until they settle

The board owns cell storage and topology; the kernel only reads and
writes cells through the board's capabilities.
"""

__version__ = "0.1.0"
