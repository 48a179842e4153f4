"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def physprop():
    """Default physics properties."""
    from slimesim.core import PhysicsProperties
    return PhysicsProperties()


@pytest.fixture
def small_board_config():
    """Configuration for a small 4-wide, 8-tall absorbing board."""
    from slimesim.core import BoardConfig
    return BoardConfig(
        width=4,
        height=8,
        falloff=0.5,
        boundary="absorbing",
    )


@pytest.fixture
def small_board(small_board_config):
    """Empty small board."""
    from slimesim.core import SlimeBoard
    return SlimeBoard(small_board_config)


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
