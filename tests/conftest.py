"""
Shared pytest fixtures for the heartfield test suite.

Everything here is headless: no window and no audio device are opened.
"""

import random

import pytest

from heartfield.particle import PALETTE, Particle
from heartfield.state import SimulationState


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def particle(rng) -> Particle:
    """A fully faded-in particle at rest in front of the focal plane."""
    p = Particle(100.0, 100.0, 120.0, 90.0, PALETTE[0], depth=0.0, rng=rng)
    p.z = 0.0
    p.opacity = 1.0
    return p


@pytest.fixture
def small_state() -> SimulationState:
    """A 200x200 surface with a small, sparse heart so tests stay fast."""
    return SimulationState.create(200, 200, heart_scale=3, layers=4, density=4, seed=1)
