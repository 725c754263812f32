"""Tests for the pure per-mode draw command functions."""

import copy
import math
import random

import numpy as np
import pytest

from heartfield.particle import PALETTE, Particle
from heartfield.render import (
    BACKGROUND,
    Lines,
    RenderMode,
    Shape,
    backdrop,
    connections,
    render_particles,
)


@pytest.fixture
def trailing(particle):
    particle.trail.extend([(90.0, 100.0, 1.0), (95.0, 100.0, 1.0), (99.0, 100.0, 1.0)])
    return particle


class TestRenderMode:

    def test_cycle(self):
        assert RenderMode.PARTICLES.next() is RenderMode.WIREFRAME
        assert RenderMode.GALAXY.next() is RenderMode.PARTICLES
        assert len(list(RenderMode)) == 4

    def test_labels(self):
        assert RenderMode.VOLUMETRIC.label == "3D Depth"


class TestRenderParticles:

    def test_particles_mode(self, trailing):
        trails, glow, core = render_particles([trailing], RenderMode.PARTICLES)
        assert [trails.shape, glow.shape, core.shape] == [Shape.DISC, Shape.GLOW, Shape.DISC]
        assert len(trails) == 3
        assert list(trails.alpha) == sorted(trails.alpha)
        assert trails.alpha[0] == 0.0
        assert trails.radius[0] == pytest.approx(trailing.size * 0.8)
        assert glow.radius[0] == pytest.approx(trailing.size * 3.5)
        assert glow.extent[0] == pytest.approx(trailing.size * 2.5)
        assert core.radius[0] == pytest.approx(trailing.size * 1.2)

    def test_volumetric_core_is_rotated_square(self, trailing):
        core = render_particles([trailing], RenderMode.VOLUMETRIC)[-1]
        assert core.shape is Shape.SQUARE
        assert core.angle[0] == trailing.angle

    def test_wireframe_is_outline_only(self, trailing):
        commands = render_particles([trailing], RenderMode.WIREFRAME)
        assert len(commands) == 1
        ring = commands[0]
        assert ring.shape is Shape.RING
        assert ring.radius[0] == pytest.approx(trailing.size * 2)

    def test_galaxy_draws_offset_glow(self, trailing):
        commands = render_particles([trailing], RenderMode.GALAXY)
        assert len(commands) == 1
        glow = commands[0]
        assert glow.shape is Shape.GLOW
        offset = math.hypot(glow.x[0] - trailing.x, glow.y[0] - trailing.y)
        assert offset == pytest.approx(trailing.size * 5)

    def test_depth_dims_and_shrinks(self, particle):
        far = copy.copy(particle)
        far.z = 150.0
        ring = render_particles([particle, far], RenderMode.WIREFRAME)[0]
        assert ring.radius[1] < ring.radius[0]
        assert ring.alpha[1] < ring.alpha[0]

    def test_invisible_before_fade_in(self, trailing):
        trailing.opacity = 0.0
        for mode in RenderMode:
            for batch in render_particles([trailing], mode):
                assert not batch.alpha.any()

    def test_rows_follow_particle_order(self, rng):
        first = Particle(10.0, 20.0, 0.0, 0.0, PALETTE[0], rng=rng)
        second = Particle(30.0, 40.0, 0.0, 0.0, PALETTE[5], rng=rng)
        second.trail.append((31.0, 41.0, 1.0))
        trails, glow, core = render_particles([first, second], RenderMode.PARTICLES)
        assert list(glow.x) == [10.0, 30.0]
        assert list(core.y) == [20.0, 40.0]
        assert len(trails) == 1
        assert tuple(trails.color[0]) == PALETTE[5]

    def test_no_particles(self):
        for mode in RenderMode:
            assert all(len(batch) == 0 for batch in render_particles([], mode))


class TestBackdrop:

    def test_galaxy_keeps_longer_trails(self):
        assert backdrop(RenderMode.GALAXY).alpha < backdrop(RenderMode.PARTICLES).alpha
        assert backdrop(RenderMode.WIREFRAME).color == BACKGROUND


class TestConnections:

    def _row(self, n, spacing):
        rng = random.Random(0)
        return [Particle(i * spacing, 0.0, 0.0, 0.0, PALETTE[0], rng=rng) for i in range(n)]

    def test_sampled_pairs(self):
        lines = connections(self._row(20, 1.0))
        assert isinstance(lines, Lines)
        # i = 0, 5, 10, 15 paired with i + 1 and i + 6 (when in range)
        assert len(lines) == 7
        assert list(lines.x0[:2]) == [0.0, 0.0]
        assert list(lines.x1[:2]) == [1.0, 6.0]

    def test_distance_cutoff(self):
        lines = connections(self._row(20, 60.0))
        assert len(lines) == 0
        assert np.asarray(lines.x0).shape == (0,)
