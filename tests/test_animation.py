"""Tests for the frame step and the simulation state controls."""

import time

import numpy as np
import pytest

from heartfield import animation
from heartfield.animation import ROTATION_STEP, TIME_STEP, hud, step
from heartfield.canvas import Canvas
from heartfield.geometry import heart_curve
from heartfield.particle import Particle
from heartfield.render import RenderMode
from heartfield.state import SimulationState

# Seconds per frame at the default 960x720 heart (several thousand particles)
FRAME_BUDGET = 0.3


@pytest.fixture
def canvas(small_state):
    return Canvas(small_state.width, small_state.height)


class TestStep:

    def test_advances_counters(self, small_state, canvas):
        triggered = step(small_state, canvas, 0.0)
        assert isinstance(triggered, bool)
        assert small_state.frame == 1
        assert small_state.time == TIME_STEP
        assert small_state.rotation == pytest.approx(ROTATION_STEP)

    def test_draws_something(self, small_state, canvas):
        for frame in range(10):
            step(small_state, canvas, frame / 60)
        assert canvas.buffer.max() > 50

    def test_every_mode_renders(self, small_state, canvas):
        for mode in RenderMode:
            small_state.mode = mode
            step(small_state, canvas, small_state.frame / 60)
        assert np.isfinite(canvas.buffer).all()

    def test_particles_fade_in(self, small_state, canvas):
        for frame in range(10):
            step(small_state, canvas, frame / 60)
        assert all(p.opacity == 1.0 for p in small_state.particles)

    def test_runs_due_effects(self, small_state, canvas):
        small_state.click(100, 100, now=0.0)
        assert len(small_state.effects) == 3
        step(small_state, canvas, 0.0)
        assert len(small_state.effects) == 2


class TestDepthSort:

    def test_step_updates_and_draws_far_to_near(self, small_state, canvas, monkeypatch):
        updated = []
        drawn = []
        update = Particle.update
        render_particles = animation.render_particles

        def recording_update(self, *args):
            updated.append((id(self), self.z))
            update(self, *args)

        def recording_render(particles, mode):
            drawn.append([id(p) for p in particles])
            return render_particles(particles, mode)

        monkeypatch.setattr(Particle, "update", recording_update)
        monkeypatch.setattr(animation, "render_particles", recording_render)
        for frame in range(5):
            updated.clear()
            step(small_state, canvas, frame / 60)
            zs = [z for _, z in updated]
            assert len(zs) == len(small_state.particles)
            assert all(a >= b for a, b in zip(zs, zs[1:]))
            assert drawn[-1] == [key for key, _ in updated]


class TestFrameBudget:

    def test_default_heart_animates_interactively(self):
        state = SimulationState.create(960, 720, seed=1)
        canvas = Canvas(960, 720)
        assert len(state.particles) > 3000
        for mode in RenderMode:
            state.mode = mode
            step(state, canvas, 0.0)
            start = time.perf_counter()
            for frame in range(3):
                step(state, canvas, (frame + 1) / 60)
            assert (time.perf_counter() - start) / 3 < FRAME_BUDGET, mode


class TestControls:

    def test_cycle_mode_shows_overlay(self, small_state):
        mode = small_state.cycle_mode(now=3.0)
        assert mode is RenderMode.WIREFRAME
        assert small_state.overlay == "Wireframe"
        assert small_state.overlay_until > 3.0

    def test_cycle_profile_resets_phase(self, small_state, canvas):
        for frame in range(5):
            step(small_state, canvas, frame / 60)
        assert small_state.cycle_profile(now=1.0) == "intense"
        assert small_state.beat.phase == 0.0
        assert "120" in small_state.overlay

    def test_burst_schedules_wave(self, small_state):
        small_state.burst(now=0.0)
        assert len(small_state.effects) == 2 * len(small_state.particles)

    def test_resize_retargets_in_place(self, small_state):
        before = [(id(p), p.color) for p in small_state.particles]
        small_state.resize(400, 300)
        assert small_state.center == (200.0, 150.0)
        assert [(id(p), p.color) for p in small_state.particles] == before
        points = list(heart_curve(200, 150, small_state.heart_scale, small_state.layers))
        for i, p in enumerate(small_state.particles):
            q = points[i % len(points)]
            assert (p.origin_x, p.origin_y, p.origin_z) == (q.x, q.y, q.z)


class TestHud:

    def test_shows_bpm_and_sound(self, small_state):
        small_state.sound_label = "Sound: OFF"
        items = hud(small_state, now=0.0)
        assert len(items) == 1
        assert "72 BPM" in items[0].text
        assert "Sound: OFF" in items[0].text

    def test_overlay_expires(self, small_state):
        small_state.show_overlay("Galaxy", now=0.0)
        assert len(hud(small_state, now=1.0)) == 2
        assert len(hud(small_state, now=5.0)) == 1
