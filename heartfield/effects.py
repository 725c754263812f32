"""One-shot perturbations (hover, ripple, explosion, wave) and their scheduler.

Delayed effects are not timers: they are queued with a due time and run by
the frame loop, so particle state is only ever mutated from the loop.
"""

import heapq
import itertools
import math
import random
from typing import Callable, Sequence

from heartfield.particle import Particle

REPEL_RADIUS = 100.0
REPEL_FORCE = 3.0
RIPPLE_RADIUS = 200.0
RIPPLE_FORCE = 30.0
RIPPLE_COUNT = 3
RIPPLE_SPACING = 0.1
EXPLOSION_MIN = 50.0
EXPLOSION_SPREAD = 100.0
EXPLOSION_DEPTH = 100.0
WAVE_DELAY = 0.5
WAVE_STAGGER = 0.002
WAVE_HEIGHT = 50.0
WAVE_HOLD = 0.2


class EffectScheduler:
    """Min-heap of callbacks keyed by due time (seconds, same clock as ``now``)."""

    def __init__(self):
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._queue)

    def schedule(self, delay: float, callback: Callable[[], None], now: float) -> None:
        heapq.heappush(self._queue, (now + delay, next(self._seq), callback))

    def run_due(self, now: float) -> int:
        """Run every callback due at or before ``now``; returns how many ran."""
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, callback = heapq.heappop(self._queue)
            callback()
            ran += 1
        return ran


def _push(particles: Sequence[Particle], x: float, y: float, radius: float, strength: float) -> None:
    for particle in particles:
        dx = particle.x - x
        dy = particle.y - y
        distance = math.hypot(dx, dy)
        if distance < radius:
            angle = math.atan2(dy, dx)
            force = (radius - distance) / radius
            particle.x += math.cos(angle) * force * strength
            particle.y += math.sin(angle) * force * strength


def repel(particles: Sequence[Particle], x: float, y: float) -> None:
    """Nudge particles near the pointer away from it."""
    _push(particles, x, y, REPEL_RADIUS, REPEL_FORCE)


def ripple(particles: Sequence[Particle], x: float, y: float) -> None:
    """One radial push; strongest at the click point, nothing beyond ``RIPPLE_RADIUS``."""
    _push(particles, x, y, RIPPLE_RADIUS, RIPPLE_FORCE)


def schedule_ripple(scheduler: EffectScheduler, particles: Sequence[Particle], x: float, y: float,
                    now: float) -> None:
    for r in range(RIPPLE_COUNT):
        scheduler.schedule(r * RIPPLE_SPACING, lambda: ripple(particles, x, y), now)


def explode(particles: Sequence[Particle], rng: random.Random | None = None) -> None:
    """Throw every particle in a random direction; they ease back on their own."""
    rng = rng or random
    for particle in particles:
        angle = rng.random() * math.pi * 2
        force = rng.random() * EXPLOSION_SPREAD + EXPLOSION_MIN
        particle.x += math.cos(angle) * force
        particle.y += math.sin(angle) * force
        particle.z += (rng.random() - 0.5) * EXPLOSION_DEPTH


def schedule_wave(scheduler: EffectScheduler, particles: Sequence[Particle], now: float,
                  delay: float = 0.0) -> None:
    """Lift each particle in turn, staggered by index, and drop it back a moment later."""
    for index, particle in enumerate(particles):
        lift_at = delay + index * WAVE_STAGGER
        scheduler.schedule(lift_at, lambda p=particle: _shift_y(p, -WAVE_HEIGHT), now)
        scheduler.schedule(lift_at + WAVE_HOLD, lambda p=particle: _shift_y(p, WAVE_HEIGHT), now)


def _shift_y(particle: Particle, dy: float) -> None:
    particle.y += dy
