"""All mutable simulation state, owned in one place and passed to the frame step."""

import random
from dataclasses import dataclass, field

from heartfield.beat import BeatEngine
from heartfield.effects import (
    WAVE_DELAY,
    EffectScheduler,
    explode,
    repel,
    schedule_ripple,
    schedule_wave,
)
from heartfield.geometry import fill_heart, heart_curve, retarget
from heartfield.particle import Particle
from heartfield.render import RenderMode

OVERLAY_DURATION = 2.0


@dataclass
class SimulationState:
    width: int
    height: int
    particles: list[Particle]
    beat: BeatEngine
    heart_scale: float = 9.0
    layers: int = 8
    mode: RenderMode = RenderMode.PARTICLES
    time: float = 0.0
    rotation: float = 0.0
    frame: int = 0
    sound_label: str = ""
    overlay: str = ""
    overlay_until: float = 0.0
    effects: EffectScheduler = field(default_factory=EffectScheduler)
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def create(cls, width: int, height: int, heart_scale: float = 9.0, layers: int = 8,
               density: float = 2.2, seed: int | None = None) -> "SimulationState":
        """Sample the heart at the surface center and fill it with particles."""
        rng = random.Random(seed)
        points = list(heart_curve(width / 2, height / 2, heart_scale, layers))
        particles = fill_heart(points, density, width, height, rng=rng)
        return cls(width, height, particles, BeatEngine(rng=rng), heart_scale=heart_scale,
                   layers=layers, rng=rng)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def show_overlay(self, text: str, now: float) -> None:
        self.overlay = text
        self.overlay_until = now + OVERLAY_DURATION

    # --- Controls ---

    def cycle_mode(self, now: float) -> RenderMode:
        self.mode = self.mode.next()
        self.show_overlay(self.mode.label, now)
        return self.mode

    def cycle_profile(self, now: float) -> str:
        profile = self.beat.cycle()
        self.show_overlay(f"{profile.label} ({profile.bpm:.0f})", now)
        return profile.name

    def burst(self, now: float) -> None:
        """Explosion now, staggered wave shortly after."""
        explode(self.particles, self.rng)
        schedule_wave(self.effects, self.particles, now, delay=WAVE_DELAY)

    # --- Pointer ---

    def pointer_move(self, x: float, y: float) -> None:
        repel(self.particles, x, y)

    def click(self, x: float, y: float, now: float) -> None:
        schedule_ripple(self.effects, self.particles, x, y, now)

    # --- Surface ---

    def resize(self, width: int, height: int) -> None:
        """Re-anchor existing particles on a heart sampled at the new center."""
        self.width = width
        self.height = height
        points = list(heart_curve(width / 2, height / 2, self.heart_scale, self.layers))
        retarget(self.particles, points)
