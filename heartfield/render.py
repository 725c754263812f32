"""Render modes and the pure functions that turn particles into draw commands.

Nothing here touches a pixel buffer: each function returns frozen dataclasses
holding numpy columns, one row per mark, that a Canvas composites in batches.
"""

import enum
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from heartfield.particle import FOCAL_LENGTH, Particle

Color = tuple[int, int, int]

BACKGROUND: Color = (10, 5, 30)
CONNECTION_COLOR: Color = (255, 105, 180)
CONNECTION_ALPHA = 0.1
CONNECTION_DISTANCE = 50.0
CONNECTION_STRIDE = 5
CONNECTION_WINDOW = 10
TRAIL_ALPHA = 0.4

GLOW_STOPS = ((0.0, 1.0), (0.5, 0.5), (1.0, 0.0))
FADE_STOPS = ((0.0, 1.0), (1.0, 0.0))


class RenderMode(enum.Enum):
    PARTICLES = "particles"
    WIREFRAME = "wireframe"
    VOLUMETRIC = "3d"
    GALAXY = "galaxy"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    def next(self) -> "RenderMode":
        members = list(RenderMode)
        return members[(members.index(self) + 1) % len(members)]


_MODE_LABELS = {
    RenderMode.PARTICLES: "Particles",
    RenderMode.WIREFRAME: "Wireframe",
    RenderMode.VOLUMETRIC: "3D Depth",
    RenderMode.GALAXY: "Galaxy",
}


# --- Draw commands ---

class Shape(enum.Enum):
    DISC = "disc"
    GLOW = "glow"
    RING = "ring"
    SQUARE = "square"


@dataclass(frozen=True)
class Fade:
    color: Color
    alpha: float


@dataclass(frozen=True, eq=False)
class Sprites:
    """A batch of same-shaped marks, one row per sprite.

    ``radius`` is the disc/ring radius, the glow gradient radius or the
    square half-width. ``extent`` is the painted glow radius.
    """
    shape: Shape
    x: np.ndarray
    y: np.ndarray
    radius: np.ndarray
    color: np.ndarray    # (n, 3)
    alpha: np.ndarray
    extent: np.ndarray | None = None
    angle: np.ndarray | None = None
    stops: tuple[tuple[float, float], ...] = FADE_STOPS

    def __len__(self) -> int:
        return len(self.x)

    def reach(self) -> np.ndarray:
        """Painted radius of each sprite."""
        if self.shape is Shape.GLOW:
            return self.extent
        if self.shape is Shape.RING:
            return self.radius + 0.5
        if self.shape is Shape.SQUARE:
            return self.radius * math.sqrt(2)
        return self.radius


@dataclass(frozen=True, eq=False)
class Lines:
    x0: np.ndarray
    y0: np.ndarray
    x1: np.ndarray
    y1: np.ndarray
    color: Color
    alpha: float

    def __len__(self) -> int:
        return len(self.x0)


@dataclass(frozen=True)
class Text:
    x: int
    y: int
    text: str
    color: Color
    scale: int = 1


DrawCommand = Fade | Sprites | Lines | Text


def backdrop(mode: RenderMode) -> Fade:
    """Translucent overlay that fades the previous frame into motion trails."""
    return Fade(BACKGROUND, 0.25 if mode is RenderMode.GALAXY else 0.35)


def _trails(particles: Sequence[Particle], size: np.ndarray, color: np.ndarray) -> Sprites:
    owner, x, y, alpha = [], [], [], []
    for k, particle in enumerate(particles):
        n = len(particle.trail)
        # Oldest trail point is faintest
        for index, (tx, ty, _) in enumerate(particle.trail):
            owner.append(k)
            x.append(tx)
            y.append(ty)
            alpha.append(index / n * particle.opacity * TRAIL_ALPHA)
    owner = np.array(owner, dtype=np.intp)
    return Sprites(Shape.DISC, np.array(x, dtype=np.float64), np.array(y, dtype=np.float64),
                   size[owner] * 0.8, color[owner], np.array(alpha, dtype=np.float64))


def render_particles(particles: Sequence[Particle], mode: RenderMode) -> list[Sprites]:
    """Draw commands for every particle, in three layers: trails, glows, cores.

    Wireframe and galaxy modes draw a single layer. Particles are expected in
    painter's order; each layer keeps that order.
    """
    n = len(particles)
    x = np.fromiter((q.x for q in particles), np.float64, n)
    y = np.fromiter((q.y for q in particles), np.float64, n)
    z = np.fromiter((q.z for q in particles), np.float64, n)
    opacity = np.fromiter((q.opacity for q in particles), np.float64, n)
    angle = np.fromiter((q.angle for q in particles), np.float64, n)
    color = np.array([q.color for q in particles], dtype=np.float64).reshape(n, 3)

    p = FOCAL_LENGTH / np.maximum(FOCAL_LENGTH + z, 1.0)
    size = np.fromiter((q.size for q in particles), np.float64, n) * p
    alpha = opacity * (0.5 + p * 0.5)

    if mode is RenderMode.WIREFRAME:
        return [Sprites(Shape.RING, x, y, size * 2, color, alpha)]

    if mode is RenderMode.GALAXY:
        spiral = angle * 3
        return [Sprites(Shape.GLOW, x + np.cos(spiral) * size * 5, y + np.sin(spiral) * size * 5,
                        size * 3, color, alpha, extent=size * 1.5)]

    glow_alpha = opacity * (0.6 + p * 0.4)
    glow = Sprites(Shape.GLOW, x, y, size * 3.5, color, glow_alpha, extent=size * 2.5,
                   stops=GLOW_STOPS)
    if mode is RenderMode.VOLUMETRIC:
        core = Sprites(Shape.SQUARE, x, y, size * 1.2, color, glow_alpha, angle=angle)
    else:
        core = Sprites(Shape.DISC, x, y, size * 1.2, color, glow_alpha)
    return [_trails(particles, size, color), glow, core]


def connections(particles: Sequence[Particle]) -> Lines:
    """Faint lines between sampled neighbours in draw order.

    Every ``CONNECTION_STRIDE``-th particle is paired with the particles
    1, 1 + stride, ... positions after it, up to ``CONNECTION_WINDOW`` ahead,
    so the cost stays linear in the particle count.
    """
    pairs = []
    n = len(particles)
    for i in range(0, n, CONNECTION_STRIDE):
        a = particles[i]
        for j in range(i + 1, min(i + CONNECTION_WINDOW, n), CONNECTION_STRIDE):
            b = particles[j]
            if math.hypot(b.x - a.x, b.y - a.y) < CONNECTION_DISTANCE:
                pairs.append((a.x, a.y, b.x, b.y))
    x0, y0, x1, y1 = np.array(pairs, dtype=np.float64).reshape(-1, 4).T
    return Lines(x0, y0, x1, y1, CONNECTION_COLOR, CONNECTION_ALPHA)
