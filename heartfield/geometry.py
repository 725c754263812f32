"""Heart curve sampling and the grid fill that turns it into particles."""

import math
import random
from typing import Iterable, Iterator, NamedTuple, Sequence

import numpy as np

from heartfield.particle import PALETTE, Particle

RESOLUTION = 150
LAYER_SPACING = 20.0
LAYER_SHRINK = 0.05
NEAREST_CUTOFF = 50.0
START_SPREAD = 200.0  # particles start within +/- half of this around the center


class Point3D(NamedTuple):
    x: float
    y: float
    z: float


def heart_xy(t: float) -> tuple[float, float]:
    """Classic parametric heart, unscaled, y pointing down (screen space)."""
    x = 16 * math.sin(t) ** 3
    y = -(13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t))
    return x, y


def heart_curve(center_x: float, center_y: float, scale: float, layers: int = 5,
                resolution: int = RESOLUTION) -> Iterator[Point3D]:
    """Yield a layered 3D heart outline, layer by layer.

    Layers are spaced ``LAYER_SPACING`` apart in z around the middle layer and
    shrink by ``LAYER_SHRINK`` of ``scale`` per step away from it.
    """
    mid = layers // 2
    for layer in range(layers):
        depth = (layer - mid) * LAYER_SPACING
        layer_scale = scale * (1 - abs(layer - mid) * LAYER_SHRINK)
        for i in range(resolution):
            x, y = heart_xy(i / resolution * math.pi * 2)
            yield Point3D(center_x + x * layer_scale, center_y + y * layer_scale, depth)


def bounds(points: Iterable[Point3D]) -> tuple[float, float, float, float]:
    """Axis-aligned (min_x, min_y, max_x, max_y) of the points' x/y."""
    xs, ys = [], []
    for p in points:
        xs.append(p.x)
        ys.append(p.y)
    return min(xs), min(ys), max(xs), max(ys)


def _nearest(xy: np.ndarray, qx: np.ndarray, qy: np.ndarray, cutoff: float = NEAREST_CUTOFF):
    """Index of, and distance to, the closest curve point for each query.

    The index is -1 where nothing lies within ``cutoff``. ``np.argmin``
    returns the first minimum, matching a linear scan.
    """
    d = np.hypot(xy[None, :, 0] - qx[:, None], xy[None, :, 1] - qy[:, None])
    idx = np.argmin(d, axis=1)
    dist = d[np.arange(len(idx)), idx]
    return np.where(dist < cutoff, idx, -1), dist


def nearest_point(x: float, y: float, points: Sequence[Point3D],
                  cutoff: float = NEAREST_CUTOFF) -> Point3D | None:
    """Closest point in the x/y plane, or None when nothing is within ``cutoff``."""
    if not points:
        return None
    xy = np.array([(p.x, p.y) for p in points], dtype=np.float64)
    idx, _ = _nearest(xy, np.array([x]), np.array([y]), cutoff)
    if idx[0] < 0:
        return None
    return points[int(idx[0])]


def fill_heart(points: Sequence[Point3D], density: float, width: float, height: float,
               rng: random.Random | None = None) -> list[Particle]:
    """Seed particles on a ``density``-spaced grid wherever the heart outline is near.

    Each grid point whose nearest curve point lies within ``density * 2``
    becomes one particle anchored (with jitter) at the grid point and
    inheriting the curve point's depth. Particles start scattered around the
    surface center so the heart assembles as they fade in.
    """
    rng = rng or random
    points = list(points)
    if not points:
        return []
    xy = np.array([(p.x, p.y) for p in points], dtype=np.float64)
    min_x, min_y, max_x, max_y = bounds(points)
    column = np.arange(min_y, max_y, density)

    particles = []
    for x in np.arange(min_x, max_x, density):
        idx, dist = _nearest(xy, np.full(len(column), x), column)
        for y, i, d in zip(column, idx, dist):
            if i < 0 or d >= density * 2:
                continue
            anchor_x = float(x) + (rng.random() - 0.5) * density
            anchor_y = float(y) + (rng.random() - 0.5) * density
            start_x = width / 2 + (rng.random() - 0.5) * START_SPREAD
            start_y = height / 2 + (rng.random() - 0.5) * START_SPREAD
            color = PALETTE[int(rng.random() * len(PALETTE))]
            particles.append(Particle(start_x, start_y, anchor_x, anchor_y, color,
                                      points[int(i)].z, rng=rng))
    return particles


def retarget(particles: Sequence[Particle], points: Sequence[Point3D]) -> None:
    """Re-anchor particle ``i`` on curve sample ``i % len(points)``."""
    if not points:
        return
    for index, particle in enumerate(particles):
        p = points[index % len(points)]
        particle.retarget(p.x, p.y, p.z)
