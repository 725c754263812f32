"""Particle entity: per-frame target tracking, trail, and fade-in."""

import math
import random
from collections import deque

# Type alias for RGB tuples
Color = tuple[int, int, int]

PALETTE: tuple[Color, ...] = (
    (255, 20, 147),   # deep pink
    (255, 105, 180),  # hot pink
    (255, 182, 193),  # light pink
    (255, 0, 127),    # bright pink
    (255, 140, 180),  # medium pink
    (138, 43, 226),   # blue violet
    (255, 69, 0),     # red-orange
)

FOCAL_LENGTH = 300.0
FADE_STEP = 0.15
PULSE_RATE = 0.005
PULSE_GAIN = 0.35
FOLLOW = 0.5          # fraction of the remaining distance covered per frame
JITTER = 0.15
TRAIL_LENGTH = 3


def perspective(z: float, focal: float = FOCAL_LENGTH) -> float:
    """Projection factor focal / (focal + z); the denominator is floored at 1."""
    return focal / max(focal + z, 1.0)


class Particle:
    """A single point of the heart.

    ``origin_*`` is the fixed anchor on the heart surface, ``target_*`` is
    recomputed every frame from origin, rotation and pulse, and ``x``/``y``/``z``
    is the rendered position easing towards the target.
    """

    def __init__(self, x: float, y: float, target_x: float, target_y: float, color: Color,
                 depth: float = 0.0, rng: random.Random | None = None,
                 trail_length: int = TRAIL_LENGTH):
        rng = rng or random
        self.x = x
        self.y = y
        self.z = rng.random() * 200 - 100
        self.target_x = target_x
        self.target_y = target_y
        self.target_z = depth
        self.origin_x = target_x
        self.origin_y = target_y
        self.origin_z = depth
        self.color = color
        self.size = rng.random() * 2.5 + 1
        self.opacity = 0.0
        self.pulse_offset = rng.random() * math.pi * 2
        self.rotation_speed = (rng.random() - 0.5) * 0.02
        self.angle = rng.random() * math.pi * 2
        # (x, y, opacity), oldest first
        self.trail: deque[tuple[float, float, float]] = deque(maxlen=trail_length)

    def retarget(self, x: float, y: float, z: float) -> None:
        """Move the anchor point; the particle eases over on the following frames."""
        self.origin_x = x
        self.origin_y = y
        self.origin_z = z

    def update(self, time: float, beat_intensity: float, rotation: float,
               center: tuple[float, float], shake_x: float = 0.0, shake_y: float = 0.0) -> None:
        """Advance one frame."""
        if self.opacity < 1.0:
            self.opacity = min(1.0, self.opacity + FADE_STEP)

        pulse = math.sin(time * PULSE_RATE + self.pulse_offset) * beat_intensity
        scale = 1 + pulse * PULSE_GAIN

        center_x, center_y = center
        dx = self.origin_x - center_x
        dy = self.origin_y - center_y
        dz = self.origin_z

        # Rotate about the vertical axis
        cos_r = math.cos(rotation)
        sin_r = math.sin(rotation)
        rotated_x = dx * cos_r - dz * sin_r
        rotated_z = dx * sin_r + dz * cos_r

        p = perspective(rotated_z)
        self.target_x = center_x + rotated_x * scale * p + shake_x
        self.target_y = center_y + dy * scale * p + shake_y
        self.target_z = rotated_z

        self.trail.append((self.x, self.y, self.opacity))

        self.x += (self.target_x - self.x) * FOLLOW
        self.y += (self.target_y - self.y) * FOLLOW
        self.z += (self.target_z - self.z) * FOLLOW

        wobble = time * PULSE_RATE + self.pulse_offset
        self.x += math.sin(wobble) * JITTER
        self.y += math.cos(wobble) * JITTER

        self.angle += self.rotation_speed
