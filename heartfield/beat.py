"""Heartbeat rhythm profiles and the per-frame beat intensity state machine."""

import math
import random
from dataclasses import dataclass
from typing import Callable

TRIGGER_THRESHOLD = 0.95
TRIGGER_SPACING = 0.8   # fraction of the beat interval that must pass between sounds
SHAKE_DECAY = 0.85


@dataclass(frozen=True)
class BeatProfile:
    """One rhythm.

    ``intensity(phase, time)`` is evaluated after the phase has advanced by
    ``phase_step`` (plus ``wobble * sin(time * 0.015)`` for irregular rhythms).
    ``low``/``high`` bound the intensity over any phase and time.
    """

    name: str
    label: str
    bpm: float
    phase_step: float
    intensity: Callable[[float, float], float]
    low: float
    high: float
    wobble: float = 0.0
    shake_above: float | None = None
    shake: float = 0.0
    random_shake_chance: float = 0.0
    rotation_kick_chance: float = 0.0

    @property
    def beat_interval(self) -> float:
        """Seconds per beat."""
        return 60.0 / self.bpm

    def advance(self, time: float) -> float:
        return self.phase_step + math.sin(time * 0.015) * self.wobble


def _normal(phase, time):
    return (math.sin(phase) * 0.5 + 0.5) * (math.sin(phase * 2.2) * 0.35 + 0.65)


def _intense(phase, time):
    return (math.sin(phase) * 0.5 + 0.5) * (math.sin(phase * 2.5) * 0.4 + 0.6) * 1.5


def _arrhythmia(phase, time):
    irregular = math.sin(phase + math.sin(time * 0.07) * 2) * 0.5 + 0.5
    skip = math.sin(phase * 1.7) * 0.4 + 0.6
    return irregular * skip


def _racing(phase, time):
    return math.sin(phase * 1.5) * 0.6 + 0.7


def _calm(phase, time):
    return (math.sin(phase) * 0.4 + 0.5) * (math.sin(phase * 2) * 0.25 + 0.75) * 0.7


def _shock(phase, time):
    return abs(math.sin(phase * 3)) * 1.8


PROFILES: dict[str, BeatProfile] = {
    p.name: p for p in (
        BeatProfile("normal", "Normal", 72, 0.11, _normal, 0.0, 1.0),
        BeatProfile("intense", "Intense", 120, 0.18, _intense, 0.0, 1.5,
                    shake_above=0.95, shake=15),
        BeatProfile("arrhythmia", "Arrhythmia", 85, 0.13, _arrhythmia, 0.0, 1.0,
                    wobble=0.04, shake=8, random_shake_chance=0.03),
        BeatProfile("racing", "Racing", 160, 0.28, _racing, 0.1, 1.3,
                    shake_above=0.9, shake=10),
        BeatProfile("calm", "Calm", 50, 0.07, _calm, 0.0, 0.7),
        BeatProfile("shock", "Shock", 200, 0.42, _shock, 0.0, 1.8,
                    shake_above=1.2, shake=25, rotation_kick_chance=0.2),
    )
}


@dataclass
class BeatFrame:
    intensity: float
    triggered: bool
    shake_x: float
    shake_y: float
    rotation_kick: float = 0.0


class BeatEngine:
    """Advances the selected rhythm once per frame.

    Holds the beat state: current profile, phase, bpm, last intensity and the
    decaying shake intensity. Switching profiles resets the phase to zero.
    """

    def __init__(self, profile: str = "normal", rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self.profile = PROFILES[profile]
        self.phase = 0.0
        self.intensity = 0.0
        self.shake_intensity = 0.0
        self.last_beat: float | None = None

    @property
    def mode(self) -> str:
        return self.profile.name

    @property
    def bpm(self) -> float:
        return self.profile.bpm

    def set_profile(self, name: str) -> BeatProfile:
        """Select a profile by name. Raises KeyError for unknown names."""
        self.profile = PROFILES[name]
        self.phase = 0.0
        return self.profile

    def cycle(self) -> BeatProfile:
        names = list(PROFILES)
        return self.set_profile(names[(names.index(self.profile.name) + 1) % len(names)])

    def step(self, time: float, now: float) -> BeatFrame:
        """Advance one frame.

        ``time`` is the animation time counter and ``now`` a wall-clock reading
        in seconds, used only to space out triggered beats.
        """
        profile = self.profile
        self.phase += profile.advance(time)
        intensity = profile.intensity(self.phase, time)
        self.intensity = intensity

        kick = 0.0
        if profile.shake_above is not None and intensity > profile.shake_above:
            self.shake_intensity = profile.shake
            if self.rng.random() < profile.rotation_kick_chance:
                kick = (self.rng.random() - 0.5) * 0.1
        if profile.random_shake_chance and self.rng.random() < profile.random_shake_chance:
            self.shake_intensity = profile.shake

        triggered = False
        if intensity > TRIGGER_THRESHOLD and (
                self.last_beat is None
                or now - self.last_beat > profile.beat_interval * TRIGGER_SPACING):
            triggered = True
            self.last_beat = now

        self.shake_intensity *= SHAKE_DECAY
        shake_x = (self.rng.random() - 0.5) * self.shake_intensity
        shake_y = (self.rng.random() - 0.5) * self.shake_intensity
        return BeatFrame(intensity, triggered, shake_x, shake_y, kick)
