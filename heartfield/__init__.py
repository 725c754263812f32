"""Audio-reactive 3D particle heart, rendered with numpy and shown in a pygame window."""

from heartfield.animation import step
from heartfield.canvas import Canvas
from heartfield.run import run
from heartfield.state import SimulationState

__all__ = ["Canvas", "SimulationState", "run", "step"]
