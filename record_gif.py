#!/usr/bin/env python3
"""Record animated GIFs of the heart by rendering frames headlessly.

Usage: python record_gif.py [profile]
Output: media/heart-<mode>.gif, one per render mode
"""

import sys
from pathlib import Path

from PIL import Image

from heartfield.animation import step
from heartfield.canvas import Canvas
from heartfield.render import RenderMode
from heartfield.state import SimulationState

ROOT = Path(__file__).parent
MEDIA_DIR = ROOT / "media"

# GIF settings
WIDTH = 480
HEIGHT = 400
HEART_SCALE = 7
DENSITY = 3.0
DURATION_S = 4.0   # Seconds of animation per GIF
GIF_FPS = 20       # Frames per second in the GIF
SIM_FPS = 60       # Simulation steps per second; every third step becomes a GIF frame
SEED = 14


def canvas_to_image(canvas: Canvas) -> Image.Image:
    """Convert a Canvas buffer to a PIL Image."""
    return Image.frombytes("RGB", (canvas.width, canvas.height), canvas.get_buffer())


def render_gif(mode: RenderMode, profile: str = "normal", duration: float = DURATION_S,
               fps: int = GIF_FPS) -> Path:
    """Run the simulation in ``mode`` and save every n-th frame as an animated GIF."""
    out_path = MEDIA_DIR / f"heart-{mode.value}.gif"
    state = SimulationState.create(WIDTH, HEIGHT, heart_scale=HEART_SCALE, density=DENSITY,
                                   seed=SEED)
    state.mode = mode
    state.beat.set_profile(profile)
    canvas = Canvas(WIDTH, HEIGHT)

    every = max(1, SIM_FPS // fps)
    frames = []
    for i in range(int(duration * SIM_FPS)):
        step(state, canvas, i / SIM_FPS)
        if i % every == 0:
            frames.append(canvas_to_image(canvas))

    # Save as GIF (duration in ms per frame)
    frames[0].save(
        out_path,
        save_all=True,
        append_images=frames[1:],
        duration=int(1000 / fps),
        loop=0,
        optimize=True,
    )
    print(f"[record] Saved {out_path} ({len(frames)} frames, {len(state.particles)} particles)")
    return out_path


if __name__ == "__main__":
    profile = sys.argv[1] if len(sys.argv) > 1 else "normal"
    MEDIA_DIR.mkdir(exist_ok=True)
    print(f"[record] Recording {profile} heart GIFs to {MEDIA_DIR}/")
    for mode in RenderMode:
        render_gif(mode, profile)
    print("[record] Done!")
