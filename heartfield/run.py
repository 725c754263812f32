"""Main run loop - ties together SimulationState, Canvas, Simulator, and sound."""

import time

import pygame

from heartfield import config
from heartfield.animation import step
from heartfield.audio import HeartbeatSound
from heartfield.canvas import Canvas
from heartfield.simulator import Simulator
from heartfield.state import SimulationState


def handle_event(event: pygame.event.Event, state: SimulationState, canvas: Canvas,
                 sound: HeartbeatSound, now: float) -> None:
    """Apply one input event to the simulation.

    Keys: M render mode, B rhythm, E explosion + wave, S sound on/off.
    """
    if event.type == pygame.MOUSEMOTION:
        state.pointer_move(*event.pos)
    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        state.click(*event.pos, now)
    elif event.type == pygame.VIDEORESIZE:
        state.resize(canvas.width, canvas.height)
    elif event.type == pygame.KEYDOWN:
        if event.key == pygame.K_m:
            print(f"[heartfield] Mode: {state.cycle_mode(now).label}")
        elif event.key == pygame.K_b:
            print(f"[heartfield] Rhythm: {state.cycle_profile(now)}")
        elif event.key == pygame.K_e:
            state.burst(now)
        elif event.key == pygame.K_s:
            state.sound_label = sound.toggle()
            state.show_overlay(state.sound_label, now)


def run(width: int = config.WIDTH, height: int = config.HEIGHT, fps: int = config.FPS,
        title: str = config.TITLE, scale: int = config.PIXEL_SCALE,
        heart_scale: float = config.HEART_SCALE, layers: int = config.LAYERS,
        density: float = config.DENSITY, sound_enabled: bool = config.SOUND_ENABLED,
        locale: str = config.LOCALE, device: str | None = config.AUDIO_DEVICE) -> None:
    """Main entry point. Runs the animation until the window is closed.

    Args:
        width: Window width in pixels.
        height: Window height in pixels.
        fps: Frame cap (0 = as fast as the display allows).
        title: Window title.
        scale: Pixel scale factor; the canvas is rendered at width/scale.
        heart_scale: Heart curve scale factor.
        layers: Number of depth layers in the heart curve.
        density: Particle grid spacing in canvas pixels.
        sound_enabled: Start with the heartbeat sound on.
        locale: Language of the sound toggle label ("vi" or "en").
        device: Output device name or index for sounddevice (None = default).
    """
    canvas = Canvas(max(1, width // scale), max(1, height // scale))
    state = SimulationState.create(canvas.width, canvas.height, heart_scale=heart_scale,
                                   layers=layers, density=density)
    print(f"[heartfield] {len(state.particles)} particles, {canvas.width}x{canvas.height}")
    sound = HeartbeatSound(locale=locale, device=device)
    if sound_enabled:
        sound.toggle()
    state.sound_label = sound.label

    start = time.monotonic()

    def elapsed() -> float:
        return time.monotonic() - start

    sim = Simulator(canvas, scale=scale, title=title,
                    on_event=lambda e: handle_event(e, state, canvas, sound, elapsed()))

    try:
        while True:
            if step(state, canvas, elapsed()):
                sound.play_heartbeat()

            if not sim.update():
                break

            sim.tick(fps)
    except KeyboardInterrupt:
        pass
    finally:
        sound.close()
        sim.close()


def main() -> None:
    run()
