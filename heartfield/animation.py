"""One frame of the heart animation.

Frame order: fade the previous frame, run due effects, advance time and
rotation, compute the beat, sort far-to-near, update every particle, draw them
in batched layers, add wireframe connections, then the HUD.
"""

from heartfield.canvas import Canvas
from heartfield.particle import Particle
from heartfield.render import RenderMode, Text, backdrop, connections, render_particles
from heartfield.state import SimulationState

TIME_STEP = 1.5
ROTATION_STEP = 0.008

HUD_SCALE = 2
HUD_MARGIN = 8
HUD_COLOR = Canvas.hex(0xFFB6C1)
OVERLAY_SCALE = 4


def depth_sort(particles: list[Particle]) -> None:
    """Painter's order: largest z (farthest) first."""
    particles.sort(key=lambda p: p.z, reverse=True)


def hud(state: SimulationState, now: float) -> list[Text]:
    line_h = 6 * HUD_SCALE
    profile = state.beat.profile
    items = [
        Text(HUD_MARGIN, state.height - HUD_MARGIN - line_h,
             f"{state.mode.label}  {profile.label}  {round(profile.bpm)} BPM  {state.sound_label}",
             HUD_COLOR, HUD_SCALE),
    ]
    if now < state.overlay_until:
        text_w = len(state.overlay) * 4 * OVERLAY_SCALE - OVERLAY_SCALE
        color = Canvas.hsv((now * 120) % 360, 0.4, 1.0)
        items.append(Text(max(0, (state.width - text_w) // 2), HUD_MARGIN * 3, state.overlay,
                          color, OVERLAY_SCALE))
    return items


def step(state: SimulationState, canvas: Canvas, now: float) -> bool:
    """Advance and draw one frame. Returns True when a heartbeat sound is due."""
    canvas.draw([backdrop(state.mode)])
    state.effects.run_due(now)

    state.time += TIME_STEP
    state.rotation += ROTATION_STEP

    beat = state.beat.step(state.time, now)
    state.rotation += beat.rotation_kick

    depth_sort(state.particles)
    center = state.center
    for particle in state.particles:
        particle.update(state.time, beat.intensity, state.rotation, center,
                        beat.shake_x, beat.shake_y)
    canvas.draw(render_particles(state.particles, state.mode))

    if state.mode is RenderMode.WIREFRAME:
        canvas.draw([connections(state.particles)])

    canvas.draw(hud(state, now))
    state.frame += 1
    return beat.triggered
