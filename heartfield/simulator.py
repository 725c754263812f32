"""Pygame window that displays the Canvas and forwards input events."""

import os
from typing import Callable

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from heartfield.canvas import Canvas

EventHandler = Callable[[pygame.event.Event], None]


class Simulator:
    """Resizable window showing the Canvas, upscaled by ``scale``.

    Mouse positions in forwarded events are converted to canvas pixels. On
    window resize the canvas is reallocated before the event is forwarded.
    """

    def __init__(self, canvas: Canvas, scale: int = 1, title: str = "Heartfield",
                 on_event: EventHandler | None = None):
        self.canvas = canvas
        self.scale = scale
        self.width = canvas.width * scale
        self.height = canvas.height * scale
        self.on_event = on_event

        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()

    def _to_canvas(self, pos: tuple[int, int]) -> tuple[int, int]:
        return (pos[0] // self.scale, pos[1] // self.scale)

    def update(self) -> bool:
        """Handle events and blit canvas to screen. Returns False if window was closed."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            if event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
                self.canvas.resize(max(1, event.w // self.scale), max(1, event.h // self.scale))
            if event.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                event = pygame.event.Event(event.type, {**event.dict,
                                                        "pos": self._to_canvas(event.pos)})
            if self.on_event is not None:
                self.on_event(event)

        # Wrap the canvas bytes as a surface, then scale to the window
        surface = pygame.image.frombuffer(self.canvas.get_buffer(),
                                          (self.canvas.width, self.canvas.height), "RGB")
        if self.scale == 1:
            self.screen.blit(surface, (0, 0))
        else:
            pygame.transform.scale(surface, (self.width, self.height), self.screen)
        pygame.display.flip()
        return True

    def tick(self, fps: int = 60) -> None:
        """Limit framerate (0 = uncapped)."""
        self.clock.tick(fps)

    def close(self) -> None:
        pygame.quit()
