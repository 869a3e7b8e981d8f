"""Keyboard handling for the simulation controls."""

import pygame
from pygame.locals import *

from boids import Mode


class InputHandler:
    """Maps keys to the Serial / Parallel / Stop controls."""

    def __init__(self, app):
        self.app = app

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            elif event.key == K_s:
                self.app.start(Mode.SEQUENTIAL)
            elif event.key == K_p:
                self.app.start(Mode.PARALLEL)
            elif event.key == K_SPACE:
                self.app.toggle_running()

        return True
