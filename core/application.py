"""Main application class that ties everything together."""

import pygame

from config import boids as config
from .input_handler import InputHandler
from rendering import FlockView, TextRenderer
from boids import Flock, Mode


class Application:
    """Drives the flock at a fixed cadence and draws it."""

    def __init__(self):
        pygame.init()
        self.screen_size = (config.WINDOW["width"], config.WINDOW["height"])
        self.screen = pygame.display.set_mode(self.screen_size)
        pygame.display.set_caption(config.WINDOW["title"])

        # Rendering components
        self.flock_view = FlockView()
        self.text_renderer = TextRenderer()

        # Simulation
        self.flock = Flock(
            num_boids=config.BOIDS["count"],
            bounds=self.screen_size,
            view_sync=self.flock_view.sync
        )
        self.flock_view.reset(self.flock.get_positions())

        self.input_handler = InputHandler(self)

        # State
        self.clock = pygame.time.Clock()
        self.tick_rate = round(1000 / config.WINDOW["tick_interval_ms"])
        self.running = True
        self.ticking = False

    def start(self, mode: Mode):
        """Switch execution mode, clear timings and start ticking."""
        self.flock.set_mode(mode)
        self.ticking = True
        print(f"[App] Running {mode.label}")

    def toggle_running(self):
        self.ticking = not self.ticking
        print(f"[App] {'Running' if self.ticking else 'Stopped'}")

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if not self.input_handler.handle_event(event):
                self.running = False

    def _render(self):
        """Render the scene."""
        self.screen.fill(config.COLORS["background"])
        self.flock_view.draw(self.screen)

        self.text_renderer.draw_text(self.screen, self.flock.format_stats(), 10, 10)
        self.text_renderer.draw_text(
            self.screen, "S: Serial  P: Parallel  Space: Stop  Esc: Quit", 10, 35
        )

        pygame.display.flip()

    def run(self):
        """Main application loop."""
        try:
            while self.running:
                self.clock.tick(self.tick_rate)

                self._handle_events()
                if self.ticking:
                    self.flock.tick()
                self._render()
        finally:
            self.flock.close()
            pygame.quit()
