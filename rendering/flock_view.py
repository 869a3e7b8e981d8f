"""On-screen representation of the flock."""

import pygame
from typing import List

from config import boids as config
from boids import Vector2D


class FlockView:
    """Keeps one circle center per boid, updated through the flock's view-sync hook."""

    def __init__(self):
        self.radius = config.BOIDS["size"] // 2
        self.color = config.COLORS["boid"]
        self.centers: List[tuple] = []

    def reset(self, positions: List[Vector2D]):
        self.centers = [(p.x, p.y) for p in positions]

    def sync(self, index: int, position: Vector2D):
        """View-sync callback: move boid ``index``'s circle."""
        self.centers[index] = (position.x, position.y)

    def draw(self, surface: pygame.Surface):
        for x, y in self.centers:
            pygame.draw.circle(surface, self.color, (int(x), int(y)), self.radius)
