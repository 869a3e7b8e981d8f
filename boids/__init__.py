"""2D boids flocking simulation core."""

from .vector import Vector2D
from .boid import Boid, Bounds, FlockParams, DEFAULT_PARAMS
from .neighbors import neighbors_within
from .flock import Flock, Mode, TickError, TickResult, initialize_population

__all__ = [
    "Vector2D",
    "Boid",
    "Bounds",
    "FlockParams",
    "DEFAULT_PARAMS",
    "neighbors_within",
    "Flock",
    "Mode",
    "TickError",
    "TickResult",
    "initialize_population",
]
