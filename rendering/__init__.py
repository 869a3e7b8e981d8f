"""Rendering components for the 2D boids simulation."""

from .flock_view import FlockView
from .text import TextRenderer

__all__ = ["FlockView", "TextRenderer"]
