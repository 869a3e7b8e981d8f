"""Individual boid handle and the per-tick steering/integration rule."""

import math
import numpy as np
from numba import njit
from typing import NamedTuple, Optional, Sequence

from config import boids as config
from .vector import Vector2D


# Boundary policies (int codes are what the kernels see)
WRAP = 0
BOUNCE = 1
BOUNDARY_POLICIES = {"wrap": WRAP, "bounce": BOUNCE}


def boundary_code(name: str) -> int:
    """Translate a boundary policy name into its kernel code."""
    try:
        return BOUNDARY_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"unknown boundary policy {name!r}, expected one of {sorted(BOUNDARY_POLICIES)}"
        ) from None


class Bounds(NamedTuple):
    """Width and height of the simulation area."""
    width: float
    height: float


class FlockParams(NamedTuple):
    """Numeric rule constants, passed as-is into the Numba kernels."""
    max_speed: float
    separation_radius: float
    perception_radius: float
    separation_weight: float
    alignment_weight: float
    cohesion_weight: float
    alignment_gain: float
    cohesion_gain: float


def params_from_settings(settings: dict) -> FlockParams:
    """Build kernel parameters from a BOIDS-style settings dict."""
    return FlockParams(
        max_speed=float(settings["max_speed"]),
        separation_radius=float(settings["separation_radius"]),
        perception_radius=float(max(settings["alignment_radius"], settings["cohesion_radius"])),
        separation_weight=float(settings["separation_weight"]),
        alignment_weight=float(settings["alignment_weight"]),
        cohesion_weight=float(settings["cohesion_weight"]),
        alignment_gain=float(settings["alignment_gain"]),
        cohesion_gain=float(settings["cohesion_gain"]),
    )


DEFAULT_PARAMS = params_from_settings(config.BOIDS)


# ============================================================================
# NUMBA JIT-COMPILED UPDATE RULE
# ============================================================================

@njit(nogil=True, cache=True)
def step_boid(
    i: int,
    positions: np.ndarray,
    velocities: np.ndarray,
    neighbors: np.ndarray,
    count: int,
    width: float,
    height: float,
    params: FlockParams,
    boundary: int
):
    """
    Steer, integrate and bound boid ``i`` in place.

    Only row ``i`` of ``positions``/``velocities`` is written. The first
    ``count`` entries of ``neighbors`` are the indices the three forces are
    computed over.
    """
    px = positions[i, 0]
    py = positions[i, 1]
    vx = velocities[i, 0]
    vy = velocities[i, 1]

    sep_x, sep_y = 0.0, 0.0
    align_x, align_y = 0.0, 0.0
    coh_x, coh_y = 0.0, 0.0
    sep_count = 0

    for k in range(count):
        j = neighbors[k]
        ox = positions[j, 0]
        oy = positions[j, 1]

        # Separation: closer neighbors repel harder
        dx = px - ox
        dy = py - oy
        dist = math.sqrt(dx * dx + dy * dy)
        if dist > 0.0 and dist < params.separation_radius:
            sep_x += dx / dist / dist
            sep_y += dy / dist / dist
            sep_count += 1

        align_x += velocities[j, 0]
        align_y += velocities[j, 1]

        coh_x += ox
        coh_y += oy

    if sep_count > 0:
        sep_x /= sep_count
        sep_y /= sep_count

    if count > 0:
        align_x /= count
        align_y /= count
        align_mag = math.sqrt(align_x * align_x + align_y * align_y)
        if align_mag > 0:
            align_x = align_x / align_mag * params.max_speed
            align_y = align_y / align_mag * params.max_speed
        align_x = (align_x - vx) * params.alignment_gain
        align_y = (align_y - vy) * params.alignment_gain

        coh_x = (coh_x / count - px) * params.cohesion_gain
        coh_y = (coh_y / count - py) * params.cohesion_gain

    vx += (sep_x * params.separation_weight
           + align_x * params.alignment_weight
           + coh_x * params.cohesion_weight)
    vy += (sep_y * params.separation_weight
           + align_y * params.alignment_weight
           + coh_y * params.cohesion_weight)

    # Limit speed
    speed = math.sqrt(vx * vx + vy * vy)
    if speed > params.max_speed:
        vx = vx / speed * params.max_speed
        vy = vy / speed * params.max_speed

    px += vx
    py += vy

    if boundary == WRAP:
        # A step may overshoot by more than one width on small areas
        if px < 0.0 or px >= width:
            px = px % width
            if px >= width:
                px -= width
        if py < 0.0 or py >= height:
            py = py % height
            if py >= height:
                py -= height
    else:
        if px < 0.0:
            px = 0.0
            vx = -vx
        if px > width:
            px = width
            vx = -vx
        if py < 0.0:
            py = 0.0
            vy = -vy
        if py > height:
            py = height
            vy = -vy

    positions[i, 0] = px
    positions[i, 1] = py
    velocities[i, 0] = vx
    velocities[i, 1] = vy


# ============================================================================
# BOID HANDLE
# ============================================================================

class Boid:
    """
    A single boid, addressed by its index into the flock's state arrays.

    Two boids are the same boid only if they are the same handle; identical
    position and velocity do not make them equal.

    Attributes:
        index: Stable row in the population arrays
        params: Rule constants of the owning flock
        boundary: Boundary policy of the owning flock
    """
    __slots__ = ("index", "_positions", "_velocities", "params", "boundary")

    def __init__(
        self,
        index: int,
        positions: np.ndarray,
        velocities: np.ndarray,
        params: FlockParams = DEFAULT_PARAMS,
        boundary: str = "wrap"
    ):
        boundary_code(boundary)
        self.index = index
        self._positions = positions
        self._velocities = velocities
        self.params = params
        self.boundary = boundary

    @property
    def position(self) -> Vector2D:
        row = self._positions[self.index]
        return Vector2D(float(row[0]), float(row[1]))

    @position.setter
    def position(self, value: Vector2D):
        self._positions[self.index] = (value.x, value.y)

    @property
    def velocity(self) -> Vector2D:
        row = self._velocities[self.index]
        return Vector2D(float(row[0]), float(row[1]))

    @velocity.setter
    def velocity(self, value: Vector2D):
        self._velocities[self.index] = (value.x, value.y)

    def shares_population(self, other: "Boid") -> bool:
        return self._positions is other._positions

    def update(
        self,
        neighbors: Sequence["Boid"],
        bounds: Bounds,
        params: Optional[FlockParams] = None,
        boundary: Optional[str] = None
    ):
        """
        Apply separation, alignment and cohesion from ``neighbors``, then
        integrate one tick and apply the boundary policy.

        Args:
            neighbors: Boids of the same population, already radius-filtered
            bounds: (width, height) of the simulation area
            params: Rule constants, defaults to the owning flock's
            boundary: "wrap" or "bounce", defaults to the owning flock's
        """
        params = self.params if params is None else params
        boundary = self.boundary if boundary is None else boundary
        for other in neighbors:
            if not self.shares_population(other):
                raise ValueError("neighbors must belong to the same population")
        indices = np.fromiter(
            (other.index for other in neighbors), dtype=np.int64, count=len(neighbors)
        )
        step_boid(
            self.index,
            self._positions,
            self._velocities,
            indices,
            len(indices),
            float(bounds[0]),
            float(bounds[1]),
            params,
            boundary_code(boundary)
        )

    def __repr__(self) -> str:
        p = self.position
        v = self.velocity
        return f"Boid({self.index}, pos=({p.x:.2f}, {p.y:.2f}), vel=({v.x:.2f}, {v.y:.2f}))"
