"""Radius neighbor queries by linear scan."""

import math
import numpy as np
from numba import njit
from typing import List, Sequence

from .boid import Boid


@njit(nogil=True, cache=True)
def query_neighbors(i: int, positions: np.ndarray, radius: float, out: np.ndarray) -> int:
    """
    Write the indices of every boid strictly within ``radius`` of boid ``i``
    into ``out`` in population order, skipping ``i`` itself.

    Returns:
        Number of indices written
    """
    count = 0
    for j in range(positions.shape[0]):
        if j == i:
            continue
        dx = positions[j, 0] - positions[i, 0]
        dy = positions[j, 1] - positions[i, 1]
        if math.sqrt(dx * dx + dy * dy) < radius:
            out[count] = j
            count += 1
    return count


def neighbors_within(radius: float, center: Boid, population: Sequence[Boid]) -> List[Boid]:
    """
    Boids of ``population`` closer than ``radius`` to ``center``.

    ``center`` is excluded by index, so a different boid sitting at the
    same position is still returned. Order follows ``population``.
    """
    origin = center.position
    found = []
    for other in population:
        if other.index == center.index and other.shares_population(center):
            continue
        if other.position.distance_to(origin) < radius:
            found.append(other)
    return found
