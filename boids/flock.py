"""Flock management - population ownership, serial/parallel ticks and frame timing."""

import os
import time
import numpy as np
from collections import deque
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum
from numba import njit
from typing import Callable, List, NamedTuple, Optional, Tuple

from config import boids as config
from .boid import Boid, Bounds, FlockParams, boundary_code, params_from_settings, step_boid
from .neighbors import query_neighbors
from .vector import Vector2D


class Mode(Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"

    @property
    def label(self) -> str:
        return "Parallel" if self is Mode.PARALLEL else "Serial"


class TickResult(NamedTuple):
    positions: List[Vector2D]
    elapsed: float  # ms, update phase only
    mode: Mode


class TickError(RuntimeError):
    """Raised once when any partition of a parallel tick fails."""

    def __init__(self, errors: List[BaseException]):
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} partition(s) failed during parallel tick; first: {self.errors[0]!r}"
        )


# ============================================================================
# NUMBA JIT-COMPILED TICK LOOP
# ============================================================================

@njit(nogil=True, cache=True)
def update_range(
    start: int,
    stop: int,
    positions: np.ndarray,
    velocities: np.ndarray,
    width: float,
    height: float,
    params: FlockParams,
    boundary: int
):
    """Query neighbors for and update boids [start, stop) against live state."""
    neighbors = np.empty(positions.shape[0], dtype=np.int64)
    for i in range(start, stop):
        count = query_neighbors(i, positions, params.perception_radius, neighbors)
        step_boid(i, positions, velocities, neighbors, count, width, height, params, boundary)


def partition_ranges(count: int, parts: int) -> List[Tuple[int, int]]:
    """Split [0, count) into at most ``parts`` contiguous, non-empty ranges."""
    ranges = []
    for chunk in np.array_split(np.arange(count), max(1, parts)):
        if len(chunk):
            ranges.append((int(chunk[0]), int(chunk[-1]) + 1))
    return ranges


# ============================================================================
# FLOCK CLASS
# ============================================================================

class Flock:
    """
    Fixed-size 2D flock with sequential or thread-parallel ticks.

    Neighbor queries read the live population, so boids updated earlier in a
    tick are already visible to later ones. In parallel mode partitions run
    concurrently against the same arrays; each partition writes only its own
    rows, and reads of other partitions' rows are unsynchronized. The two
    modes therefore drift apart numerically; each is reproducible only
    against itself (and parallel only with a single worker).
    """

    def __init__(
        self,
        num_boids: Optional[int] = None,
        bounds: Optional[Tuple[float, float]] = None,
        seed: Optional[int] = None,
        *,
        positions=None,
        velocities=None,
        view_sync: Optional[Callable[[int, Vector2D], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
        **overrides
    ):
        unknown = set(overrides) - set(config.BOIDS)
        if unknown:
            raise KeyError(f"unknown flock settings: {sorted(unknown)}")
        settings = {**config.BOIDS, **overrides}

        if bounds is None:
            bounds = (settings["width"], settings["height"])
        width, height = float(bounds[0]), float(bounds[1])
        if width <= 0 or height <= 0:
            raise ValueError(f"bounds must be positive, got {width} x {height}")
        self.bounds = Bounds(width, height)

        self.boundary = settings["boundary"]
        self._boundary_code = boundary_code(self.boundary)
        self.params = params_from_settings(settings)
        if settings["alignment_radius"] != settings["cohesion_radius"]:
            print(
                f"[Flock] alignment_radius != cohesion_radius; both forces use "
                f"{self.params.perception_radius:g}"
            )

        # Boid data (float64 for physics accuracy)
        if positions is not None or velocities is not None:
            self.positions, self.velocities = self._validate_state(positions, velocities, self.bounds)
        else:
            n = settings["count"] if num_boids is None else num_boids
            if n < 0:
                raise ValueError(f"num_boids must be >= 0, got {n}")
            rng = np.random.default_rng(seed)
            speed = float(settings["initial_speed"])
            self.positions = rng.random((n, 2)) * np.array([width, height])
            self.velocities = rng.random((n, 2)) * 2 * speed - speed
        self.num_boids = len(self.positions)
        self.agents = [
            Boid(i, self.positions, self.velocities, self.params, self.boundary)
            for i in range(self.num_boids)
        ]

        # Execution
        self.mode = Mode.SEQUENTIAL
        self.last_mode = self.mode
        self.workers = settings["workers"] or os.cpu_count() or 1
        self._partitions = partition_ranges(self.num_boids, self.workers)
        self._executor = None
        self._closed = False

        # Timing
        self._clock = clock
        self.recent_tick_durations = deque(maxlen=settings["timing_window"])

        self.view_sync = view_sync

        # Warm up Numba so worker threads never compile
        self._warmup_numba()

        print(
            f"[Flock] Initialized {self.num_boids:,} boids "
            f"({width:g}x{height:g}, {self.boundary}, {self.workers} workers)"
        )

    @classmethod
    def from_state(cls, positions, velocities, bounds=None, **kwargs) -> "Flock":
        """Build a flock from explicit (n, 2) position and velocity data."""
        return cls(bounds=bounds, positions=positions, velocities=velocities, **kwargs)

    @staticmethod
    def _validate_state(positions, velocities, bounds: Bounds):
        if positions is None or velocities is None:
            raise ValueError("positions and velocities must be given together")
        arrays = []
        for name, data in (("positions", positions), ("velocities", velocities)):
            arr = np.array(data, dtype=np.float64)
            if arr.size == 0:
                arr = arr.reshape(0, 2)
            if arr.ndim != 2 or arr.shape[1] != 2:
                raise ValueError(f"{name} must have shape (n, 2), got {arr.shape}")
            arrays.append(np.ascontiguousarray(arr))
        if arrays[0].shape != arrays[1].shape:
            raise ValueError(
                f"positions {arrays[0].shape} and velocities {arrays[1].shape} differ in length"
            )
        outside = (arrays[0] < 0) | (arrays[0] > bounds) | ~np.isfinite(arrays[0])
        if outside.any():
            row = int(np.argwhere(outside)[0][0])
            raise ValueError(
                f"position {tuple(arrays[0][row])} of boid {row} lies outside "
                f"[0, {bounds.width:g}] x [0, {bounds.height:g}]"
            )
        return arrays[0], arrays[1]

    def _warmup_numba(self):
        """Pre-compile Numba functions."""
        pos = np.array([[1.0, 1.0], [2.0, 2.0]], dtype=np.float64)
        vel = np.array([[0.5, 0.0], [0.0, 0.5]], dtype=np.float64)
        update_range(0, 2, pos, vel, 10.0, 10.0, self.params, self._boundary_code)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._closed:
            raise RuntimeError("flock is closed")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix="flock"
            )
            print(f"[Flock] Worker pool started ({self.workers} threads)")
        return self._executor

    def close(self):
        """Shut down the worker pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            print("[Flock] Worker pool stopped")
        self._closed = True

    def __enter__(self) -> "Flock":
        return self

    def __exit__(self, *exc):
        self.close()

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def _update_serial(self):
        update_range(
            0, self.num_boids,
            self.positions, self.velocities,
            self.bounds.width, self.bounds.height,
            self.params, self._boundary_code
        )

    def _update_parallel(self):
        executor = self._get_executor()
        futures = [
            executor.submit(
                update_range,
                start, stop,
                self.positions, self.velocities,
                self.bounds.width, self.bounds.height,
                self.params, self._boundary_code
            )
            for start, stop in self._partitions
        ]
        wait(futures)
        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            raise TickError(errors) from errors[0]

    def tick(self, mode=None) -> TickResult:
        """
        Advance the flock by one step.

        Args:
            mode: Mode (or its value) for this tick; defaults to ``self.mode``

        Returns:
            TickResult with every boid's new position and the update-phase
            duration in milliseconds
        """
        mode = self.mode if mode is None else Mode(mode)
        if self.num_boids == 0:
            return TickResult([], 0.0, mode)

        start = self._clock()
        if mode is Mode.PARALLEL:
            self._update_parallel()
        else:
            self._update_serial()
        elapsed = (self._clock() - start) * 1000.0

        if mode is not self.last_mode:
            # Timings from the other mode would skew the average
            self.reset_timings()
        self.record_duration(elapsed)
        self.last_mode = mode

        positions = self.get_positions()
        if self.view_sync is not None:
            for i, position in enumerate(positions):
                self.view_sync(i, position)
        return TickResult(positions, elapsed, mode)

    def get_positions(self) -> List[Vector2D]:
        return [Vector2D(x, y) for x, y in self.positions.tolist()]

    # ------------------------------------------------------------------
    # Mode and timing
    # ------------------------------------------------------------------

    def set_mode(self, mode):
        """Persist the default mode; previous timings no longer apply."""
        self.mode = Mode(mode)
        self.last_mode = self.mode
        self.reset_timings()

    def record_duration(self, elapsed_ms: float):
        self.recent_tick_durations.append(float(elapsed_ms))

    def reset_timings(self):
        self.recent_tick_durations.clear()

    def average_recent_tick_duration(self) -> float:
        """Mean duration (ms) over the rolling window, 0.0 if empty."""
        if not self.recent_tick_durations:
            return 0.0
        return sum(self.recent_tick_durations) / len(self.recent_tick_durations)

    def format_stats(self) -> str:
        return f"Average Frame Time: {self.average_recent_tick_duration():.2f} ms ({self.last_mode.label})"


def initialize_population(
    count: Optional[int] = None,
    bounds: Optional[Tuple[float, float]] = None,
    seed: Optional[int] = None,
    **kwargs
) -> Flock:
    """Create a flock with uniformly random positions and velocities."""
    return Flock(num_boids=count, bounds=bounds, seed=seed, **kwargs)
