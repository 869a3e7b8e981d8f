"""Configuration for 2D Boids flocking simulation."""

WINDOW = {
    "width": 800,
    "height": 600,
    "title": "2D Boids",
    "tick_interval_ms": 16,    # ~60 ticks per second
}

BOIDS = {
    "count": 100,
    "width": 800.0,            # Match window size
    "height": 600.0,
    "max_speed": 3.0,
    "initial_speed": 2.0,      # Initial velocity components in [-v, v)
    "size": 10,                # Drawn diameter in pixels

    # Flocking behavior
    "separation_radius": 25.0,  # Minimum comfortable distance
    "alignment_radius": 50.0,   # How far boids match headings
    "cohesion_radius": 50.0,    # How far boids see the group center
    "separation_weight": 2.5,   # Avoid crowding
    "alignment_weight": 1.0,    # Match neighbor velocities
    "cohesion_weight": 1.0,     # Move toward group center
    "alignment_gain": 0.1,
    "cohesion_gain": 0.005,

    # "wrap" (toroidal) or "bounce" (reflective)
    "boundary": "wrap",

    # Execution
    "workers": None,           # None = os.cpu_count()
    "timing_window": 100,      # Ticks kept for the rolling average
}

COLORS = {
    "background": (255, 255, 255),
    "boid": (0, 0, 255),
    "text": (30, 30, 30),
}
