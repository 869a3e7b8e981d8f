"""
2D Boids Simulation
===================

Runs the flock in a pygame window, ticking about every 16 ms. The HUD shows
the mean update time over the last 100 ticks, e.g.
"Average Frame Time: 1.42 ms (Parallel)", and restarts that average whenever
the execution mode changes.

Controls:
    - S: Run ticks serially
    - P: Run ticks on the worker pool
    - Space: Stop/resume ticking
    - ESC: Quit
"""

from core import Application


def main():
    app = Application()
    app.run()


if __name__ == "__main__":
    main()
