import pytest

from boids import Flock


@pytest.fixture
def make_flock():
    """Build flocks from explicit state and close their worker pools afterwards."""
    created = []

    def _make(positions, velocities, bounds=(800.0, 600.0), **kwargs):
        flock = Flock.from_state(positions, velocities, bounds=bounds, **kwargs)
        created.append(flock)
        return flock

    yield _make
    for flock in created:
        flock.close()


@pytest.fixture
def random_flock():
    flock = Flock(num_boids=120, bounds=(400.0, 300.0), seed=1234, workers=4)
    yield flock
    flock.close()
