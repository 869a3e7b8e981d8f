import pytest

from boids import Bounds, Vector2D, neighbors_within


BOUNDS = Bounds(800.0, 600.0)


def test_update_combines_three_forces(make_flock):
    flock = make_flock([(100.0, 100.0), (110.0, 100.0)], [(0.0, 0.0), (1.0, 0.0)])
    boid, other = flock.agents

    boid.update([other], BOUNDS)

    # separation (-0.1) * 2.5 + alignment (3 - 0) * 0.1 + cohesion 10 * 0.005
    assert boid.velocity.x == pytest.approx(0.1)
    assert boid.velocity.y == 0.0
    assert boid.position.x == pytest.approx(100.1)
    assert boid.position.y == 100.0
    # Only the updated boid is written
    assert other.position == Vector2D(110.0, 100.0)
    assert other.velocity == Vector2D(1.0, 0.0)


def test_separation_skips_neighbors_at_zero_distance(make_flock):
    flock = make_flock([(50.0, 50.0), (50.0, 50.0)], [(1.0, 0.0), (1.0, 0.0)])
    boid, twin = flock.agents

    boid.update([twin], BOUNDS)

    # Alignment pulls toward (3, 0); cohesion and separation are zero
    assert boid.velocity.x == pytest.approx(1.0 + (3.0 - 1.0) * 0.1)
    assert boid.velocity.y == 0.0


def test_separation_only_within_radius(make_flock):
    flock = make_flock([(100.0, 100.0), (140.0, 100.0)], [(0.0, 0.0), (0.0, 0.0)])
    boid, other = flock.agents

    boid.update([other], BOUNDS)

    # Outside separation radius 25: zero alignment target, cohesion 40 * 0.005
    assert boid.velocity.x == pytest.approx(0.2)


def test_no_neighbors_keeps_velocity(make_flock):
    flock = make_flock([(10.0, 20.0)], [(1.5, -0.5)])
    boid = flock.agents[0]

    boid.update([], BOUNDS)

    assert boid.velocity == Vector2D(1.5, -0.5)
    assert boid.position == Vector2D(11.5, 19.5)


def test_speed_is_clamped(make_flock):
    flock = make_flock([(10.0, 10.0)], [(30.0, 40.0)])
    boid = flock.agents[0]

    boid.update([], BOUNDS)

    assert boid.velocity.length() == pytest.approx(3.0)
    assert boid.velocity.x == pytest.approx(1.8)
    assert boid.velocity.y == pytest.approx(2.4)


def test_wraparound_on_every_edge(make_flock):
    flock = make_flock(
        [(1.0, 300.0), (799.0, 300.0), (400.0, 1.0), (400.0, 599.0)],
        [(-2.0, 0.0), (2.0, 0.0), (0.0, -2.0), (0.0, 2.0)],
    )
    for boid in flock.agents:
        boid.update([], BOUNDS)

    assert flock.agents[0].position == Vector2D(799.0, 300.0)
    assert flock.agents[1].position == Vector2D(1.0, 300.0)
    assert flock.agents[2].position == Vector2D(400.0, 599.0)
    assert flock.agents[3].position == Vector2D(400.0, 1.0)


def test_bounce_reflects_velocity(make_flock):
    flock = make_flock([(799.0, 1.0)], [(2.0, -2.0)])
    boid = flock.agents[0]

    boid.update([], BOUNDS, boundary="bounce")

    assert boid.position == Vector2D(800.0, 0.0)
    assert boid.velocity == Vector2D(-2.0, 2.0)


def test_unknown_boundary_rejected(make_flock):
    flock = make_flock([(1.0, 1.0)], [(0.0, 0.0)])
    with pytest.raises(ValueError):
        flock.agents[0].update([], BOUNDS, boundary="teleport")


def test_neighbors_from_other_population_rejected(make_flock):
    a = make_flock([(1.0, 1.0)], [(0.0, 0.0)])
    b = make_flock([(2.0, 2.0)], [(0.0, 0.0)])
    with pytest.raises(ValueError):
        a.agents[0].update(b.agents, BOUNDS)


def test_identical_boids_are_distinct(make_flock):
    flock = make_flock([(5.0, 5.0), (5.0, 5.0)], [(1.0, 1.0), (1.0, 1.0)])
    first, second = flock.agents
    assert first != second
    assert neighbors_within(1.0, first, flock.agents) == [second]


def test_position_setter_writes_population(make_flock):
    flock = make_flock([(5.0, 5.0)], [(1.0, 1.0)])
    flock.agents[0].position = Vector2D(7.0, 8.0)
    flock.agents[0].velocity = Vector2D(-1.0, 0.5)
    assert list(flock.positions[0]) == [7.0, 8.0]
    assert list(flock.velocities[0]) == [-1.0, 0.5]


def test_update_uses_owning_flock_settings(make_flock):
    flock = make_flock([(199.0, 10.0)], [(2.0, 0.0)], bounds=(200.0, 100.0),
                       boundary="bounce", max_speed=5.0)
    boid = flock.agents[0]

    boid.update([], flock.bounds)

    assert boid.position == Vector2D(200.0, 10.0)
    assert boid.velocity == Vector2D(-2.0, 0.0)

    boid.position = Vector2D(100.0, 50.0)
    boid.velocity = Vector2D(4.0, 0.0)
    boid.update([], flock.bounds)

    assert boid.velocity == Vector2D(4.0, 0.0)
    assert boid.position == Vector2D(104.0, 50.0)


def test_update_matches_tick_for_custom_flock(make_flock):
    kwargs = dict(bounds=(200.0, 100.0), boundary="bounce", max_speed=5.0)
    state = ([(198.0, 50.0), (190.0, 52.0)], [(4.5, 0.0), (3.0, 1.0)])
    by_tick = make_flock(*state, **kwargs)
    by_update = make_flock(*state, **kwargs)

    by_tick.tick()
    for boid in by_update.agents:
        boid.update(neighbors_within(50.0, boid, by_update.agents), by_update.bounds)

    assert by_update.get_positions() == by_tick.get_positions()
