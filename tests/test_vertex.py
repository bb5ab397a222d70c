import math

import numpy as np
import pytest

from mavtraj.vertex import (
    DerivativeOrder,
    Vertex,
    compute_time_velocity_ramp,
    create_random_vertices,
    create_random_vertices_1d,
    create_square_vertices,
    estimate_segment_times,
    estimate_segment_times_nfabian,
    estimate_segment_times_velocity_ramp,
)

N = 10
HIGHEST_DERIVATIVE = N // 2 - 1

# (D, max_derivative, num_segments, seed, pos_bounds, v_max, a_max)
PARAMS = [
    (1, DerivativeOrder.SNAP, 1, 100, 10.0, 3.0, 5.0),
    (1, DerivativeOrder.SNAP, 10, 102, 10.0, 3.0, 5.0),
    (1, DerivativeOrder.SNAP, 50, 103, 10.0, 3.0, 5.0),
    (3, DerivativeOrder.SNAP, 1, 104, 10.0, 3.0, 5.0),
    (3, DerivativeOrder.SNAP, 10, 105, 10.0, 3.0, 5.0),
    (3, DerivativeOrder.SNAP, 50, 106, 10.0, 3.0, 5.0),
    (1, DerivativeOrder.ACCELERATION, 5, 107, 10.0, 1.0, 2.0),
    (3, DerivativeOrder.ACCELERATION, 1, 108, 10.0, 1.0, 2.0),
    (3, DerivativeOrder.ACCELERATION, 5, 109, 10.0, 1.0, 2.0),
    (3, DerivativeOrder.JERK, 5, 110, 10.0, 1.0, 2.0),
]


def _make_vertices(params):
    d, _, num_segments, seed, bounds, _, _ = params
    return create_random_vertices(
        HIGHEST_DERIVATIVE, num_segments, np.full(d, -bounds), np.full(d, bounds), seed
    )


@pytest.mark.parametrize("params", PARAMS)
def test_vertex_generation(params):
    d, _, num_segments, _, bounds, _, _ = params
    vertices = _make_vertices(params)
    assert len(vertices) == num_segments + 1
    assert vertices[0].number_of_constraints == HIGHEST_DERIVATIVE + 1
    assert vertices[-1].number_of_constraints == HIGHEST_DERIVATIVE + 1
    for v in vertices:
        assert v.has_constraint(DerivativeOrder.POSITION)
        c = v.get_constraint(DerivativeOrder.POSITION)
        assert c.shape == (d,)
        assert np.all(c <= bounds)
        assert np.all(c >= -bounds)


@pytest.mark.parametrize("params", PARAMS)
def test_time_allocation(params):
    _, _, num_segments, _, _, v_max, a_max = params
    vertices = _make_vertices(params)
    ramp = estimate_segment_times_velocity_ramp(vertices, v_max, a_max)
    nfabian = estimate_segment_times_nfabian(vertices, v_max, a_max)
    assert len(ramp) == len(nfabian)
    assert len(nfabian) == num_segments
    for t_ramp, t_nf in zip(ramp, nfabian):
        assert 0.0 < t_ramp < 1e5
        assert 0.0 < t_nf < 1e5


def test_random_vertices_are_separated_and_reproducible():
    a = create_random_vertices(4, 20, [-1.0, -1.0], [1.0, 1.0], 7)
    b = create_random_vertices(4, 20, [-1.0, -1.0], [1.0, 1.0], 7)
    assert all(x.is_equal_tol(y, 0.0) for x, y in zip(a, b))
    positions = [v.get_constraint(DerivativeOrder.POSITION) for v in a]
    for p, q in zip(positions, positions[1:]):
        assert np.linalg.norm(q - p) > 0.2


def test_random_vertices_1d():
    vertices = create_random_vertices_1d(2, 3, -5.0, 5.0, 1)
    assert len(vertices) == 4
    assert all(v.dimension == 1 for v in vertices)
    assert vertices[0].number_of_constraints == 3


@pytest.mark.parametrize(
    "args",
    [
        (4, 0, [-1.0], [1.0], 0),
        (4, 2, [-1.0], [1.0, 1.0], 0),
        (4, 2, [0.0], [0.1], 0),
        (0, 2, [-1.0], [1.0], 0),
    ],
)
def test_random_vertices_invalid(args):
    with pytest.raises(ValueError):
        create_random_vertices(*args)


def test_square_vertices():
    vertices = create_square_vertices(4, [0.0, 0.0, 1.0], 2.0, 2)
    assert len(vertices) == 9
    assert vertices[0].number_of_constraints == 5
    assert vertices[-1].number_of_constraints == 5
    assert vertices[1].number_of_constraints == 1
    np.testing.assert_allclose(
        vertices[0].get_constraint(DerivativeOrder.POSITION), [-1.0, -1.0, 1.0]
    )
    np.testing.assert_allclose(
        vertices[2].get_constraint(DerivativeOrder.POSITION), [1.0, 1.0, 1.0]
    )
    # Intermediate copies of the start corner are not at rest.
    assert vertices[4].number_of_constraints == 1
    np.testing.assert_allclose(
        vertices[4].get_constraint(DerivativeOrder.POSITION),
        vertices[0].get_constraint(DerivativeOrder.POSITION),
    )


def test_add_and_remove_constraint():
    v = Vertex(1)
    v.add_constraint(DerivativeOrder.POSITION, 0.0)
    v.add_constraint(DerivativeOrder.VELOCITY, 2.0)
    assert v.number_of_constraints == 2
    assert v.remove_constraint(DerivativeOrder.VELOCITY) is True
    assert v.remove_constraint(DerivativeOrder.VELOCITY) is False
    assert v.get_constraint(DerivativeOrder.VELOCITY) is None
    assert not v.has_constraint(DerivativeOrder.VELOCITY)


def test_add_constraint_wrong_size():
    v = Vertex(3)
    with pytest.raises(ValueError):
        v.add_constraint(DerivativeOrder.POSITION, [1.0, 2.0])


def test_make_start_or_end():
    v = Vertex(2)
    v.make_start_or_end([1.0, 2.0], DerivativeOrder.SNAP)
    assert sorted(v.constraints) == [0, 1, 2, 3, 4]
    np.testing.assert_array_equal(v.get_constraint(DerivativeOrder.JERK), [0.0, 0.0])
    np.testing.assert_array_equal(v.get_constraint(DerivativeOrder.POSITION), [1.0, 2.0])


def test_is_equal_tol():
    a = Vertex(2)
    a.add_constraint(0, [1.0, 2.0])
    b = Vertex(2)
    b.add_constraint(0, [1.05, 2.0])
    assert a.is_equal_tol(b, 0.1)
    assert not a.is_equal_tol(b, 0.01)
    b.add_constraint(1, [0.0, 0.0])
    assert not a.is_equal_tol(b, 1.0)


def test_get_subdimension():
    v = Vertex(3)
    v.make_start_or_end([1.0, 2.0, 3.0], 3)
    sub = v.get_subdimension([2, 0], 1)
    assert sub.dimension == 2
    assert sorted(sub.constraints) == [0, 1]
    np.testing.assert_array_equal(sub.get_constraint(0), [3.0, 1.0])
    with pytest.raises(IndexError):
        v.get_subdimension([3], 1)


def test_str():
    v = Vertex(2)
    v.add_constraint(DerivativeOrder.POSITION, [1.0, 2.5])
    assert str(v) == "constraints: \n  type: position  value: [1, 2.5]\n"


def test_velocity_ramp_values():
    assert compute_time_velocity_ramp([0.0], [1.0], 2.0, 2.0) == pytest.approx(
        2.0 * math.sqrt(0.5)
    )
    assert compute_time_velocity_ramp([0.0], [10.0], 2.0, 2.0) == pytest.approx(6.0)


def test_velocity_ramp_minimum_time_and_zero_nfabian():
    a = Vertex(1)
    a.add_constraint(0, 3.0)
    b = Vertex(1)
    b.add_constraint(0, 3.0)
    assert estimate_segment_times_velocity_ramp([a, b], 1.0, 1.0) == [0.1]
    assert estimate_segment_times_nfabian([a, b], 1.0, 1.0) == [0.0]


def test_estimate_segment_times_matches_nfabian():
    vertices = create_random_vertices(4, 5, [-3.0, -3.0], [3.0, 3.0], 5)
    assert estimate_segment_times(vertices, 2.0, 3.0) == estimate_segment_times_nfabian(
        vertices, 2.0, 3.0
    )


def test_estimate_needs_two_vertices():
    v = Vertex(1)
    v.add_constraint(0, 0.0)
    with pytest.raises(ValueError):
        estimate_segment_times([v], 1.0, 1.0)
    with pytest.raises(ValueError):
        estimate_segment_times_velocity_ramp([v, Vertex(1)], 1.0, 1.0)