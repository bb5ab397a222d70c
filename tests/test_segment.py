import numpy as np
import pytest

from mavtraj.polynomial import Polynomial
from mavtraj.segment import Segment


def test_new_segment_is_zero():
    segment = Segment(4, 3)
    assert segment.n == 4
    assert segment.dimension == 3
    assert segment.time == 0.0
    assert np.array_equal(segment.evaluate(1.5), np.zeros(3))


def test_set_and_evaluate_polynomials():
    segment = Segment(3, 2)
    segment[0] = Polynomial([1.0, 2.0, 3.0])
    segment[1] = Polynomial([4.0, 0.0, 0.0])
    assert np.allclose(segment.evaluate(0.0), [1.0, 4.0])
    assert np.allclose(
        segment.evaluate(2.0, 1),
        [segment[0].evaluate(2.0, 1), segment[1].evaluate(2.0, 1)],
    )
    assert segment[0] == Polynomial([1.0, 2.0, 3.0])


def test_wrong_polynomial_size_rejected():
    segment = Segment(3, 2)
    with pytest.raises(ValueError):
        segment[0] = Polynomial([1.0, 2.0])
    assert segment[0] == Polynomial([0.0, 0.0, 0.0])


def test_non_polynomial_rejected():
    segment = Segment(3, 2)
    with pytest.raises(TypeError):
        segment[1] = [1.0, 2.0, 3.0]
    assert segment[1] == Polynomial([0.0, 0.0, 0.0])


def test_invalid_sizes_rejected():
    with pytest.raises(ValueError):
        Segment(0, 3)
    with pytest.raises(ValueError):
        Segment(3, 0)


def test_time_nanoseconds_round_trip():
    segment = Segment(2, 1)
    segment.time = 1.5
    ns = segment.time_ns
    other = Segment(2, 1)
    other.time_ns = ns
    assert other.time == pytest.approx(1.5)


def test_iteration_yields_every_dimension():
    segment = Segment(2, 4)
    assert len(list(segment)) == 4
    assert len(segment) == 4