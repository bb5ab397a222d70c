"""A piece of a trajectory: one polynomial per dimension over a common time."""
from __future__ import annotations

from typing import Iterator

import numpy as np

from mavtraj.polynomial import Polynomial

_NANOSECONDS_PER_SECOND = 1.0e9


class Segment:
    """``dimension`` polynomials with ``n`` coefficients each, valid for ``time`` seconds."""

    def __init__(self, n: int, dimension: int):
        if n < 1:
            raise ValueError("a segment needs at least one coefficient")
        if dimension < 1:
            raise ValueError("a segment needs at least one dimension")
        self._n = int(n)
        self._polynomials = [Polynomial.zeros(self._n) for _ in range(int(dimension))]
        self._time = 0.0

    @property
    def n(self) -> int:
        """Number of coefficients of every polynomial."""
        return self._n

    @property
    def dimension(self) -> int:
        return len(self._polynomials)

    @property
    def time(self) -> float:
        """Duration of the segment in seconds."""
        return self._time

    @time.setter
    def time(self, seconds: float) -> None:
        self._time = float(seconds)

    @property
    def time_ns(self) -> int:
        """Duration of the segment in nanoseconds."""
        return int(round(self._time * _NANOSECONDS_PER_SECOND))

    @time_ns.setter
    def time_ns(self, nanoseconds: int) -> None:
        self._time = float(nanoseconds) / _NANOSECONDS_PER_SECOND

    @property
    def polynomials(self) -> list[Polynomial]:
        return list(self._polynomials)

    def __len__(self) -> int:
        return len(self._polynomials)

    def __iter__(self) -> Iterator[Polynomial]:
        return iter(self._polynomials)

    def __getitem__(self, index: int) -> Polynomial:
        return self._polynomials[index]

    def __setitem__(self, index: int, polynomial: Polynomial) -> None:
        if not isinstance(polynomial, Polynomial):
            raise TypeError("a segment holds Polynomial objects")
        if polynomial.n != self._n:
            raise ValueError(
                f"segment polynomials have {self._n} coefficients, got {polynomial.n}"
            )
        self._polynomials[index] = polynomial

    def evaluate(self, t: float, derivative: int = 0) -> np.ndarray:
        """Value of the given derivative in every dimension at time t."""
        return np.array([p.evaluate(t, derivative) for p in self._polynomials], dtype=float)

    def __repr__(self) -> str:
        return (
            f"Segment(n={self._n}, dimension={self.dimension}, time={self._time}, "
            f"polynomials={self._polynomials!r})"
        )