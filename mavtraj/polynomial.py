"""Polynomials with coefficients stored in increasing powers of t.

A polynomial with ``N`` coefficients represents
``c_0 + c_1 * t + ... + c_{N-1} * t^(N-1)``.
"""
from __future__ import annotations

import numbers
import sys
from functools import lru_cache
from typing import Iterable, Sequence

import numpy as np

# Maximum number of coefficients the optimisation code works with.
MAX_N = 12
# Largest convolution of a polynomial with MAX_N coefficients with its derivative.
MAX_CONVOLUTION_SIZE = 2 * MAX_N - 2

_EPSILON = sys.float_info.epsilon

# An extremum is reported as (t, value).
Extremum = tuple[float, float]


def compute_base_coefficients(n: int) -> np.ndarray:
    """Return the n x n matrix of derivative factors.

    Entry (d, j) is the factor that the coefficient of t^j picks up when the
    polynomial is differentiated d times, i.e. j! / (j - d)! for j >= d.
    """
    if n < 0:
        raise ValueError("the number of coefficients cannot be negative")
    base = np.zeros((n, n))
    if n == 0:
        return base
    base[0, :] = 1.0
    powers = np.arange(n, dtype=float)
    for row in range(1, n):
        base[row] = base[row - 1] * np.clip(powers - row + 1, 0.0, None)
    return base


@lru_cache(maxsize=None)
def _base_matrix(n: int) -> np.ndarray:
    matrix = compute_base_coefficients(n)
    matrix.setflags(write=False)
    return matrix


def convolve(data: Sequence[float], kernel: Sequence[float]) -> np.ndarray:
    """Discrete convolution: result[m] = sum(data[m - k] * kernel[k])."""
    data_array = np.asarray(data, dtype=float).reshape(-1)
    kernel_array = np.asarray(kernel, dtype=float).reshape(-1)
    if data_array.size == 0 or kernel_array.size == 0:
        raise ValueError("cannot convolve an empty vector")
    return np.convolve(data_array, kernel_array)


class Polynomial:
    """A real polynomial in t, stored by increasing power."""

    __slots__ = ("_coefficients",)

    def __init__(self, coefficients: Iterable[float]):
        self._coefficients = np.array(coefficients, dtype=float).reshape(-1)

    @classmethod
    def zeros(cls, n: int) -> "Polynomial":
        """Return the zero polynomial with ``n`` coefficients."""
        if n < 0:
            raise ValueError("the number of coefficients cannot be negative")
        return cls(np.zeros(n))

    @property
    def n(self) -> int:
        """Number of coefficients (order + 1)."""
        return int(self._coefficients.size)

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients.copy()

    @coefficients.setter
    def coefficients(self, values: Iterable[float]) -> None:
        new = np.array(values, dtype=float).reshape(-1)
        if new.size != self.n:
            raise ValueError(
                f"expected {self.n} coefficients, got {new.size}"
            )
        self._coefficients = new

    def get_coefficients(self, derivative: int = 0) -> np.ndarray:
        """Coefficients of the given derivative, padded with zeros to length N."""
        n = self.n
        if derivative < 0 or derivative > n:
            raise ValueError(
                f"derivative {derivative} out of range for {n} coefficients"
            )
        if derivative == 0:
            return self._coefficients.copy()
        result = np.zeros(n)
        if derivative < n:
            factors = _base_matrix(n)[derivative, derivative:]
            result[: n - derivative] = self._coefficients[derivative:] * factors
        return result

    def evaluate(self, t: float, derivative: int = 0) -> float:
        """Value of the given derivative at time t."""
        if derivative < 0:
            raise ValueError("derivative cannot be negative")
        n = self.n
        if derivative >= n:
            return 0.0
        weighted = (
            self._coefficients[derivative:] * _base_matrix(n)[derivative, derivative:]
        )
        value = 0.0
        for weight in reversed(weighted.tolist()):
            value = value * t + weight
        return float(value)

    def evaluate_derivatives(self, t: float, count: int) -> np.ndarray:
        """Values of derivatives 0 .. count-1 at time t."""
        if count < 0 or count > self.n:
            raise ValueError(
                f"cannot evaluate {count} derivatives of a polynomial "
                f"with {self.n} coefficients"
            )
        return np.array([self.evaluate(t, d) for d in range(count)], dtype=float)

    def get_roots(self, derivative: int) -> np.ndarray:
        """All complex roots of the given derivative.

        A constant or zero derivative has no roots and yields an empty array.
        """
        coeffs = self.get_coefficients(derivative)
        if not np.all(np.isfinite(coeffs)):
            raise ValueError("cannot find roots of a polynomial with non-finite coefficients")
        return np.asarray(np.roots(coeffs[::-1]), dtype=complex)

    @staticmethod
    def select_min_max_candidates_from_roots(
        t_start: float, t_end: float, roots: Iterable[complex]
    ) -> list[float]:
        """Interval ends plus every real root inside [t_start, t_end]."""
        if t_start > t_end:
            raise ValueError("t_start is greater than t_end")
        candidates = [float(t_start), float(t_end)]
        for root in np.asarray(list(roots), dtype=complex):
            if abs(root.imag) > _EPSILON:
                continue
            candidate = float(root.real)
            if t_start <= candidate <= t_end:
                candidates.append(candidate)
        return candidates

    def compute_min_max_candidates(
        self, t_start: float, t_end: float, derivative: int
    ) -> list[float]:
        """Candidate times for extrema of the given derivative in [t_start, t_end]."""
        if derivative < 0 or derivative >= self.n:
            raise ValueError(
                f"derivative {derivative} out of range for {self.n} coefficients"
            )
        roots = self.get_roots(derivative + 1)
        return self.select_min_max_candidates_from_roots(t_start, t_end, roots)

    def select_min_max_from_roots(
        self,
        t_start: float,
        t_end: float,
        derivative: int,
        roots: Iterable[complex],
    ) -> tuple[Extremum, Extremum]:
        """Minimum and maximum of a derivative, given roots of the next derivative."""
        candidates = self.select_min_max_candidates_from_roots(t_start, t_end, roots)
        return self.select_min_max_from_candidates(candidates, derivative)

    def compute_min_max(
        self, t_start: float, t_end: float, derivative: int = 0
    ) -> tuple[Extremum, Extremum]:
        """Minimum and maximum of a derivative on [t_start, t_end] as (t, value)."""
        candidates = self.compute_min_max_candidates(t_start, t_end, derivative)
        return self.select_min_max_from_candidates(candidates, derivative)

    def select_min_max_from_candidates(
        self, candidates: Iterable[float], derivative: int = 0
    ) -> tuple[Extremum, Extremum]:
        """Minimum and maximum of a derivative over the candidate times."""
        evaluated = [(float(t), self.evaluate(t, derivative)) for t in candidates]
        if not evaluated:
            raise ValueError("cannot find extrema from an empty candidate list")
        minimum = min(evaluated, key=lambda item: item[1])
        maximum = max(evaluated, key=lambda item: item[1])
        return minimum, maximum

    def with_appended_coefficients(self, new_n: int) -> "Polynomial":
        """Copy of this polynomial padded with zero coefficients up to new_n."""
        if new_n < self.n:
            raise ValueError(
                f"cannot shrink a polynomial from {self.n} to {new_n} coefficients"
            )
        return Polynomial(
            np.concatenate([self._coefficients, np.zeros(new_n - self.n)])
        )

    @staticmethod
    def base_coeffs_with_time(n: int, derivative: int, t: float) -> np.ndarray:
        """Row vector mapping coefficients to the given derivative's value at t."""
        if not 0 <= derivative < n:
            raise ValueError(
                f"derivative {derivative} out of range for {n} coefficients"
            )
        base = _base_matrix(n)
        coeffs = np.zeros(n)
        coeffs[derivative] = base[derivative, derivative]
        if abs(t) < _EPSILON:
            return coeffs
        powers = np.cumprod(np.full(n - derivative - 1, float(t)))
        coeffs[derivative + 1 :] = base[derivative, derivative + 1 :] * powers
        return coeffs

    def scale_in_time(self, scaling_factor: float) -> None:
        """Scale the time axis in place: p(t) becomes p(scaling_factor * t)."""
        if self.n == 0:
            return
        scales = np.concatenate(
            ([1.0], np.cumprod(np.full(self.n - 1, float(scaling_factor))))
        )
        self._coefficients = self._coefficients * scales

    def __add__(self, other: object) -> "Polynomial":
        if not isinstance(other, Polynomial):
            return NotImplemented
        if other.n != self.n:
            raise ValueError(
                f"cannot add polynomials with {self.n} and {other.n} coefficients"
            )
        return Polynomial(self._coefficients + other._coefficients)

    def __mul__(self, other: object) -> "Polynomial":
        if isinstance(other, Polynomial):
            return Polynomial(convolve(self._coefficients, other._coefficients))
        if isinstance(other, numbers.Real):
            return Polynomial(self._coefficients * float(other))
        return NotImplemented

    def __rmul__(self, other: object) -> "Polynomial":
        if isinstance(other, numbers.Real):
            return Polynomial(self._coefficients * float(other))
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return bool(np.array_equal(self._coefficients, other._coefficients))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Polynomial({self._coefficients.tolist()!r})"