"""Waypoints with derivative constraints and segment time estimation."""
from __future__ import annotations

import copy
import math
from enum import IntEnum
from typing import Iterable, Optional, Sequence, Union

import numpy as np

ArrayLike = Union[float, Sequence[float], np.ndarray]

# Smallest distance between consecutive random vertices.
_MIN_RANDOM_VERTEX_DISTANCE = 0.2
# Lower bound for a segment time estimated with the velocity ramp.
_MIN_SEGMENT_TIME = 0.1
DEFAULT_MAGIC_FABIAN_CONSTANT = 6.5


class DerivativeOrder(IntEnum):
    """Derivative orders of position (and orientation) used as constraint keys."""

    POSITION = 0
    VELOCITY = 1
    ACCELERATION = 2
    JERK = 3
    SNAP = 4
    ORIENTATION = 0
    ANGULAR_VELOCITY = 1
    ANGULAR_ACCELERATION = 2


_DERIVATIVE_NAMES = {
    DerivativeOrder.POSITION: "position",
    DerivativeOrder.VELOCITY: "velocity",
    DerivativeOrder.ACCELERATION: "acceleration",
    DerivativeOrder.JERK: "jerk",
    DerivativeOrder.SNAP: "snap",
}


def derivative_name(order: int) -> str:
    """Human readable name of a position derivative order."""
    return _DERIVATIVE_NAMES.get(order, "unknown")


def _format_value(value: np.ndarray) -> str:
    return "[" + ", ".join(f"{float(x):.4g}" for x in value) + "]"


class Vertex:
    """A support point of a path, holding constraints per derivative order."""

    def __init__(self, dimension: int):
        if dimension < 1:
            raise ValueError("a vertex needs at least one dimension")
        self._dimension = int(dimension)
        self._constraints: dict[int, np.ndarray] = {}

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def constraints(self) -> dict[int, np.ndarray]:
        """Copy of the constraints, ordered by derivative order."""
        return {order: self._constraints[order].copy() for order in sorted(self._constraints)}

    @property
    def number_of_constraints(self) -> int:
        return len(self._constraints)

    def _as_value(self, value: ArrayLike) -> np.ndarray:
        array = np.atleast_1d(np.array(value, dtype=float)).reshape(-1)
        if array.size != self._dimension:
            raise ValueError(
                f"constraint has {array.size} entries, vertex has dimension {self._dimension}"
            )
        return array

    def add_constraint(self, derivative_order: int, value: ArrayLike) -> None:
        """Set (or replace) the constraint for a derivative order."""
        self._constraints[int(derivative_order)] = self._as_value(value)

    def remove_constraint(self, derivative_order: int) -> bool:
        """Remove a constraint; return whether it was present."""
        return self._constraints.pop(int(derivative_order), None) is not None

    def make_start_or_end(self, value: ArrayLike, up_to_derivative: int) -> None:
        """Fix the position and set all derivatives 1..up_to_derivative to zero."""
        self.add_constraint(DerivativeOrder.POSITION, value)
        for order in range(1, up_to_derivative + 1):
            self._constraints[order] = np.zeros(self._dimension)

    def get_constraint(self, derivative_order: int) -> Optional[np.ndarray]:
        """The constraint for a derivative order, or None if there is none."""
        value = self._constraints.get(int(derivative_order))
        return None if value is None else value.copy()

    def has_constraint(self, derivative_order: int) -> bool:
        return int(derivative_order) in self._constraints

    def is_equal_tol(self, other: "Vertex", tol: float) -> bool:
        """True if both vertices hold the same constraints within tol."""
        if len(self._constraints) != len(other._constraints):
            return False
        for order, value in self._constraints.items():
            other_value = other._constraints.get(order)
            if other_value is None or other_value.shape != value.shape:
                return False
            if not np.all(np.abs(value - other_value) <= tol):
                return False
        return True

    def get_subdimension(
        self, subdimensions: Sequence[int], max_derivative_order: int
    ) -> "Vertex":
        """A vertex restricted to some dimensions and derivative orders."""
        indices = [int(i) for i in subdimensions]
        if any(i < 0 or i >= self._dimension for i in indices):
            raise IndexError(
                f"subdimensions {indices} out of range for dimension {self._dimension}"
            )
        subvertex = Vertex(len(indices))
        for order, value in self._constraints.items():
            if order > max_derivative_order:
                continue
            subvertex.add_constraint(order, value[indices])
        return subvertex

    def copy(self) -> "Vertex":
        return copy.deepcopy(self)

    def __str__(self) -> str:
        lines = ["constraints: \n"]
        for order in sorted(self._constraints):
            lines.append(
                f"  type: {derivative_name(order)}"
                f"  value: {_format_value(self._constraints[order])}\n"
            )
        return "".join(lines)

    def __repr__(self) -> str:
        items = ", ".join(
            f"{order}: {self._constraints[order].tolist()}"
            for order in sorted(self._constraints)
        )
        return f"Vertex(dimension={self._dimension}, constraints={{{items}}})"


def format_vertices(vertices: Iterable[Vertex]) -> str:
    """All vertices, each followed by a blank line."""
    return "".join(f"{vertex}\n" for vertex in vertices)


def create_random_vertices(
    maximum_derivative: int,
    n_segments: int,
    pos_min: ArrayLike,
    pos_max: ArrayLike,
    seed: int,
) -> list[Vertex]:
    """Random vertices inside a box; start and end are at rest."""
    low = np.atleast_1d(np.array(pos_min, dtype=float)).reshape(-1)
    high = np.atleast_1d(np.array(pos_max, dtype=float)).reshape(-1)
    if n_segments < 1:
        raise ValueError("at least one segment is needed")
    if low.size != high.size:
        raise ValueError("pos_min and pos_max must have the same size")
    if np.linalg.norm(high - low) < _MIN_RANDOM_VERTEX_DISTANCE:
        raise ValueError("the position box is too small")
    if maximum_derivative <= 0:
        raise ValueError("maximum_derivative must be positive")

    rng = np.random.default_rng(seed)
    dimension = low.size

    last_pos = rng.uniform(low, high)
    first = Vertex(dimension)
    first.make_start_or_end(last_pos, maximum_derivative)
    vertices = [first]

    for _ in range(n_segments):
        while True:
            pos = rng.uniform(low, high)
            if np.linalg.norm(pos - last_pos) > _MIN_RANDOM_VERTEX_DISTANCE:
                break
        vertex = Vertex(dimension)
        vertex.add_constraint(DerivativeOrder.POSITION, pos)
        vertices.append(vertex)
        last_pos = pos

    vertices[-1].make_start_or_end(last_pos, maximum_derivative)
    return vertices


def create_random_vertices_1d(
    maximum_derivative: int,
    n_segments: int,
    pos_min: float,
    pos_max: float,
    seed: int,
) -> list[Vertex]:
    """One-dimensional version of create_random_vertices."""
    return create_random_vertices(
        maximum_derivative, n_segments, [pos_min], [pos_max], seed
    )


def create_square_vertices(
    maximum_derivative: int,
    center: Sequence[float],
    side_length: float,
    rounds: int,
) -> list[Vertex]:
    """Vertices flying `rounds` times around a square in the horizontal plane."""
    cx, cy, cz = (float(c) for c in center)
    half = side_length / 2.0
    corners = [
        (cx - half, cy - half, cz),
        (cx - half, cy + half, cz),
        (cx + half, cy + half, cz),
        (cx + half, cy - half, cz),
    ]
    templates = []
    for corner in corners:
        vertex = Vertex(3)
        vertex.add_constraint(DerivativeOrder.POSITION, corner)
        templates.append(vertex)
    v1, v2, v3, v4 = templates

    vertices = [v1.copy()]
    vertices[0].make_start_or_end(corners[0], maximum_derivative)
    for _ in range(rounds):
        vertices.extend(v.copy() for v in (v2, v3, v4, v1))
    vertices[-1].make_start_or_end(corners[0], maximum_derivative)
    return vertices


def _positions(vertices: Sequence[Vertex]) -> list[np.ndarray]:
    if len(vertices) < 2:
        raise ValueError("at least two vertices are needed")
    positions = []
    for vertex in vertices:
        position = vertex.get_constraint(DerivativeOrder.POSITION)
        if position is None:
            raise ValueError("every vertex needs a position constraint")
        positions.append(position)
    return positions


def compute_time_velocity_ramp(
    start: ArrayLike, goal: ArrayLike, v_max: float, a_max: float
) -> float:
    """Time for a trapezoidal velocity profile from start to goal."""
    distance = float(
        np.linalg.norm(np.atleast_1d(np.array(start, dtype=float))
                       - np.atleast_1d(np.array(goal, dtype=float)))
    )
    acc_time = v_max / a_max
    acc_distance = 0.5 * v_max * acc_time
    if distance < 2.0 * acc_distance:
        return 2.0 * math.sqrt(distance / a_max)
    return 2.0 * acc_time + (distance - 2.0 * acc_distance) / v_max


def estimate_segment_times_velocity_ramp(
    vertices: Sequence[Vertex], v_max: float, a_max: float, time_factor: float = 1.0
) -> list[float]:
    """Segment times from a velocity ramp, at least 0.1 s each.

    ``time_factor`` is accepted for interface compatibility and does not
    change the result.
    """
    positions = _positions(vertices)
    return [
        max(_MIN_SEGMENT_TIME, compute_time_velocity_ramp(start, end, v_max, a_max))
        for start, end in zip(positions, positions[1:])
    ]


def estimate_segment_times_nfabian(
    vertices: Sequence[Vertex],
    v_max: float,
    a_max: float,
    magic_fabian_constant: float = DEFAULT_MAGIC_FABIAN_CONSTANT,
) -> list[float]:
    """Heuristic segment times that add extra time for short segments."""
    positions = _positions(vertices)
    times = []
    for start, end in zip(positions, positions[1:]):
        distance = float(np.linalg.norm(end - start))
        times.append(
            distance / v_max * 2
            * (1.0 + magic_fabian_constant * v_max / a_max
               * math.exp(-distance / v_max * 2))
        )
    return times


def estimate_segment_times(
    vertices: Sequence[Vertex], v_max: float, a_max: float
) -> list[float]:
    """Default segment time estimate."""
    return estimate_segment_times_nfabian(vertices, v_max, a_max)