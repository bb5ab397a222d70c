"""Common parts of input feasibility checks: results, half planes and the base checker."""
from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Sequence

import numpy as np

from mavtraj.input_constraints import GRAVITY, InputConstraints
from mavtraj.segment import Segment
from mavtraj.vertex import DerivativeOrder

_LOG = logging.getLogger(__name__)


class InputFeasibilityResult(IntEnum):
    FEASIBLE = 0
    INDETERMINABLE = 1
    INFEASIBLE_THRUST_HIGH = 2
    INFEASIBLE_THRUST_LOW = 3
    INFEASIBLE_VELOCITY = 4
    INFEASIBLE_ROLL_PITCH_RATES = 5
    INFEASIBLE_YAW_RATES = 6
    INFEASIBLE_YAW_ACC = 7


_RESULT_NAMES = {
    InputFeasibilityResult.FEASIBLE: "Feasible",
    InputFeasibilityResult.INDETERMINABLE: "Indeterminable",
    InputFeasibilityResult.INFEASIBLE_THRUST_HIGH: "InfeasibleThrustHigh",
    InputFeasibilityResult.INFEASIBLE_THRUST_LOW: "InfeasibleThrustLow",
    InputFeasibilityResult.INFEASIBLE_VELOCITY: "InfeasibleVelocity",
    InputFeasibilityResult.INFEASIBLE_ROLL_PITCH_RATES: "InfeasibleRollPitchRates",
    InputFeasibilityResult.INFEASIBLE_YAW_RATES: "InfeasibleYawRates",
    InputFeasibilityResult.INFEASIBLE_YAW_ACC: "InfeasibleYawAcc",
}


def feasibility_result_name(result: int) -> str:
    """Readable name of a feasibility result, or "Unknown!"."""
    try:
        return _RESULT_NAMES[InputFeasibilityResult(result)]
    except ValueError:
        return "Unknown!"


def _vector3(value: Sequence[float]) -> np.ndarray:
    array = np.array(value, dtype=float).reshape(-1)
    if array.size != 3:
        raise ValueError("expected a 3D vector")
    return array


@dataclass(eq=False)
class HalfPlane:
    """The half space on the side of ``point`` that ``normal`` points into."""

    point: np.ndarray
    normal: np.ndarray

    def __init__(self, point: Sequence[float], normal: Sequence[float]):
        self.point = _vector3(point)
        normal_array = _vector3(normal)
        length = float(np.linalg.norm(normal_array))
        if not length > 0.0:
            raise ValueError("Invalid normal.")
        self.normal = normal_array / length

    @classmethod
    def from_points(
        cls, a: Sequence[float], b: Sequence[float], c: Sequence[float]
    ) -> "HalfPlane":
        """Plane through three points; the normal is (b - a) x (c - a)."""
        pa, pb, pc = _vector3(a), _vector3(b), _vector3(c)
        if np.array_equal(pa, pb) or np.array_equal(pa, pc):
            raise ValueError("the points defining a half plane must differ")
        return cls(pa, np.cross(pb - pa, pc - pa))

    @classmethod
    def create_bounding_box(
        cls, point: Sequence[float], size: Sequence[float]
    ) -> list["HalfPlane"]:
        """Six half planes whose intersection is the box centred at point."""
        center, extent = _vector3(point), _vector3(size)
        bbx_min = center - extent / 2.0
        bbx_max = center + extent / 2.0
        planes = []
        for axis in range(3):
            normal_min = np.zeros(3)
            normal_max = np.zeros(3)
            normal_min[axis] = 1.0
            normal_max[axis] = -1.0
            planes.append(cls(bbx_min, normal_min))
            planes.append(cls(bbx_max, normal_max))
        return planes


class FeasibilityBase(abc.ABC):
    """Checks segments against input constraints and half-plane boundaries."""

    def __init__(self, input_constraints: Optional[InputConstraints] = None):
        self.input_constraints = (
            input_constraints if input_constraints is not None else InputConstraints()
        )
        self.gravity = np.array([0.0, 0.0, GRAVITY])
        self.half_plane_constraints: list[HalfPlane] = []

    @abc.abstractmethod
    def check_input_feasibility(self, segment: Segment) -> InputFeasibilityResult:
        """Feasibility of one segment with respect to the input constraints."""

    def check_input_feasibility_trajectory(
        self, segments: Iterable[Segment]
    ) -> InputFeasibilityResult:
        """First non-feasible segment result; indeterminable for no segments."""
        result = InputFeasibilityResult.INDETERMINABLE
        for segment in segments:
            result = self.check_input_feasibility(segment)
            if result != InputFeasibilityResult.FEASIBLE:
                return result
        return result

    def check_half_plane_feasibility(self, segment: Segment) -> bool:
        """True if the segment stays strictly inside every half plane."""
        if segment.dimension not in (3, 4):
            _LOG.warning(
                "Feasibility check only implemented for segment dimensions "
                "3 and 4. Got dimension %d.",
                segment.dimension,
            )
            return False

        for half_plane in self.half_plane_constraints:
            # Distance travelled along the plane normal, as one polynomial.
            projection = segment[0] * float(half_plane.normal[0])
            for dim in (1, 2):
                projection = projection + segment[dim] * float(half_plane.normal[dim])
            candidates = projection.compute_min_max_candidates(
                0.0, segment.time, DerivativeOrder.POSITION
            )
            for t in candidates:
                offset = segment.evaluate(t)[:3] - half_plane.point
                if float(offset @ half_plane.normal) <= 0.0:
                    return False
        return True

    def check_half_plane_feasibility_trajectory(
        self, segments: Iterable[Segment]
    ) -> bool:
        return all(self.check_half_plane_feasibility(s) for s in segments)