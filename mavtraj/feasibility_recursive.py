"""Recursive input feasibility test that bisects a segment until it is decided."""
from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Optional

import numpy as np

from mavtraj.feasibility_base import FeasibilityBase, InputFeasibilityResult
from mavtraj.input_constraints import InputConstraints, InputConstraintType
from mavtraj.segment import Segment
from mavtraj.vertex import DerivativeOrder

ICT = InputConstraintType
Result = InputFeasibilityResult

_Roots = Optional[list[np.ndarray]]


@dataclass
class RecursiveSettings:
    """Sections shorter than this are reported as indeterminable."""

    min_section_time_s: float = 0.05


class FeasibilityRecursive(FeasibilityBase):
    """Bounds thrust, velocity and body rates per section and bisects when unsure."""

    def __init__(
        self,
        input_constraints: Optional[InputConstraints] = None,
        settings: Optional[RecursiveSettings] = None,
    ):
        super().__init__(input_constraints)
        self.settings = settings if settings is not None else RecursiveSettings()

    @staticmethod
    def _axis_roots(segment: Segment, derivative: int) -> list[np.ndarray]:
        return [segment[i].get_roots(derivative) for i in range(3)]

    def check_input_feasibility(self, segment: Segment) -> InputFeasibilityResult:
        if segment.dimension not in (3, 4):
            return Result.INDETERMINABLE

        has = self.input_constraints.has_constraint
        try:
            roots_acc = (
                self._axis_roots(segment, DerivativeOrder.ACCELERATION)
                if has(ICT.V_MAX)
                else None
            )
            roots_jerk = (
                self._axis_roots(segment, DerivativeOrder.JERK)
                if has(ICT.F_MIN) or has(ICT.F_MAX) or has(ICT.OMEGA_XY_MAX)
                else None
            )
            roots_snap = (
                self._axis_roots(segment, DerivativeOrder.SNAP)
                if has(ICT.OMEGA_XY_MAX)
                else None
            )
        except ValueError:
            return Result.INDETERMINABLE

        t_1, t_2 = 0.0, segment.time
        result = self._recursive_feasibility(
            segment, roots_acc, roots_jerk, roots_snap, t_1, t_2
        )
        if result != Result.FEASIBLE:
            return result

        if segment.dimension == 4:
            # Yaw is assumed independent of translation (rigid body model).
            checks = (
                (ICT.OMEGA_Z_MAX, DerivativeOrder.ANGULAR_VELOCITY, Result.INFEASIBLE_YAW_RATES),
                (ICT.OMEGA_Z_DOT_MAX, DerivativeOrder.ANGULAR_ACCELERATION, Result.INFEASIBLE_YAW_ACC),
            )
            for constraint, derivative, failure in checks:
                limit = self.input_constraints.get_constraint(constraint)
                if limit is None:
                    continue
                try:
                    minimum, maximum = segment[3].compute_min_max(t_1, t_2, derivative)
                except ValueError:
                    return Result.INDETERMINABLE
                if max(abs(minimum[1]), abs(maximum[1])) > limit:
                    return failure

        return Result.FEASIBLE

    def _recursive_feasibility(
        self,
        segment: Segment,
        roots_acc: _Roots,
        roots_jerk: _Roots,
        roots_snap: _Roots,
        t_1: float,
        t_2: float,
    ) -> InputFeasibilityResult:
        if t_2 - t_1 < self.settings.min_section_time_s:
            return Result.INDETERMINABLE

        constraints = self.input_constraints
        f_min_limit = constraints.get_constraint(ICT.F_MIN)
        f_max_limit = constraints.get_constraint(ICT.F_MAX)
        v_max_limit = constraints.get_constraint(ICT.V_MAX)
        omega_xy_limit = constraints.get_constraint(ICT.OMEGA_XY_MAX)

        # Thrust at the section boundaries.
        if f_min_limit is not None or f_max_limit is not None:
            f_t_1 = self.evaluate_thrust(segment, t_1)
            f_t_2 = self.evaluate_thrust(segment, t_2)
            if f_min_limit is not None and min(f_t_1, f_t_2) < f_min_limit:
                return Result.INFEASIBLE_THRUST_LOW
            if f_max_limit is not None and max(f_t_1, f_t_2) > f_max_limit:
                return Result.INFEASIBLE_THRUST_HIGH

        # Velocity at the section boundaries.
        if v_max_limit is not None:
            v_t_1 = float(np.linalg.norm(segment.evaluate(t_1, DerivativeOrder.VELOCITY)[:3]))
            v_t_2 = float(np.linalg.norm(segment.evaluate(t_2, DerivativeOrder.VELOCITY)[:3]))
            if max(v_t_1, v_t_2) > v_max_limit:
                return Result.INFEASIBLE_VELOCITY

        f_min_sqr = 0.0
        f_max_sqr = 0.0
        v_max_sqr = 0.0
        j_max_sqr = 0.0

        if v_max_limit is not None:
            for i in range(3):
                v_min, v_max = segment[i].select_min_max_from_roots(
                    t_1, t_2, DerivativeOrder.VELOCITY, roots_acc[i]
                )
                # A single axis already faster than the total limit.
                if max(v_min[1] ** 2, v_max[1] ** 2) > v_max_limit**2:
                    return Result.INFEASIBLE_VELOCITY
                v_max_sqr += max(abs(v_min[1]), abs(v_max[1])) ** 2

        if f_min_limit is not None or f_max_limit is not None or omega_xy_limit is not None:
            for i in range(3):
                a_min, a_max = segment[i].select_min_max_from_roots(
                    t_1, t_2, DerivativeOrder.ACCELERATION, roots_jerk[i]
                )
                f_i_min = a_min[1] + self.gravity[i]
                f_i_max = a_max[1] + self.gravity[i]
                # A single axis already above the total thrust limit.
                if f_max_limit is not None and max(abs(f_i_min), abs(f_i_max)) > f_max_limit:
                    return Result.INFEASIBLE_THRUST_HIGH
                if f_i_min * f_i_max >= 0.0:
                    f_min_sqr += min(abs(f_i_min), abs(f_i_max)) ** 2
                f_max_sqr += max(abs(f_i_min), abs(f_i_max)) ** 2

        if omega_xy_limit is not None:
            for i in range(3):
                j_min, j_max = segment[i].select_min_max_from_roots(
                    t_1, t_2, DerivativeOrder.JERK, roots_snap[i]
                )
                j_max_sqr += max(abs(j_min[1]), abs(j_max[1])) ** 2

        f_lower_bound = math.sqrt(f_min_sqr)
        f_upper_bound = math.sqrt(f_max_sqr)
        v_upper_bound = math.sqrt(v_max_sqr)
        if f_min_sqr > 1.0e-6:
            omega_xy_upper_bound = math.sqrt(j_max_sqr / f_min_sqr)
        else:
            omega_xy_upper_bound = sys.float_info.max

        # Definitely infeasible.
        if f_min_limit is not None and f_upper_bound < f_min_limit:
            return Result.INFEASIBLE_THRUST_LOW
        if f_max_limit is not None and f_lower_bound > f_max_limit:
            return Result.INFEASIBLE_THRUST_HIGH

        # Possibly infeasible: one of the bounds exceeds a limit, so bisect.
        if (
            (f_min_limit is not None and f_lower_bound < f_min_limit)
            or (f_max_limit is not None and f_upper_bound > f_max_limit)
            or (v_max_limit is not None and v_upper_bound > v_max_limit)
            or (omega_xy_limit is not None and omega_xy_upper_bound > omega_xy_limit)
        ):
            t_half = (t_1 + t_2) / 2
            first = self._recursive_feasibility(
                segment, roots_acc, roots_jerk, roots_snap, t_1, t_half
            )
            if first != Result.FEASIBLE:
                return first
            return self._recursive_feasibility(
                segment, roots_acc, roots_jerk, roots_snap, t_half, t_2
            )

        return Result.FEASIBLE

    def evaluate_thrust(self, segment: Segment, time: float) -> float:
        """Mass-normalised thrust magnitude at the given time."""
        acceleration = segment.evaluate(time, DerivativeOrder.ACCELERATION)[:3]
        return float(np.linalg.norm(acceleration + self.gravity))