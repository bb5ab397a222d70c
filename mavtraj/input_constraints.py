"""Limits on the inputs of a multicopter: thrust, velocity and body rates."""
from __future__ import annotations

import math
from enum import IntEnum
from typing import Mapping, Optional

GRAVITY = 9.81


class InputConstraintType(IntEnum):
    F_MIN = 0
    F_MAX = 1
    V_MAX = 2
    OMEGA_XY_MAX = 3
    OMEGA_Z_MAX = 4
    OMEGA_Z_DOT_MAX = 5


_NAMES = {
    InputConstraintType.F_MIN: "f_min",
    InputConstraintType.F_MAX: "f_max",
    InputConstraintType.V_MAX: "v_max",
    InputConstraintType.OMEGA_XY_MAX: "omega_xy_max",
    InputConstraintType.OMEGA_Z_MAX: "omega_z_max",
    InputConstraintType.OMEGA_Z_DOT_MAX: "omega_z_dot_max",
}


def constraint_name(constraint_type: int) -> str:
    """Name of a constraint type, or "Unknown!" for an invalid one."""
    try:
        return _NAMES[InputConstraintType(constraint_type)]
    except ValueError:
        return "Unknown!"


class InputConstraints:
    """A set of input limits, at most one per constraint type."""

    def __init__(self):
        self._constraints: dict[int, float] = {}

    def add_constraint(self, constraint_type: int, value: float) -> None:
        """Set a limit; thrust bounds are kept consistent with each other."""
        constraint_type = int(constraint_type)
        value = abs(float(value))
        f_min, f_max = InputConstraintType.F_MIN, InputConstraintType.F_MAX
        if constraint_type == f_min and f_max in self._constraints:
            self._constraints[f_max] = max(value, self._constraints[f_max])
        elif constraint_type == f_max and f_min in self._constraints:
            self._constraints[f_min] = min(value, self._constraints[f_min])
        self._constraints[constraint_type] = value

    def set_default_values(self) -> None:
        self._constraints[InputConstraintType.F_MIN] = 0.5 * GRAVITY
        self._constraints[InputConstraintType.F_MAX] = 1.5 * GRAVITY
        self._constraints[InputConstraintType.V_MAX] = 3.0
        self._constraints[InputConstraintType.OMEGA_XY_MAX] = math.pi / 2.0
        self._constraints[InputConstraintType.OMEGA_Z_MAX] = math.pi / 2.0
        self._constraints[InputConstraintType.OMEGA_Z_DOT_MAX] = 2.0 * math.pi

    def get_constraint(self, constraint_type: int) -> Optional[float]:
        """The limit for a type, or None if it is not set."""
        return self._constraints.get(int(constraint_type))

    def has_constraint(self, constraint_type: int) -> bool:
        return int(constraint_type) in self._constraints

    def remove_constraint(self, constraint_type: int) -> bool:
        """Remove a limit; return whether it was set."""
        return self._constraints.pop(int(constraint_type), None) is not None

    def to_dict(self) -> dict[str, float]:
        """Limits keyed by constraint name, in type order."""
        return {
            constraint_name(ctype): value
            for ctype, value in sorted(self._constraints.items())
        }

    def from_dict(self, data: Mapping[str, float]) -> None:
        """Add every known limit found in the mapping."""
        for ctype in InputConstraintType:
            name = constraint_name(ctype)
            if name in data:
                self.add_constraint(ctype, float(data[name]))

    def __repr__(self) -> str:
        return f"InputConstraints({self.to_dict()!r})"