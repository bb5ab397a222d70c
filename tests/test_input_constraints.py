import math

import pytest

from mavtraj.input_constraints import (
    GRAVITY,
    InputConstraints,
    InputConstraintType as ICT,
    constraint_name,
)


def test_names():
    assert constraint_name(ICT.F_MIN) == "f_min"
    assert constraint_name(ICT.OMEGA_Z_DOT_MAX) == "omega_z_dot_max"
    assert constraint_name(99) == "Unknown!"


def test_add_takes_absolute_value():
    c = InputConstraints()
    c.add_constraint(ICT.V_MAX, -3.0)
    assert c.get_constraint(ICT.V_MAX) == 3.0


def test_f_max_lowers_f_min():
    c = InputConstraints()
    c.add_constraint(ICT.F_MIN, 8.0)
    c.add_constraint(ICT.F_MAX, 6.0)
    assert c.get_constraint(ICT.F_MIN) == 6.0
    assert c.get_constraint(ICT.F_MAX) == 6.0


def test_f_min_raises_f_max():
    c = InputConstraints()
    c.add_constraint(ICT.F_MAX, 6.0)
    c.add_constraint(ICT.F_MIN, 8.0)
    assert c.get_constraint(ICT.F_MAX) == 8.0
    assert c.get_constraint(ICT.F_MIN) <= c.get_constraint(ICT.F_MAX)


def test_defaults():
    c = InputConstraints()
    c.set_default_values()
    assert c.get_constraint(ICT.F_MIN) == pytest.approx(0.5 * GRAVITY)
    assert c.get_constraint(ICT.F_MAX) == pytest.approx(1.5 * GRAVITY)
    assert c.get_constraint(ICT.V_MAX) == 3.0
    assert c.get_constraint(ICT.OMEGA_XY_MAX) == pytest.approx(math.pi / 2.0)
    assert c.get_constraint(ICT.OMEGA_Z_DOT_MAX) == pytest.approx(2.0 * math.pi)
    assert list(c.to_dict()) == [
        "f_min", "f_max", "v_max", "omega_xy_max", "omega_z_max", "omega_z_dot_max"
    ]


def test_has_and_remove():
    c = InputConstraints()
    assert not c.has_constraint(ICT.V_MAX)
    assert c.get_constraint(ICT.V_MAX) is None
    c.add_constraint(ICT.V_MAX, 2.0)
    assert c.has_constraint(ICT.V_MAX)
    assert c.remove_constraint(ICT.V_MAX) is True
    assert c.remove_constraint(ICT.V_MAX) is False


def test_dict_round_trip():
    c = InputConstraints()
    c.set_default_values()
    other = InputConstraints()
    other.from_dict(c.to_dict())
    assert other.to_dict() == c.to_dict()


def test_from_dict_ignores_unknown_keys():
    c = InputConstraints()
    c.from_dict({"v_max": 2.0, "bogus": 1.0})
    assert c.to_dict() == {"v_max": 2.0}


def test_from_dict_bad_value():
    c = InputConstraints()
    with pytest.raises(TypeError):
        c.from_dict({"v_max": None})