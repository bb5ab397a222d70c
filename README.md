# mavtraj

Building blocks for polynomial trajectories of multirotor aerial vehicles. The package depends on numpy only.

## Modules

- `mavtraj.polynomial` provides `Polynomial`, a polynomial whose coefficients are stored in increasing powers of t. It evaluates any derivative (`evaluate`, `evaluate_derivatives`, `get_coefficients`) and finds roots (`get_roots`). It computes the exact minimum and maximum over an interval (`compute_min_max`, `select_min_max_from_roots`, `select_min_max_from_candidates`). It can scale time in place (`scale_in_time`) and pad coefficients (`with_appended_coefficients`). Polynomials support `+`, `*` with a polynomial (convolution) or a number, and `==`. The module also holds `compute_base_coefficients` and `convolve`. Extrema come back as `(t, value)` pairs.
- `mavtraj.vertex` provides the following:
  - `Vertex`, a waypoint with one constraint vector per derivative order. Its methods are `add_constraint`, `get_constraint` (which returns `None` when the constraint is missing), `has_constraint`, `remove_constraint`, `make_start_or_end`, `is_equal_tol` and `get_subdimension`.
  - `DerivativeOrder`, the enum of derivative orders.
  - Vertex generators: `create_random_vertices`, `create_random_vertices_1d` and `create_square_vertices`.
  - Segment time estimates: `estimate_segment_times` (the default, which uses `estimate_segment_times_nfabian`), `estimate_segment_times_velocity_ramp` (each time is at least 0.1 s) and `compute_time_velocity_ramp`.
- `mavtraj.input_constraints` provides `InputConstraints`, which holds thrust, velocity and body-rate limits keyed by `InputConstraintType`. `add_constraint` stores the absolute value of the limit and keeps `F_MIN` no larger than `F_MAX`. `set_default_values` fills in defaults, and `to_dict` / `from_dict` convert to and from plain dictionaries keyed by `constraint_name`.
- `mavtraj.segment` provides `Segment`, which holds one `Polynomial` per dimension, all with the same number of coefficients. Its duration is available as `time` in seconds and as `time_ns` in nanoseconds. `evaluate(t, derivative)` returns one value per dimension.
- `mavtraj.feasibility_base` provides the following:
  - `InputFeasibilityResult` and `feasibility_result_name`.
  - `HalfPlane`, which is built from a point and a normal, from three points (`from_points`), or as the six planes of a box (`create_bounding_box`).
  - The abstract `FeasibilityBase`. Its `check_half_plane_feasibility` returns true if a segment stays strictly inside every plane in `half_plane_constraints`. Its `check_input_feasibility_trajectory` returns the first result that is not feasible, and returns `INDETERMINABLE` for an empty list.
- `mavtraj.feasibility_recursive` provides `FeasibilityRecursive`, which checks 3D or 4D (position and yaw) segments against the input constraints. It bisects a segment until every section is decided. A section shorter than `RecursiveSettings.min_section_time_s` (0.05 s by default) is reported as indeterminable.
- `mavtraj.conversions` converts between segment lists and the dataclasses `PolynomialTrajectoryMessage` and `PolynomialSegmentMessage`. The conversion functions are `trajectory_to_message` for dimension 3, 4 or 6, `trajectory_to_message_4d` for dimension 3 or 4, `message_to_trajectory` and `message_4d_to_trajectory`. If a segment has an unsupported dimension, the functions raise `ValueError`.
- `mavtraj.timing` provides named wall-clock timers:
  - `Timing` is a registry of timers, addressed by tag or by handle. Its `report()` returns a table of all timers.
  - `Timer` records elapsed time into a registry and can be used as a context manager.
  - `Accumulator` keeps running and windowed statistics.
  - `MiniTimer` is a simple stopwatch.
  - `seconds_to_time_string` formats a duration.

## Install

```
pip install .
```

Install with the test extra to run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from mavtraj.polynomial import Polynomial
from mavtraj.vertex import Vertex, DerivativeOrder, estimate_segment_times

p = Polynomial([1.0, 2.0])
q = Polynomial([-1.0, 3.0])
print((p * q).get_coefficients(0))        # [-1.  1.  6.]

(t_min, v_min), (t_max, v_max) = p.compute_min_max(0.0, 1.0, 0)

start, goal = Vertex(3), Vertex(3)
start.make_start_or_end([0.0, 0.0, 0.0], DerivativeOrder.SNAP)
goal.make_start_or_end([0.0, 5.0, 2.0], DerivativeOrder.SNAP)
times = estimate_segment_times([start, goal], 2.0, 2.0)
```

The following example checks a hovering segment for feasibility:

```python
from mavtraj.feasibility_base import HalfPlane
from mavtraj.feasibility_recursive import FeasibilityRecursive
from mavtraj.input_constraints import InputConstraints
from mavtraj.segment import Segment

segment = Segment(10, 3)          # all coefficients zero: hovering at the origin
segment.time = 2.0

limits = InputConstraints()
limits.set_default_values()
checker = FeasibilityRecursive(limits)
print(checker.check_input_feasibility(segment))

checker.half_plane_constraints = HalfPlane.create_bounding_box([0, 0, 0], [2, 2, 2])
print(checker.check_half_plane_feasibility(segment))   # True
```

## What this package does not do

The package does not solve for trajectories. It has no linear or nonlinear polynomial optimisation and no trajectory class spanning several segments. A trajectory is passed around as a plain list of `Segment` objects. The package also has no sampling of states over time, no visualisation, no messaging middleware and no command-line program. The segments you check or convert must come from elsewhere, or you must build them by hand from `Polynomial` objects.