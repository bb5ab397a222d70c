"""Polynomials, vertices, segment times, input feasibility checks and trajectory messages for aerial vehicles."""

__version__ = "0.1.0"

__all__ = [
    "polynomial",
    "timing",
    "vertex",
    "input_constraints",
    "segment",
    "feasibility_base",
    "feasibility_recursive",
    "conversions",
]