"""
Curves package - zero-rate curves consumed by the pricing environment.

Curve construction and calibration live outside this library; curves are
built directly from node times and zero rates or discount factors.
"""

from .curve import Curve, create_flat_curve
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    create_interpolator,
)

__all__ = [
    "Curve",
    "create_flat_curve",
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "create_interpolator",
]
