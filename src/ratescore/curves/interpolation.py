"""
Interpolation methods for zero-rate curves.

Provides:
- LinearInterpolator: linear in zero rate
- LogLinearInterpolator: linear in r(t)*t, i.e. log-linear in discount
  factor (piecewise constant forward rates)

Both take year fractions as x-coordinates and continuously compounded
zero rates as y-coordinates, and extrapolate flat in zero rate.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> "Interpolator":
        """
        Fit the interpolator to data points.

        Args:
            times: Year fractions
            values: Zero rates at those times

        Returns:
            self, for chaining
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if times.shape != values.shape:
            raise ValueError("Times and values must have same length")
        if len(times) < 1:
            raise ValueError("Need at least 1 point for interpolation")

        idx = np.argsort(times)
        self.times = times[idx]
        self.values = values[idx]
        return self

    def _check_fitted(self) -> None:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

    @abstractmethod
    def interpolate(self, t: float) -> float:
        """Zero rate at year fraction t."""

    def __call__(self, t: float) -> float:
        return self.interpolate(t)


class LinearInterpolator(Interpolator):
    """Linear interpolation of zero rates with flat extrapolation."""

    def interpolate(self, t: float) -> float:
        self._check_fitted()
        return float(np.interp(t, self.times, self.values))


class LogLinearInterpolator(Interpolator):
    """
    Linear interpolation of r(t)*t.

    Equivalent to log-linear discount factors between nodes.
    """

    def interpolate(self, t: float) -> float:
        self._check_fitted()
        if t <= self.times[0] or len(self.times) == 1:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])
        rt = np.interp(t, self.times, self.values * self.times)
        return float(rt / t)


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "log_linear"

    Returns:
        Interpolator instance
    """
    method = method.lower().replace("-", "_").replace(" ", "_")

    if method in ("linear", "lin"):
        return LinearInterpolator()
    elif method in ("log_linear", "loglinear", "flat_forward"):
        return LogLinearInterpolator()
    raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "create_interpolator",
]
