"""
Zero-rate curve representation.

The Curve class provides:
- Discount factor P(0,t) = exp(-z(t) * t)
- Zero rate z(t), continuously compounded
- Simple forward rate between two dates
- Parallel and per-node shifts returning new curves

Times are year fractions from the anchor date under the curve's day count.
Curves are immutable once constructed.
"""

from datetime import date
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..conventions import DayCount, year_fraction
from .interpolation import Interpolator, create_interpolator


class Curve:
    """
    Zero-rate curve with interpolation.

    Attributes:
        name: Curve name, e.g. "USD-DSC"
        anchor_date: Valuation date (time 0)
        day_count: Day count for time calculations
        interpolation_method: Name of interpolation method

    Conventions:
        - Zero rates are continuously compounded
        - Discount factor at t <= 0 is 1.0
    """

    def __init__(
        self,
        name: str,
        anchor_date: date,
        times: Sequence[float],
        zero_rates: Sequence[float],
        day_count: DayCount = DayCount.ACT_365F,
        interpolation_method: str = "linear"
    ):
        times = np.asarray(times, dtype=np.float64)
        zero_rates = np.asarray(zero_rates, dtype=np.float64)
        if len(times) == 0:
            raise ValueError(f"Curve {name} needs at least one node")
        if np.any(times <= 0):
            raise ValueError(f"Curve {name} node times must be positive")
        if len(np.unique(times)) != len(times):
            raise ValueError(f"Curve {name} node times must be distinct")

        self.name = name
        self.anchor_date = anchor_date
        self.day_count = day_count
        self.interpolation_method = interpolation_method

        order = np.argsort(times)
        self._times = times[order]
        self._rates = zero_rates[order]
        self._interpolator: Interpolator = create_interpolator(interpolation_method).fit(
            self._times, self._rates
        )

    @classmethod
    def from_discount_factors(
        cls,
        name: str,
        anchor_date: date,
        times: Sequence[float],
        discount_factors: Sequence[float],
        **kwargs
    ) -> "Curve":
        """Build a curve from discount factors at node times."""
        times = np.asarray(times, dtype=np.float64)
        dfs = np.asarray(discount_factors, dtype=np.float64)
        if np.any(dfs <= 0):
            raise ValueError(f"Invalid discount factors for curve {name}")
        return cls(name, anchor_date, times, -np.log(dfs) / times, **kwargs)

    def relative_time(self, d: date) -> float:
        """Year fraction from anchor date; negative for dates in the past."""
        if d >= self.anchor_date:
            return year_fraction(self.anchor_date, d, self.day_count)
        return -year_fraction(d, self.anchor_date, self.day_count)

    def _to_time(self, t: Union[float, date]) -> float:
        if isinstance(t, date):
            return self.relative_time(t)
        return float(t)

    def zero_rate(self, t: Union[float, date]) -> float:
        """Continuously compounded zero rate at year fraction or date."""
        return self._interpolator.interpolate(max(self._to_time(t), 0.0))

    def discount_factor(self, t: Union[float, date]) -> float:
        """Discount factor P(0,t)."""
        t = self._to_time(t)
        if t <= 0:
            return 1.0
        return float(np.exp(-self.zero_rate(t) * t))

    def forward_rate(self, t1: Union[float, date], t2: Union[float, date], accrual: Optional[float] = None) -> float:
        """
        Simple forward rate between t1 and t2.

        Args:
            t1: Start (year fraction or date)
            t2: End (year fraction or date)
            accrual: Accrual fraction of the period; defaults to t2 - t1

        Returns:
            (P(t1) / P(t2) - 1) / accrual
        """
        time1, time2 = self._to_time(t1), self._to_time(t2)
        if time2 <= time1:
            raise ValueError("t2 must be greater than t1")
        delta = accrual if accrual is not None else time2 - time1
        return (self.discount_factor(time1) / self.discount_factor(time2) - 1.0) / delta

    def nodes(self) -> Tuple[np.ndarray, np.ndarray]:
        """Copies of (times, zero_rates)."""
        return self._times.copy(), self._rates.copy()

    def _with_rates(self, rates: np.ndarray, name: Optional[str] = None) -> "Curve":
        return Curve(
            name or self.name,
            self.anchor_date,
            self._times,
            rates,
            day_count=self.day_count,
            interpolation_method=self.interpolation_method,
        )

    def parallel_shift(self, bp: float) -> "Curve":
        """New curve with every zero rate shifted by bp basis points."""
        return self._with_rates(self._rates + bp / 10000.0)

    def shift_by_rate(self, shift: float) -> "Curve":
        """New curve with every zero rate shifted by an absolute rate."""
        return self._with_rates(self._rates + shift)

    def node_shift(self, node_index: int, bp: float) -> "Curve":
        """New curve with one node shifted by bp basis points."""
        if node_index < 0 or node_index >= len(self._rates):
            raise IndexError(f"Invalid node index: {node_index}")
        rates = self._rates.copy()
        rates[node_index] += bp / 10000.0
        return self._with_rates(rates)

    def __repr__(self) -> str:
        return (f"Curve(name={self.name}, anchor={self.anchor_date}, "
                f"nodes={len(self._times)}, method={self.interpolation_method})")


def create_flat_curve(
    name: str,
    anchor_date: date,
    rate: float,
    max_tenor_years: float = 30.0,
    day_count: DayCount = DayCount.ACT_365F
) -> Curve:
    """
    Create a flat zero-rate curve.

    Args:
        name: Curve name
        anchor_date: Valuation date
        rate: Flat continuously compounded rate
        max_tenor_years: Maximum tenor in years
        day_count: Day count for time calculations

    Returns:
        Flat curve
    """
    times = [t for t in (0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0) if t < max_tenor_years]
    times.append(max_tenor_years)
    return Curve(name, anchor_date, times, [rate] * len(times), day_count=day_count)


__all__ = [
    "Curve",
    "create_flat_curve",
]
