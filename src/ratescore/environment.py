"""
Pricing environment abstraction.

The pricers only see the PricingEnvironment contract:
- discount_factor(currency, date)
- discount_factor_zero_rate_sensitivity(currency, date)
- relative_time(date)

CurvePricingEnvironment implements it on top of Curve objects: one
discount curve per currency and one projection curve per IBOR index.
A missing curve raises MissingMarketData; the pricers do not check.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol

from .conventions import DayCount, year_fraction
from .curves.curve import Curve
from .currency import Currency
from .errors import MissingMarketData
from .market.data import DiscountCurveKey, ForwardCurveKey, MarketData
from .rates import IborIndex
from .risk.sensitivities import ZeroRateSensitivity


class PricingEnvironment(Protocol):
    """Market access required by the discounting pricers."""

    def discount_factor(self, currency: Currency, on_date: date) -> float: ...

    def discount_factor_zero_rate_sensitivity(self, currency: Currency, on_date: date) -> ZeroRateSensitivity: ...

    def relative_time(self, on_date: date) -> float: ...


@dataclass(frozen=True)
class CurvePricingEnvironment:
    """
    Pricing environment backed by zero-rate curves.

    Attributes:
        valuation_date: Market valuation date
        discount_curves: Discount curve per currency
        forward_curves: Projection curve per IBOR index
        time_day_count: Day count used by relative_time
    """
    valuation_date: date
    discount_curves: Mapping[Currency, Curve] = field(default_factory=dict)
    forward_curves: Mapping[IborIndex, Curve] = field(default_factory=dict)
    time_day_count: DayCount = DayCount.ACT_365F

    def __post_init__(self):
        object.__setattr__(self, "discount_curves", MappingProxyType(dict(self.discount_curves)))
        object.__setattr__(self, "forward_curves", MappingProxyType(dict(self.forward_curves)))

    def __reduce__(self):
        # mappingproxy does not pickle
        return type(self), (
            self.valuation_date,
            dict(self.discount_curves),
            dict(self.forward_curves),
            self.time_day_count,
        )

    @classmethod
    def from_market_data(cls, market_data: MarketData) -> "CurvePricingEnvironment":
        """Collect the DiscountCurveKey and ForwardCurveKey entries of a snapshot."""
        discount: Dict[Currency, Curve] = {}
        forward: Dict[IborIndex, Curve] = {}
        for key, value in market_data.values.items():
            if isinstance(key, DiscountCurveKey):
                discount[key.currency] = value
            elif isinstance(key, ForwardCurveKey):
                forward[key.index] = value
        return cls(market_data.valuation_date, discount, forward)

    def discount_curve(self, currency: Currency) -> Curve:
        curve = self.discount_curves.get(currency)
        if curve is None:
            raise MissingMarketData(f"No discount curve for {currency}", DiscountCurveKey(currency))
        return curve

    def forward_curve(self, index: IborIndex) -> Curve:
        """Projection curve for index, falling back to the index currency's discount curve."""
        curve = self.forward_curves.get(index)
        if curve is None:
            curve = self.discount_curves.get(index.currency)
        if curve is None:
            raise MissingMarketData(f"No forward curve for {index}", ForwardCurveKey(index))
        return curve

    def relative_time(self, on_date: date) -> float:
        if on_date >= self.valuation_date:
            return year_fraction(self.valuation_date, on_date, self.time_day_count)
        return -year_fraction(on_date, self.valuation_date, self.time_day_count)

    def discount_factor(self, currency: Currency, on_date: date) -> float:
        return self.discount_curve(currency).discount_factor(on_date)

    def discount_factor_zero_rate_sensitivity(self, currency: Currency, on_date: date) -> ZeroRateSensitivity:
        """
        Sensitivity of the discount factor to the zero rate at on_date.

        d(exp(-z t)) / dz = -t * P(t)
        """
        curve = self.discount_curve(currency)
        t = curve.relative_time(on_date)
        return ZeroRateSensitivity.of(currency, on_date, -t * curve.discount_factor(on_date))

    def ibor_forward_rate(self, index: IborIndex, start_date: date, end_date: date) -> float:
        """Simple forward rate of index over [start_date, end_date]."""
        accrual = year_fraction(start_date, end_date, index.day_count)
        return self.forward_curve(index).forward_rate(start_date, end_date, accrual)

    def with_discount_curve(self, currency: Currency, curve: Curve) -> "CurvePricingEnvironment":
        curves = dict(self.discount_curves)
        curves[currency] = curve
        return CurvePricingEnvironment(self.valuation_date, curves, self.forward_curves, self.time_day_count)

    def with_forward_curve(self, index: IborIndex, curve: Curve) -> "CurvePricingEnvironment":
        curves = dict(self.forward_curves)
        curves[index] = curve
        return CurvePricingEnvironment(self.valuation_date, self.discount_curves, curves, self.time_day_count)

    def parallel_shift(self, bp: float, currency: Optional[Currency] = None) -> "CurvePricingEnvironment":
        """
        New environment with curves shifted by bp basis points.

        Only curves of currency are shifted when it is given.
        """
        def shift(curve_ccy: Currency, curve: Curve) -> Curve:
            if currency is None or curve_ccy == currency:
                return curve.parallel_shift(bp)
            return curve

        return CurvePricingEnvironment(
            self.valuation_date,
            {ccy: shift(ccy, c) for ccy, c in self.discount_curves.items()},
            {idx: shift(idx.currency, c) for idx, c in self.forward_curves.items()},
            self.time_day_count,
        )


__all__ = [
    "PricingEnvironment",
    "CurvePricingEnvironment",
]
