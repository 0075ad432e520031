"""
Discounting FRA pricer.

With N the signed notional, Y the accrual year fraction, K the fixed rate
and fwd the forward rate of the floating index, the amount settled on the
payment date is:

    NONE:  N * Y * (fwd - K)
    ISDA:  N * Y * (fwd - K) / (1 + Y * fwd)
    AFMA: -N * (1 / (1 + Y * fwd) - 1 / (1 + Y * K))

Present value is that amount times the discount factor to the payment date.

Sensitivities are exact derivatives of these formulas:
    d FV / d fwd:
        NONE:  N * Y
        ISDA:  N * Y * (1 + Y * K) / (1 + Y * fwd)^2
        AFMA:  N * Y / (1 + Y * fwd)^2

The scenario methods apply the same single-environment pricing to every
value of a MarketDataBox, so the pricer never inspects scenario shape.
"""

import logging
from concurrent.futures import Executor
from functools import partial
from typing import Any, Dict, Optional

from ..conventions import FraDiscountingMethod
from ..currency import CurrencyAmount
from ..market.box import MarketDataBox, box_combine, box_map
from ..products.fra import ExpandedFra
from ..rates import ForwardIborRateObservationFn, RateObservationFn
from ..risk.sensitivities import PointSensitivities

logger = logging.getLogger(__name__)


def fra_future_value(
    method: FraDiscountingMethod,
    notional: float,
    year_fraction: float,
    forward_rate: float,
    fixed_rate: float
) -> float:
    """Settlement amount of a FRA for a given forward rate."""
    if method is FraDiscountingMethod.NONE:
        return notional * year_fraction * (forward_rate - fixed_rate)
    if method is FraDiscountingMethod.ISDA:
        return notional * year_fraction * (forward_rate - fixed_rate) / (1.0 + year_fraction * forward_rate)
    if method is FraDiscountingMethod.AFMA:
        return -notional * (1.0 / (1.0 + year_fraction * forward_rate)
                            - 1.0 / (1.0 + year_fraction * fixed_rate))
    raise ValueError(f"Unknown FRA discounting method: {method}")


def fra_future_value_derivative(
    method: FraDiscountingMethod,
    notional: float,
    year_fraction: float,
    forward_rate: float,
    fixed_rate: float
) -> float:
    """Derivative of the settlement amount with respect to the forward rate."""
    if method is FraDiscountingMethod.NONE:
        return notional * year_fraction
    denom = (1.0 + year_fraction * forward_rate) ** 2
    if method is FraDiscountingMethod.ISDA:
        return notional * year_fraction * (1.0 + year_fraction * fixed_rate) / denom
    if method is FraDiscountingMethod.AFMA:
        return notional * year_fraction / denom
    raise ValueError(f"Unknown FRA discounting method: {method}")


def _present_value_amount(fra: ExpandedFra, forward_rate: float, discount_factor: float) -> CurrencyAmount:
    fv = fra_future_value(fra.discounting, fra.notional, fra.year_fraction, forward_rate, fra.fixed_rate)
    return CurrencyAmount(fra.currency, fv * discount_factor)


class DiscountingFraPricer:
    """
    Prices FRAs by discounting the settlement amount.

    The environment must satisfy PricingEnvironment and whatever the rate
    observation function reads (ibor_forward_rate for the default one).

    Attributes:
        rate_observation_fn: Source of the forward rate and its sensitivity
    """

    def __init__(self, rate_observation_fn: Optional[RateObservationFn] = None):
        self.rate_observation_fn = rate_observation_fn or ForwardIborRateObservationFn()

    def forward_rate(self, env, fra: ExpandedFra) -> float:
        return self.rate_observation_fn.rate(env, fra.floating_rate, fra.start_date, fra.end_date)

    def future_value(self, env, fra: ExpandedFra) -> CurrencyAmount:
        """Settlement amount on the payment date."""
        fwd = self.forward_rate(env, fra)
        fv = fra_future_value(fra.discounting, fra.notional, fra.year_fraction, fwd, fra.fixed_rate)
        return CurrencyAmount(fra.currency, fv)

    def present_value(self, env, fra: ExpandedFra) -> CurrencyAmount:
        """Settlement amount discounted to the valuation date."""
        fwd = self.forward_rate(env, fra)
        df = env.discount_factor(fra.currency, fra.payment_date)
        pv = _present_value_amount(fra, fwd, df)
        logger.debug(
            "FRA %s %s: fwd=%.8f df=%.8f pv=%.2f",
            fra.floating_rate.index, fra.discounting.value, fwd, df, pv.amount,
        )
        return pv

    def _future_value_sensitivity_builder(self, env, fra: ExpandedFra, fwd: float):
        factor = fra_future_value_derivative(
            fra.discounting, fra.notional, fra.year_fraction, fwd, fra.fixed_rate
        )
        rate_sens = self.rate_observation_fn.rate_sensitivity(
            env, fra.floating_rate, fra.start_date, fra.end_date
        )
        return rate_sens.multiplied_by(factor)

    def future_value_sensitivity(self, env, fra: ExpandedFra) -> PointSensitivities:
        """Sensitivity of the settlement amount to the forward rate."""
        fwd = self.forward_rate(env, fra)
        return self._future_value_sensitivity_builder(env, fra, fwd).build()

    def present_value_sensitivity(self, env, fra: ExpandedFra) -> PointSensitivities:
        """
        Sensitivity of the present value to the forward and discount curves.

        Returns:
            Two entries in order: the forward rate sensitivity scaled by the
            discount factor, then the future value times the discount factor
            sensitivity to the zero rate at the payment date
        """
        fwd = self.forward_rate(env, fra)
        df = env.discount_factor(fra.currency, fra.payment_date)
        fv = fra_future_value(fra.discounting, fra.notional, fra.year_fraction, fwd, fra.fixed_rate)

        forward_part = self._future_value_sensitivity_builder(env, fra, fwd).multiplied_by(df)
        discount_part = env.discount_factor_zero_rate_sensitivity(
            fra.currency, fra.payment_date
        ).multiplied_by(fv)
        return forward_part.combined_with(discount_part).build()

    def par_rate(self, env, fra: ExpandedFra) -> float:
        """Fixed rate for which the present value is zero."""
        return self.forward_rate(env, fra)

    def par_spread(self, env, fra: ExpandedFra) -> float:
        """Spread to add to the fixed rate to reach the par rate."""
        return self.par_rate(env, fra) - fra.fixed_rate

    def explain_present_value(self, env, fra: ExpandedFra) -> Dict[str, Any]:
        """Breakdown of the present value calculation."""
        fwd = self.forward_rate(env, fra)
        df = env.discount_factor(fra.currency, fra.payment_date)
        fv = fra_future_value(fra.discounting, fra.notional, fra.year_fraction, fwd, fra.fixed_rate)
        return {
            "entry_type": "FRA",
            "currency": fra.currency.code,
            "notional": fra.notional,
            "fixed_rate": fra.fixed_rate,
            "forward_rate": fwd,
            "index": str(fra.floating_rate.index),
            "fixing_date": fra.floating_rate.fixing_date,
            "start_date": fra.start_date,
            "end_date": fra.end_date,
            "payment_date": fra.payment_date,
            "year_fraction": fra.year_fraction,
            "discounting": fra.discounting.value,
            "discount_factor": df,
            "future_value": fv,
            "present_value": fv * df,
        }

    # Scenario pricing

    def future_value_scenarios(
        self,
        env_box: MarketDataBox,
        fra: ExpandedFra,
        executor: Optional[Executor] = None
    ) -> MarketDataBox[CurrencyAmount]:
        """Future value for every environment in env_box."""
        return box_map(env_box, partial(self.future_value, fra=fra), executor)

    def present_value_scenarios(
        self,
        env_box: MarketDataBox,
        fra: ExpandedFra,
        executor: Optional[Executor] = None
    ) -> MarketDataBox[CurrencyAmount]:
        """Present value for every environment in env_box."""
        logger.debug("Pricing FRA over %d scenario(s)", env_box.scenario_count)
        return box_map(env_box, partial(self.present_value, fra=fra), executor)

    def present_value_sensitivity_scenarios(
        self,
        env_box: MarketDataBox,
        fra: ExpandedFra,
        executor: Optional[Executor] = None
    ) -> MarketDataBox[PointSensitivities]:
        return box_map(env_box, partial(self.present_value_sensitivity, fra=fra), executor)

    def present_value_from_boxes(
        self,
        fra: ExpandedFra,
        forward_rate_box: MarketDataBox[float],
        discount_factor_box: MarketDataBox[float],
        executor: Optional[Executor] = None
    ) -> MarketDataBox[CurrencyAmount]:
        """
        Present value from boxed forward rates and discount factors.

        Either box may be single or per-scenario; the usual broadcasting
        rules apply.

        Raises:
            ShapeMismatch: If both boxes hold scenarios of different counts
        """
        return box_combine(
            forward_rate_box,
            discount_factor_box,
            partial(_present_value_amount, fra),
            executor,
        )


__all__ = [
    "DiscountingFraPricer",
    "fra_future_value",
    "fra_future_value_derivative",
]
