"""
Trade-level pricing and risk dispatch.

Trades arrive as plain dicts (e.g. rows of a blotter); this module builds
the product, expands it and calls the matching pricer. Only FRAs are
supported.

FRA trade keys:
    instrument_type: "FRA"
    index: IborIndex or standard index name, e.g. "USD-LIBOR-3M"
    notional, fixed_rate
    start_date and end_date, or trade_date and fra_tenor ("3x6")
    buy_sell: "BUY" (default) or "SELL"
    discounting: "ISDA", "NONE" or "AFMA"; the currency preset when omitted
    day_count: optional, e.g. "ACT/365F"; the index day count when omitted
    payment_date: optional
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict

from ..config import DEFAULT_SCENARIO_CONFIG, ScenarioConfig
from ..conventions import DayCount, FraConventions, FraDiscountingMethod
from ..environment import CurvePricingEnvironment
from ..market.box import MarketDataBox
from ..market.data import ScenarioMarketData
from ..products.fra import ExpandedFra, Fra
from ..rates import IborIndex
from .fra import DiscountingFraPricer

logger = logging.getLogger(__name__)

FRA_TYPES = {"FRA"}


@dataclass
class PricerOutput:
    """Container for pricing outputs to keep return type consistent."""

    instrument_type: str
    pv: float
    details: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"instrument_type": self.instrument_type, "pv": self.pv, **self.details}


def _instrument_type(trade: Dict[str, Any]) -> str:
    inst = str(trade.get("instrument_type", "")).upper()
    if inst not in FRA_TYPES:
        raise ValueError(f"Unsupported instrument type: {trade.get('instrument_type')}")
    return inst


def build_fra(trade: Dict[str, Any]) -> Fra:
    """
    Build a Fra from a trade dict.

    Raises:
        KeyError: If a required key is missing
        InvalidConfiguration: If the discounting method is unknown
        ValueError: If the day count is unknown
    """
    index = trade["index"]
    if not isinstance(index, IborIndex):
        index = IborIndex.of(str(index))
    conventions = FraConventions.for_currency(index.currency.code)

    day_count = trade.get("day_count", index.day_count)
    if not isinstance(day_count, DayCount):
        day_count = DayCount.from_string(str(day_count))
    discounting = trade.get("discounting", conventions.discounting)
    if not isinstance(discounting, FraDiscountingMethod):
        discounting = FraDiscountingMethod.from_string(str(discounting))
    conventions = replace(conventions, day_count=day_count, discounting=discounting)
    buy_sell = str(trade.get("buy_sell", "BUY"))

    if "fra_tenor" in trade:
        return Fra.of_tenor(
            trade_date=trade["trade_date"],
            fra_tenor=trade["fra_tenor"],
            index=index,
            notional=float(trade["notional"]),
            fixed_rate=float(trade["fixed_rate"]),
            buy_sell=buy_sell,
            conventions=conventions,
            payment_date=trade.get("payment_date"),
        )

    return Fra(
        index=index,
        notional=float(trade["notional"]),
        fixed_rate=float(trade["fixed_rate"]),
        start_date=trade["start_date"],
        end_date=trade["end_date"],
        buy_sell=buy_sell,
        payment_date=trade.get("payment_date"),
        day_count=conventions.day_count,
        business_day=conventions.business_day,
        discounting=conventions.discounting,
    )


def _expand(trade: Dict[str, Any]) -> ExpandedFra:
    _instrument_type(trade)
    return build_fra(trade).expand()


def price_trade(trade: Dict[str, Any], env: CurvePricingEnvironment) -> PricerOutput:
    """
    Price a trade dict in a pricing environment.

    Raises:
        ValueError: If the instrument type is not supported
        MissingMarketData: If a required curve is missing
    """
    inst = _instrument_type(trade)
    fra = _expand(trade)
    pricer = DiscountingFraPricer()
    details = pricer.explain_present_value(env, fra)
    return PricerOutput(
        instrument_type=inst,
        pv=details["present_value"],
        details={
            "forward_rate": details["forward_rate"],
            "discount_factor": details["discount_factor"],
            "future_value": details["future_value"],
            "par_rate": details["forward_rate"],
            "currency": details["currency"],
        },
    )


def risk_trade(trade: Dict[str, Any], env: CurvePricingEnvironment) -> Dict[str, Any]:
    """
    Point sensitivities and a bumped DV01 for a trade.

    DV01 is PV(+1bp parallel) - PV(base) on every curve.
    """
    _instrument_type(trade)
    fra = _expand(trade)
    pricer = DiscountingFraPricer()
    sensitivities = pricer.present_value_sensitivity(env, fra)
    base_pv = pricer.present_value(env, fra).amount
    bumped_pv = pricer.present_value(env.parallel_shift(1.0), fra).amount
    return {
        "sensitivities": sensitivities,
        "dv01": bumped_pv - base_pv,
    }


def price_trade_scenarios(
    trade: Dict[str, Any],
    market_data: ScenarioMarketData,
    config: ScenarioConfig = DEFAULT_SCENARIO_CONFIG
) -> MarketDataBox:
    """
    Present value of a trade in every scenario.

    Returns:
        Box of CurrencyAmount, single when no market data varies by scenario
    """
    _instrument_type(trade)
    fra = _expand(trade)
    env_box = market_data.to_box().map(CurvePricingEnvironment.from_market_data)
    logger.debug("Scenario pricing %s over %d scenario(s)", trade.get("instrument_type"), env_box.scenario_count)
    with config.executor(env_box.scenario_count) as executor:
        return DiscountingFraPricer().present_value_scenarios(env_box, fra, executor)


__all__ = [
    "PricerOutput",
    "build_fra",
    "price_trade",
    "risk_trade",
    "price_trade_scenarios",
]
