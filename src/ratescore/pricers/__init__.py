"""
Pricers package - instrument pricing.

Provides:
- Discounting FRA pricer with ISDA, NONE and AFMA settlement
- Dict-based trade dispatch for pricing, risk and scenario pricing
"""

from .fra import DiscountingFraPricer, fra_future_value, fra_future_value_derivative
from .dispatcher import PricerOutput, build_fra, price_trade, price_trade_scenarios, risk_trade

__all__ = [
    "DiscountingFraPricer",
    "fra_future_value",
    "fra_future_value_derivative",
    "PricerOutput",
    "build_fra",
    "price_trade",
    "price_trade_scenarios",
    "risk_trade",
]
