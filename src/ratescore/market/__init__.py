"""
Market package - market data containers and FX lookup.

Provides:
- MarketDataBox: a value shared by all scenarios or one value per scenario
- MarketData / ScenarioMarketData: market data snapshots keyed by FxRateKey,
  DiscountCurveKey and ForwardCurveKey
- FxRate and the triangulating MarketDataFxRateProvider
"""

from .box import (
    MarketDataBox,
    box_combine,
    box_map,
    box_map_with_index,
    scenario_count_of,
)
from .data import (
    DiscountCurveKey,
    ForwardCurveKey,
    FxRateKey,
    MarketData,
    ScenarioMarketData,
)
from .fx import FxRate, FxRateProvider, MarketDataFxRateProvider

__all__ = [
    "MarketDataBox",
    "box_combine",
    "box_map",
    "box_map_with_index",
    "scenario_count_of",
    "DiscountCurveKey",
    "ForwardCurveKey",
    "FxRateKey",
    "MarketData",
    "ScenarioMarketData",
    "FxRate",
    "FxRateProvider",
    "MarketDataFxRateProvider",
]
