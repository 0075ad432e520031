"""
RatesCore: scenario-aware valuation core for interest rate products

A modular library for:
- Holding market data for one or many scenarios (MarketDataBox)
- Looking up FX rates with triangulation
- Pricing Forward Rate Agreements under ISDA, NONE and AFMA settlement
- Exact point sensitivities to forward and discount curves
- Parallel curve shift scenarios and pandas risk tables

Scope: linear rates products; curves are supplied, not calibrated.
"""

__version__ = "0.1.0"

# Core modules
from .errors import (
    RatesCoreError,
    InvalidState,
    IndexOutOfRange,
    ShapeMismatch,
    MissingMarketData,
    InvalidConfiguration,
)
from .config import ScenarioConfig, DEFAULT_SCENARIO_CONFIG
from .currency import Currency, CurrencyPair, CurrencyAmount, USD, EUR, GBP, JPY, CHF, AUD
from .conventions import (
    DayCount,
    BusinessDayConvention,
    FraDiscountingMethod,
    FraConventions,
    year_fraction,
)
from .dates import DateUtils

# Curves and market data
from .curves import Curve, create_flat_curve, LinearInterpolator, LogLinearInterpolator
from .market import (
    MarketDataBox,
    MarketData,
    ScenarioMarketData,
    FxRateKey,
    DiscountCurveKey,
    ForwardCurveKey,
    FxRate,
    MarketDataFxRateProvider,
)
from .rates import IborIndex, FxIndex, IborRateObservation, ForwardIborRateObservationFn
from .environment import PricingEnvironment, CurvePricingEnvironment

# Risk
from .risk import (
    PointSensitivities,
    PointSensitivityBuilder,
    IborRateSensitivity,
    ZeroRateSensitivity,
    CurveShiftScenario,
    ScenarioEngine,
    STANDARD_SHIFTS,
)

# Products and pricers
from .products import Fra, ExpandedFra, NotionalSchedule, FxResetCalculation, ValueSchedule
from .pricers import DiscountingFraPricer, price_trade, risk_trade, price_trade_scenarios, PricerOutput

__all__ = [
    "__version__",
    "RatesCoreError",
    "InvalidState",
    "IndexOutOfRange",
    "ShapeMismatch",
    "MissingMarketData",
    "InvalidConfiguration",
    "ScenarioConfig",
    "DEFAULT_SCENARIO_CONFIG",
    "Currency",
    "CurrencyPair",
    "CurrencyAmount",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CHF",
    "AUD",
    "DayCount",
    "BusinessDayConvention",
    "FraDiscountingMethod",
    "FraConventions",
    "year_fraction",
    "DateUtils",
    "Curve",
    "create_flat_curve",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "MarketDataBox",
    "MarketData",
    "ScenarioMarketData",
    "FxRateKey",
    "DiscountCurveKey",
    "ForwardCurveKey",
    "FxRate",
    "MarketDataFxRateProvider",
    "IborIndex",
    "FxIndex",
    "IborRateObservation",
    "ForwardIborRateObservationFn",
    "PricingEnvironment",
    "CurvePricingEnvironment",
    "PointSensitivities",
    "PointSensitivityBuilder",
    "IborRateSensitivity",
    "ZeroRateSensitivity",
    "CurveShiftScenario",
    "ScenarioEngine",
    "STANDARD_SHIFTS",
    "Fra",
    "ExpandedFra",
    "NotionalSchedule",
    "FxResetCalculation",
    "ValueSchedule",
    "DiscountingFraPricer",
    "price_trade",
    "risk_trade",
    "price_trade_scenarios",
    "PricerOutput",
]
