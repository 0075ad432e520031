"""
Market data snapshots.

MarketData is an immutable snapshot of values keyed by market data keys
(FX rates, discount curves, forward curves). ScenarioMarketData stores a
MarketDataBox per key so that some inputs can vary by scenario while the
rest stay single; scenario(i) extracts the snapshot seen by scenario i.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Hashable, Iterator, Mapping, Optional

from ..currency import Currency, CurrencyPair
from ..errors import IndexOutOfRange, MissingMarketData
from .box import MarketDataBox, scenario_count_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FxRateKey:
    """
    Key for the FX rate between two currencies.

    The key is unordered: FxRateKey.of(EUR, USD) == FxRateKey.of(USD, EUR).
    """
    pair: CurrencyPair

    @classmethod
    def of(cls, base: Currency, counter: Currency) -> "FxRateKey":
        if counter.code < base.code:
            base, counter = counter, base
        return cls(CurrencyPair(base, counter))

    def __str__(self) -> str:
        return f"FX[{self.pair}]"


@dataclass(frozen=True)
class DiscountCurveKey:
    """Key for the discount curve of a currency."""
    currency: Currency

    def __str__(self) -> str:
        return f"Discount[{self.currency}]"


@dataclass(frozen=True)
class ForwardCurveKey:
    """Key for the forward (projection) curve of a floating rate index."""
    index: Any

    def __str__(self) -> str:
        return f"Forward[{self.index}]"


def _frozen(values: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class MarketData:
    """
    Immutable snapshot of market data for one valuation.

    Attributes:
        valuation_date: Date the data is observed on
        values: Values keyed by market data key
    """
    valuation_date: date
    values: Mapping[Hashable, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", _frozen(self.values))

    def __reduce__(self):
        return type(self), (self.valuation_date, dict(self.values))

    @classmethod
    def of(cls, valuation_date: date, values: Optional[Mapping[Hashable, Any]] = None) -> "MarketData":
        return cls(valuation_date, values or {})

    def contains(self, key: Hashable) -> bool:
        return key in self.values

    def find_value(self, key: Hashable) -> Optional[Any]:
        """Value for key, or None if absent."""
        return self.values.get(key)

    def get_value(self, key: Hashable) -> Any:
        """
        Value for key.

        Raises:
            MissingMarketData: If no value is available
        """
        value = self.values.get(key)
        if value is None:
            raise MissingMarketData(f"No market data available for {key}", key)
        return value

    def with_value(self, key: Hashable, value: Any) -> "MarketData":
        """New snapshot with key added or replaced."""
        updated = dict(self.values)
        updated[key] = value
        return MarketData(self.valuation_date, updated)

    def keys(self):
        return self.values.keys()


@dataclass(frozen=True)
class ScenarioMarketData:
    """
    Market data for a set of scenarios.

    Each key maps to a MarketDataBox. Single boxes apply to every scenario;
    all scenario boxes must agree on the scenario count.

    Attributes:
        valuation_date: Date the data is observed on
        values: Boxes keyed by market data key

    Raises:
        ShapeMismatch: On construction, if scenario boxes disagree on count
    """
    valuation_date: date
    values: Mapping[Hashable, MarketDataBox] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", _frozen(self.values))
        scenario_count_of(*self.values.values())

    def __reduce__(self):
        return type(self), (self.valuation_date, dict(self.values))

    @classmethod
    def of(cls, valuation_date: date, values: Optional[Mapping[Hashable, MarketDataBox]] = None) -> "ScenarioMarketData":
        return cls(valuation_date, values or {})

    @classmethod
    def from_market_data(cls, market_data: MarketData) -> "ScenarioMarketData":
        """Scenario market data where every value is single."""
        return cls(
            market_data.valuation_date,
            {k: MarketDataBox.of_single_value(v) for k, v in market_data.values.items()},
        )

    @property
    def scenario_count(self) -> int:
        """Number of scenarios; 1 when no value varies by scenario."""
        return scenario_count_of(*self.values.values())

    def contains(self, key: Hashable) -> bool:
        return key in self.values

    def find_value(self, key: Hashable) -> Optional[MarketDataBox]:
        return self.values.get(key)

    def get_value(self, key: Hashable) -> MarketDataBox:
        """
        Box for key.

        Raises:
            MissingMarketData: If no value is available
        """
        box = self.values.get(key)
        if box is None:
            raise MissingMarketData(f"No market data available for {key}", key)
        return box

    def keys(self):
        return self.values.keys()

    def with_value(self, key: Hashable, box: MarketDataBox) -> "ScenarioMarketData":
        """New scenario data with key added or replaced."""
        updated = dict(self.values)
        updated[key] = box
        return ScenarioMarketData(self.valuation_date, updated)

    def with_perturbation(
        self,
        key: Hashable,
        scenario_count: int,
        fn: Callable[[Any, int], Any]
    ) -> "ScenarioMarketData":
        """
        Replace a single value by scenario_count perturbed copies.

        Scenario i gets fn(value, i).
        """
        box = self.get_value(key).map_with_index(scenario_count, fn)
        logger.debug("Perturbed %s into %d scenarios", key, scenario_count)
        return self.with_value(key, box)

    def scenario(self, scenario_index: int) -> MarketData:
        """
        Snapshot seen by one scenario.

        Raises:
            IndexOutOfRange: If the index is outside [0, scenario_count)
        """
        count = self.scenario_count
        if scenario_index < 0 or scenario_index >= count:
            raise IndexOutOfRange(scenario_index, count)
        return MarketData(
            self.valuation_date,
            {k: box.get_value(scenario_index) for k, box in self.values.items()},
        )

    def scenarios(self) -> Iterator[MarketData]:
        """Snapshots for every scenario, in scenario order."""
        for i in range(self.scenario_count):
            yield self.scenario(i)

    def to_box(self) -> MarketDataBox[MarketData]:
        """
        The scenario snapshots as a box.

        Single when no value varies by scenario.
        """
        if all(box.is_single_value for box in self.values.values()):
            return MarketDataBox.of_single_value(self.scenario(0))
        return MarketDataBox.of_scenario_values(list(self.scenarios()))


__all__ = [
    "FxRateKey",
    "DiscountCurveKey",
    "ForwardCurveKey",
    "MarketData",
    "ScenarioMarketData",
]
