"""
FX rates and FX rate lookup.

FxRate holds a single quote for a currency pair and can be read in either
direction. MarketDataFxRateProvider resolves a rate from the quotes held in
a MarketData snapshot:

1. base == counter: 1.0
2. a direct quote for the pair, read in the requested direction
3. one hop through the base currency's triangulation currency
4. otherwise MissingMarketData

Only the base currency's triangulation currency is tried; no general
search over chains of quotes is attempted.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..currency import Currency, CurrencyAmount, CurrencyPair
from ..errors import MissingMarketData
from .data import FxRateKey, MarketData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FxRate:
    """
    An FX rate for a currency pair: 1 unit of base = rate units of counter.

    Attributes:
        pair: The quoted pair
        rate: Positive rate for the pair as quoted
    """
    pair: CurrencyPair
    rate: float

    def __post_init__(self):
        if not self.rate > 0:
            raise ValueError(f"FX rate must be positive: {self.pair} {self.rate}")
        if self.pair.is_identity() and self.rate != 1.0:
            raise ValueError(f"Rate for identical currencies must be 1, got {self.rate}")

    @classmethod
    def of(cls, base: Currency, counter: Currency, rate: float) -> "FxRate":
        return cls(CurrencyPair(base, counter), float(rate))

    def inverse(self) -> "FxRate":
        return FxRate(self.pair.inverse(), 1.0 / self.rate)

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """
        Rate to convert base into counter.

        Raises:
            ValueError: If the requested pair is not this pair or its inverse
        """
        if base == counter:
            return 1.0
        if base == self.pair.base and counter == self.pair.counter:
            return self.rate
        if base == self.pair.counter and counter == self.pair.base:
            return 1.0 / self.rate
        raise ValueError(f"No FX rate for {base}/{counter} in {self.pair}")

    def cross_rate(self, other: "FxRate") -> "FxRate":
        """
        Derive the rate between the two currencies not shared by self and other.

        EUR/USD combined with USD/JPY gives EUR/JPY.

        Raises:
            ValueError: If the pairs share no currency, or are the same pair
        """
        if self.pair == other.pair or self.pair.is_inverse(other.pair):
            raise ValueError(f"Unable to cross identical pairs {self.pair} and {other.pair}")
        if self.pair.base in (other.pair.base, other.pair.counter):
            common = self.pair.base
            mine = self.pair.counter
        elif self.pair.counter in (other.pair.base, other.pair.counter):
            common = self.pair.counter
            mine = self.pair.base
        else:
            raise ValueError(f"Unable to cross {self.pair} and {other.pair}: no common currency")
        theirs = other.pair.counter if other.pair.base == common else other.pair.base
        rate = self.fx_rate(mine, common) * other.fx_rate(common, theirs)
        return FxRate.of(mine, theirs, rate)

    def convert(self, amount: float, from_currency: Currency) -> float:
        """Convert an amount in one currency of the pair into the other."""
        if from_currency == self.pair.base:
            return amount * self.rate
        if from_currency == self.pair.counter:
            return amount / self.rate
        raise ValueError(f"Currency {from_currency} is not part of {self.pair}")

    def __str__(self) -> str:
        return f"{self.pair} {self.rate}"


class FxRateProvider(Protocol):
    """Anything able to provide an FX rate for a pair of currencies."""

    def fx_rate(self, base: Currency, counter: Currency) -> float: ...


class MarketDataFxRateProvider:
    """
    FX rate provider backed by the FxRateKey quotes of a MarketData snapshot.

    Attributes:
        market_data: Snapshot containing FxRate values under FxRateKey keys
    """

    def __init__(self, market_data: MarketData):
        self.market_data = market_data

    def _find(self, base: Currency, counter: Currency) -> Optional[FxRate]:
        if base == counter:
            return None
        return self.market_data.find_value(FxRateKey.of(base, counter))

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """
        Rate to convert one unit of base into counter.

        Raises:
            MissingMarketData: If neither a direct nor a triangulated quote exists
        """
        if base == counter:
            return 1.0

        direct = self._find(base, counter)
        if direct is not None:
            return direct.fx_rate(base, counter)

        triangulation = base.triangulation_currency
        first = self._find(base, triangulation)
        second = self._find(triangulation, counter)
        if first is not None and second is not None:
            logger.debug("Triangulating %s/%s through %s", base, counter, triangulation)
            return first.cross_rate(second).fx_rate(base, counter)

        raise MissingMarketData(
            f"No market data available for pair {base}/{counter}",
            FxRateKey.of(base, counter),
        )

    def convert(self, amount: CurrencyAmount, result_currency: Currency) -> CurrencyAmount:
        """Express an amount in another currency."""
        if amount.currency == result_currency:
            return amount
        rate = self.fx_rate(amount.currency, result_currency)
        return CurrencyAmount(result_currency, amount.amount * rate)


__all__ = [
    "FxRate",
    "FxRateProvider",
    "MarketDataFxRateProvider",
]
