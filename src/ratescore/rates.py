"""
Floating rate indices and rate observation.

- IborIndex / FxIndex: identifiers of floating rate and FX fixings
- IborRateObservation: one fixing of an IBOR index
- RateObservationFn: computes the rate of an observation over a period
  and the sensitivity of that rate to the forward curve
- ForwardIborRateObservationFn: reads simple forward rates from a
  CurvePricingEnvironment
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Protocol

from .conventions import DayCount, is_business_day
from .currency import Currency, CurrencyPair, EUR, GBP, USD
from .dates import DateUtils
from .risk.sensitivities import IborRateSensitivity, PointSensitivityBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IborIndex:
    """
    An IBOR-like floating rate index.

    Attributes:
        name: Unique name, e.g. "USD-LIBOR-3M"
        currency: Currency of the index
        tenor: Tenor of the underlying deposit, e.g. "3M"
        day_count: Accrual day count
        fixing_offset_days: Business days between fixing and effective date
    """
    name: str
    currency: Currency
    tenor: str
    day_count: DayCount = DayCount.ACT_360
    fixing_offset_days: int = 2

    def __post_init__(self):
        DateUtils.parse_tenor(self.tenor)
        if self.fixing_offset_days < 0:
            raise ValueError(f"Fixing offset must not be negative for {self.name}")

    def fixing_date(self, effective_date: date) -> date:
        """Fixing date for a deposit starting on effective_date."""
        if self.fixing_offset_days == 0:
            return effective_date
        d = effective_date
        remaining = self.fixing_offset_days
        while remaining > 0:
            d -= timedelta(days=1)
            if is_business_day(d):
                remaining -= 1
        return d

    def maturity_date(self, effective_date: date) -> date:
        return DateUtils.add_tenor(effective_date, self.tenor)

    @classmethod
    def of(cls, name: str) -> "IborIndex":
        """
        Look up a standard index by name.

        Raises:
            ValueError: If the name is not a known index
        """
        index = STANDARD_IBOR_INDICES.get(name.upper())
        if index is None:
            raise ValueError(f"Unknown IBOR index: {name}")
        return index

    def __str__(self) -> str:
        return self.name


STANDARD_IBOR_INDICES: Dict[str, IborIndex] = {
    idx.name: idx for idx in [
        IborIndex("USD-LIBOR-3M", USD, "3M", DayCount.ACT_360, 2),
        IborIndex("USD-LIBOR-6M", USD, "6M", DayCount.ACT_360, 2),
        IborIndex("EUR-EURIBOR-3M", EUR, "3M", DayCount.ACT_360, 2),
        IborIndex("EUR-EURIBOR-6M", EUR, "6M", DayCount.ACT_360, 2),
        IborIndex("GBP-LIBOR-3M", GBP, "3M", DayCount.ACT_365F, 0),
        IborIndex("GBP-LIBOR-6M", GBP, "6M", DayCount.ACT_365F, 0),
    ]
}


@dataclass(frozen=True)
class FxIndex:
    """
    An FX fixing index, e.g. the ECB EUR/USD fixing.

    Attributes:
        name: Unique name
        currency_pair: The pair fixed by the index
        fixing_offset_days: Business days between fixing and payment
    """
    name: str
    currency_pair: CurrencyPair
    fixing_offset_days: int = 2

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IborRateObservation:
    """
    Observation of an IBOR index on a fixing date.

    Attributes:
        index: The index observed
        fixing_date: Date of the fixing
    """
    index: IborIndex
    fixing_date: date

    @classmethod
    def of(cls, index: IborIndex, fixing_date: date) -> "IborRateObservation":
        return cls(index, fixing_date)


class RateObservationFn(Protocol):
    """
    Computes the rate of an observation over an accrual period.

    rate_sensitivity returns the sensitivity of the rate itself, before any
    scaling by the instrument being priced.
    """

    def rate(self, env, observation, start_date: date, end_date: date) -> float: ...

    def rate_sensitivity(self, env, observation, start_date: date, end_date: date) -> PointSensitivityBuilder: ...


class ForwardIborRateObservationFn:
    """
    Forward IBOR rates from the environment's projection curves.

    The environment must provide ibor_forward_rate(index, start, end).
    """

    def rate(self, env, observation: IborRateObservation, start_date: date, end_date: date) -> float:
        fwd = env.ibor_forward_rate(observation.index, start_date, end_date)
        logger.debug("Forward %s %s-%s: %.8f", observation.index, start_date, end_date, fwd)
        return fwd

    def rate_sensitivity(
        self,
        env,
        observation: IborRateObservation,
        start_date: date,
        end_date: date
    ) -> PointSensitivityBuilder:
        return IborRateSensitivity.of(observation.index, observation.fixing_date, 1.0)


__all__ = [
    "IborIndex",
    "FxIndex",
    "IborRateObservation",
    "RateObservationFn",
    "ForwardIborRateObservationFn",
    "STANDARD_IBOR_INDICES",
]
