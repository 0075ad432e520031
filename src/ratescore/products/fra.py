"""
Forward Rate Agreement definitions.

A FRA exchanges a fixed rate for an IBOR fixing over a single accrual
period, settled in cash on the payment date (usually the start date).
Fra holds the trade as booked; expand() resolves it into an ExpandedFra
with adjusted dates, the accrual year fraction and the rate observation,
which is all the pricer needs.

Sign convention:
    BUY  = pay fixed, receive floating (positive notional)
    SELL = receive fixed, pay floating (negative notional)
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..conventions import (
    BusinessDayConvention,
    DayCount,
    FraConventions,
    FraDiscountingMethod,
    adjust_business_day,
    year_fraction,
)
from ..currency import Currency
from ..dates import DateUtils
from ..errors import InvalidConfiguration
from ..rates import IborIndex, IborRateObservation


def _to_method(discounting: Union[FraDiscountingMethod, str]) -> FraDiscountingMethod:
    if isinstance(discounting, FraDiscountingMethod):
        return discounting
    if isinstance(discounting, str):
        return FraDiscountingMethod.from_string(discounting)
    raise InvalidConfiguration(f"Unknown FRA discounting method: {discounting!r}")


@dataclass(frozen=True)
class ExpandedFra:
    """
    A FRA resolved for pricing.

    Attributes:
        currency: Settlement currency
        notional: Signed notional (positive when paying fixed)
        fixed_rate: Agreed rate as a decimal
        year_fraction: Accrual fraction of [start_date, end_date]
        floating_rate: Observation of the floating index
        start_date: Adjusted accrual start
        end_date: Adjusted accrual end
        payment_date: Adjusted settlement date
        discounting: Settlement discounting method
    """
    currency: Currency
    notional: float
    fixed_rate: float
    year_fraction: float
    floating_rate: IborRateObservation
    start_date: date
    end_date: date
    payment_date: date
    discounting: FraDiscountingMethod = FraDiscountingMethod.ISDA

    def __post_init__(self):
        object.__setattr__(self, "discounting", _to_method(self.discounting))
        if self.end_date <= self.start_date:
            raise InvalidConfiguration(
                f"FRA end date {self.end_date} must be after start date {self.start_date}"
            )
        if self.year_fraction <= 0:
            raise InvalidConfiguration(f"FRA year fraction must be positive, got {self.year_fraction}")


@dataclass(frozen=True)
class Fra:
    """
    A Forward Rate Agreement as booked.

    Attributes:
        index: Floating rate index
        notional: Notional amount, must be positive
        fixed_rate: Agreed rate as a decimal
        start_date: Unadjusted accrual start
        end_date: Unadjusted accrual end
        buy_sell: "BUY" (pay fixed) or "SELL" (receive fixed)
        currency: Settlement currency, defaults to the index currency
        payment_date: Unadjusted settlement date, defaults to start_date
        day_count: Accrual day count, defaults to the index day count
        business_day: Date adjustment for start, end and payment dates
        discounting: Settlement discounting method or its name

    Raises:
        InvalidConfiguration: If the discounting method is not ISDA, NONE or AFMA
        ValueError: If the dates or notional are inconsistent
    """
    index: IborIndex
    notional: float
    fixed_rate: float
    start_date: date
    end_date: date
    buy_sell: str = "BUY"
    currency: Optional[Currency] = None
    payment_date: Optional[date] = None
    day_count: Optional[DayCount] = None
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING
    discounting: Union[FraDiscountingMethod, str] = FraDiscountingMethod.ISDA

    def __post_init__(self):
        object.__setattr__(self, "discounting", _to_method(self.discounting))
        object.__setattr__(self, "buy_sell", self.buy_sell.upper())
        if self.buy_sell not in ("BUY", "SELL"):
            raise ValueError(f"buy_sell must be BUY or SELL, got {self.buy_sell}")
        if self.notional <= 0:
            raise ValueError(f"FRA notional must be positive, got {self.notional}")
        if self.end_date <= self.start_date:
            raise ValueError(f"FRA end date {self.end_date} must be after start date {self.start_date}")
        if self.currency is None:
            object.__setattr__(self, "currency", self.index.currency)
        if self.day_count is None:
            object.__setattr__(self, "day_count", self.index.day_count)

    @classmethod
    def of_tenor(
        cls,
        trade_date: date,
        fra_tenor: str,
        index: IborIndex,
        notional: float,
        fixed_rate: float,
        buy_sell: str = "BUY",
        conventions: Optional[FraConventions] = None,
        payment_date: Optional[date] = None
    ) -> "Fra":
        """
        Create a FRA from a market tenor such as "3x6".

        Dates are measured from spot, which is conventions.spot_days
        business days after the trade date.

        Args:
            trade_date: Trade date
            fra_tenor: "{start}x{end}" in months
            index: Floating rate index
            notional: Notional amount
            fixed_rate: Agreed rate
            buy_sell: "BUY" or "SELL"
            conventions: Market conventions, FraConventions() when omitted
            payment_date: Unadjusted settlement date, defaults to the start date

        Returns:
            Fra with unadjusted start and end dates
        """
        conventions = conventions or FraConventions(day_count=index.day_count)
        start_months, end_months = DateUtils.parse_fra_tenor(fra_tenor)
        spot = DateUtils.add_business_days(trade_date, conventions.spot_days)
        return cls(
            index=index,
            notional=notional,
            fixed_rate=fixed_rate,
            start_date=DateUtils.add_months(spot, start_months),
            end_date=DateUtils.add_months(spot, end_months),
            buy_sell=buy_sell,
            day_count=conventions.day_count,
            payment_date=payment_date,
            business_day=conventions.business_day,
            discounting=conventions.discounting,
        )

    @property
    def signed_notional(self) -> float:
        return self.notional if self.buy_sell == "BUY" else -self.notional

    def expand(self) -> ExpandedFra:
        """Adjust the dates and resolve the rate observation."""
        start = adjust_business_day(self.start_date, self.business_day)
        end = adjust_business_day(self.end_date, self.business_day)
        payment = adjust_business_day(self.payment_date or self.start_date, self.business_day)
        return ExpandedFra(
            currency=self.currency,
            notional=self.signed_notional,
            fixed_rate=self.fixed_rate,
            year_fraction=year_fraction(start, end, self.day_count),
            floating_rate=IborRateObservation.of(self.index, self.index.fixing_date(start)),
            start_date=start,
            end_date=end,
            payment_date=payment,
            discounting=self.discounting,
        )


__all__ = [
    "Fra",
    "ExpandedFra",
]
