"""
Day count, business day and FRA settlement conventions.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets, most IBOR indices)
- ACT/365F: Actual days / 365 (GBP, AUD money markets)
- ACT/ACT: ISDA actual/actual, split at year boundaries
- 30/360: 30 days per month / 360

Business Day Conventions:
- Modified Following: Move to next business day, unless it falls in next month (then previous)
- Following: Move to next business day
- Preceding: Move to previous business day

FRA Discounting Methods:
- NONE: settlement amount is not discounted to the payment date
- ISDA: settlement amount discounted at the floating rate (FRA Discounting)
- AFMA: Australian market convention, discounting at both rates
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .errors import InvalidConfiguration


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365F = "ACT/365F"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365F,
            "ACT/365F": cls.ACT_365F,
            "ACT365": cls.ACT_365F,
            "ACT365F": cls.ACT_365F,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


class FraDiscountingMethod(Enum):
    """
    How the FRA settlement amount relates to the payment date.

    The method is fixed when the FRA is defined; pricing dispatches on it
    once per valuation.
    """
    NONE = "None"
    ISDA = "ISDA"
    AFMA = "AFMA"

    @classmethod
    def from_string(cls, s: str) -> "FraDiscountingMethod":
        """
        Parse a discounting method name (case-insensitive).

        Raises:
            InvalidConfiguration: If the name is not ISDA, NONE or AFMA
        """
        key = s.upper().strip()
        for member in cls:
            if member.name == key:
                return member
        raise InvalidConfiguration(f"Unknown FRA discounting method: {s}")


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float, 0.0 when end is not after start
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365F:
        return actual_days / 365.0

    elif day_count == DayCount.ACT_ACT:
        # ISDA ACT/ACT: days in each calendar year over that year's length
        total = 0.0
        current = start
        while current < end:
            next_year = date(current.year + 1, 1, 1)
            period_end = min(next_year, end)
            days_in_year = 366 if calendar.isleap(current.year) else 365
            total += (period_end - current).days / days_in_year
            current = period_end
        return total

    elif day_count == DayCount.THIRTY_360:
        # 30/360 US convention
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    else:
        raise ValueError(f"Unknown day count: {day_count}")


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """
    Check if a date is a business day.

    Uses weekend-only calendar by default (Saturday/Sunday are non-business days).
    """
    if d.weekday() >= 5:
        return False
    if holidays and d in holidays:
        return False
    return True


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Adjust a date according to business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    adjusted = _roll(d, 1, holidays)
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING and adjusted.month != d.month:
        adjusted = _roll(d, -1, holidays)
    return adjusted


def _roll(d: date, step: int, holidays: Optional[set]) -> date:
    adjusted = d
    while not is_business_day(adjusted, holidays):
        adjusted += timedelta(days=step)
    return adjusted


@dataclass(frozen=True)
class FraConventions:
    """
    Market conventions for a FRA.

    Attributes:
        day_count: Accrual day count of the floating index
        business_day: Payment date adjustment
        discounting: Settlement discounting method
        spot_days: Business days from trade date to spot
    """
    day_count: DayCount = DayCount.ACT_360
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING
    discounting: FraDiscountingMethod = FraDiscountingMethod.ISDA
    spot_days: int = 2

    @classmethod
    def usd(cls) -> "FraConventions":
        """Standard USD FRA conventions."""
        return cls(day_count=DayCount.ACT_360, discounting=FraDiscountingMethod.ISDA, spot_days=2)

    @classmethod
    def eur(cls) -> "FraConventions":
        """Standard EUR FRA conventions."""
        return cls(day_count=DayCount.ACT_360, discounting=FraDiscountingMethod.ISDA, spot_days=2)

    @classmethod
    def gbp(cls) -> "FraConventions":
        """Standard GBP FRA conventions."""
        return cls(day_count=DayCount.ACT_365F, discounting=FraDiscountingMethod.ISDA, spot_days=0)

    @classmethod
    def aud(cls) -> "FraConventions":
        """Australian FRA conventions (AFMA settlement)."""
        return cls(day_count=DayCount.ACT_365F, discounting=FraDiscountingMethod.AFMA, spot_days=0)

    @classmethod
    def for_currency(cls, code: str) -> "FraConventions":
        """Preset for a currency code; the default conventions when there is none."""
        presets = {"USD": cls.usd, "EUR": cls.eur, "GBP": cls.gbp, "AUD": cls.aud}
        preset = presets.get(code.upper())
        return preset() if preset is not None else cls()


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "FraDiscountingMethod",
    "FraConventions",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
]
