"""
Date utilities for rates calculations.

Provides:
- Tenor parsing ("3M", "1Y") and tenor arithmetic
- FRA tenor notation ("3x6") used to define FRA periods
"""

import calendar
import re
from datetime import date, timedelta
from typing import Optional, Tuple

from .conventions import is_business_day


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)
    # FRA pattern: start months x end months, e.g. 3x6
    FRA_PATTERN = re.compile(r'^(\d+)\s*[xX]\s*(\d+)$')

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "1D", "3M", "2Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def parse_fra_tenor(fra_tenor: str) -> Tuple[int, int]:
        """
        Parse FRA notation into (start_months, end_months).

        "3x6" is a FRA starting in 3 months on a 3 month index.

        Raises:
            ValueError: If the notation is invalid or the end is not after the start
        """
        match = DateUtils.FRA_PATTERN.match(fra_tenor.strip())
        if not match:
            raise ValueError(f"Invalid FRA tenor: {fra_tenor}. Expected format like '3x6'")
        start_months, end_months = int(match.group(1)), int(match.group(2))
        if end_months <= start_months:
            raise ValueError(f"FRA end must be after start: {fra_tenor}")
        return start_months, end_months

    @staticmethod
    def add_months(start: date, months: int) -> date:
        """Add calendar months, clipping the day to the end of the month."""
        year = start.year + (start.month + months - 1) // 12
        month = (start.month + months - 1) % 12 + 1
        day = min(start.day, calendar.monthrange(year, month)[1])
        return date(year, month, day)

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date.

        Day tenors count business days; other units are calendar periods.

        Args:
            start: Starting date
            tenor: Tenor string (e.g., "1D", "3M", "2Y")
            holidays: Optional holiday calendar

        Returns:
            End date
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            result = start
            days_added = 0
            while days_added < amount:
                result += timedelta(days=1)
                if is_business_day(result, holidays):
                    days_added += 1
            return result
        elif unit == 'W':
            return start + timedelta(weeks=amount)
        elif unit == 'M':
            return DateUtils.add_months(start, amount)
        elif unit == 'Y':
            return DateUtils.add_months(start, 12 * amount)

        raise ValueError(f"Unknown tenor unit: {unit}")

    @staticmethod
    def add_business_days(start: date, days: int, holidays: Optional[set] = None) -> date:
        """Add a number of business days (0 returns start unchanged)."""
        if days == 0:
            return start
        return DateUtils.add_tenor(start, f"{days}D", holidays)


__all__ = [
    "DateUtils",
]
