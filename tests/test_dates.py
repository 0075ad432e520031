"""
Unit tests for dates module.
"""

from datetime import date
import pytest

from ratescore.dates import DateUtils


class TestDateUtils:
    """Tests for DateUtils class."""

    def test_parse_tenor_months(self):
        """Test parsing month tenors."""
        assert DateUtils.parse_tenor("3M") == (3, 'M')
        assert DateUtils.parse_tenor("12M") == (12, 'M')

    def test_parse_tenor_years(self):
        """Test parsing year tenors."""
        assert DateUtils.parse_tenor("1Y") == (1, 'Y')
        assert DateUtils.parse_tenor("30Y") == (30, 'Y')

    def test_parse_tenor_lowercase(self):
        """Test parsing lowercase tenors."""
        assert DateUtils.parse_tenor("3m") == (3, 'M')
        assert DateUtils.parse_tenor("2w") == (2, 'W')

    def test_parse_tenor_invalid(self):
        """Test invalid tenor raises error."""
        with pytest.raises(ValueError):
            DateUtils.parse_tenor("invalid")
        with pytest.raises(ValueError):
            DateUtils.parse_tenor("3X")

    def test_add_tenor_months(self):
        """Test adding month tenors."""
        base = date(2024, 1, 15)
        assert DateUtils.add_tenor(base, "3M") == date(2024, 4, 15)
        assert DateUtils.add_tenor(base, "1Y") == date(2025, 1, 15)

    def test_add_tenor_weeks(self):
        """Week tenors add seven days each."""
        assert DateUtils.add_tenor(date(2024, 1, 15), "2W") == date(2024, 1, 29)

    def test_add_tenor_days_skips_weekend(self):
        """Day tenors count business days."""
        assert DateUtils.add_tenor(date(2024, 1, 12), "1D") == date(2024, 1, 15)

    def test_add_tenor_end_of_month(self):
        """Month addition clips to the last day of a shorter month."""
        assert DateUtils.add_tenor(date(2024, 1, 31), "1M") == date(2024, 2, 29)

    def test_add_business_days(self):
        """Business days skip weekends; zero days is a no-op."""
        assert DateUtils.add_business_days(date(2024, 1, 11), 2) == date(2024, 1, 15)
        assert DateUtils.add_business_days(date(2024, 1, 11), 0) == date(2024, 1, 11)


class TestFraTenor:
    """Tests for FRA tenor notation."""

    def test_parse_fra_tenor(self):
        """FRA tenors parse case-insensitively, with optional spaces."""
        assert DateUtils.parse_fra_tenor("3x6") == (3, 6)
        assert DateUtils.parse_fra_tenor("1X4") == (1, 4)
        assert DateUtils.parse_fra_tenor("6 x 12") == (6, 12)

    def test_parse_fra_tenor_invalid(self):
        """Non-FRA tenors are rejected."""
        with pytest.raises(ValueError):
            DateUtils.parse_fra_tenor("3M")
        with pytest.raises(ValueError):
            DateUtils.parse_fra_tenor("6x3")
