"""
Unit tests for the curve pricing environment and rate observation.
"""

from datetime import date
import pickle

import numpy as np
import pytest

from ratescore.conventions import year_fraction, DayCount
from ratescore.currency import EUR, USD
from ratescore.curves import Curve, create_flat_curve
from ratescore.environment import CurvePricingEnvironment
from ratescore.errors import MissingMarketData
from ratescore.market.data import DiscountCurveKey, ForwardCurveKey, MarketData
from ratescore.rates import ForwardIborRateObservationFn, IborIndex, IborRateObservation
from ratescore.risk.sensitivities import IborRateSensitivity, ZeroRateSensitivity

VAL_DATE = date(2024, 1, 15)
USD_3M = IborIndex.of("USD-LIBOR-3M")


@pytest.fixture
def env():
    return CurvePricingEnvironment(
        VAL_DATE,
        discount_curves={USD: create_flat_curve("USD-DSC", VAL_DATE, 0.03)},
        forward_curves={USD_3M: create_flat_curve("USD-3M", VAL_DATE, 0.035)},
    )


class TestIborIndex:
    """Tests for IBOR index lookups and dates."""

    def test_lookup(self):
        """Standard indices are found by name; unknown names are rejected."""
        assert USD_3M.currency == USD
        assert USD_3M.day_count == DayCount.ACT_360
        assert str(USD_3M) == "USD-LIBOR-3M"
        with pytest.raises(ValueError):
            IborIndex.of("XYZ-1M")

    def test_fixing_date_skips_weekend(self):
        """Two business days before Monday is the previous Thursday."""
        assert USD_3M.fixing_date(date(2024, 1, 15)) == date(2024, 1, 11)

    def test_same_day_fixing(self):
        """Indices with no fixing offset fix on the start date."""
        gbp = IborIndex.of("GBP-LIBOR-3M")
        assert gbp.fixing_date(date(2024, 1, 15)) == date(2024, 1, 15)

    def test_maturity_date(self):
        """Maturity is the index tenor after the effective date."""
        assert USD_3M.maturity_date(date(2024, 1, 17)) == date(2024, 4, 17)


class TestCurvePricingEnvironment:
    """Tests for discounting and forward rates."""

    def test_discount_factor(self, env):
        """Flat curve discount factor one year out."""
        t = 1.0
        d = date(2025, 1, 14)
        assert env.relative_time(d) == pytest.approx(t)
        assert env.discount_factor(USD, d) == pytest.approx(np.exp(-0.03 * t))

    def test_relative_time_past(self, env):
        """Dates before valuation have negative time."""
        assert env.relative_time(date(2024, 1, 10)) == pytest.approx(-5 / 365)

    def test_missing_discount_curve(self, env):
        """A missing discount curve names its key."""
        with pytest.raises(MissingMarketData) as exc_info:
            env.discount_factor(EUR, date(2025, 1, 15))
        assert exc_info.value.key == DiscountCurveKey(EUR)

    def test_zero_rate_sensitivity(self, env):
        """d DF / d z is -t * DF at the requested date."""
        d = date(2025, 1, 14)
        sens = env.discount_factor_zero_rate_sensitivity(USD, d)
        assert isinstance(sens, ZeroRateSensitivity)
        assert sens.currency == USD
        assert sens.date == d
        assert sens.sensitivity == pytest.approx(-1.0 * np.exp(-0.03))

    def test_zero_rate_sensitivity_matches_bump(self, env):
        """d DF / d z against a central difference."""
        d = date(2026, 6, 30)
        eps = 1e-7
        up = env.with_discount_curve(USD, env.discount_curve(USD).shift_by_rate(eps))
        down = env.with_discount_curve(USD, env.discount_curve(USD).shift_by_rate(-eps))
        fd = (up.discount_factor(USD, d) - down.discount_factor(USD, d)) / (2 * eps)
        assert env.discount_factor_zero_rate_sensitivity(USD, d).sensitivity == pytest.approx(fd, abs=1e-6)

    def test_ibor_forward_rate(self, env):
        """Simple forward rate from the projection curve."""
        start, end = date(2024, 4, 15), date(2024, 7, 15)
        accrual = year_fraction(start, end, DayCount.ACT_360)
        curve = env.forward_curve(USD_3M)
        expected = (curve.discount_factor(start) / curve.discount_factor(end) - 1) / accrual
        assert env.ibor_forward_rate(USD_3M, start, end) == pytest.approx(expected)

    def test_forward_curve_falls_back_to_discount(self, env):
        """Indices without a projection curve use the discount curve."""
        six_m = IborIndex.of("USD-LIBOR-6M")
        assert env.forward_curve(six_m) is env.discount_curve(USD)

    def test_missing_forward_curve(self, env):
        """Without either curve the forward curve key is reported."""
        euribor = IborIndex.of("EUR-EURIBOR-3M")
        with pytest.raises(MissingMarketData) as exc_info:
            env.forward_curve(euribor)
        assert exc_info.value.key == ForwardCurveKey(euribor)

    def test_parallel_shift_by_currency(self):
        """A currency filter leaves other curves unchanged."""
        env = CurvePricingEnvironment(
            VAL_DATE,
            discount_curves={
                USD: create_flat_curve("USD-DSC", VAL_DATE, 0.03),
                EUR: create_flat_curve("EUR-DSC", VAL_DATE, 0.02),
            },
        )
        shifted = env.parallel_shift(100.0, currency=USD)
        assert shifted.discount_curve(USD).zero_rate(1.0) == pytest.approx(0.04)
        assert shifted.discount_curve(EUR).zero_rate(1.0) == pytest.approx(0.02)

    def test_from_market_data(self):
        """Curve entries of a snapshot become the environment curves."""
        dsc = create_flat_curve("USD-DSC", VAL_DATE, 0.03)
        fwd = create_flat_curve("USD-3M", VAL_DATE, 0.035)
        md = MarketData.of(VAL_DATE, {
            DiscountCurveKey(USD): dsc,
            ForwardCurveKey(USD_3M): fwd,
        })
        env = CurvePricingEnvironment.from_market_data(md)
        assert env.valuation_date == VAL_DATE
        assert env.discount_curve(USD) is dsc
        assert env.forward_curve(USD_3M) is fwd

    def test_pickle_round_trip(self, env):
        """Environments pickle for process pools and keep their curves."""
        restored = pickle.loads(pickle.dumps(env))
        d = date(2025, 1, 14)
        assert restored.valuation_date == VAL_DATE
        assert restored.time_day_count == env.time_day_count
        assert restored.discount_factor(USD, d) == pytest.approx(env.discount_factor(USD, d))
        assert restored.forward_curve(USD_3M).zero_rate(1.0) == pytest.approx(0.035)
        with pytest.raises(TypeError):
            restored.discount_curves[EUR] = restored.discount_curve(USD)


class TestForwardIborRateObservationFn:
    """Tests for the rate observation function."""

    def test_rate_and_sensitivity(self, env):
        """The forward rate with unit sensitivity to the fixing."""
        fn = ForwardIborRateObservationFn()
        obs = IborRateObservation.of(USD_3M, date(2024, 4, 11))
        start, end = date(2024, 4, 15), date(2024, 7, 15)
        assert fn.rate(env, obs, start, end) == pytest.approx(env.ibor_forward_rate(USD_3M, start, end))
        sens = fn.rate_sensitivity(env, obs, start, end).build()
        assert sens[0] == IborRateSensitivity.of(USD_3M, date(2024, 4, 11), 1.0)
