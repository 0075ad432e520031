"""
Unit tests for curves module.
"""

from datetime import date, timedelta
import numpy as np
import pytest

from ratescore.conventions import DayCount
from ratescore.curves import (
    Curve,
    LinearInterpolator,
    LogLinearInterpolator,
    create_flat_curve,
    create_interpolator,
)

VAL_DATE = date(2024, 1, 15)


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        """Sample interpolation data."""
        x = np.array([0.25, 0.5, 1.0, 2.0, 5.0, 10.0])
        y = np.array([0.051, 0.052, 0.053, 0.050, 0.048, 0.045])
        return x, y

    def test_linear_interpolator(self, sample_data):
        """Test linear interpolation."""
        x, y = sample_data
        interp = LinearInterpolator().fit(x, y)

        assert abs(interp(1.0) - 0.053) < 1e-10
        assert abs(interp(0.75) - 0.0525) < 1e-10

    def test_flat_extrapolation(self, sample_data):
        """Values outside the nodes are held flat."""
        x, y = sample_data
        interp = LinearInterpolator().fit(x, y)
        assert interp(0.01) == pytest.approx(0.051)
        assert interp(30.0) == pytest.approx(0.045)

    def test_log_linear_interpolator(self, sample_data):
        """r(t)*t is linear between nodes."""
        x, y = sample_data
        interp = LogLinearInterpolator().fit(x, y)

        assert abs(interp(2.0) - 0.050) < 1e-12
        expected_rt = 0.5 * (0.053 * 1.0 + 0.050 * 2.0)
        assert abs(interp(1.5) * 1.5 - expected_rt) < 1e-12

    def test_unfitted_interpolator(self):
        """Interpolating before fit() fails."""
        with pytest.raises(RuntimeError):
            LinearInterpolator()(1.0)

    def test_factory(self):
        """Interpolators are created by method name."""
        assert isinstance(create_interpolator("linear"), LinearInterpolator)
        assert isinstance(create_interpolator("flat-forward"), LogLinearInterpolator)
        with pytest.raises(ValueError):
            create_interpolator("cubic")


class TestCurve:
    """Tests for Curve class."""

    @pytest.fixture
    def curve(self):
        """Upward sloping USD curve."""
        return Curve(
            "USD-DSC",
            VAL_DATE,
            times=[0.5, 1.0, 2.0, 5.0],
            zero_rates=[0.040, 0.042, 0.045, 0.050],
        )

    def test_discount_factor_at_anchor(self, curve):
        """The discount factor at the anchor date is one."""
        assert curve.discount_factor(VAL_DATE) == 1.0
        assert curve.discount_factor(0.0) == 1.0

    def test_discount_factor_past_date(self, curve):
        """Past dates discount at one."""
        assert curve.discount_factor(VAL_DATE - timedelta(days=10)) == 1.0

    def test_discount_factor(self, curve):
        """Discount factor is exp(-z t)."""
        assert curve.discount_factor(1.0) == pytest.approx(np.exp(-0.042))

    def test_relative_time(self, curve):
        """Time from the anchor in the curve day count, negative in the past."""
        assert curve.relative_time(date(2025, 1, 14)) == pytest.approx(365 / 365)
        assert curve.relative_time(date(2024, 1, 5)) == pytest.approx(-10 / 365)

    def test_forward_rate_consistency(self, curve):
        """Forward over [t1, t2] reproduces the discount factor ratio."""
        fwd = curve.forward_rate(1.0, 2.0)
        assert (1 + fwd) == pytest.approx(curve.discount_factor(1.0) / curve.discount_factor(2.0))

    def test_forward_rate_with_accrual(self, curve):
        """Simple forward over an explicit accrual fraction."""
        fwd = curve.forward_rate(1.0, 1.25, accrual=0.25 * 365 / 360)
        expected = (curve.discount_factor(1.0) / curve.discount_factor(1.25) - 1) / (0.25 * 365 / 360)
        assert fwd == pytest.approx(expected)

    def test_forward_rate_invalid_period(self, curve):
        """The forward period must end after it starts."""
        with pytest.raises(ValueError):
            curve.forward_rate(2.0, 1.0)

    def test_from_discount_factors(self):
        """Curves built from discount factors reprice them."""
        curve = Curve.from_discount_factors("X", VAL_DATE, [1.0, 2.0], [0.96, 0.92])
        assert curve.discount_factor(1.0) == pytest.approx(0.96)
        assert curve.discount_factor(2.0) == pytest.approx(0.92)
        with pytest.raises(ValueError):
            Curve.from_discount_factors("X", VAL_DATE, [1.0], [0.0])

    def test_invalid_nodes(self):
        """Empty, non-positive or duplicate node times are rejected."""
        with pytest.raises(ValueError):
            Curve("X", VAL_DATE, [], [])
        with pytest.raises(ValueError):
            Curve("X", VAL_DATE, [0.0, 1.0], [0.01, 0.02])
        with pytest.raises(ValueError):
            Curve("X", VAL_DATE, [1.0, 1.0], [0.01, 0.02])

    def test_nodes_are_sorted_copies(self):
        """Nodes come back sorted by time."""
        curve = Curve("X", VAL_DATE, [2.0, 1.0], [0.02, 0.01])
        times, rates = curve.nodes()
        np.testing.assert_allclose(times, [1.0, 2.0])
        np.testing.assert_allclose(rates, [0.01, 0.02])
        times[0] = 99.0
        assert curve.nodes()[0][0] == 1.0


class TestCurveShifts:
    """Tests for curve shifts."""

    def test_parallel_shift(self):
        """A parallel shift in basis points moves every zero rate."""
        curve = create_flat_curve("USD-DSC", VAL_DATE, 0.03)
        shifted = curve.parallel_shift(10.0)
        assert shifted.zero_rate(3.0) == pytest.approx(0.031)
        assert curve.zero_rate(3.0) == pytest.approx(0.03)

    def test_shift_by_rate(self):
        """shift_by_rate takes a decimal shift."""
        curve = create_flat_curve("USD-DSC", VAL_DATE, 0.03)
        assert curve.shift_by_rate(-0.001).zero_rate(1.0) == pytest.approx(0.029)

    def test_node_shift(self):
        """A node shift moves one node only."""
        curve = Curve("X", VAL_DATE, [1.0, 2.0, 3.0], [0.03, 0.03, 0.03])
        shifted = curve.node_shift(1, 100.0)
        assert shifted.zero_rate(2.0) == pytest.approx(0.04)
        assert shifted.zero_rate(1.0) == pytest.approx(0.03)
        with pytest.raises(IndexError):
            curve.node_shift(3, 1.0)

    def test_flat_curve(self):
        """Flat curves carry the requested rate, tenor and day count."""
        curve = create_flat_curve("EUR-DSC", VAL_DATE, 0.025, max_tenor_years=10.0, day_count=DayCount.ACT_360)
        times, rates = curve.nodes()
        assert times[-1] == 10.0
        assert np.all(rates == 0.025)
        assert curve.day_count == DayCount.ACT_360
