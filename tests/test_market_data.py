"""
Unit tests for market data snapshots and scenario market data.
"""

from datetime import date
import pickle

import pytest

from ratescore.currency import EUR, USD
from ratescore.curves import create_flat_curve
from ratescore.errors import IndexOutOfRange, InvalidState, MissingMarketData, ShapeMismatch
from ratescore.market.box import MarketDataBox
from ratescore.market.data import (
    DiscountCurveKey,
    FxRateKey,
    MarketData,
    ScenarioMarketData,
)
from ratescore.market.fx import FxRate

VAL_DATE = date(2024, 1, 15)
FX_KEY = FxRateKey.of(EUR, USD)
DSC_KEY = DiscountCurveKey(USD)


def _bump_fx(rate, i):
    return FxRate.of(EUR, USD, rate.rate + 0.01 * i)


@pytest.fixture
def market_data():
    return MarketData.of(VAL_DATE, {
        FX_KEY: FxRate.of(EUR, USD, 1.10),
        DSC_KEY: create_flat_curve("USD-DSC", VAL_DATE, 0.03),
    })


class TestMarketData:
    """Tests for the single snapshot."""

    def test_lookup(self, market_data):
        """Values are found by key; absent keys give None."""
        assert market_data.contains(FX_KEY)
        assert market_data.get_value(FX_KEY).rate == 1.10
        assert market_data.find_value(DiscountCurveKey(EUR)) is None

    def test_missing_value(self, market_data):
        """get_value names the missing key."""
        with pytest.raises(MissingMarketData) as exc_info:
            market_data.get_value(DiscountCurveKey(EUR))
        assert exc_info.value.key == DiscountCurveKey(EUR)
        assert "Discount[EUR]" in str(exc_info.value)

    def test_with_value_is_a_copy(self, market_data):
        """with_value leaves the original snapshot unchanged."""
        updated = market_data.with_value(FX_KEY, FxRate.of(EUR, USD, 1.20))
        assert updated.get_value(FX_KEY).rate == 1.20
        assert market_data.get_value(FX_KEY).rate == 1.10

    def test_values_are_read_only(self, market_data):
        """The value mapping cannot be modified in place."""
        with pytest.raises(TypeError):
            market_data.values[FX_KEY] = None

    def test_pickle_round_trip(self, market_data):
        """Snapshots pickle for process pools and stay read-only afterwards."""
        restored = pickle.loads(pickle.dumps(market_data))
        assert restored.valuation_date == VAL_DATE
        assert restored.get_value(FX_KEY) == market_data.get_value(FX_KEY)
        assert restored.get_value(DSC_KEY).zero_rate(1.0) == pytest.approx(0.03)
        with pytest.raises(TypeError):
            restored.values[FX_KEY] = None


class TestScenarioMarketData:
    """Tests for scenario market data."""

    def test_from_market_data_is_single(self, market_data):
        """Every value of a plain snapshot is single."""
        smd = ScenarioMarketData.from_market_data(market_data)
        assert smd.scenario_count == 1
        assert smd.get_value(FX_KEY).is_single_value

    def test_with_perturbation(self, market_data):
        """Scenario i of a perturbed key gets fn(value, i)."""
        smd = ScenarioMarketData.from_market_data(market_data).with_perturbation(
            FX_KEY, 3, lambda rate, i: FxRate.of(EUR, USD, rate.rate + 0.01 * i)
        )
        assert smd.scenario_count == 3
        rates = [s.get_value(FX_KEY).rate for s in smd.scenarios()]
        assert rates == pytest.approx([1.10, 1.11, 1.12])

    def test_single_values_shared_by_scenarios(self, market_data):
        """Unperturbed values are the same object in every scenario."""
        smd = ScenarioMarketData.from_market_data(market_data).with_perturbation(
            FX_KEY, 2, lambda rate, i: rate
        )
        curve = market_data.get_value(DSC_KEY)
        assert smd.scenario(0).get_value(DSC_KEY) is curve
        assert smd.scenario(1).get_value(DSC_KEY) is curve

    def test_perturbing_twice_rejected(self, market_data):
        """A key that already varies by scenario cannot be perturbed again."""
        smd = ScenarioMarketData.from_market_data(market_data).with_perturbation(
            FX_KEY, 2, lambda rate, i: rate
        )
        with pytest.raises(InvalidState):
            smd.with_perturbation(FX_KEY, 2, lambda rate, i: rate)

    def test_scenario_out_of_range(self, market_data):
        """Scenario indices are checked against the scenario count."""
        smd = ScenarioMarketData.from_market_data(market_data)
        with pytest.raises(IndexOutOfRange):
            smd.scenario(1)

    def test_mismatched_scenario_counts(self):
        """All scenario boxes must agree on the scenario count."""
        with pytest.raises(ShapeMismatch):
            ScenarioMarketData.of(VAL_DATE, {
                FX_KEY: MarketDataBox.of_scenario_values([1.0, 2.0, 3.0]),
                DSC_KEY: MarketDataBox.of_scenario_values([1.0] * 5),
            })

    def test_missing_box(self):
        """Missing keys raise MissingMarketData."""
        with pytest.raises(MissingMarketData):
            ScenarioMarketData.of(VAL_DATE).get_value(FX_KEY)

    def test_to_box(self, market_data):
        """to_box gives one snapshot per scenario."""
        single = ScenarioMarketData.from_market_data(market_data).to_box()
        assert single.is_single_value
        assert single.single_value().get_value(FX_KEY).rate == 1.10

        boxed = ScenarioMarketData.from_market_data(market_data).with_perturbation(
            FX_KEY, 4, lambda rate, i: rate
        ).to_box()
        assert boxed.scenario_count == 4

    def test_pickle_round_trip(self, market_data):
        """Scenario boxes survive pickling with their shape."""
        smd = ScenarioMarketData.from_market_data(market_data).with_perturbation(
            FX_KEY, 2, _bump_fx
        )
        restored = pickle.loads(pickle.dumps(smd))
        assert restored.scenario_count == 2
        assert restored.get_value(DSC_KEY).is_single_value
        assert [s.get_value(FX_KEY).rate for s in restored.scenarios()] == pytest.approx([1.10, 1.11])
