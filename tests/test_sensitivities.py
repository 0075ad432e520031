"""
Unit tests for point sensitivities.
"""

from datetime import date

import pytest

from ratescore.currency import EUR, USD
from ratescore.rates import IborIndex
from ratescore.risk.sensitivities import (
    IborRateSensitivity,
    PointSensitivities,
    PointSensitivityBuilder,
    ZeroRateSensitivity,
)

USD_3M = IborIndex.of("USD-LIBOR-3M")
D1 = date(2024, 4, 15)
D2 = date(2024, 7, 15)


class TestBuilders:
    """Tests for building sensitivities."""

    def test_single_point_builds(self):
        """A single point builds into one entry."""
        sens = IborRateSensitivity.of(USD_3M, D1, 2.0).build()
        assert len(sens) == 1
        assert sens[0].sensitivity == 2.0
        assert sens[0].curve_key == USD_3M
        assert sens[0].date == D1

    def test_multiplied_by(self):
        """Scaling keeps the curve key and date."""
        point = ZeroRateSensitivity.of(USD, D1, -0.5).multiplied_by(4.0)
        assert point.sensitivity == -2.0
        assert point.currency == USD

    def test_combined_keeps_order(self):
        """Combined builders keep insertion order."""
        builder = IborRateSensitivity.of(USD_3M, D1, 1.0).combined_with(
            ZeroRateSensitivity.of(USD, D2, 3.0)
        )
        sens = builder.multiplied_by(2.0).build()
        assert [type(s) for s in sens] == [IborRateSensitivity, ZeroRateSensitivity]
        assert [s.sensitivity for s in sens] == [2.0, 6.0]

    def test_none(self):
        """The empty builder adds nothing."""
        empty = PointSensitivityBuilder.none()
        assert empty.build().size() == 0
        point = ZeroRateSensitivity.of(USD, D1, 1.0)
        assert empty.combined_with(point).build()[0] == point
        assert empty.multiplied_by(10.0) is empty


class TestPointSensitivities:
    """Tests for the built result."""

    def test_normalized_merges_same_key_and_date(self):
        """Entries with the same key and date merge."""
        sens = PointSensitivities.of(
            ZeroRateSensitivity.of(USD, D1, 1.0),
            IborRateSensitivity.of(USD_3M, D1, 5.0),
            ZeroRateSensitivity.of(USD, D1, 2.5),
            ZeroRateSensitivity.of(EUR, D1, 1.0),
        ).normalized()
        assert len(sens) == 3
        assert sens.find(USD, D1).sensitivity == 3.5
        assert sens.find(USD_3M, D1).sensitivity == 5.0

    def test_different_dates_not_merged(self):
        """Entries on different dates stay separate."""
        sens = PointSensitivities.of(
            ZeroRateSensitivity.of(USD, D1, 1.0),
            ZeroRateSensitivity.of(USD, D2, 1.0),
        ).normalized()
        assert len(sens) == 2

    def test_combined_with_and_total(self):
        """Combining concatenates; the total sums sensitivities."""
        a = PointSensitivities.of(ZeroRateSensitivity.of(USD, D1, 1.0))
        b = PointSensitivities.of(ZeroRateSensitivity.of(USD, D2, 2.0))
        combined = a.combined_with(b)
        assert len(combined) == 2
        assert combined.total() == 3.0
        assert combined.multiplied_by(-1.0).total() == -3.0

    def test_equal_within_tolerance(self):
        """Equality after normalisation, within a tolerance."""
        a = PointSensitivities.of(
            ZeroRateSensitivity.of(USD, D1, 1.0),
            ZeroRateSensitivity.of(USD, D1, 1.0),
        )
        b = PointSensitivities.of(ZeroRateSensitivity.of(USD, D1, 2.0 + 1e-9))
        assert a.equal_within_tolerance(b, 1e-8)
        assert not a.equal_within_tolerance(PointSensitivities.empty(), 1e-8)

    def test_find_missing(self):
        """find returns None when nothing matches."""
        assert PointSensitivities.empty().find(USD, D1) is None

    def test_to_dataframe(self):
        """One row per entry with type, key, date and value."""
        df = PointSensitivities.of(
            IborRateSensitivity.of(USD_3M, D1, 10.0),
            ZeroRateSensitivity.of(USD, D2, -1.0),
        ).to_dataframe()
        assert list(df.columns) == ["type", "curve_key", "date", "sensitivity"]
        assert list(df["type"]) == ["IborRateSensitivity", "ZeroRateSensitivity"]
        assert list(df["curve_key"]) == ["USD-LIBOR-3M", "USD"]
        assert df["sensitivity"].sum() == pytest.approx(9.0)
