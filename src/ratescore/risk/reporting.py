"""
Tabulation of risk results with pandas.

Keeps formatting out of the pricers; callers get DataFrames they can
filter, pivot or export.
"""

from typing import Any, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..currency import CurrencyAmount
from ..market.box import MarketDataBox
from .scenarios import ScenarioResult
from .sensitivities import PointSensitivities


def sensitivities_frame(sensitivities: PointSensitivities, normalize: bool = True) -> pd.DataFrame:
    """
    Sensitivities as a table, merged by key and date unless normalize is False.

    Columns: type, curve_key, date, sensitivity.
    """
    if normalize:
        sensitivities = sensitivities.normalized()
    return sensitivities.to_dataframe()


def sensitivity_ladder(sensitivities: PointSensitivities) -> pd.DataFrame:
    """Sensitivities pivoted to one row per date and one column per curve key."""
    df = sensitivities_frame(sensitivities)
    if df.empty:
        return df
    return df.pivot_table(index="date", columns="curve_key", values="sensitivity", aggfunc="sum").fillna(0.0)


def box_to_series(box: MarketDataBox, name: Optional[str] = None) -> pd.Series:
    """
    One row per scenario.

    CurrencyAmount values are reduced to their amounts; a single box gives
    a one-row series.
    """
    values: List[Any] = [v.amount if isinstance(v, CurrencyAmount) else v for v in box]
    return pd.Series(values, index=pd.RangeIndex(len(values), name="scenario"), name=name)


def scenario_results_frame(results: Iterable[ScenarioResult]) -> pd.DataFrame:
    """Scenario results as a table, one row per scenario."""
    rows = [r.to_dict() for r in results]
    columns = ["scenario_name", "description", "shift_bp", "base_pv", "scenario_pv", "pnl"]
    return pd.DataFrame(rows, columns=columns)


def worst_scenario(results: Iterable[ScenarioResult]) -> Optional[ScenarioResult]:
    """Scenario with the lowest P&L, or None when there are no results."""
    results = list(results)
    if not results:
        return None
    return results[int(np.argmin([r.pnl for r in results]))]


__all__ = [
    "sensitivities_frame",
    "sensitivity_ladder",
    "box_to_series",
    "scenario_results_frame",
    "worst_scenario",
]
