"""
Risk package - point sensitivities, curve scenarios and risk tables.

Provides:
- Point sensitivities to forward rates and zero rates
- Parallel curve shift scenarios over MarketDataBox environments
- pandas tables of sensitivities and scenario P&L
"""

from .sensitivities import (
    PointSensitivity,
    PointSensitivityBuilder,
    PointSensitivities,
    IborRateSensitivity,
    ZeroRateSensitivity,
)
from .scenarios import (
    CurveShiftScenario,
    ScenarioEngine,
    ScenarioResult,
    STANDARD_SHIFTS,
    parallel_shift_scenarios,
    scenario_environments,
    shift_scenario_market_data,
)
from .reporting import (
    box_to_series,
    scenario_results_frame,
    sensitivities_frame,
    sensitivity_ladder,
    worst_scenario,
)

__all__ = [
    "PointSensitivity",
    "PointSensitivityBuilder",
    "PointSensitivities",
    "IborRateSensitivity",
    "ZeroRateSensitivity",
    "CurveShiftScenario",
    "ScenarioEngine",
    "ScenarioResult",
    "STANDARD_SHIFTS",
    "parallel_shift_scenarios",
    "scenario_environments",
    "shift_scenario_market_data",
    "box_to_series",
    "scenario_results_frame",
    "sensitivities_frame",
    "sensitivity_ladder",
    "worst_scenario",
]
