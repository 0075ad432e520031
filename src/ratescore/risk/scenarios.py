"""
Curve shift scenarios.

Scenarios are parallel shifts of the zero curves, optionally restricted
to one currency. A set of scenarios turns a single pricing environment
into a MarketDataBox with one environment per scenario; pricing then maps
over the box.

- CurveShiftScenario: one named shift
- STANDARD_SHIFTS: common parallel moves
- scenario_environments / parallel_shift_scenarios: environment boxes
- shift_scenario_market_data: the same shifts applied to curve entries
  of a ScenarioMarketData
- ScenarioEngine: base vs scenario P&L for a pricing function
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import DEFAULT_SCENARIO_CONFIG, ScenarioConfig
from ..currency import Currency
from ..market.box import MarketDataBox
from ..market.data import DiscountCurveKey, ForwardCurveKey, ScenarioMarketData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveShiftScenario:
    """
    A parallel curve shift.

    Attributes:
        name: Scenario name
        shift_bp: Shift in basis points
        currency: Only shift curves of this currency when set
        description: Free text
    """
    name: str
    shift_bp: float
    currency: Optional[Currency] = None
    description: str = ""

    def apply(self, env):
        """Shifted copy of a CurvePricingEnvironment."""
        return env.parallel_shift(self.shift_bp, self.currency)


STANDARD_SHIFTS: Dict[str, CurveShiftScenario] = {
    s.name: s for s in [
        CurveShiftScenario("parallel_up_100", 100.0, description="Parallel +100bp"),
        CurveShiftScenario("parallel_down_100", -100.0, description="Parallel -100bp"),
        CurveShiftScenario("parallel_up_50", 50.0, description="Parallel +50bp"),
        CurveShiftScenario("parallel_down_50", -50.0, description="Parallel -50bp"),
        CurveShiftScenario("parallel_up_25", 25.0, description="Parallel +25bp"),
        CurveShiftScenario("parallel_down_25", -25.0, description="Parallel -25bp"),
    ]
}


def _apply_scenario(scenarios: Sequence[CurveShiftScenario], env, scenario_index: int):
    return scenarios[scenario_index].apply(env)


def scenario_environments(
    env,
    scenarios: Sequence[CurveShiftScenario],
    config: ScenarioConfig = DEFAULT_SCENARIO_CONFIG
) -> MarketDataBox:
    """
    Box with one shifted environment per scenario, in scenario order.

    Raises:
        InvalidConfiguration: If scenarios is empty
    """
    scenarios = tuple(scenarios)
    with config.executor(len(scenarios)) as executor:
        return MarketDataBox.of_single_value(env).map_with_index(
            len(scenarios), partial(_apply_scenario, scenarios), executor
        )


def parallel_shift_scenarios(
    env,
    shifts_bp: Sequence[float],
    currency: Optional[Currency] = None,
    config: ScenarioConfig = DEFAULT_SCENARIO_CONFIG
) -> MarketDataBox:
    """Box of environments shifted by each of shifts_bp."""
    scenarios = [CurveShiftScenario(f"shift_{bp:+g}bp", bp, currency) for bp in shifts_bp]
    return scenario_environments(env, scenarios, config)


def _shift_curve(shifts_bp: Sequence[float], curve, scenario_index: int):
    return curve.parallel_shift(shifts_bp[scenario_index])


def shift_scenario_market_data(
    market_data: ScenarioMarketData,
    shifts_bp: Sequence[float],
    currency: Optional[Currency] = None
) -> ScenarioMarketData:
    """
    Perturb every curve entry of market_data by each shift.

    Curve entries must still be single values.

    Raises:
        InvalidState: If a curve entry already varies by scenario
    """
    shifts_bp = tuple(shifts_bp)
    shifted = market_data
    for key in list(market_data.keys()):
        if isinstance(key, DiscountCurveKey):
            key_ccy = key.currency
        elif isinstance(key, ForwardCurveKey):
            key_ccy = key.index.currency
        else:
            continue
        if currency is not None and key_ccy != currency:
            continue
        shifted = shifted.with_perturbation(key, len(shifts_bp), partial(_shift_curve, shifts_bp))
    return shifted


@dataclass
class ScenarioResult:
    """
    Result of running a scenario.

    Attributes:
        scenario: The scenario that was run
        base_pv: PV before the shift
        scenario_pv: PV after the shift
        pnl: scenario_pv - base_pv
    """
    scenario: CurveShiftScenario
    base_pv: float
    scenario_pv: float
    pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario_name": self.scenario.name,
            "description": self.scenario.description,
            "shift_bp": self.scenario.shift_bp,
            "base_pv": self.base_pv,
            "scenario_pv": self.scenario_pv,
            "pnl": self.pnl,
        }


class ScenarioEngine:
    """
    Runs curve shift scenarios against a pricing function.

    Attributes:
        base_env: Unshifted environment
        pricer_func: Maps an environment to a PV
        config: Scenario execution settings
    """

    def __init__(
        self,
        base_env,
        pricer_func: Callable[[Any], float],
        config: ScenarioConfig = DEFAULT_SCENARIO_CONFIG
    ):
        self.base_env = base_env
        self.pricer_func = pricer_func
        self.config = config

    def run_scenarios(self, scenarios: Sequence[CurveShiftScenario]) -> List[ScenarioResult]:
        """PV and P&L for each scenario, in order."""
        scenarios = list(scenarios)
        base_pv = float(self.pricer_func(self.base_env))
        env_box = scenario_environments(self.base_env, scenarios, self.config)
        with self.config.executor(len(scenarios)) as executor:
            pv_box = env_box.map(self.pricer_func, executor)
        logger.debug("Ran %d scenarios, base PV %.2f", len(scenarios), base_pv)
        return [
            ScenarioResult(scenario, base_pv, float(pv), float(pv) - base_pv)
            for scenario, pv in zip(scenarios, pv_box)
        ]

    def run_scenario(self, scenario: CurveShiftScenario) -> ScenarioResult:
        return self.run_scenarios([scenario])[0]

    def run_standard_scenarios(self) -> List[ScenarioResult]:
        return self.run_scenarios(list(STANDARD_SHIFTS.values()))


__all__ = [
    "CurveShiftScenario",
    "STANDARD_SHIFTS",
    "scenario_environments",
    "parallel_shift_scenarios",
    "shift_scenario_market_data",
    "ScenarioResult",
    "ScenarioEngine",
]
