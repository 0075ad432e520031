"""
Products package - trade definitions.

- Fra / ExpandedFra: forward rate agreements
- NotionalSchedule: leg notionals with optional FX reset
"""

from .fra import ExpandedFra, Fra
from .notional import FxResetCalculation, NotionalSchedule, ValueSchedule, ValueStep

__all__ = [
    "Fra",
    "ExpandedFra",
    "NotionalSchedule",
    "FxResetCalculation",
    "ValueSchedule",
    "ValueStep",
]
