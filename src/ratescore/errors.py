"""
Exception types raised by the valuation core.

Every error derives from RatesCoreError so callers can catch library
failures as a group, and also from the builtin that plain Python code
would raise for the same situation:

- InvalidState: operation needs a box shape the box does not have
- IndexOutOfRange: scenario index outside [0, count)
- ShapeMismatch: two scenario boxes with different scenario counts
- MissingMarketData: no quote, curve or FX rate for the requested key
- InvalidConfiguration: inconsistent object rejected at construction
"""


class RatesCoreError(Exception):
    """Base class for errors originating from this library."""


class InvalidState(RatesCoreError, RuntimeError):
    """Operation requires a shape or state the object does not have."""


class IndexOutOfRange(RatesCoreError, IndexError):
    """Scenario index outside the valid range."""

    def __init__(self, index: int, scenario_count: int):
        self.index = index
        self.scenario_count = scenario_count
        super().__init__(
            f"Scenario index {index} is out of range for {scenario_count} scenario(s)"
        )

    def __reduce__(self):
        return type(self), (self.index, self.scenario_count)


class ShapeMismatch(RatesCoreError, ValueError):
    """Two scenario boxes with different scenario counts were combined."""

    def __init__(self, count: int, other_count: int):
        self.count = count
        self.other_count = other_count
        super().__init__(
            f"Cannot combine boxes with {count} and {other_count} scenarios"
        )

    def __reduce__(self):
        return type(self), (self.count, self.other_count)


class MissingMarketData(RatesCoreError, LookupError):
    """Required market data is not available."""

    def __init__(self, message: str, key=None):
        self.key = key
        super().__init__(message)

    def __reduce__(self):
        return type(self), (self.args[0], self.key)

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidConfiguration(RatesCoreError, ValueError):
    """Object definition is inconsistent; raised at construction time."""


__all__ = [
    "RatesCoreError",
    "InvalidState",
    "IndexOutOfRange",
    "ShapeMismatch",
    "MissingMarketData",
    "InvalidConfiguration",
]
