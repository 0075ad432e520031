"""
Scenario-aware containers for market data.

A MarketDataBox holds either one value that applies to every scenario
(a single box) or one value per scenario (a scenario box). Pricing code is
written once against boxes; the combinators below decide whether the
result is a single value or a value per scenario:

    single   + single       -> single
    single   + scenario(n)  -> scenario(n)
    scenario(n) + single    -> scenario(n)
    scenario(n) + scenario(n) -> scenario(n)   (elementwise)
    scenario(n) + scenario(m), n != m -> ShapeMismatch

The rules live in the module-level functions box_map, box_map_with_index
and box_combine. The methods on MarketDataBox delegate to them.

Per-scenario work may be handed to a concurrent.futures Executor. Results
are always collected in scenario order, so element i of an output box is
computed from element i of every input box.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Optional, Sequence, Tuple, TypeVar

import numpy as np

from ..errors import IndexOutOfRange, InvalidConfiguration, InvalidState, ShapeMismatch

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@dataclass(frozen=True)
class MarketDataBox(Generic[T]):
    """
    A single market data value or one value per scenario.

    Use of_single_value / of_scenario_values to construct.

    Attributes:
        values: The contained value(s); exactly one for a single box
        is_single_value: True for a single box
    """
    values: Tuple[T, ...]
    is_single_value: bool

    def __post_init__(self):
        if not self.values:
            raise InvalidConfiguration("A scenario box must contain at least one value")
        if self.is_single_value and len(self.values) != 1:
            raise InvalidConfiguration("A single box must contain exactly one value")
        if any(v is None for v in self.values):
            raise InvalidConfiguration("Market data box values must not be None")

    @classmethod
    def of_single_value(cls, value: T) -> "MarketDataBox[T]":
        """Box a value that applies to all scenarios."""
        return cls((value,), True)

    @classmethod
    def of_scenario_values(cls, values: Sequence[T]) -> "MarketDataBox[T]":
        """Box one value per scenario, in scenario order."""
        return cls(tuple(values), False)

    @property
    def scenario_count(self) -> int:
        """Number of scenarios; 1 for a single box."""
        return len(self.values)

    @property
    def value_type(self) -> type:
        """Python type of the contained value."""
        return type(self.values[0])

    def single_value(self) -> T:
        """
        The value of a single box.

        Raises:
            InvalidState: If this is a scenario box
        """
        if not self.is_single_value:
            raise InvalidState("This box does not contain a single value")
        return self.values[0]

    def scenario_value(self) -> Tuple[T, ...]:
        """
        The per-scenario values of a scenario box.

        Raises:
            InvalidState: If this is a single box
        """
        if self.is_single_value:
            raise InvalidState("This box does not contain a scenario value")
        return self.values

    def get_value(self, scenario_index: int) -> T:
        """
        Value for a scenario.

        A single box returns its value for any non-negative index.

        Raises:
            IndexOutOfRange: If the index is negative, or beyond the
                scenario count of a scenario box
        """
        if scenario_index < 0:
            raise IndexOutOfRange(scenario_index, self.scenario_count)
        if self.is_single_value:
            return self.values[0]
        if scenario_index >= len(self.values):
            raise IndexOutOfRange(scenario_index, len(self.values))
        return self.values[scenario_index]

    def map(self, fn: Callable[[T], R], executor: Optional[Executor] = None) -> "MarketDataBox[R]":
        """Apply fn to the value(s), keeping the shape."""
        return box_map(self, fn, executor)

    def map_with_index(
        self,
        scenario_count: int,
        fn: Callable[[T, int], R],
        executor: Optional[Executor] = None
    ) -> "MarketDataBox[R]":
        """Expand a single box into scenario_count values fn(value, i)."""
        return box_map_with_index(self, scenario_count, fn, executor)

    def combine_with(
        self,
        other: "MarketDataBox[U]",
        fn: Callable[[T, U], R],
        executor: Optional[Executor] = None
    ) -> "MarketDataBox[R]":
        """Combine with another box using the broadcasting rules."""
        return box_combine(self, other, fn, executor)

    def stream(self) -> Iterator[T]:
        """Iterate over the value(s): one for a single box, one per scenario otherwise."""
        return iter(self.values)

    def __iter__(self) -> Iterator[T]:
        return self.stream()

    def to_array(self) -> np.ndarray:
        """Numeric values as a float array, one element per scenario."""
        return np.array(self.values, dtype=np.float64)

    def __repr__(self) -> str:
        if self.is_single_value:
            return f"MarketDataBox.single({self.values[0]!r})"
        return f"MarketDataBox.scenarios(n={len(self.values)})"


def _apply(fn: Callable[..., R], args: Sequence[Tuple[Any, ...]], executor: Optional[Executor]) -> Tuple[R, ...]:
    # Executor.map yields results in submission order
    if executor is None:
        return tuple(fn(*a) for a in args)
    logger.debug("Evaluating %d scenarios on %s", len(args), type(executor).__name__)
    return tuple(executor.map(fn, *zip(*args)))


def box_map(
    box: MarketDataBox[T],
    fn: Callable[[T], R],
    executor: Optional[Executor] = None
) -> MarketDataBox[R]:
    """Apply fn to every value in box; single stays single."""
    if box.is_single_value:
        return MarketDataBox.of_single_value(fn(box.values[0]))
    return MarketDataBox.of_scenario_values(_apply(fn, [(v,) for v in box.values], executor))


def box_map_with_index(
    box: MarketDataBox[T],
    scenario_count: int,
    fn: Callable[[T, int], R],
    executor: Optional[Executor] = None
) -> MarketDataBox[R]:
    """
    Turn a single box into a scenario box of scenario_count values.

    Element i is fn(value, i), e.g. the i-th perturbation of a curve.

    Raises:
        InvalidState: If box is already a scenario box
        InvalidConfiguration: If scenario_count is not positive
    """
    if not box.is_single_value:
        raise InvalidState(
            f"map_with_index requires a single value box, got {box.scenario_count} scenarios"
        )
    if scenario_count <= 0:
        raise InvalidConfiguration(f"Scenario count must be positive, got {scenario_count}")
    value = box.values[0]
    return MarketDataBox.of_scenario_values(
        _apply(fn, [(value, i) for i in range(scenario_count)], executor)
    )


def box_combine(
    box: MarketDataBox[T],
    other: MarketDataBox[U],
    fn: Callable[[T, U], R],
    executor: Optional[Executor] = None
) -> MarketDataBox[R]:
    """
    Combine two boxes elementwise, broadcasting single values.

    Raises:
        ShapeMismatch: If both are scenario boxes with different counts
    """
    if box.is_single_value and other.is_single_value:
        return MarketDataBox.of_single_value(fn(box.values[0], other.values[0]))

    if not box.is_single_value and not other.is_single_value:
        if box.scenario_count != other.scenario_count:
            raise ShapeMismatch(box.scenario_count, other.scenario_count)

    count = other.scenario_count if box.is_single_value else box.scenario_count
    args = [(box.get_value(i), other.get_value(i)) for i in range(count)]
    return MarketDataBox.of_scenario_values(_apply(fn, args, executor))


def scenario_count_of(*boxes: MarketDataBox) -> int:
    """
    Common scenario count of several boxes.

    Returns 1 when all boxes are single.

    Raises:
        ShapeMismatch: If two scenario boxes disagree on their count
    """
    count = 1
    multi = None
    for box in boxes:
        if box.is_single_value:
            continue
        if multi is not None and box.scenario_count != multi:
            raise ShapeMismatch(multi, box.scenario_count)
        multi = box.scenario_count
        count = multi
    return count


__all__ = [
    "MarketDataBox",
    "box_map",
    "box_map_with_index",
    "box_combine",
    "scenario_count_of",
]
