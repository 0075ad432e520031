"""
Point sensitivities: exact first-order risk to curve points.

A point sensitivity is the derivative of a value with respect to one
market quantity identified by a curve key and a date:

- IborRateSensitivity: forward rate of an IBOR index fixing on a date
- ZeroRateSensitivity: continuously compounded zero rate of a currency's
  discount curve at a date

Pricers return builders (PointSensitivityBuilder) so that scaling and
combining sensitivities does not copy lists at every step; build()
produces the immutable PointSensitivities result.

Entries are merged only when kind, key and date all match (normalized).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..currency import Currency


class PointSensitivityBuilder(ABC):
    """Accumulates point sensitivities before they are built."""

    @abstractmethod
    def build_into(self, target: List["PointSensitivity"]) -> List["PointSensitivity"]:
        """Append the sensitivities of this builder to target and return it."""

    @abstractmethod
    def multiplied_by(self, factor: float) -> "PointSensitivityBuilder":
        """Scale every sensitivity by factor."""

    def combined_with(self, other: "PointSensitivityBuilder") -> "PointSensitivityBuilder":
        """Builder holding the sensitivities of self followed by those of other."""
        return CombinedSensitivityBuilder((self, other))

    def build(self) -> "PointSensitivities":
        return PointSensitivities(tuple(self.build_into([])))

    @staticmethod
    def none() -> "PointSensitivityBuilder":
        """Builder with no sensitivities."""
        return _NO_SENSITIVITY


class _NoSensitivity(PointSensitivityBuilder):

    def build_into(self, target):
        return target

    def multiplied_by(self, factor):
        return self

    def combined_with(self, other):
        return other

    def __repr__(self) -> str:
        return "PointSensitivityBuilder.none()"


_NO_SENSITIVITY = _NoSensitivity()


@dataclass(frozen=True)
class CombinedSensitivityBuilder(PointSensitivityBuilder):
    """Ordered combination of builders."""
    builders: Tuple[PointSensitivityBuilder, ...]

    def build_into(self, target):
        for builder in self.builders:
            builder.build_into(target)
        return target

    def multiplied_by(self, factor):
        return CombinedSensitivityBuilder(tuple(b.multiplied_by(factor) for b in self.builders))

    def combined_with(self, other):
        return CombinedSensitivityBuilder(self.builders + (other,))


class PointSensitivity(PointSensitivityBuilder):
    """
    A single sensitivity to a curve point.

    Concrete subclasses are frozen dataclasses exposing curve_key,
    date and sensitivity.
    """

    @property
    @abstractmethod
    def curve_key(self) -> Any:
        """Identifier of the curve the sensitivity refers to."""

    def with_sensitivity(self, value: float) -> "PointSensitivity":
        return replace(self, sensitivity=value)

    def multiplied_by(self, factor: float) -> "PointSensitivity":
        return self.with_sensitivity(self.sensitivity * factor)

    def build_into(self, target):
        target.append(self)
        return target

    def merge_key(self) -> Tuple[type, Any, date]:
        """Identity used when merging sensitivities."""
        return type(self), self.curve_key, self.date


@dataclass(frozen=True)
class IborRateSensitivity(PointSensitivity):
    """
    Sensitivity to the forward rate of an IBOR index.

    Attributes:
        index: The floating rate index (e.g. IborIndex USD-LIBOR-3M)
        fixing_date: Fixing date of the observed rate
        sensitivity: dValue / dForwardRate
    """
    index: Any
    fixing_date: date
    sensitivity: float

    @classmethod
    def of(cls, index: Any, fixing_date: date, sensitivity: float) -> "IborRateSensitivity":
        return cls(index, fixing_date, float(sensitivity))

    @property
    def curve_key(self) -> Any:
        return self.index

    @property
    def date(self) -> date:
        return self.fixing_date


@dataclass(frozen=True)
class ZeroRateSensitivity(PointSensitivity):
    """
    Sensitivity to the zero rate of a currency's discount curve.

    Attributes:
        currency: Currency whose discount curve is referenced
        date: Curve date
        sensitivity: dValue / dZeroRate
    """
    currency: Currency
    date: date
    sensitivity: float

    @classmethod
    def of(cls, currency: Currency, on_date: date, sensitivity: float) -> "ZeroRateSensitivity":
        return cls(currency, on_date, float(sensitivity))

    @property
    def curve_key(self) -> Currency:
        return self.currency


@dataclass(frozen=True)
class PointSensitivities:
    """
    Immutable, ordered list of point sensitivities.

    Attributes:
        sensitivities: The entries, in the order they were built
    """
    sensitivities: Tuple[PointSensitivity, ...] = ()

    @classmethod
    def of(cls, *sensitivities: PointSensitivity) -> "PointSensitivities":
        return cls(tuple(sensitivities))

    @classmethod
    def empty(cls) -> "PointSensitivities":
        return cls(())

    def size(self) -> int:
        return len(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)

    def __iter__(self) -> Iterator[PointSensitivity]:
        return iter(self.sensitivities)

    def __getitem__(self, i: int) -> PointSensitivity:
        return self.sensitivities[i]

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        """Concatenation of both lists, without merging."""
        return PointSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(tuple(s.multiplied_by(factor) for s in self.sensitivities))

    def normalized(self) -> "PointSensitivities":
        """
        Merge entries sharing kind, curve key and date.

        Sensitivities are summed; the position of the first occurrence is kept.
        """
        merged: Dict[Tuple[type, Any, date], PointSensitivity] = {}
        for s in self.sensitivities:
            key = s.merge_key()
            if key in merged:
                merged[key] = merged[key].with_sensitivity(merged[key].sensitivity + s.sensitivity)
            else:
                merged[key] = s
        return PointSensitivities(tuple(merged.values()))

    def find(self, curve_key: Any, on_date: date) -> Optional[PointSensitivity]:
        """First entry with the given curve key and date, or None."""
        for s in self.sensitivities:
            if s.curve_key == curve_key and s.date == on_date:
                return s
        return None

    def total(self) -> float:
        """Sum of all sensitivity values (meaningful only for a single curve)."""
        return float(np.sum([s.sensitivity for s in self.sensitivities]))

    def equal_within_tolerance(self, other: "PointSensitivities", tolerance: float) -> bool:
        """
        Compare two results after normalization.

        Entries must match on kind, key and date; values within tolerance.
        """
        mine = {s.merge_key(): s.sensitivity for s in self.normalized()}
        theirs = {s.merge_key(): s.sensitivity for s in other.normalized()}
        for key in set(mine) | set(theirs):
            if abs(mine.get(key, 0.0) - theirs.get(key, 0.0)) > tolerance:
                return False
        return True

    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabulate the sensitivities.

        Columns: type, curve_key, date, sensitivity.
        """
        rows = [
            {
                "type": type(s).__name__,
                "curve_key": str(s.curve_key),
                "date": s.date,
                "sensitivity": s.sensitivity,
            }
            for s in self.sensitivities
        ]
        return pd.DataFrame(rows, columns=["type", "curve_key", "date", "sensitivity"])


__all__ = [
    "PointSensitivityBuilder",
    "CombinedSensitivityBuilder",
    "PointSensitivity",
    "IborRateSensitivity",
    "ZeroRateSensitivity",
    "PointSensitivities",
]
