"""
Notional schedules for swap legs.

A NotionalSchedule gives the notional of a leg, which may step at payment
period boundaries, and whether notional is exchanged at the start, at the
end or whenever it changes. With an FX reset the notional is defined in a
reference currency and converted into the leg currency at each period.

Consistency between the leg currency and the FX reset is checked when the
schedule is constructed.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Tuple, Union

from ..currency import Currency, CurrencyAmount
from ..errors import InvalidConfiguration
from ..rates import FxIndex


@dataclass(frozen=True)
class ValueStep:
    """The value of a schedule from a date onwards."""
    date: date
    value: float


@dataclass(frozen=True)
class ValueSchedule:
    """
    An initial value plus dated steps.

    Attributes:
        initial_value: Value before the first step
        steps: Steps in date order
    """
    initial_value: float
    steps: Tuple[ValueStep, ...] = ()

    def __post_init__(self):
        ordered = tuple(sorted(self.steps, key=lambda s: s.date))
        dates = [s.date for s in ordered]
        if len(set(dates)) != len(dates):
            raise InvalidConfiguration("Value schedule steps must have distinct dates")
        object.__setattr__(self, "steps", ordered)

    @classmethod
    def of(cls, initial_value: float, steps: Sequence[ValueStep] = ()) -> "ValueSchedule":
        return cls(float(initial_value), tuple(steps))

    def value_on(self, on_date: date) -> float:
        """Value in force on a date: the last step on or before it."""
        value = self.initial_value
        for step in self.steps:
            if step.date > on_date:
                break
            value = step.value
        return value

    def is_constant(self) -> bool:
        return not self.steps


@dataclass(frozen=True)
class FxResetCalculation:
    """
    Conversion of a notional defined in another currency.

    Attributes:
        index: FX index used for the conversion
        reference_currency: Currency the notional amounts are defined in
    """
    index: FxIndex
    reference_currency: Currency

    def __post_init__(self):
        if not self.index.currency_pair.contains(self.reference_currency):
            raise InvalidConfiguration(
                f"Reference currency {self.reference_currency} must be one of those "
                f"in the FX index {self.index}"
            )


@dataclass(frozen=True)
class NotionalSchedule:
    """
    The schedule of notional amounts of a swap leg.

    Attributes:
        currency: Leg currency, in which interest is calculated
        amount: Notional amounts, expected to be positive
        fx_reset: Optional FX reset when amounts are in another currency
        initial_exchange: Exchange notional at the start
        final_exchange: Exchange notional at the end
        intermediate_exchange: Exchange notional differences during the life

    Raises:
        InvalidConfiguration: If the FX reset reference currency equals the
            leg currency, or the FX reset index does not involve the leg currency
    """
    currency: Currency
    amount: ValueSchedule
    fx_reset: Optional[FxResetCalculation] = None
    initial_exchange: bool = False
    final_exchange: bool = False
    intermediate_exchange: bool = False

    def __post_init__(self):
        if self.fx_reset is None:
            return
        if self.fx_reset.reference_currency == self.currency:
            raise InvalidConfiguration(
                f"Currency {self.currency} must not equal FX reset reference currency "
                f"{self.fx_reset.reference_currency}"
            )
        if not self.fx_reset.index.currency_pair.contains(self.currency):
            raise InvalidConfiguration(
                f"Currency {self.currency} must be one of those in the FX reset index "
                f"{self.fx_reset.index}"
            )

    @classmethod
    def of(
        cls,
        currency_or_amount: Union[Currency, CurrencyAmount],
        amount: Union[float, ValueSchedule, None] = None
    ) -> "NotionalSchedule":
        """
        Notional that never exchanges and has no FX reset.

        NotionalSchedule.of(CurrencyAmount.of(USD, 1e6)),
        NotionalSchedule.of(USD, 1e6) or NotionalSchedule.of(USD, schedule).
        """
        if isinstance(currency_or_amount, CurrencyAmount):
            if amount is not None:
                raise ValueError("Amount must not be given twice")
            return cls(currency_or_amount.currency, ValueSchedule.of(currency_or_amount.amount))
        if amount is None:
            raise ValueError("Notional amount is required")
        if not isinstance(amount, ValueSchedule):
            amount = ValueSchedule.of(amount)
        return cls(currency_or_amount, amount)

    @property
    def amount_currency(self) -> Currency:
        """Currency the amounts are expressed in."""
        return self.fx_reset.reference_currency if self.fx_reset else self.currency

    def notional_on(self, on_date: date) -> CurrencyAmount:
        """Notional in force on a date, in the currency the amounts are defined in."""
        return CurrencyAmount(self.amount_currency, self.amount.value_on(on_date))


__all__ = [
    "ValueStep",
    "ValueSchedule",
    "FxResetCalculation",
    "NotionalSchedule",
]
