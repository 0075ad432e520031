"""
Currency value types.

Provides:
- Currency: ISO code plus the currency used to triangulate FX rates
- CurrencyPair: ordered (base, counter) pair, e.g. EUR/USD
- CurrencyAmount: an amount of money in a single currency

All types are immutable. Arithmetic on CurrencyAmount returns new
instances and refuses to mix currencies.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Union


_CODE_PATTERN = re.compile(r'^[A-Z]{3}$')


@dataclass(frozen=True)
class Currency:
    """
    A currency identified by its three-letter ISO code.

    Equality and hashing use the code only.

    Attributes:
        code: ISO 4217 code, e.g. "USD"
        minor_units: Number of decimal places used for rounding
        triangulation_code: Currency used to derive FX cross rates when no
            direct quote exists
    """
    code: str
    minor_units: int = field(default=2, compare=False)
    triangulation_code: str = field(default="USD", compare=False)

    def __post_init__(self):
        if not _CODE_PATTERN.match(self.code):
            raise ValueError(f"Invalid currency code: {self.code}")
        if not _CODE_PATTERN.match(self.triangulation_code):
            raise ValueError(f"Invalid triangulation currency code: {self.triangulation_code}")

    @classmethod
    def of(cls, code: str) -> "Currency":
        """Look up a known currency, or create one with default settings."""
        key = code.upper().strip()
        known = _KNOWN_CURRENCIES.get(key)
        if known is not None:
            return known
        return cls(key)

    @property
    def triangulation_currency(self) -> "Currency":
        """Currency through which FX cross rates are derived."""
        if self.triangulation_code == self.code:
            return self
        return Currency.of(self.triangulation_code)

    def round_amount(self, amount: float) -> float:
        """Round an amount to the currency's minor units."""
        return round(amount, self.minor_units)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code})"


_KNOWN_CURRENCIES: Dict[str, Currency] = {
    c.code: c for c in [
        Currency("USD", 2, "EUR"),
        Currency("EUR", 2, "USD"),
        Currency("GBP", 2, "USD"),
        Currency("JPY", 0, "USD"),
        Currency("CHF", 2, "USD"),
        Currency("AUD", 2, "USD"),
        Currency("CAD", 2, "USD"),
        Currency("NZD", 2, "USD"),
        Currency("SEK", 2, "EUR"),
        Currency("NOK", 2, "EUR"),
        Currency("DKK", 2, "EUR"),
        Currency("PLN", 2, "EUR"),
        Currency("HKD", 2, "USD"),
    ]
}

USD = _KNOWN_CURRENCIES["USD"]
EUR = _KNOWN_CURRENCIES["EUR"]
GBP = _KNOWN_CURRENCIES["GBP"]
JPY = _KNOWN_CURRENCIES["JPY"]
CHF = _KNOWN_CURRENCIES["CHF"]
AUD = _KNOWN_CURRENCIES["AUD"]


@dataclass(frozen=True)
class CurrencyPair:
    """
    An ordered pair of currencies, quoted as BASE/COUNTER.

    A rate r for EUR/USD means 1 EUR = r USD.
    """
    base: Currency
    counter: Currency

    @classmethod
    def of(cls, base: Union[Currency, str], counter: Union[Currency, str]) -> "CurrencyPair":
        if isinstance(base, str):
            base = Currency.of(base)
        if isinstance(counter, str):
            counter = Currency.of(counter)
        return cls(base, counter)

    @classmethod
    def parse(cls, pair: str) -> "CurrencyPair":
        """Parse "EUR/USD" or "EURUSD"."""
        text = pair.upper().replace("/", "").strip()
        if len(text) != 6:
            raise ValueError(f"Invalid currency pair: {pair}")
        return cls.of(text[:3], text[3:])

    def inverse(self) -> "CurrencyPair":
        return CurrencyPair(self.counter, self.base)

    def is_inverse(self, other: "CurrencyPair") -> bool:
        return self.base == other.counter and self.counter == other.base

    def is_identity(self) -> bool:
        return self.base == self.counter

    def contains(self, currency: Currency) -> bool:
        return currency == self.base or currency == self.counter

    def __str__(self) -> str:
        return f"{self.base.code}/{self.counter.code}"


@dataclass(frozen=True)
class CurrencyAmount:
    """
    An amount of a currency.

    Attributes:
        currency: Currency of the amount
        amount: Signed magnitude
    """
    currency: Currency
    amount: float

    def __post_init__(self):
        object.__setattr__(self, "amount", float(self.amount))

    @classmethod
    def of(cls, currency: Union[Currency, str], amount: float) -> "CurrencyAmount":
        if isinstance(currency, str):
            currency = Currency.of(currency)
        return cls(currency, amount)

    @classmethod
    def zero(cls, currency: Union[Currency, str]) -> "CurrencyAmount":
        return cls.of(currency, 0.0)

    @classmethod
    def parse(cls, text: str) -> "CurrencyAmount":
        """
        Parse an amount formatted as "CCY amount", e.g. "USD 1250.5".

        Raises:
            ValueError: If the text is not in that format
        """
        parts = text.split()
        if len(parts) != 2:
            raise ValueError(f"Unable to parse amount, invalid format: {text}")
        try:
            value = float(parts[1])
        except ValueError as exc:
            raise ValueError(f"Unable to parse amount: {text}") from exc
        return cls.of(parts[0], value)

    def _check_currency(self, other: "CurrencyAmount", action: str) -> None:
        if other.currency != self.currency:
            raise ValueError(
                f"Unable to {action} amounts in different currencies: "
                f"{self.currency} and {other.currency}"
            )

    def plus(self, other: Union["CurrencyAmount", float]) -> "CurrencyAmount":
        if isinstance(other, CurrencyAmount):
            self._check_currency(other, "add")
            return CurrencyAmount(self.currency, self.amount + other.amount)
        return CurrencyAmount(self.currency, self.amount + other)

    def minus(self, other: Union["CurrencyAmount", float]) -> "CurrencyAmount":
        if isinstance(other, CurrencyAmount):
            self._check_currency(other, "subtract")
            return CurrencyAmount(self.currency, self.amount - other.amount)
        return CurrencyAmount(self.currency, self.amount - other)

    def multiplied_by(self, factor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, self.amount * factor)

    def negated(self) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, -self.amount)

    def map_amount(self, fn: Callable[[float], float]) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, fn(self.amount))

    def rounded(self) -> "CurrencyAmount":
        """Amount rounded to the currency's minor units."""
        return CurrencyAmount(self.currency, self.currency.round_amount(self.amount))

    def __add__(self, other):
        return self.plus(other)

    def __sub__(self, other):
        return self.minus(other)

    def __mul__(self, factor: float):
        return self.multiplied_by(factor)

    __rmul__ = __mul__

    def __neg__(self):
        return self.negated()

    def __lt__(self, other: "CurrencyAmount") -> bool:
        return (self.currency.code, self.amount) < (other.currency.code, other.amount)

    def __str__(self) -> str:
        return f"{self.currency.code} {self.amount}"


__all__ = [
    "Currency",
    "CurrencyPair",
    "CurrencyAmount",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CHF",
    "AUD",
]
