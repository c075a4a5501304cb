"""Money value object with currency-safe decimal arithmetic."""

from __future__ import annotations

from collections.abc import Iterable
from copy import copy
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal, DivisionByZero, InvalidOperation, localcontext

from babel import Locale
from babel.numbers import parse_pattern

from recurring_billing.domain.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidCurrencyError,
)

DEFAULT_CURRENCY = "USD"
DEFAULT_LOCALE = "en_US"
STORAGE_PLACES = 4
DISPLAY_FRACTION_DIGITS = (2, 4)

# Arithmetic context; never installed as the thread's decimal context.
_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP, traps=[DivisionByZero, InvalidOperation])

AmountLike = str | int | float | Decimal


def _to_decimal(value: AmountLike) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # repr() gives the shortest round-tripping form: 0.1 -> "0.1"
        result = Decimal(repr(value))
    elif isinstance(value, (int, str)) and not isinstance(value, bool):
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as e:
            raise InvalidAmountError(f"Invalid amount: {value!r}") from e
    else:
        raise InvalidAmountError(f"Invalid amount type: {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    return result


def _quantize_context(amount: Decimal, places: int) -> Context:
    # Quantizing needs room for every integer digit plus the fraction.
    context = _CONTEXT.copy()
    context.prec = max(_CONTEXT.prec, amount.adjusted() + places + 1)
    return context


@dataclass(frozen=True, slots=True)
class Money:
    """Immutable monetary amount in a single currency.

    The currency is fixed at construction and normalized to upper case.
    Every operation returns a new Money; operands are never mutated.
    Binary operations between different currencies raise
    CurrencyMismatchError instead of converting.

    Use ``Money.of()`` to build from strings, ints or floats.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.currency, str):
            raise InvalidCurrencyError(f"Currency must be a string, got {self.currency!r}")

        normalized = self.currency.strip().upper()
        if len(normalized) != 3 or not normalized.isascii() or not normalized.isalpha():
            raise InvalidCurrencyError(f"Currency must be a 3-letter code, got {self.currency!r}")
        if normalized != self.currency:
            object.__setattr__(self, "currency", normalized)

        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            object.__setattr__(self, "amount", _to_decimal(self.amount))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, amount: AmountLike, currency: str = DEFAULT_CURRENCY) -> Money:
        """Create Money from a decimal string, numeric literal or Decimal.

        Raises:
            InvalidAmountError: If the amount is not a finite number.
            InvalidCurrencyError: If the currency is not a 3-letter code.
        """
        return cls(amount=_to_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount=Decimal(0), currency=currency)

    @classmethod
    def from_decimal_string(cls, text: str, currency: str = DEFAULT_CURRENCY) -> Money:
        """Rebuild Money from its storage form (see ``to_decimal_string``)."""
        return cls.of(text, currency)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: Money) -> Money:
        self._require_same_currency(other, "add")
        return Money(_CONTEXT.add(self.amount, other.amount), self.currency)

    def subtract(self, other: Money) -> Money:
        self._require_same_currency(other, "subtract")
        return Money(_CONTEXT.subtract(self.amount, other.amount), self.currency)

    def negate(self) -> Money:
        return Money(_CONTEXT.minus(self.amount), self.currency)

    def multiply(self, multiplier: AmountLike) -> Money:
        return Money(_CONTEXT.multiply(self.amount, _to_decimal(multiplier)), self.currency)

    def divide(self, divisor: AmountLike) -> Money:
        """Divide by a dimensionless scalar.

        Raises:
            InvalidAmountError: If the divisor is zero.
        """
        scalar = _to_decimal(divisor)
        try:
            return Money(_CONTEXT.divide(self.amount, scalar), self.currency)
        except (DivisionByZero, InvalidOperation) as e:
            raise InvalidAmountError(f"Cannot divide {self} by {divisor!r}") from e

    def percentage(self, percent: AmountLike) -> Money:
        """Return ``percent`` percent of this amount (``15`` means 15%)."""
        rate = _CONTEXT.divide(_to_decimal(percent), Decimal(100))
        return Money(_CONTEXT.multiply(self.amount, rate), self.currency)

    def round(self, places: int = 2) -> Money:
        """Round half-up to ``places`` decimal places."""
        exponent = Decimal(1).scaleb(-places, context=_CONTEXT)
        rounded = self.amount.quantize(
            exponent,
            rounding=ROUND_HALF_UP,
            context=_quantize_context(self.amount, places),
        )
        return Money(rounded, self.currency)

    # -------------------------------------------------------------------------
    # Predicates & comparison
    # -------------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.amount.is_zero()

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def compare(self, other: Money) -> int:
        """Three-way comparison: -1, 0 or 1.

        Raises:
            CurrencyMismatchError: If the currencies differ.
        """
        self._require_same_currency(other, "compare")
        return int(self.amount.compare(other.amount))

    def __lt__(self, other: Money) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Money) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Money) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Money) -> bool:
        return self.compare(other) >= 0

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide
    __neg__ = negate

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def to_decimal_string(self) -> str:
        """Fixed four-decimal-place form used for storage and exchange."""
        return f"{self.round(STORAGE_PLACES).amount:.{STORAGE_PLACES}f}"

    def format(self, locale: str = DEFAULT_LOCALE) -> str:
        """Locale-aware display string with two to four fraction digits.

        Args:
            locale: Locale identifier, ``en_US`` or ``en-US`` style.

        Returns:
            The amount in the locale's standard currency pattern, e.g.
            ``$1,234.50`` for en_US or ``1.234,50 €`` for de_DE.
        """
        babel_locale = Locale.parse(locale.replace("-", "_"))
        # Copy before widening the fraction digits; locale patterns are shared.
        pattern = copy(parse_pattern(babel_locale.currency_formats["standard"]))
        pattern.frac_prec = DISPLAY_FRACTION_DIGITS
        amount = self.round(DISPLAY_FRACTION_DIGITS[1]).amount
        with localcontext(_quantize_context(amount, DISPLAY_FRACTION_DIGITS[1])):
            return pattern.apply(
                amount,
                babel_locale,
                currency=self.currency,
                currency_digits=False,
            )

    def __str__(self) -> str:
        return f"{self.to_decimal_string()} {self.currency}"

    def _require_same_currency(self, other: Money, operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {operation} Money and {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(
                f"Cannot {operation} different currencies: {self.currency} and {other.currency}"
            )


def sum_money(values: Iterable[Money]) -> Money:
    """Sum Money values that all share the first value's currency.

    An empty iterable sums to zero USD.

    Raises:
        CurrencyMismatchError: If any value's currency differs from the first.
    """
    iterator = iter(values)
    total = next(iterator, None)
    if total is None:
        return Money.zero(DEFAULT_CURRENCY)

    for value in iterator:
        if value.currency != total.currency:
            raise CurrencyMismatchError(
                f"Cannot sum different currencies: {total.currency} and {value.currency}"
            )
        total = total.add(value)
    return total
