"""
Currency Support Module

Converts between lowest-denomination amounts (pence, cents) and major-unit
amounts (pounds, euros) and renders amounts for display. NEVER uses float
for monetary values: floats are accepted at the boundary and converted
through their shortest string form.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, localcontext
from dataclasses import dataclass
from typing import Dict, Optional, Union
from enum import Enum
import re

Number = Union[int, float, Decimal]

CENTS = Decimal('0.01')
UNITS = Decimal('1')

# Plain ASCII decimal notation, optionally signed, with an optional exponent
NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Currency(Enum):
    """Supported payout currencies with display symbol and precision"""
    GBP = ("GBP", "£", 2)  # British Pound
    EUR = ("EUR", "€", 2)  # Euro

    def __init__(self, code: str, symbol: str, precision: int):
        self.code = code
        self.symbol = symbol
        self.precision = precision

    @classmethod
    def from_code(cls, code: str) -> 'Currency':
        """
        Resolve an ISO 4217 code (case-insensitive)

        Raises:
            ValueError: If the code is not a supported currency
        """
        if isinstance(code, cls):
            return code
        if not isinstance(code, str):
            raise ValueError(f"Unsupported currency: {code!r}")
        try:
            return cls[code.strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported currency: {code}") from None


CURRENCY_SYMBOLS: Dict[str, str] = {currency.code: currency.symbol for currency in Currency}


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal without binary float artefacts"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Amount must be a number, not {type(value).__name__}")
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(str(value))


def parse_decimal(text: str) -> Optional[Decimal]:
    """
    Strictly parse a numeric string

    Only ASCII digits are accepted: digit group separators, underscores and
    other scripts' numerals are not a number.

    Returns:
        Decimal value, or None if the text is not a finite number
    """
    text = text.strip()
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def decimal_places(value: Decimal) -> int:
    """Number of significant fraction digits, ignoring trailing zeros"""
    if value.is_zero():
        return 0
    _, digits, exponent = value.as_tuple()
    places = max(0, -exponent)
    for digit in reversed(digits):
        if places == 0 or digit != 0:
            break
        places -= 1
    return places


def _shift(value: Decimal, places: int) -> Decimal:
    """Move the decimal point of a finite value without any rounding"""
    sign, digits, exponent = value.as_tuple()
    return Decimal((sign, digits, exponent + places))


def _round_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    """quantize() with enough working precision for the value's magnitude"""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.adjusted() + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def from_lowest_denomination(amount: Number) -> Decimal:
    """
    Convert amount from lowest denomination (e.g. pence) to major unit (e.g. pounds)

    Args:
        amount: Amount in lowest denomination

    Returns:
        Exact amount in major unit, whatever its number of digits
    """
    value = to_decimal(amount)
    if not value.is_finite():
        return value
    return _shift(value, -2)


def to_lowest_denomination(amount: Number) -> int:
    """
    Convert amount from major unit (e.g. pounds) to lowest denomination (e.g. pence)

    Half-cent ties round away from zero: 1.235 -> 124, -1.235 -> -124.

    Args:
        amount: Amount in major unit

    Returns:
        Amount in lowest denomination

    Raises:
        ValueError: If amount is NaN or infinite
    """
    value = to_decimal(amount)
    if not value.is_finite():
        raise ValueError(f"Cannot convert {value} to lowest denomination")
    return int(_round_half_up(_shift(value, 2), UNITS))


def get_currency_symbol(currency: Union[Currency, str]) -> str:
    """
    Get currency symbol for a given currency

    Unmapped codes are returned unchanged so display never fails.
    """
    if isinstance(currency, Currency):
        return currency.symbol
    return CURRENCY_SYMBOLS.get(currency, currency)


def format_currency(amount: Number, currency: Union[Currency, str],
                    is_lowest_denomination: bool = True) -> str:
    """
    Format currency amount with symbol

    Args:
        amount: Amount in lowest denomination (e.g. pence) or major unit (e.g. pounds)
        currency: Currency or currency code
        is_lowest_denomination: Whether amount is in lowest denomination

    Returns:
        Formatted string such as "£1,234.56" or "-€500.00"; NaN and
        infinities render as "£NaN" and "-£Infinity"
    """
    symbol = get_currency_symbol(currency)
    if is_lowest_denomination:
        major_amount = from_lowest_denomination(amount)
    else:
        major_amount = to_decimal(amount)

    if not major_amount.is_finite():
        sign = "-" if major_amount.is_signed() else ""
        return f"{sign}{symbol}{major_amount.copy_abs()}"

    major_amount = _round_half_up(major_amount, CENTS)

    # Sign goes before the symbol; a value that rounds to zero is unsigned
    sign = "-" if major_amount < 0 else ""

    return f"{sign}{symbol}{major_amount.copy_abs():,.2f}"


@dataclass(frozen=True)
class Money:
    """
    Immutable major-unit amount in a supported currency.
    Amounts are rounded to currency precision on construction.
    """
    amount: Decimal
    currency: Currency

    def __post_init__(self):
        rounded = _round_half_up(
            to_decimal(self.amount),
            Decimal('0.1') ** self.currency.precision
        )
        object.__setattr__(self, 'amount', rounded)

    @classmethod
    def from_lowest_denomination(cls, amount: int, currency: Currency) -> 'Money':
        return cls(from_lowest_denomination(amount), currency)

    @property
    def lowest_denomination(self) -> int:
        """Amount in pence/cents"""
        return to_lowest_denomination(self.amount)

    def _check_currency(self, other: 'Money', operation: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {operation} {self.currency.code} and {other.currency.code}"
            )

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "subtract")
        return Money(self.amount - other.amount, self.currency)

    def __neg__(self) -> 'Money':
        return Money(-self.amount, self.currency)

    def __abs__(self) -> 'Money':
        return Money(abs(self.amount), self.currency)

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')

    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.amount < Decimal('0')

    def to_string(self) -> str:
        """Format for display"""
        return format_currency(self.amount, self.currency, is_lowest_denomination=False)
