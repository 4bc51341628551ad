"""
Currency Module

Fixed-point money for the terminal. Amounts are held as an integer count of
minor units (paise, cents) so that balances never drift. Decimal is used
only at the boundary, when parsing input or rendering output.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from dataclasses import dataclass
from enum import Enum
from typing import Union
import re

_AMOUNT_PATTERN = re.compile(r'^[+-]?\d[\d,]*(\.\d+)?$|^[+-]?\.\d+$')


class Currency(Enum):
    """ISO 4217 Currency Codes with precision and display symbol"""
    INR = ("INR", 2, "₹")  # Indian Rupee, 2 decimal places
    USD = ("USD", 2, "$")  # US Dollar, 2 decimal places
    EUR = ("EUR", 2, "€")  # Euro, 2 decimal places
    GBP = ("GBP", 2, "£")  # British Pound, 2 decimal places
    JPY = ("JPY", 0, "¥")  # Japanese Yen, 0 decimal places

    def __init__(self, code: str, precision: int, symbol: str):
        self.code = code
        self.precision = precision
        self.symbol = symbol

    @property
    def scale(self) -> int:
        """Number of minor units in one major unit"""
        return 10 ** self.precision


@dataclass(frozen=True)
class Money:
    """
    Immutable money value stored as integer minor units.
    """
    minor_units: int
    currency: Currency = Currency.INR

    def __post_init__(self):
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError("Money must be built from integer minor units; use Money.from_decimal")

    @classmethod
    def from_decimal(cls, amount: Union[Decimal, int, str], currency: Currency = Currency.INR) -> 'Money':
        """Build Money from a major-unit decimal, rounding half up to currency precision"""
        try:
            if not isinstance(amount, Decimal):
                amount = Decimal(str(amount))
            if not amount.is_finite():
                raise ValueError(f"Cannot represent {amount} as money")
            minor = (amount * currency.scale).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError(f"Cannot represent {amount} as money") from exc
        return cls(int(minor), currency)

    @classmethod
    def zero(cls, currency: Currency = Currency.INR) -> 'Money':
        return cls(0, currency)

    @property
    def amount(self) -> Decimal:
        """Major-unit Decimal view of this value"""
        return (Decimal(self.minor_units) / self.currency.scale).quantize(
            Decimal(1).scaleb(-self.currency.precision)
        )

    def _check_currency(self, other: 'Money', verb: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {verb} Money and {type(other).__name__}")
        if self.currency != other.currency:
            raise ValueError(f"Cannot {verb} {self.currency.code} and {other.currency.code}")

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "add")
        return Money(self.minor_units + other.minor_units, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "subtract")
        return Money(self.minor_units - other.minor_units, self.currency)

    def __neg__(self) -> 'Money':
        return Money(-self.minor_units, self.currency)

    def __abs__(self) -> 'Money':
        return Money(abs(self.minor_units), self.currency)

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units < other.minor_units

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units <= other.minor_units

    def __gt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units > other.minor_units

    def __ge__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units >= other.minor_units

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.minor_units == 0

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.minor_units > 0

    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.minor_units < 0

    def to_plain_string(self) -> str:
        """Bare amount at currency precision, e.g. 1000.00"""
        return f"{self.amount:.{self.currency.precision}f}"

    def to_string(self) -> str:
        """Format for display"""
        return f"{self.currency.code} {self.amount:,.{self.currency.precision}f}"

    def __str__(self) -> str:
        return self.to_string()


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert user-entered text to Decimal, handling common formats

    Args:
        value: String representation of number, possibly with a currency
            symbol or thousands separators

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to a finite Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    # Strip whitespace and a leading or trailing currency symbol or code only
    clean_value = value.strip()
    for currency in Currency:
        for marker in (currency.symbol, currency.code):
            if clean_value.upper().startswith(marker):
                clean_value = clean_value[len(marker):].strip()
            elif clean_value.upper().endswith(marker):
                clean_value = clean_value[:-len(marker)].strip()

    if not _AMOUNT_PATTERN.match(clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - comma is the thousands separator
        clean_value = clean_value.replace(',', '')
    elif ',' in clean_value and clean_value.count(',') == 1:
        whole, fraction = clean_value.split(',')
        if len(fraction) <= 2:
            clean_value = f"{whole}.{fraction}"
        else:
            clean_value = whole + fraction
    elif ',' in clean_value:
        # Indian grouping such as 1,00,000
        clean_value = clean_value.replace(',', '')

    try:
        result = Decimal(clean_value)
    except InvalidOperation as exc:
        raise ValueError(f"Cannot convert '{value}' to Decimal") from exc

    if not result.is_finite():
        raise ValueError(f"Cannot convert '{value}' to Decimal")
    return result
