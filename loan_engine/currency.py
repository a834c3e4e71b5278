"""
Currency Precision Module

Decimal conversion and half-up rounding for every amount the engine produces.
NEVER uses float for monetary values; floats coming from callers are converted
through their string form.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from enum import Enum
from typing import Optional, Union

# Set global decimal context for financial precision
getcontext().prec = 28

Numeric = Union[Decimal, int, float, str]


class Currency(Enum):
    """ISO 4217 Currency Codes with precision info"""
    CAD = ("CAD", 2)  # Canadian Dollar, 2 decimal places
    USD = ("USD", 2)  # US Dollar, 2 decimal places
    
    def __init__(self, code: str, precision: int):
        self.code = code
        self.precision = precision


CENT = Decimal('0.01')
ZERO = Decimal('0')


def to_decimal(value: Optional[Numeric]) -> Optional[Decimal]:
    """
    Convert a caller-supplied number into a finite Decimal
    
    Returns None for None, booleans, non-numeric strings, NaN and infinities
    so callers can treat the value as "not computable".
    """
    if value is None or isinstance(value, bool):
        return None
    
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    
    if not result.is_finite():
        return None
    return result


def round_currency(value: Numeric, currency: Currency = Currency.CAD) -> Decimal:
    """Round to currency precision using half-up rounding"""
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return amount.quantize(
        Decimal('0.1') ** currency.precision,
        rounding=ROUND_HALF_UP
    )


def format_currency(amount: Numeric, currency: Optional[Currency] = None) -> str:
    """Format for display, e.g. ``CAD 1,250.50``"""
    if currency is None:
        from .config import get_config
        currency = Currency[get_config().currency]
    
    rounded = round_currency(amount, currency)
    if currency.precision == 0:
        return f"{currency.code} {rounded:,.0f}"
    return f"{currency.code} {rounded:,.{currency.precision}f}"
