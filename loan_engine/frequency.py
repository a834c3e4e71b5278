"""
Payment Frequency Module

Fixed periods-per-year table shared by the payment calculator and the
breakdown engine, plus normalization of free-form frequency strings coming
from bank-verification and contract data.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import re


class PaymentFrequency(Enum):
    """Payment frequency options"""
    WEEKLY = "weekly"                  # 52 payments per year
    BI_WEEKLY = "bi-weekly"            # 26 payments per year
    TWICE_MONTHLY = "twice-monthly"    # 24 payments per year
    MONTHLY = "monthly"                # 12 payments per year


PAYMENTS_PER_YEAR: Dict[PaymentFrequency, int] = {
    PaymentFrequency.WEEKLY: 52,
    PaymentFrequency.BI_WEEKLY: 26,
    PaymentFrequency.TWICE_MONTHLY: 24,
    PaymentFrequency.MONTHLY: 12
}

PAYMENTS_PER_MONTH: Dict[PaymentFrequency, int] = {
    PaymentFrequency.WEEKLY: 4,
    PaymentFrequency.BI_WEEKLY: 2,
    PaymentFrequency.TWICE_MONTHLY: 2,
    PaymentFrequency.MONTHLY: 1
}

# Maximum term offered is three months
DEFAULT_NUMBER_OF_PAYMENTS: Dict[PaymentFrequency, int] = {
    PaymentFrequency.WEEKLY: 12,
    PaymentFrequency.BI_WEEKLY: 6,
    PaymentFrequency.TWICE_MONTHLY: 6,
    PaymentFrequency.MONTHLY: 3
}

FREQUENCY_ALIASES: Dict[PaymentFrequency, List[str]] = {
    PaymentFrequency.WEEKLY: [
        'weekly', 'week', 'once-a-week', 'one-week', '1w',
        'hebdomadaire', 'every-week', 'per-week'
    ],
    PaymentFrequency.BI_WEEKLY: [
        'bi-weekly', 'biweekly', 'every-two-weeks', 'two-weeks',
        'fortnightly', '14-days', 'every-14-days', '2w'
    ],
    PaymentFrequency.TWICE_MONTHLY: [
        'twice-monthly', 'twice-per-month', 'two-times-per-month',
        'two-time-per-month', '2-times-per-month', '2-time-per-month',
        '2x-per-month', '2x-month', 'semi-monthly', 'semimonthly',
        'semi-month', 'twice-month', 'twice-per-monthly'
    ],
    PaymentFrequency.MONTHLY: [
        'monthly', 'month', 'once-a-month', '1m', 'mensuel', 'per-month'
    ]
}

_SEGMENT_DELIMITERS = re.compile(r'[:|;,/]+')


def periods_per_year(frequency: PaymentFrequency) -> int:
    """Get number of payments per year"""
    return PAYMENTS_PER_YEAR[frequency]


def periodic_rate(annual_rate_percent: Decimal, frequency: PaymentFrequency) -> Decimal:
    """Convert an annual percentage (e.g. 29) into the rate for one payment period"""
    return (Decimal(annual_rate_percent) / Decimal('100')) / Decimal(periods_per_year(frequency))


def payments_per_month(frequency: PaymentFrequency) -> int:
    """Approximate number of payments falling in one calendar month"""
    return PAYMENTS_PER_MONTH.get(frequency, 1)


def default_number_of_payments(frequency: PaymentFrequency) -> int:
    """Number of payments for the standard three-month term"""
    return DEFAULT_NUMBER_OF_PAYMENTS[frequency]


def number_of_payments_for_term(frequency: PaymentFrequency, term_months: int) -> int:
    """Derive a payment count from a term expressed in months"""
    return int((term_months / 12) * periods_per_year(frequency))


def _canonicalize(value: str) -> str:
    value = re.sub(r'[_\s]+', '-', value.strip().lower())
    return re.sub(r'-+', '-', value)


def _match_frequency(value: str) -> Optional[PaymentFrequency]:
    normalized = _canonicalize(value)
    
    for frequency in PaymentFrequency:
        if frequency.value == normalized:
            return frequency
    
    segments = [normalized]
    for delimiter in (':', '|', ';'):
        segments.append(normalized.split(delimiter)[0])
    segments.extend(_SEGMENT_DELIMITERS.split(normalized))
    segments.extend(normalized.split('-'))
    candidates = {segment.strip() for segment in segments if segment and segment.strip()}
    
    for frequency, aliases in FREQUENCY_ALIASES.items():
        canonical_aliases = {_canonicalize(alias) for alias in aliases}
        if candidates & canonical_aliases:
            return frequency
    
    return None


def normalize_frequency(value: Any) -> Optional[PaymentFrequency]:
    """
    Map a free-form frequency description onto PaymentFrequency
    
    Accepts enum members, strings such as "Bi Weekly" or "semi_monthly",
    lists (first match wins) and mappings carrying a ``frequency``,
    ``raw_frequency`` or ``value`` key.
    
    Returns:
        Matching PaymentFrequency, or None if nothing matches
    """
    if value is None:
        return None
    
    if isinstance(value, PaymentFrequency):
        return value
    
    if isinstance(value, str):
        return _match_frequency(value)
    
    if isinstance(value, (list, tuple)):
        for entry in value:
            matched = normalize_frequency(entry)
            if matched:
                return matched
        return None
    
    if isinstance(value, dict):
        for key in ('frequency', 'raw_frequency', 'value'):
            if value.get(key) is not None:
                return normalize_frequency(value[key])
        return None
    
    return _match_frequency(str(value))


def assert_frequency(value: Any, fallback: PaymentFrequency = PaymentFrequency.MONTHLY) -> PaymentFrequency:
    """Normalize a frequency, falling back when it cannot be recognized"""
    return normalize_frequency(value) or fallback
