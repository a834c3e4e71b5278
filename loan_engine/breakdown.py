"""
Breakdown Engine Module

Walks a fixed-payment schedule against a starting balance and splits each
payment into interest and principal. The final payment always retires the
remaining balance, so the principal column sums to the starting balance.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import List, Sequence

from .currency import Numeric, ZERO, round_currency, to_decimal
from .frequency import PaymentFrequency, periodic_rate


@dataclass(frozen=True)
class BreakdownLine:
    """Interest/principal allocation for one payment"""
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal    # Balance after this payment


def compute_breakdown(
    total_balance: Numeric,
    payment_amount: Numeric,
    annual_rate_percent: Numeric,
    frequency: PaymentFrequency,
    number_of_payments: int
) -> List[BreakdownLine]:
    """
    Split each payment of a schedule into interest and principal
    
    Interest accrues on the balance before each payment. Principal is the
    payment less interest, floored at zero (no negative amortization) and
    capped at the outstanding balance. The last payment takes the whole
    remaining balance as principal.
    
    Args:
        total_balance: Balance being amortized (principal plus any fees)
        payment_amount: Fixed payment per period
        annual_rate_percent: Annual interest rate as a percentage
        frequency: Payment frequency
        number_of_payments: Number of payments
        
    Returns:
        One BreakdownLine per payment; empty when the inputs are not computable
    """
    balance = to_decimal(total_balance)
    payment = to_decimal(payment_amount)
    rate = to_decimal(annual_rate_percent)
    
    if balance is None or payment is None or rate is None:
        return []
    if balance < ZERO or payment < ZERO or rate < ZERO or number_of_payments <= 0:
        return []
    
    r = periodic_rate(rate, frequency)
    remaining = round_currency(balance)
    lines = []
    
    for index in range(number_of_payments):
        interest = remaining * r
        
        if index == number_of_payments - 1:
            principal = remaining
        else:
            principal = min(round_currency(max(ZERO, payment - interest)), remaining)
        
        remaining = remaining - principal
        
        lines.append(BreakdownLine(
            interest=round_currency(interest),
            principal=principal,
            remaining_balance=remaining
        ))
    
    return lines


def has_negative_amortization(lines: Sequence[BreakdownLine], total_balance: Numeric) -> bool:
    """
    Check whether any payment before the last failed to reduce the balance
    
    The engine floors principal at zero instead of raising; callers use this
    to surface under-sized payments as a business anomaly.
    """
    previous = round_currency(Decimal(str(total_balance)))
    for line in lines[:-1]:
        if previous > ZERO and line.remaining_balance >= previous:
            return True
        previous = line.remaining_balance
    return False
