"""
Loan Summary Module

Full loan quote built from the calculator, the schedule builder and the
breakdown engine, plus the balance helpers servicing uses after payments.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .currency import Numeric, ZERO, round_currency, to_decimal
from .frequency import PaymentFrequency
from .calculator import (
    LoanTerms, FeeConfiguration, calculate_total_fees,
    calculate_total_loan_amount, compute_payment
)
from .schedule import BrokenScheduleItem, build_schedule, apply_breakdown
from .breakdown import compute_breakdown
from .exceptions import NotComputableError


@dataclass(frozen=True)
class LoanSummary:
    """Complete loan calculation result"""
    principal: Decimal
    total_fees: Decimal
    total_loan_amount: Decimal       # Principal plus fees
    payment_amount: Decimal
    total_interest: Decimal
    total_repayment_amount: Decimal  # Total loan amount plus interest
    number_of_payments: int
    frequency: PaymentFrequency
    schedule: List[BrokenScheduleItem] = field(default_factory=list)
    
    @classmethod
    def zero(cls, terms: LoanTerms) -> 'LoanSummary':
        """All-zero summary for callers that display invalid terms instead of rejecting them"""
        zero = round_currency(ZERO)
        return cls(
            principal=zero,
            total_fees=zero,
            total_loan_amount=zero,
            payment_amount=zero,
            total_interest=zero,
            total_repayment_amount=zero,
            number_of_payments=0,
            frequency=terms.frequency
        )


@dataclass(frozen=True)
class BalanceResult:
    """Balance after applying a payment and any added fees"""
    new_balance: Decimal
    amount_paid: Decimal
    is_paid_off: bool


def calculate_loan(
    terms: LoanTerms,
    first_payment_date: date,
    fees: Optional[FeeConfiguration] = None
) -> LoanSummary:
    """
    Calculate complete loan details including schedule and all amounts
    
    Args:
        terms: Loan terms
        first_payment_date: Due date of the first payment
        fees: Fees financed with the principal
        
    Returns:
        LoanSummary with the broken-down schedule
        
    Raises:
        NotComputableError: If the terms cannot produce a payment
    """
    total_loan_amount = calculate_total_loan_amount(terms.principal, fees)
    n = terms.number_of_payments
    
    payment_amount = compute_payment(
        total_loan_amount, terms.annual_interest_rate, terms.frequency, n
    )
    if payment_amount is None:
        raise NotComputableError(
            "Failed to calculate payment amount with given parameters",
            {
                'principal': str(terms.principal),
                'annual_interest_rate': str(terms.annual_interest_rate),
                'frequency': terms.frequency.value,
                'number_of_payments': n
            }
        )
    
    lines = compute_breakdown(
        total_loan_amount, payment_amount, terms.annual_interest_rate, terms.frequency, n
    )
    schedule = apply_breakdown(
        build_schedule(first_payment_date, terms.frequency, payment_amount, n), lines
    )
    total_interest = calculate_total_interest(schedule)
    
    return LoanSummary(
        principal=round_currency(terms.principal),
        total_fees=calculate_total_fees(fees),
        total_loan_amount=total_loan_amount,
        payment_amount=payment_amount,
        total_interest=total_interest,
        total_repayment_amount=round_currency(total_loan_amount + total_interest),
        number_of_payments=n,
        frequency=terms.frequency,
        schedule=schedule
    )


def calculate_total_interest(lines: Iterable) -> Decimal:
    """Total interest across breakdown lines or broken schedule items"""
    return round_currency(sum((line.interest for line in lines), ZERO))


def calculate_new_balance(
    current_balance: Numeric,
    payment_amount: Numeric,
    additional_fees: Numeric = ZERO
) -> BalanceResult:
    """
    Apply fees, then a payment, to a balance
    
    The balance never goes below zero.
    """
    balance_with_fees = Decimal(str(current_balance)) + Decimal(str(additional_fees))
    paid = Decimal(str(payment_amount))
    new_balance = round_currency(max(ZERO, balance_with_fees - paid))
    
    return BalanceResult(
        new_balance=new_balance,
        amount_paid=round_currency(paid),
        is_paid_off=new_balance == ZERO
    )


def calculate_balance_from_payments(initial_balance: Numeric, payments: Sequence[Numeric]) -> Decimal:
    """Remaining balance after a list of successfully applied payment amounts"""
    total_paid = sum((to_decimal(amount) or ZERO for amount in payments), ZERO)
    return round_currency(max(ZERO, Decimal(str(initial_balance)) - total_paid))
