"""
Payment Calculator Module

Fixed-payment amortization: derives the periodic payment for a balance,
annual rate, frequency and payment count, and resolves the fee structure a
contract adds on top of the principal.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .currency import Numeric, ZERO, round_currency, to_decimal
from .frequency import (
    PaymentFrequency, periodic_rate, number_of_payments_for_term
)


@dataclass(frozen=True)
class LoanTerms:
    """Loan terms for a single schedule-generation call"""
    principal: Decimal
    annual_interest_rate: Decimal          # Percent, e.g. 29 for 29%
    frequency: PaymentFrequency
    term_months: Optional[int] = None
    explicit_number_of_payments: Optional[int] = None
    
    def __post_init__(self):
        for name in ('principal', 'annual_interest_rate'):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))
        
        if self.term_months is None and self.explicit_number_of_payments is None:
            raise ValueError("Either term_months or number_of_payments must be provided")
    
    @property
    def number_of_payments(self) -> int:
        """Resolved payment count; an explicit count takes precedence over the term"""
        if self.explicit_number_of_payments is not None:
            return self.explicit_number_of_payments
        return number_of_payments_for_term(self.frequency, self.term_months)


@dataclass(frozen=True)
class FeeConfiguration:
    """Fees resolved from contract terms by the caller"""
    origination_fee: Decimal = ZERO    # Flat penalty charged per failed payment
    processing_fee: Decimal = ZERO
    brokerage_fee: Decimal = ZERO      # One-time, applied once per modification
    other_fees: Decimal = ZERO
    
    def __post_init__(self):
        for name in ('origination_fee', 'processing_fee', 'brokerage_fee', 'other_fees'):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                value = Decimal(str(value))
                object.__setattr__(self, name, value)
            if value < ZERO:
                raise ValueError(f"{name} cannot be negative")
    
    @classmethod
    def from_contract_terms(cls, contract_terms: Optional[Mapping[str, Any]]) -> 'FeeConfiguration':
        """
        Build fees from a contract terms document
        
        Reads the ``fees`` block; a missing origination fee falls back to the
        configured failed-payment fee.
        
        Raises:
            pydantic.ValidationError: If a fee is negative or not a number
        """
        from .config import get_config
        from .schemas import ContractFeesModel
        
        fees = (contract_terms or {}).get('fees') or {}
        model = ContractFeesModel(**{key: value for key, value in fees.items() if value is not None})
        return model.to_fee_configuration(Decimal(get_config().default_failed_payment_fee))
    
    @property
    def total(self) -> Decimal:
        """Fees financed at origination"""
        return calculate_total_fees(self)


def compute_payment(
    principal: Numeric,
    annual_rate_percent: Numeric,
    frequency: PaymentFrequency,
    number_of_payments: int
) -> Optional[Decimal]:
    """
    Calculate the fixed payment amount per period
    
    Standard loan payment formula: P * [r(1+r)^n] / [(1+r)^n - 1]
    Where P = principal, r = periodic interest rate, n = number of payments
    
    Args:
        principal: Balance to amortize
        annual_rate_percent: Annual interest rate as a percentage
        frequency: Payment frequency
        number_of_payments: Total number of payments
        
    Returns:
        Payment amount rounded to cents, or None when the inputs are not computable
    """
    principal = to_decimal(principal)
    rate = to_decimal(annual_rate_percent)
    
    if principal is None or rate is None or not isinstance(frequency, PaymentFrequency):
        return None
    if isinstance(number_of_payments, bool) or not isinstance(number_of_payments, int):
        return None
    if principal <= ZERO or rate < ZERO or number_of_payments <= 0:
        return None
    
    r = periodic_rate(rate, frequency)
    n = Decimal(number_of_payments)
    
    if r == ZERO:
        # No interest - simple division
        return round_currency(principal / n)
    
    factor = (Decimal('1') + r) ** number_of_payments
    denominator = factor - Decimal('1')
    if denominator == ZERO:
        return None
    
    return round_currency(principal * r * factor / denominator)


def calculate_total_fees(fees: Optional[FeeConfiguration]) -> Decimal:
    """Sum of the fees financed with the principal"""
    if fees is None:
        return round_currency(ZERO)
    return round_currency(
        fees.brokerage_fee + fees.origination_fee + fees.processing_fee + fees.other_fees
    )


def calculate_total_loan_amount(principal: Numeric, fees: Optional[FeeConfiguration] = None) -> Decimal:
    """Principal plus financed fees"""
    return round_currency(Decimal(str(principal)) + calculate_total_fees(fees))


def compute_payment_for_terms(terms: LoanTerms, fees: Optional[FeeConfiguration] = None) -> Optional[Decimal]:
    """Payment amount for a full set of terms, amortizing principal plus fees"""
    return compute_payment(
        calculate_total_loan_amount(terms.principal, fees),
        terms.annual_interest_rate,
        terms.frequency,
        terms.number_of_payments
    )


def calculate_brokerage_fee(loan_amount: Numeric) -> Decimal:
    """Brokerage fee charged on a loan amount; zero for invalid amounts"""
    from .config import get_config
    
    amount = to_decimal(loan_amount)
    if amount is None or amount <= ZERO:
        return round_currency(ZERO)
    return round_currency(amount * Decimal(get_config().brokerage_fee_rate))


def validate_loan_params(
    principal: Numeric,
    annual_rate_percent: Numeric,
    frequency: Any,
    number_of_payments: int
) -> Optional[str]:
    """
    Validate loan calculation parameters
    
    Returns:
        Error message if invalid, None if valid
    """
    principal = to_decimal(principal)
    rate = to_decimal(annual_rate_percent)
    
    if principal is None or principal <= ZERO:
        return "Principal amount must be greater than 0"
    if rate is None or rate < ZERO:
        return "Interest rate cannot be negative"
    if not isinstance(number_of_payments, int) or number_of_payments <= 0:
        return "Number of payments must be greater than 0"
    if not isinstance(frequency, PaymentFrequency):
        return "Invalid payment frequency"
    return None


def validate_payment_amount(payment_amount: Numeric, current_balance: Numeric) -> Optional[str]:
    """
    Validate that a payment is positive and does not exceed the balance
    
    Returns:
        Error message if invalid, None if valid
    """
    amount = to_decimal(payment_amount)
    balance = to_decimal(current_balance)
    
    if amount is None or amount <= ZERO:
        return "Payment amount must be greater than 0"
    if balance is not None and amount > balance:
        return (f"Payment amount ({round_currency(amount)}) cannot exceed "
                f"remaining balance ({round_currency(balance)})")
    return None
