"""
Test suite for loan summary

Tests the complete loan quote and the balance helpers used after payments.
"""

import pytest
from decimal import Decimal
from datetime import date

from loan_engine.frequency import PaymentFrequency
from loan_engine.calculator import LoanTerms, FeeConfiguration
from loan_engine.exceptions import NotComputableError
from loan_engine.summary import (
    LoanSummary, calculate_loan, calculate_total_interest,
    calculate_new_balance, calculate_balance_from_payments
)


@pytest.fixture
def three_month_terms():
    return LoanTerms(
        principal=Decimal('500'),
        annual_interest_rate=Decimal('29'),
        frequency=PaymentFrequency.MONTHLY,
        explicit_number_of_payments=3
    )


class TestCalculateLoan:
    """Test full loan calculation"""
    
    def test_three_month_quote(self, three_month_terms):
        """Test quote amounts and schedule for a 500 loan at 29%"""
        summary = calculate_loan(three_month_terms, date(2026, 1, 15))
        
        assert summary.payment_amount == Decimal('174.79')
        assert summary.total_loan_amount == Decimal('500.00')
        assert summary.total_fees == Decimal('0.00')
        assert [item.interest for item in summary.schedule] == [
            Decimal('12.08'), Decimal('8.15'), Decimal('4.12')
        ]
        assert summary.total_interest == Decimal('24.35')
        assert summary.total_repayment_amount == Decimal('524.35')
        assert summary.number_of_payments == 3
        assert [item.due_date for item in summary.schedule] == [
            date(2026, 1, 15), date(2026, 2, 15), date(2026, 3, 15)
        ]
    
    def test_principal_column_matches_loan_amount(self, three_month_terms):
        """Test principal allocations sum to the amount financed"""
        summary = calculate_loan(three_month_terms, date(2026, 1, 15))
        
        assert sum(item.principal for item in summary.schedule) == summary.total_loan_amount
        assert summary.schedule[-1].remaining_balance == Decimal('0')
    
    def test_fees_are_financed(self):
        """Test fees raise the amount financed and the payment"""
        terms = LoanTerms(
            principal=Decimal('450'),
            annual_interest_rate=Decimal('29'),
            frequency=PaymentFrequency.MONTHLY,
            explicit_number_of_payments=3
        )
        
        summary = calculate_loan(terms, date(2026, 1, 15), FeeConfiguration(brokerage_fee=Decimal('50.61')))
        
        assert summary.principal == Decimal('450.00')
        assert summary.total_fees == Decimal('50.61')
        assert summary.total_loan_amount == Decimal('500.61')
        assert summary.payment_amount == Decimal('175.00')
    
    def test_not_computable(self):
        """Test terms without a positive principal are rejected"""
        terms = LoanTerms(
            principal=Decimal('0'),
            annual_interest_rate=Decimal('29'),
            frequency=PaymentFrequency.MONTHLY,
            explicit_number_of_payments=3
        )
        
        with pytest.raises(NotComputableError) as exc_info:
            calculate_loan(terms, date(2026, 1, 15))
        
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.details['number_of_payments'] == 3
    
    def test_zero_summary(self, three_month_terms):
        """Test the all-zero summary keeps the frequency"""
        summary = LoanSummary.zero(three_month_terms)
        
        assert summary.payment_amount == Decimal('0.00')
        assert summary.number_of_payments == 0
        assert summary.frequency == PaymentFrequency.MONTHLY
        assert summary.schedule == []


class TestBalances:
    """Test balance helpers"""
    
    def test_total_interest(self, three_month_terms):
        """Test interest total over a schedule"""
        summary = calculate_loan(three_month_terms, date(2026, 1, 15))
        
        assert calculate_total_interest(summary.schedule) == Decimal('24.35')
        assert calculate_total_interest([]) == Decimal('0.00')
    
    def test_new_balance_with_fees(self):
        """Test fees are added before the payment is applied"""
        result = calculate_new_balance(Decimal('300'), Decimal('100'), Decimal('25'))
        
        assert result.new_balance == Decimal('225.00')
        assert result.amount_paid == Decimal('100.00')
        assert not result.is_paid_off
    
    def test_new_balance_never_negative(self):
        """Test an overpayment pays the loan off at zero"""
        result = calculate_new_balance(Decimal('100'), Decimal('150'))
        
        assert result.new_balance == Decimal('0.00')
        assert result.is_paid_off
    
    def test_balance_from_payments(self):
        """Test balance after a list of applied payments"""
        assert calculate_balance_from_payments(Decimal('500'), [100, '50.50', None]) == Decimal('349.50')
        assert calculate_balance_from_payments(Decimal('100'), [Decimal('60'), Decimal('60')]) == Decimal('0.00')
