"""
Test suite for payment records

Tests status classification, notes and the collection lifecycle.
"""

import pytest
from decimal import Decimal
from datetime import date

from loan_engine.payments import PaymentRecord, PaymentStatus, SETTLED_STATUSES
from loan_engine.exceptions import InvalidPaymentTransitionError, ScheduleValidationError


def make_payment(status=PaymentStatus.PENDING, notes=None):
    return PaymentRecord(
        payment_number=1,
        payment_date=date(2026, 11, 15),
        amount=Decimal('175.00'),
        status=status,
        interest=Decimal('12.10'),
        principal=Decimal('162.90'),
        notes=notes
    )


class TestPaymentRecord:
    """Test payment record construction and queries"""
    
    def test_coerces_values(self):
        """Test amounts become Decimal and status strings become enums"""
        payment = PaymentRecord(
            payment_number=2,
            payment_date=date(2026, 12, 15),
            amount=175,
            status="confirmed",
            interest=None,
            principal='162.90'
        )
        
        assert payment.amount == Decimal('175')
        assert payment.interest == Decimal('0')
        assert payment.principal == Decimal('162.90')
        assert payment.status == PaymentStatus.CONFIRMED
    
    def test_settled_statuses(self):
        """Test which statuses count as collected"""
        assert SETTLED_STATUSES == {
            PaymentStatus.CONFIRMED, PaymentStatus.PAID,
            PaymentStatus.MANUAL, PaymentStatus.REBATE
        }
        assert make_payment(PaymentStatus.MANUAL).is_settled
        assert not make_payment(PaymentStatus.FAILED).is_settled
        assert not make_payment(PaymentStatus.PENDING).is_settled
    
    def test_is_past(self):
        """Test a payment due today is not in the past"""
        payment = make_payment()
        
        assert payment.is_past(date(2026, 11, 16))
        assert not payment.is_past(date(2026, 11, 15))
    
    def test_notes_are_appended(self):
        """Test existing notes are preserved"""
        assert make_payment().with_note("first").notes == "first"
        assert make_payment(notes="first").with_note("second").notes == "first\nsecond"


class TestPaymentLifecycle:
    """Test status transitions"""
    
    def test_pending_transitions(self):
        """Test pending payments can be confirmed, failed or cancelled"""
        payment = make_payment()
        
        assert payment.transition_to(PaymentStatus.CONFIRMED).status == PaymentStatus.CONFIRMED
        assert payment.transition_to(PaymentStatus.FAILED).status == PaymentStatus.FAILED
        assert payment.transition_to(PaymentStatus.CANCELLED).status == PaymentStatus.CANCELLED
        assert payment.status == PaymentStatus.PENDING  # Original untouched
    
    def test_same_status_is_noop(self):
        """Test transitioning to the current status returns the record"""
        payment = make_payment(PaymentStatus.CONFIRMED)
        
        assert payment.transition_to(PaymentStatus.CONFIRMED) is payment
    
    @pytest.mark.parametrize("current,requested", [
        (PaymentStatus.CONFIRMED, PaymentStatus.PENDING),
        (PaymentStatus.FAILED, PaymentStatus.CONFIRMED),
        (PaymentStatus.CANCELLED, PaymentStatus.PENDING),
        (PaymentStatus.PENDING, PaymentStatus.DEFERRED),
    ])
    def test_invalid_transitions(self, current, requested):
        """Test terminal states cannot move"""
        with pytest.raises(InvalidPaymentTransitionError) as exc_info:
            make_payment(current).transition_to(requested)
        
        assert isinstance(exc_info.value, ScheduleValidationError)
        assert exc_info.value.details == {
            'current_status': current.value,
            'requested_status': requested.value
        }
    
    def test_cancel_adds_note(self):
        """Test schedule cancellation works from any status and records why"""
        cancelled = make_payment(PaymentStatus.FAILED, notes="NSF").cancel("Payment stopped on Oct 18, 2026")
        
        assert cancelled.status == PaymentStatus.CANCELLED
        assert cancelled.notes == "NSF\nPayment stopped on Oct 18, 2026"
        assert cancelled.amount == Decimal('175.00')
