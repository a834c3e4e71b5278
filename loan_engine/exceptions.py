"""Exceptions raised by the schedule lifecycle operations."""

from decimal import Decimal
from typing import Optional


class LoanEngineError(Exception):
    """Base exception for all engine errors."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ScheduleValidationError(LoanEngineError, ValueError):
    """Raised when a schedule operation is rejected and the caller must abort."""
    pass


class NotComputableError(ScheduleValidationError):
    """Raised when loan terms cannot produce a payment amount."""
    pass


class MissingModificationParametersError(ScheduleValidationError):
    """Raised when a modification omits amount, frequency, count or start date."""
    
    def __init__(self, missing: list):
        super().__init__(
            "Payment amount, frequency, number of payments, and start date are required",
            {'missing': list(missing)}
        )
        self.missing = list(missing)


class PaymentAmountMismatchError(ScheduleValidationError):
    """Raised when the caller's payment amount disagrees with the computed one."""
    
    def __init__(self, calculated_amount: Decimal, provided_amount: Decimal):
        super().__init__(
            f"Payment amount mismatch. Calculated: {calculated_amount:.2f}, "
            f"provided: {provided_amount:.2f}",
            {
                'calculated_amount': str(calculated_amount),
                'provided_amount': str(provided_amount)
            }
        )
        self.calculated_amount = calculated_amount
        self.provided_amount = provided_amount


class NothingToStopError(ScheduleValidationError):
    """Raised when a stop finds no future payments."""
    
    def __init__(self, loan_id: Optional[str] = None):
        details = {'loan_id': loan_id} if loan_id else {}
        super().__init__("No future payments to stop", details)


class EmptyScheduleError(ScheduleValidationError):
    """Raised when a modification would leave the loan without a schedule."""
    
    def __init__(self, message: str = "Payment schedule is required"):
        super().__init__(message)


class InvalidPaymentTransitionError(ScheduleValidationError):
    """Raised when a payment record cannot move to the requested status."""
    
    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot transition payment from {current} to {requested}",
            {'current_status': current, 'requested_status': requested}
        )


class PaymentNotDeferrableError(ScheduleValidationError):
    """Raised when a deferral targets a missing or non-pending payment."""
    pass
