"""
Payment Record Module

Immutable view of a persisted loan payment as the servicing workflow hands it
to the engine, and the status rules the schedule operations rely on.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Optional
from enum import Enum

from .currency import ZERO
from .exceptions import InvalidPaymentTransitionError


class PaymentStatus(Enum):
    """Payment lifecycle states"""
    PENDING = "pending"        # Scheduled, not yet collected
    CONFIRMED = "confirmed"    # Collected by the payment provider
    PAID = "paid"              # Marked paid
    MANUAL = "manual"          # Paid outside the payment rail
    REBATE = "rebate"          # Settled by rebate
    FAILED = "failed"          # Collection failed
    CANCELLED = "cancelled"    # Removed from the schedule
    DEFERRED = "deferred"      # Moved to the end of the schedule
    REJECTED = "rejected"      # Rejected by the provider


SETTLED_STATUSES: FrozenSet[PaymentStatus] = frozenset({
    PaymentStatus.CONFIRMED,
    PaymentStatus.PAID,
    PaymentStatus.MANUAL,
    PaymentStatus.REBATE
})

UNRESOLVED_STATUSES: FrozenSet[PaymentStatus] = frozenset({
    PaymentStatus.PENDING,
    PaymentStatus.FAILED
})

ALLOWED_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.CONFIRMED,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELLED
    })
}


@dataclass(frozen=True)
class PaymentRecord:
    """Loan payment as read from the servicing workflow"""
    payment_number: int
    payment_date: date
    amount: Decimal
    status: PaymentStatus
    interest: Decimal = ZERO
    principal: Decimal = ZERO
    id: Optional[str] = None
    remaining_balance: Optional[Decimal] = None
    notes: Optional[str] = None
    
    def __post_init__(self):
        for name in ('amount', 'interest', 'principal'):
            value = getattr(self, name)
            if value is None:
                object.__setattr__(self, name, ZERO)
            elif not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))
        if isinstance(self.status, str):
            object.__setattr__(self, 'status', PaymentStatus(self.status))
    
    @property
    def is_settled(self) -> bool:
        """Check if the payment was successfully collected"""
        return self.status in SETTLED_STATUSES
    
    def is_past(self, today: date) -> bool:
        """Check if the due date is before ``today``"""
        return self.payment_date < today
    
    def with_note(self, note: str) -> 'PaymentRecord':
        """Copy with ``note`` appended on its own line, keeping existing notes"""
        notes = f"{self.notes}\n{note}" if self.notes else note
        return replace(self, notes=notes)
    
    def transition_to(self, new_status: PaymentStatus) -> 'PaymentRecord':
        """
        Move the payment through its collection lifecycle
        
        Only pending payments change status; every other state is terminal.
        
        Raises:
            InvalidPaymentTransitionError: If the transition is not allowed
        """
        if new_status == self.status:
            return self
        if new_status not in ALLOWED_TRANSITIONS.get(self.status, frozenset()):
            raise InvalidPaymentTransitionError(self.status.value, new_status.value)
        return replace(self, status=new_status)
    
    def cancel(self, note: str) -> 'PaymentRecord':
        """
        Cancel the payment as part of a schedule stop or replacement
        
        This bypasses the collection lifecycle: failed payments left unresolved
        in the past are cancelled here even though that lifecycle treats them
        as terminal.
        """
        return replace(self.with_note(note), status=PaymentStatus.CANCELLED)
