"""
Schedule Builder Module

Produces the ordered due dates of a fixed-payment schedule. Items start out
as UnbrokenScheduleItem (date and amount only) and become BrokenScheduleItem
once the breakdown engine has allocated interest and principal.
"""

from decimal import Decimal
from datetime import date, timedelta
from dataclasses import dataclass
from typing import List, Sequence, Union
import calendar

from .frequency import PaymentFrequency


# Days between consecutive due dates. Twice-monthly is a flat 15-day step,
# not anchored to the 15th and month end.
DAYS_BETWEEN_PAYMENTS = {
    PaymentFrequency.WEEKLY: 7,
    PaymentFrequency.BI_WEEKLY: 14,
    PaymentFrequency.TWICE_MONTHLY: 15
}


@dataclass(frozen=True)
class UnbrokenScheduleItem:
    """Scheduled payment that has not been cost-allocated yet"""
    due_date: date
    amount: Decimal


@dataclass(frozen=True)
class BrokenScheduleItem:
    """Scheduled payment with its interest/principal allocation"""
    due_date: date
    amount: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


ScheduleItem = Union[UnbrokenScheduleItem, BrokenScheduleItem]


def add_months(start_date: date, months: int) -> date:
    """Add months to a date, clamping the day to the end of shorter months"""
    month = start_date.month - 1 + months
    year = start_date.year + month // 12
    month = month % 12 + 1
    day = min(start_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def due_date_for(start_date: date, frequency: PaymentFrequency, index: int) -> date:
    """
    Due date of the payment at ``index`` (0 is the first payment)
    
    Monthly dates are derived from the start date rather than the previous
    due date so a 31st keeps returning to the 31st after a short month.
    """
    if frequency == PaymentFrequency.MONTHLY:
        return add_months(start_date, index)
    if frequency in DAYS_BETWEEN_PAYMENTS:
        return start_date + timedelta(days=DAYS_BETWEEN_PAYMENTS[frequency] * index)
    raise ValueError(f"Unsupported payment frequency: {frequency}")


def build_schedule(
    start_date: date,
    frequency: PaymentFrequency,
    amount: Decimal,
    number_of_payments: int
) -> List[UnbrokenScheduleItem]:
    """
    Build the due dates of a fixed-payment schedule
    
    Args:
        start_date: First due date
        frequency: Payment frequency
        amount: Fixed payment amount carried by every item
        number_of_payments: Number of items to produce
        
    Returns:
        Exactly ``number_of_payments`` items; empty when the count is not positive
    """
    if number_of_payments <= 0:
        return []
    
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    
    return [
        UnbrokenScheduleItem(due_date=due_date_for(start_date, frequency, index), amount=amount)
        for index in range(number_of_payments)
    ]


def apply_breakdown(items: Sequence[ScheduleItem], lines: Sequence) -> List[BrokenScheduleItem]:
    """Attach breakdown lines to schedule items, position by position"""
    if len(items) != len(lines):
        raise ValueError(
            f"Schedule has {len(items)} items but breakdown has {len(lines)} lines"
        )
    
    return [
        BrokenScheduleItem(
            due_date=item.due_date,
            amount=item.amount,
            interest=line.interest,
            principal=line.principal,
            remaining_balance=line.remaining_balance
        )
        for item, line in zip(items, lines)
    ]
