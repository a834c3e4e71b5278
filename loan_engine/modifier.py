"""
Schedule Modifier Module

Stop, modify and defer operations on an in-flight payment schedule. Every
operation reads a snapshot supplied by the servicing workflow and returns the
records to write; the caller applies them atomically inside its own
transaction and must serialize concurrent changes to the same loan.
"""

from decimal import Decimal
from datetime import date, timedelta
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple, Union
from enum import Enum

from .currency import ZERO, round_currency, to_decimal
from .frequency import PaymentFrequency
from .calculator import FeeConfiguration, compute_payment
from .schedule import (
    BrokenScheduleItem, UnbrokenScheduleItem, build_schedule, apply_breakdown
)
from .breakdown import compute_breakdown
from .payments import PaymentRecord, PaymentStatus, UNRESOLVED_STATUSES
from .exceptions import (
    NotComputableError, MissingModificationParametersError,
    PaymentAmountMismatchError, NothingToStopError, EmptyScheduleError,
    PaymentNotDeferrableError
)
from .logging_config import get_logger, log_action


logger = get_logger("loan_engine.modifier")


class ScheduleAction(Enum):
    """Lifecycle actions on a payment schedule"""
    MODIFY = "modify"
    STOP = "stop"


@dataclass(frozen=True)
class LoanSnapshot:
    """Current loan state read by the caller before a schedule change"""
    remaining_balance: Decimal
    annual_interest_rate: Decimal           # Percent, e.g. 29 for 29%
    payments: Tuple[PaymentRecord, ...]
    fees: FeeConfiguration = field(default_factory=FeeConfiguration)
    loan_id: Optional[str] = None
    
    def __post_init__(self):
        for name in ('remaining_balance', 'annual_interest_rate'):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))
        object.__setattr__(self, 'payments', tuple(self.payments))


@dataclass(frozen=True)
class ModificationRequest:
    """New terms for the future portion of a schedule"""
    payment_amount: Optional[Decimal] = None
    frequency: Optional[PaymentFrequency] = None
    number_of_payments: Optional[int] = None
    start_date: Optional[date] = None
    edited_schedule: Tuple[UnbrokenScheduleItem, ...] = ()
    
    def missing_parameters(self) -> List[str]:
        """Names of required parameters that are absent or zero"""
        required = ('payment_amount', 'frequency', 'number_of_payments', 'start_date')
        return [name for name in required if not getattr(self, name)]


@dataclass(frozen=True)
class ScheduleChangeRequest:
    """A stop, or a modification with its new terms"""
    action: ScheduleAction
    modification: Optional[ModificationRequest] = None


@dataclass(frozen=True)
class FailedPaymentSummary:
    """Penalties rolled into the balance for failed payments"""
    total_fees: Decimal
    total_interest: Decimal
    total_amount: Decimal
    failed_payment_count: int


@dataclass(frozen=True)
class StopResult:
    """Records to mark cancelled when stopping a schedule"""
    to_cancel: List[PaymentRecord]
    stopped_on: date


@dataclass(frozen=True)
class ModificationResult:
    """Replacement of the future schedule"""
    to_update: List[PaymentRecord]      # Existing future rows reused under the same number
    to_create: List[PaymentRecord]
    to_delete: List[PaymentRecord]      # Future rows with no place in the new schedule
    new_balance: Decimal
    payment_amount: Decimal
    failed_payments: FailedPaymentSummary
    schedule: List[BrokenScheduleItem]


@dataclass(frozen=True)
class DeferralResult:
    """A deferred payment and its replacement at the end of the schedule"""
    deferred: PaymentRecord
    created: PaymentRecord
    remaining_balance: Decimal
    fee: Decimal


def format_note_date(value: date) -> str:
    """Date as written in payment notes, e.g. ``Oct 18, 2026``"""
    return f"{value:%b} {value.day}, {value.year}"


def future_set(payments: Sequence[PaymentRecord], today: date) -> List[PaymentRecord]:
    """
    Payments that are not yet settled and may be cancelled or replaced
    
    Includes everything due today or later, plus pending or failed payments
    whose due date has passed without being resolved.
    """
    return [
        payment for payment in payments
        if not payment.is_past(today) or payment.status in UNRESOLVED_STATUSES
    ]


def failed_past_payments(payments: Sequence[PaymentRecord], today: date) -> List[PaymentRecord]:
    """Failed payments due before ``today``"""
    return [
        payment for payment in payments
        if payment.status == PaymentStatus.FAILED and payment.is_past(today)
    ]


def calculate_failed_payment_fees(
    failed_payments: Sequence[PaymentRecord],
    origination_fee: Decimal
) -> FailedPaymentSummary:
    """
    Calculate fees and interest from failed payments
    
    Each failed payment costs the flat origination fee plus the interest it
    was originally scheduled to cover.
    """
    total_fees = Decimal(len(failed_payments)) * Decimal(str(origination_fee))
    total_interest = sum((payment.interest for payment in failed_payments), ZERO)
    
    return FailedPaymentSummary(
        total_fees=round_currency(total_fees),
        total_interest=round_currency(total_interest),
        total_amount=round_currency(total_fees + total_interest),
        failed_payment_count=len(failed_payments)
    )


def calculate_modification_balance(
    current_balance: Decimal,
    brokerage_fee: Decimal,
    failed_summary: FailedPaymentSummary
) -> Decimal:
    """Balance to amortize over the new schedule"""
    return round_currency(
        round_currency(current_balance) + Decimal(str(brokerage_fee)) + failed_summary.total_amount
    )


def last_settled_payment_number(payments: Sequence[PaymentRecord]) -> int:
    """Highest payment number among settled payments, 0 if none"""
    return max((payment.payment_number or 0 for payment in payments if payment.is_settled), default=0)


def next_payment_number(payments: Sequence[PaymentRecord], today: date) -> int:
    """
    First payment number of a replacement schedule
    
    Continues after the last settled payment. Rows that stay in the history
    without being settled (an earlier deferral, or a stop whose dates have
    since passed) push the start past their own numbers so numbers stay unique.
    """
    replaceable = {id(payment) for payment in future_set(payments, today)}
    retained = max(
        (payment.payment_number or 0 for payment in payments if id(payment) not in replaceable),
        default=0
    )
    return max(last_settled_payment_number(payments), retained) + 1


def apply_modification(
    payments: Sequence[PaymentRecord],
    result: ModificationResult,
    today: date
) -> List[PaymentRecord]:
    """
    Payment history as it stands once a modification has been written
    
    Mirrors what the caller's transaction does: drop the replaced future rows,
    keep reused rows under their new values and append the created rows.
    """
    replaceable = {id(payment) for payment in future_set(payments, today)}
    history = [payment for payment in payments if id(payment) not in replaceable]
    history.extend(result.to_update)
    history.extend(result.to_create)
    return sorted(history, key=lambda payment: (payment.payment_number or 0, payment.payment_date))


def stop_future_schedule(
    payments: Sequence[PaymentRecord],
    today: date,
    loan_id: Optional[str] = None
) -> StopResult:
    """
    Cancel every payment in the future set
    
    Args:
        payments: Full payment history of the loan
        today: Caller's current date
        loan_id: Loan identifier, used for logging only
    
    Returns:
        StopResult with cancelled copies of the affected payments
    
    Raises:
        NothingToStopError: If no payment is eligible
    """
    candidates = future_set(payments, today)
    if not candidates:
        log_action(logger, "warning", "Stop rejected: no future payments",
                   loan_id=loan_id, action="schedule_stop_rejected")
        raise NothingToStopError(loan_id)
    
    note = f"Payment stopped on {format_note_date(today)}"
    cancelled = [payment.cancel(note) for payment in candidates]
    
    log_action(logger, "info", f"Stopped {len(cancelled)} future payment(s)",
               loan_id=loan_id, action="schedule_stopped", resource="loan_payments",
               extra={"cancelled_payments": len(cancelled)})
    
    return StopResult(to_cancel=cancelled, stopped_on=today)


def modify_schedule(
    snapshot: LoanSnapshot,
    request: ModificationRequest,
    today: date,
    tolerance: Optional[Decimal] = None
) -> ModificationResult:
    """
    Replace the future portion of a schedule with new terms
    
    Failed-payment penalties and the one-time brokerage fee are rolled into
    the remaining balance, the caller's payment amount is checked against the
    amortized amount for that balance, and a new future schedule is produced.
    An edited schedule from the caller keeps its dates and amounts, but its
    interest/principal are always recomputed from the new balance.
    
    Future rows whose payment number is taken again by the new schedule are
    reused; every other future row is returned for deletion, so applying the
    result leaves one row per payment number.
    
    Args:
        snapshot: Current balance, rate, fees and payment history
        request: New payment amount, frequency, count and start date
        today: Caller's current date
        tolerance: Allowed difference between provided and computed amounts
    
    Returns:
        ModificationResult with records to update, create and delete
    
    Raises:
        MissingModificationParametersError: If a required parameter is missing
        NotComputableError: If the new terms cannot produce a payment
        PaymentAmountMismatchError: If the provided amount is off by more than the tolerance
        EmptyScheduleError: If the resulting schedule is empty
    """
    missing = request.missing_parameters()
    if missing:
        raise MissingModificationParametersError(missing)
    
    if tolerance is None:
        from .config import get_config
        tolerance = Decimal(get_config().payment_amount_tolerance)
    
    failed_summary = calculate_failed_payment_fees(
        failed_past_payments(snapshot.payments, today),
        snapshot.fees.origination_fee
    )
    new_balance = calculate_modification_balance(
        snapshot.remaining_balance, snapshot.fees.brokerage_fee, failed_summary
    )
    
    calculated_amount = compute_payment(
        new_balance, snapshot.annual_interest_rate, request.frequency, request.number_of_payments
    )
    if calculated_amount is None:
        raise NotComputableError(
            "Failed to calculate payment amount with given parameters",
            {'new_balance': str(new_balance), 'number_of_payments': request.number_of_payments}
        )
    
    provided_amount = to_decimal(request.payment_amount)
    if provided_amount is None or abs(provided_amount - calculated_amount) > tolerance:
        log_action(logger, "warning", "Modification rejected: payment amount mismatch",
                   loan_id=snapshot.loan_id, action="schedule_modify_rejected",
                   extra={"calculated_amount": str(calculated_amount),
                          "provided_amount": str(request.payment_amount)})
        raise PaymentAmountMismatchError(calculated_amount, provided_amount or ZERO)
    
    if request.edited_schedule:
        items = list(request.edited_schedule)
    else:
        items = build_schedule(
            request.start_date, request.frequency, calculated_amount, request.number_of_payments
        )
    if not items:
        raise EmptyScheduleError()
    
    lines = compute_breakdown(
        new_balance, calculated_amount, snapshot.annual_interest_rate,
        request.frequency, len(items)
    )
    schedule = apply_breakdown(items, lines)
    
    note_date = format_note_date(today)
    replaced = future_set(snapshot.payments, today)
    reusable = {}
    for payment in replaced:
        reusable.setdefault(payment.payment_number, payment)
    
    first_number = next_payment_number(snapshot.payments, today)
    to_update = []
    to_create = []
    reused = set()
    for offset, item in enumerate(schedule):
        number = first_number + offset
        fields = dict(
            payment_number=number,
            payment_date=item.due_date,
            amount=round_currency(item.amount),
            status=PaymentStatus.PENDING,
            interest=item.interest,
            principal=item.principal,
            remaining_balance=item.remaining_balance,
            notes=f"Payment {number} - Modified on {note_date}"
        )
        existing = reusable.get(number)
        if existing is not None:
            reused.add(id(existing))
            to_update.append(replace(existing, **fields))
        else:
            to_create.append(PaymentRecord(**fields))
    
    to_delete = [payment for payment in replaced if id(payment) not in reused]
    
    log_action(logger, "info", "Payment schedule modified",
               loan_id=snapshot.loan_id, action="schedule_modified", resource="loan_payments",
               extra={"updated_payments": len(to_update),
                      "created_payments": len(to_create),
                      "deleted_payments": len(to_delete),
                      "new_balance": str(new_balance),
                      "failed_payment_count": failed_summary.failed_payment_count})
    
    return ModificationResult(
        to_update=to_update,
        to_create=to_create,
        to_delete=to_delete,
        new_balance=new_balance,
        payment_amount=calculated_amount,
        failed_payments=failed_summary,
        schedule=schedule
    )


def defer_payment(
    payments: Sequence[PaymentRecord],
    payment_number: int,
    remaining_balance: Decimal,
    fee: Decimal = ZERO,
    add_fee_to_payment: bool = False,
    loan_id: Optional[str] = None
) -> DeferralResult:
    """
    Defer a pending payment to the end of the schedule
    
    The deferred payment keeps its row with zeroed amounts; a new pending
    payment one day after the last scheduled payment carries the original
    amount. A deferral fee is always added to the loan balance, and also to
    the new payment when ``add_fee_to_payment`` is set.
    
    Raises:
        PaymentNotDeferrableError: If the payment is missing or not pending,
            or the fee is negative
    """
    fee = to_decimal(fee)
    if fee is None or fee < ZERO:
        raise PaymentNotDeferrableError("Fee amount must be a positive number")
    
    target = next((p for p in payments if p.payment_number == payment_number), None)
    if target is None:
        raise PaymentNotDeferrableError(
            "Payment not found or does not belong to this loan",
            {'payment_number': payment_number}
        )
    if target.status != PaymentStatus.PENDING:
        raise PaymentNotDeferrableError(
            "Only pending payments can be deferred",
            {'payment_number': payment_number, 'status': target.status.value}
        )
    
    last_date = max(p.payment_date for p in payments)
    max_number = max((p.payment_number or 0 for p in payments), default=0)
    fee = round_currency(fee)
    
    fee_note = f", deferral fee: {fee:.2f}" if fee > ZERO else ""
    deferred = replace(
        target.with_note(f"Payment deferred. Original amount: {target.amount:.2f}{fee_note}."),
        amount=ZERO,
        interest=ZERO,
        principal=ZERO,
        status=PaymentStatus.DEFERRED
    )
    
    if fee > ZERO and add_fee_to_payment:
        created_note = (f"Deferred payment from #{payment_number} "
                        f"(includes deferral fee of {fee:.2f} in amount).")
    elif fee > ZERO:
        created_note = (f"Deferred payment from #{payment_number} "
                        f"(deferral fee of {fee:.2f} added to loan balance).")
    else:
        created_note = f"Deferred payment from #{payment_number}."
    
    created = PaymentRecord(
        payment_number=max_number + 1,
        payment_date=last_date + timedelta(days=1),
        amount=target.amount + (fee if add_fee_to_payment else ZERO),
        status=PaymentStatus.PENDING,
        interest=target.interest,
        principal=target.principal,
        notes=created_note
    )
    
    new_balance = round_currency(Decimal(str(remaining_balance)) + fee)
    
    log_action(logger, "info", f"Deferred payment #{payment_number}",
               loan_id=loan_id, action="payment_deferred", resource="loan_payments",
               extra={"new_payment_number": created.payment_number, "fee": str(fee)})
    
    return DeferralResult(deferred=deferred, created=created, remaining_balance=new_balance, fee=fee)


def apply_request(
    snapshot: LoanSnapshot,
    request: ScheduleChangeRequest,
    today: date
) -> Union[StopResult, ModificationResult]:
    """Dispatch a parsed schedule change to stop or modify"""
    if request.action == ScheduleAction.STOP:
        return stop_future_schedule(snapshot.payments, today, loan_id=snapshot.loan_id)
    return modify_schedule(snapshot, request.modification or ModificationRequest(), today)
