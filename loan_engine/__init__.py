"""
Loan Amortization & Schedule Lifecycle Engine

Fixed-payment amortization, calendar-aware payment schedules and safe
stop/modify operations on in-flight schedules. All financial math uses
Decimal; every operation is a pure function over caller-supplied state.
"""

__version__ = "1.0.0"

from .frequency import PaymentFrequency, periods_per_year, periodic_rate, normalize_frequency
from .calculator import LoanTerms, FeeConfiguration, compute_payment
from .schedule import UnbrokenScheduleItem, BrokenScheduleItem, build_schedule, apply_breakdown
from .breakdown import BreakdownLine, compute_breakdown
from .summary import LoanSummary, calculate_loan
from .payments import PaymentRecord, PaymentStatus
from .modifier import (
    LoanSnapshot, ModificationRequest, ScheduleAction, ScheduleChangeRequest,
    StopResult, ModificationResult, DeferralResult,
    stop_future_schedule, modify_schedule, apply_modification, defer_payment,
    apply_request
)
from .holidays import Holiday, HolidayWarning, flag_holidays
from .exceptions import (
    LoanEngineError, ScheduleValidationError, NotComputableError,
    MissingModificationParametersError, PaymentAmountMismatchError,
    NothingToStopError, EmptyScheduleError
)
