"""
Pydantic schemas for raw caller payloads
"""

from decimal import Decimal
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from .frequency import normalize_frequency
from .calculator import FeeConfiguration
from .schedule import UnbrokenScheduleItem
from .payments import PaymentRecord, PaymentStatus
from .modifier import (
    LoanSnapshot, ModificationRequest, ScheduleAction, ScheduleChangeRequest
)
from .exceptions import ScheduleValidationError


class ContractFeesModel(BaseModel):
    origination_fee: Optional[Decimal] = Field(None, ge=0, description="Flat fee per failed payment")
    processing_fee: Decimal = Field(Decimal('0'), ge=0)
    brokerage_fee: Decimal = Field(Decimal('0'), ge=0)
    other_fees: Decimal = Field(Decimal('0'), ge=0)
    
    def to_fee_configuration(self, default_origination_fee: Decimal) -> FeeConfiguration:
        return FeeConfiguration(
            origination_fee=(
                self.origination_fee if self.origination_fee is not None else default_origination_fee
            ),
            processing_fee=self.processing_fee,
            brokerage_fee=self.brokerage_fee,
            other_fees=self.other_fees
        )


class ScheduleItemModel(BaseModel):
    due_date: date
    amount: Decimal = Field(..., ge=0)
    
    def to_item(self) -> UnbrokenScheduleItem:
        return UnbrokenScheduleItem(due_date=self.due_date, amount=self.amount)


class PaymentRecordModel(BaseModel):
    id: Optional[str] = None
    payment_number: Optional[int] = None
    payment_date: date
    amount: Decimal = Decimal('0')
    interest: Optional[Decimal] = None
    principal: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None
    status: PaymentStatus
    notes: Optional[str] = None
    
    def to_record(self) -> PaymentRecord:
        return PaymentRecord(
            id=self.id,
            payment_number=self.payment_number or 0,
            payment_date=self.payment_date,
            amount=self.amount,
            interest=self.interest,
            principal=self.principal,
            remaining_balance=self.remaining_balance,
            status=self.status,
            notes=self.notes
        )


class LoanSnapshotModel(BaseModel):
    loan_id: Optional[str] = None
    remaining_balance: Decimal = Decimal('0')
    interest_rate: Optional[Decimal] = Field(None, ge=0, description="Annual percent, e.g. 29")
    payments: List[PaymentRecordModel] = []
    fees: ContractFeesModel = ContractFeesModel()
    
    def to_snapshot(self) -> LoanSnapshot:
        from .config import get_config
        
        settings = get_config()
        rate = self.interest_rate if self.interest_rate is not None else Decimal(settings.default_interest_rate)
        return LoanSnapshot(
            loan_id=self.loan_id,
            remaining_balance=self.remaining_balance,
            annual_interest_rate=rate,
            payments=tuple(payment.to_record() for payment in self.payments),
            fees=self.fees.to_fee_configuration(Decimal(settings.default_failed_payment_fee))
        )


class ModifyLoanRequest(BaseModel):
    action: ScheduleAction = ScheduleAction.MODIFY
    payment_amount: Optional[Decimal] = None
    payment_frequency: Optional[str] = Field(None, description="weekly, bi-weekly, twice-monthly or monthly")
    number_of_payments: Optional[int] = None
    start_date: Optional[date] = None
    payment_schedule: Optional[List[ScheduleItemModel]] = None
    
    def to_change_request(self) -> ScheduleChangeRequest:
        """
        Convert into the engine's request
        
        Raises:
            ScheduleValidationError: If the frequency cannot be recognized
        """
        if self.action == ScheduleAction.STOP:
            return ScheduleChangeRequest(action=ScheduleAction.STOP)
        
        frequency = None
        if self.payment_frequency:
            frequency = normalize_frequency(self.payment_frequency)
            if frequency is None:
                raise ScheduleValidationError(
                    "Invalid payment frequency",
                    {'payment_frequency': self.payment_frequency}
                )
        
        modification = ModificationRequest(
            payment_amount=self.payment_amount,
            frequency=frequency,
            number_of_payments=self.number_of_payments,
            start_date=self.start_date,
            edited_schedule=tuple(item.to_item() for item in self.payment_schedule or [])
        )
        return ScheduleChangeRequest(action=ScheduleAction.MODIFY, modification=modification)
