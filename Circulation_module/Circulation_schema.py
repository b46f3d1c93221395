from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .Loan_model import LoanStatus
from .Reservation_model import ReservationStatus
from .Fine_model import FineReason, PaymentStatus

DEFAULT_LOAN_DAYS = 14
DEFAULT_RESERVATION_DAYS = 7


class LoanCreate(BaseModel):
    copy_id: int = Field(..., gt=0)
    member_id: int = Field(..., gt=0)
    loan_date: date = Field(default_factory=date.today)
    due_date: Optional[date] = Field(None, description=f"Defaults to loan_date + {DEFAULT_LOAN_DAYS} days")
    return_date: Optional[date] = None
    late_fee: Decimal = Field(Decimal("0.00"), ge=0, max_digits=8, decimal_places=2)
    loan_status: LoanStatus = LoanStatus.ACTIVE

    @model_validator(mode='after')
    def default_and_check_dates(self):
        if self.due_date is None:
            self.due_date = self.loan_date + timedelta(days=DEFAULT_LOAN_DAYS)
        elif self.due_date < self.loan_date:
            raise ValueError('Due date cannot be before the loan date')
        if self.return_date and self.return_date < self.loan_date:
            raise ValueError('Return date cannot be before the loan date')
        return self


class ReservationCreate(BaseModel):
    book_id: int = Field(..., gt=0)
    member_id: int = Field(..., gt=0)
    reservation_date: datetime = Field(default_factory=datetime.now)
    reservation_status: ReservationStatus = ReservationStatus.ACTIVE
    priority: int = Field(1, ge=1)
    expiry_date: Optional[date] = Field(
        None, description=f"Defaults to reservation_date + {DEFAULT_RESERVATION_DAYS} days"
    )

    @model_validator(mode='after')
    def default_and_check_expiry(self):
        reserved_on = self.reservation_date.date()
        if self.expiry_date is None:
            self.expiry_date = reserved_on + timedelta(days=DEFAULT_RESERVATION_DAYS)
        elif self.expiry_date < reserved_on:
            raise ValueError('Expiry date cannot be before the reservation date')
        return self


class FineCreate(BaseModel):
    member_id: int = Field(..., gt=0)
    loan_id: Optional[int] = Field(None, gt=0)
    fine_amount: Decimal = Field(..., gt=0, max_digits=8, decimal_places=2)
    fine_date: date = Field(default_factory=date.today)
    reason: FineReason
    payment_status: PaymentStatus = PaymentStatus.PENDING
    paid_date: Optional[date] = None
    description: Optional[str] = None

    @model_validator(mode='after')
    def check_paid_date(self):
        if self.paid_date and self.payment_status != PaymentStatus.PAID:
            raise ValueError('paid_date is only set on fines with payment_status Paid')
        return self
